"""
In-memory roster of children, drivers and users.

Profile management lives elsewhere; the trip core only looks people up by
id.  Children are persisted alongside trips, drivers and users are loaded
from configuration or seed data.
"""

from __future__ import annotations

import copy
from typing import Iterable, Optional

from src.domain.entities import Driver, Passenger, User


class InMemoryRoster:
    def __init__(
        self,
        children: Iterable[Passenger] = (),
        drivers: Iterable[Driver] = (),
        users: Iterable[User] = (),
    ):
        self._children = {c.id: c for c in children}
        self._drivers = {d.id: d for d in drivers}
        self._users = {u.id: u for u in users}

    def lookup_child(self, child_id: str) -> Optional[Passenger]:
        return self._children.get(child_id)

    def lookup_driver(self, driver_id: str) -> Optional[Driver]:
        return self._drivers.get(driver_id)

    def lookup_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def list_available_drivers(self) -> list[Driver]:
        """Drivers whose onboarding is APPROVED, in roster order."""
        return [d for d in self._drivers.values() if d.is_available]

    def children(self) -> list[Passenger]:
        return [copy.copy(c) for c in self._children.values()]

    def children_of(self, parent_id: str) -> list[Passenger]:
        return [c for c in self._children.values() if c.parent_id == parent_id]

    def children_at(self, school: str) -> list[Passenger]:
        return [c for c in self._children.values() if school in c.school]
