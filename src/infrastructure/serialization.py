"""JSON-safe conversion of domain dataclasses for the snapshot blobs."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from src.domain.entities import Passenger, Trip

_trips = TypeAdapter(list[Trip])
_children = TypeAdapter(list[Passenger])


def dump_trips(trips: list[Trip]) -> list[dict[str, Any]]:
    return _trips.dump_python(trips, mode="json")


def load_trips(payload: list[dict[str, Any]]) -> list[Trip]:
    return _trips.validate_python(payload)


def dump_children(children: list[Passenger]) -> list[dict[str, Any]]:
    return _children.dump_python(children, mode="json")


def load_children(payload: list[dict[str, Any]]) -> list[Passenger]:
    return _children.validate_python(payload)
