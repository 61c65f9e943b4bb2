"""
Repository Pattern -- keeps snapshot persistence out of the domain.

``SnapshotRepository`` works inside a caller's ``AsyncSession``;
``SnapshotStore`` owns the session lifecycle and speaks in domain objects.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import CHILDREN_KEY, TRIPS_KEY, SnapshotModel
from .serialization import dump_children, dump_trips, load_children, load_trips
from src.domain.entities import Passenger, Trip

logger = logging.getLogger(__name__)


class SnapshotRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> Optional[Any]:
        row = await self.session.get(SnapshotModel, key)
        return row.payload if row else None

    async def put(self, key: str, payload: Any) -> None:
        row = await self.session.get(SnapshotModel, key)
        if row is None:
            self.session.add(SnapshotModel(key=key, payload=payload))
        else:
            row.payload = payload
        await self.session.flush()


class SnapshotStore:
    """Loads and writes the full trip and children lists."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._write_lock = asyncio.Lock()

    async def load(self) -> tuple[Optional[list[Trip]], Optional[list[Passenger]]]:
        async with self.session_factory() as session:
            repo = SnapshotRepository(session)
            trips = await repo.get(TRIPS_KEY)
            children = await repo.get(CHILDREN_KEY)
        return (
            load_trips(trips) if trips is not None else None,
            load_children(children) if children is not None else None,
        )

    async def save(self, trips: list[Trip], children: list[Passenger]) -> None:
        async with self._write_lock:
            async with self.session_factory() as session:
                repo = SnapshotRepository(session)
                await repo.put(TRIPS_KEY, dump_trips(trips))
                await repo.put(CHILDREN_KEY, dump_children(children))
                await session.commit()
        logger.debug("Snapshot written (%d trips)", len(trips))
