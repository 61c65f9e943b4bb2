"""
Redis-based distributed lock.

Held by the tracking worker for the duration of one tick so that, with
several API processes sharing the same snapshot database, only one of them
moves vehicles and rolls signal loss per interval.

Acquire is ``SET NX PX``; release runs as a Lua script so a process never
deletes a lock another process now owns.
"""

from __future__ import annotations

import uuid

import redis.asyncio as aioredis

_RELEASE = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class LockNotAcquired(RuntimeError):
    pass


class DistributedLock:
    def __init__(self, client: aioredis.Redis, name: str, ttl_seconds: float = 30):
        self.redis = client
        self.key = f"lock:{name}"
        self.ttl_ms = int(ttl_seconds * 1000)
        self.token = uuid.uuid4().hex

    async def acquire(self) -> bool:
        """Try once; ``True`` when this instance now owns the lock."""
        return bool(
            await self.redis.set(self.key, self.token, nx=True, px=self.ttl_ms)
        )

    async def release(self) -> None:
        await self.redis.eval(_RELEASE, 1, self.key, self.token)

    async def __aenter__(self) -> "DistributedLock":
        if not await self.acquire():
            raise LockNotAcquired(f"Could not acquire lock: {self.key}")
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()
