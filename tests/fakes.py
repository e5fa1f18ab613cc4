# tests/fakes.py

from __future__ import annotations


class FakeRedis:
    """
    In-memory stand-in for the Redis client.

    Only the commands the token blacklist and health check use are provided.
    TTLs are recorded but never expire, tests assert on them directly.
    """

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None
