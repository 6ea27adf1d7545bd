"""Card profile cache - one entry per identity, expiring after a TTL.

Caches are constructed once at startup with an explicit TTL and clock, and
injected into ``CardProfileService``. Storing overwrites any previous entry
for the same identity.
"""

from abc import ABC, abstractmethod
from datetime import timedelta

import redis.asyncio as aioredis

from stylesync.config import Settings
from stylesync.core.clock import Clock, now_utc
from stylesync.db.redis import get_redis_client
from stylesync.schemas.card import CardProfile


class CardProfileCache(ABC):
    def __init__(self, ttl: timedelta, clock: Clock = now_utc):
        self.ttl = ttl
        self.clock = clock

    def is_fresh(self, profile: CardProfile) -> bool:
        return self.clock() - profile.computed_at < self.ttl

    async def get(self, public_id: str) -> CardProfile | None:
        """Return the cached profile if present and younger than the TTL."""
        profile = await self.load(public_id)
        if profile is None or not self.is_fresh(profile):
            return None
        return profile

    @abstractmethod
    async def load(self, public_id: str) -> CardProfile | None:
        """Return the stored entry regardless of age."""

    @abstractmethod
    async def store(self, profile: CardProfile) -> None:
        """Upsert the entry for ``profile.public_id``."""

    @abstractmethod
    async def delete(self, public_id: str) -> None:
        """Remove the entry if present."""


class MemoryCardProfileCache(CardProfileCache):
    """In-process cache for tests and single-worker deployments."""

    def __init__(self, ttl: timedelta, clock: Clock = now_utc):
        super().__init__(ttl, clock)
        self._entries: dict[str, CardProfile] = {}

    async def load(self, public_id: str) -> CardProfile | None:
        return self._entries.get(public_id)

    async def store(self, profile: CardProfile) -> None:
        self._entries[profile.public_id] = profile

    async def delete(self, public_id: str) -> None:
        self._entries.pop(public_id, None)


class RedisCardProfileCache(CardProfileCache):
    """Redis-backed cache. Keys also expire server-side after the TTL."""

    def __init__(self, redis: aioredis.Redis, ttl: timedelta, clock: Clock = now_utc):
        super().__init__(ttl, clock)
        self.redis = redis

    def _key(self, public_id: str) -> str:
        return f"card:profile:{public_id}"

    async def load(self, public_id: str) -> CardProfile | None:
        raw = await self.redis.get(self._key(public_id))
        if raw:
            return CardProfile.model_validate_json(raw)
        return None

    async def store(self, profile: CardProfile) -> None:
        await self.redis.set(
            self._key(profile.public_id),
            profile.model_dump_json(),
            ex=int(self.ttl.total_seconds()),
        )

    async def delete(self, public_id: str) -> None:
        await self.redis.delete(self._key(public_id))


def build_card_cache(settings: Settings, clock: Clock = now_utc) -> CardProfileCache:
    """Construct the configured cache backend."""
    ttl = timedelta(hours=settings.CARD_PROFILE_TTL_HOURS)
    if settings.CARD_CACHE_BACKEND == "memory":
        return MemoryCardProfileCache(ttl, clock)
    if settings.CARD_CACHE_BACKEND == "redis":
        return RedisCardProfileCache(
            get_redis_client(settings.REDIS_URL, settings.REDIS_SOCKET_TIMEOUT_SECONDS), ttl, clock
        )
    raise ValueError(f"Unknown card cache backend: {settings.CARD_CACHE_BACKEND}")
