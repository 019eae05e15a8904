"""
CacheStore port: a narrow key/value interface over a cache backend.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CacheStore(ABC):
    """Minimal key/value cache abstraction.

    Implementations raise ``shared.errors.CacheUnavailable`` for every backend
    failure instead of hiding it; deciding whether a failure matters is the
    caller's job.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored payload, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, payload: str, ttl_seconds: Optional[int] = None) -> None:
        """Unconditionally overwrite ``key``.

        ``ttl_seconds=None`` falls back to the store's default TTL, or no
        expiry when it has none.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is a no-op."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def refresh_ttl(self, key: str, ttl_seconds: int) -> bool:
        """Extend the expiry of an existing key.

        Returns False, without raising, when the key does not exist.
        """

    async def start(self) -> None:
        """Open backend connections."""

    async def stop(self) -> None:
        """Release backend connections."""

    async def health_check(self) -> bool:
        return True

    async def __aenter__(self) -> "CacheStore":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
