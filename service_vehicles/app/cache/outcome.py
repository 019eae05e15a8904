"""
Typed result for best-effort cache calls.
"""

from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from shared.errors import CacheUnavailable

T = TypeVar("T")


@dataclass(frozen=True)
class CacheOutcome(Generic[T]):
    """Either the value a cache call produced or the CacheUnavailable it hit."""
    value: Optional[T] = None
    error: Optional[CacheUnavailable] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


async def attempt(call: Awaitable[T]) -> CacheOutcome[T]:
    """Await a cache call and capture CacheUnavailable as a degraded outcome.

    Only CacheUnavailable is captured. Any other exception, including
    cancellation, propagates unchanged.
    """
    try:
        return CacheOutcome(value=await call)
    except CacheUnavailable as exc:
        return CacheOutcome(error=exc)
