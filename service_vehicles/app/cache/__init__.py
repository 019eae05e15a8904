"""
Cache package for Vehicles Service.

Provides the CacheStore port, its Redis-backed implementation, the typed
CacheOutcome used to absorb cache failures, and the JSON codec for the
collection snapshot.
"""

from .base import CacheStore
from .outcome import CacheOutcome, attempt
from .redis_cache import RedisCacheStore
from .snapshot import encode_snapshot, decode_snapshot, SnapshotDecodeError

__all__ = [
    "CacheStore",
    "CacheOutcome",
    "attempt",
    "RedisCacheStore",
    "encode_snapshot",
    "decode_snapshot",
    "SnapshotDecodeError",
]
