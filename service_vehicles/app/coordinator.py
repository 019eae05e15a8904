"""
Cache-aside coordination between the vehicle store and the snapshot cache.

The whole collection is cached as one serialized snapshot under a single key.
Reads go cache-first and fall back to the store; every successful mutation
invalidates the snapshot. Cache failures degrade to store reads or no-op
invalidations, store failures propagate unchanged.

Concurrent misses are not de-duplicated: a burst of simultaneous misses
produces the same number of store loads, each writing the snapshot back
(last write wins).
"""

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from shared.errors import InvalidIdentifierError, MissingFieldError
from shared.logging import get_logger
from .cache.base import CacheStore
from .cache.outcome import CacheOutcome, attempt
from .cache.snapshot import encode_snapshot, decode_snapshot, SnapshotDecodeError
from .models import Vehicle, REQUIRED_FIELDS
from .persistence.base import VehicleStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_CACHE_KEY = "vehicles-cache"
DEFAULT_TTL_SECONDS = 20 * 60


class CacheCoordinator:
    """Sole owner of the snapshot key and TTL policy.

    Holds no mutable state across calls; the injected cache and store handles
    must be safe for concurrent use.
    """

    def __init__(
        self,
        store: VehicleStore,
        cache: CacheStore,
        *,
        cache_key: str = DEFAULT_CACHE_KEY,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        required_fields: Sequence[str] = REQUIRED_FIELDS,
        metrics: Optional["MetricsCollector"] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.store = store
        self.cache = cache
        self.cache_key = cache_key
        self.ttl_seconds = ttl_seconds
        self.required_fields = tuple(required_fields)
        self.metrics = metrics
        self.logger = get_logger("vehicles.coordinator")

    async def get_collection(self) -> List[Vehicle]:
        """Return the full collection, from the snapshot when one is cached."""
        # Sliding expiration; purely an optimization
        self._note_degraded(await attempt(self.cache.refresh_ttl(self.cache_key, self.ttl_seconds)))

        cached = await attempt(self.cache.get(self.cache_key))
        if cached.degraded:
            self._note_degraded(cached)
            self._record("cache_requests_total", result="degraded")
        elif cached.value:
            try:
                vehicles = decode_snapshot(cached.value)
            except SnapshotDecodeError as e:
                self.logger.warning("Discarding unreadable snapshot", key=self.cache_key, error=str(e))
                self._record("cache_requests_total", result="miss")
            else:
                self.logger.info("Vehicles served from cache", count=len(vehicles))
                self._record("cache_requests_total", result="hit")
                return vehicles
        else:
            self._record("cache_requests_total", result="miss")

        vehicles = await self._load_from_store()

        if not vehicles:
            # An empty scan may be transient; never cache it
            self.logger.info("No vehicles found in store")
            self._record("cache_writes_total", result="skipped_empty")
            return vehicles

        written = await attempt(
            self.cache.set(self.cache_key, encode_snapshot(vehicles), self.ttl_seconds)
        )
        if written.degraded:
            self._note_degraded(written)
            self._record("cache_writes_total", result="failed")
        else:
            self.logger.info("Vehicles snapshot cached", count=len(vehicles), ttl=self.ttl_seconds)
            self._record("cache_writes_total", result="ok")

        return vehicles

    async def add(self, vehicle: Optional[Vehicle]) -> int:
        """Create a vehicle and return the id assigned by the store."""
        self._validate_fields(vehicle)

        self.logger.info("Creating vehicle", brand=vehicle.brand, model=vehicle.model, plate=vehicle.plate)
        vehicle_id = await self.store.create(vehicle)

        await self.invalidate()
        self.logger.info("Vehicle created", vehicle_id=vehicle_id)
        return vehicle_id

    async def update(self, vehicle_id: Any, vehicle: Optional[Vehicle]) -> None:
        """Overwrite an existing vehicle."""
        self._validate_id(vehicle_id)
        self._validate_fields(vehicle)

        self.logger.info("Updating vehicle", vehicle_id=vehicle_id, plate=vehicle.plate)
        await self.store.update(vehicle_id, vehicle)

        await self.invalidate()
        self.logger.info("Vehicle updated", vehicle_id=vehicle_id)

    async def delete(self, vehicle_id: Any) -> None:
        """Delete a vehicle."""
        self._validate_id(vehicle_id)

        self.logger.info("Deleting vehicle", vehicle_id=vehicle_id)
        await self.store.delete(vehicle_id)

        await self.invalidate()
        self.logger.info("Vehicle deleted", vehicle_id=vehicle_id)

    async def invalidate(self) -> bool:
        """Drop the snapshot once, without retrying.

        Returns False when the cache was unreachable; the stale snapshot then
        lives until its TTL runs out.
        """
        outcome = await attempt(self.cache.delete(self.cache_key))
        if outcome.degraded:
            self._note_degraded(outcome)
            self._record("cache_invalidations_total", result="failed")
            return False

        self.logger.info("Cache invalidated", key=self.cache_key)
        self._record("cache_invalidations_total", result="ok")
        return True

    async def _load_from_store(self) -> List[Vehicle]:
        if self.metrics is None:
            return list(await self.store.list_all())
        with self.metrics.time_operation("store_load_duration_seconds"):
            return list(await self.store.list_all())

    def _validate_id(self, vehicle_id: Any) -> None:
        if isinstance(vehicle_id, bool) or not isinstance(vehicle_id, int) or vehicle_id <= 0:
            self.logger.warning("Rejected invalid vehicle id", vehicle_id=vehicle_id)
            raise InvalidIdentifierError("id", vehicle_id)

    def _validate_fields(self, vehicle: Optional[Vehicle]) -> None:
        if vehicle is None:
            self.logger.warning("Rejected missing vehicle payload")
            raise MissingFieldError("vehicle")

        for field_name in self.required_fields:
            value = getattr(vehicle, field_name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                self.logger.warning("Rejected vehicle with blank required field", field=field_name)
                raise MissingFieldError(field_name)

    def _note_degraded(self, outcome: CacheOutcome) -> None:
        if outcome.degraded:
            self.logger.warning(
                "Cache unavailable, continuing without cache",
                operation=outcome.error.operation,
                key=outcome.error.key,
                error=outcome.error.message,
            )

    def _record(self, metric_name: str, **labels) -> None:
        if not self.metrics:
            return

        try:
            self.metrics.increment_counter(metric_name, **labels)
        except Exception as exc:  # pragma: no cover - metrics failures should never break a request
            self.logger.debug("Failed to record cache metric", metric=metric_name, error=str(exc))
