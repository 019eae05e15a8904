"""
Test helper functions and in-memory backends for the Vehicles access layer.
"""

import time
from typing import Callable, Dict, List, Optional, Tuple

from shared.errors import CacheUnavailable, RecordNotFoundError, StoreError
from service_vehicles.app.cache.base import CacheStore
from service_vehicles.app.models import Vehicle
from service_vehicles.app.persistence.base import VehicleStore


class VehicleFactory:
    """Factory for creating test vehicles."""

    @staticmethod
    def toyota_corolla(**overrides) -> Vehicle:
        data = {
            "brand": "Toyota",
            "model": "Corolla",
            "year": 2023,
            "plate": "ABC-1234",
            "color": "White"
        }
        data.update(overrides)
        return Vehicle(**data)

    @staticmethod
    def create_test_vehicles() -> List[Vehicle]:
        """Three distinct vehicles without ids."""
        return [
            VehicleFactory.toyota_corolla(),
            Vehicle(brand="Honda", model="Civic", year=2022, plate="DEF-5678", color="Black"),
            Vehicle(brand="Ford", model="Focus", year=2021, plate="GHI-9012", color="Blue"),
        ]


class InMemoryVehicleStore(VehicleStore):
    """Dict-backed VehicleStore that counts calls and can be told to fail."""

    def __init__(self, vehicles: Optional[List[Vehicle]] = None):
        self._rows: Dict[int, Vehicle] = {}
        self._next_id = 1
        self.list_calls = 0
        self.create_calls = 0
        self.update_calls = 0
        self.delete_calls = 0
        self.fail_with: Optional[StoreError] = None
        for vehicle in vehicles or []:
            self._insert(vehicle)

    def _insert(self, vehicle: Vehicle) -> int:
        vehicle_id = self._next_id
        self._next_id += 1
        self._rows[vehicle_id] = vehicle.model_copy(update={"id": vehicle_id})
        return vehicle_id

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def list_all(self) -> List[Vehicle]:
        self.list_calls += 1
        self._maybe_fail()
        return [self._rows[key] for key in sorted(self._rows)]

    async def create(self, vehicle: Vehicle) -> int:
        self.create_calls += 1
        self._maybe_fail()
        return self._insert(vehicle)

    async def update(self, vehicle_id: int, vehicle: Vehicle) -> None:
        self.update_calls += 1
        self._maybe_fail()
        if vehicle_id not in self._rows:
            raise RecordNotFoundError(vehicle_id)
        self._rows[vehicle_id] = vehicle.model_copy(update={"id": vehicle_id})

    async def delete(self, vehicle_id: int) -> None:
        self.delete_calls += 1
        self._maybe_fail()
        if vehicle_id not in self._rows:
            raise RecordNotFoundError(vehicle_id)
        del self._rows[vehicle_id]


class InMemoryCacheStore(CacheStore):
    """Dict-backed CacheStore with TTL enforcement on an injectable clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, default_ttl: Optional[int] = None):
        self.clock = clock
        self.default_ttl = default_ttl
        self._entries: Dict[str, Tuple[str, Optional[float]]] = {}
        self.calls: List[Tuple[str, str]] = []

    def _live(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, payload: str, ttl_seconds: Optional[int] = None) -> None:
        self.calls.append(("set", key))
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        expires_at = self.clock() + ttl if ttl is not None else None
        self._entries[key] = (payload, expires_at)

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        self.calls.append(("exists", key))
        return self._live(key) is not None

    async def refresh_ttl(self, key: str, ttl_seconds: int) -> bool:
        self.calls.append(("refresh_ttl", key))
        entry = self._live(key)
        if entry is None:
            return False
        self._entries[key] = (entry[0], self.clock() + ttl_seconds)
        return True


class UnavailableCacheStore(CacheStore):
    """CacheStore whose backend is always down."""

    def __init__(self):
        self.calls: List[str] = []

    async def _fail(self, operation: str, key: Optional[str] = None):
        self.calls.append(operation)
        raise CacheUnavailable(operation, key, "Connection refused")

    async def start(self) -> None:
        await self._fail("start")

    async def get(self, key: str) -> Optional[str]:
        await self._fail("get", key)

    async def set(self, key: str, payload: str, ttl_seconds: Optional[int] = None) -> None:
        await self._fail("set", key)

    async def delete(self, key: str) -> None:
        await self._fail("delete", key)

    async def exists(self, key: str) -> bool:
        await self._fail("exists", key)

    async def refresh_ttl(self, key: str, ttl_seconds: int) -> bool:
        await self._fail("refresh_ttl", key)

    async def health_check(self) -> bool:
        return False


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
