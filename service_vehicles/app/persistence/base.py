"""
VehicleStore port: durable CRUD over the vehicle collection.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Vehicle


class VehicleStore(ABC):
    """Authoritative store for vehicles.

    Every operation raises ``shared.errors.StoreError`` on failure.
    """

    @abstractmethod
    async def list_all(self) -> List[Vehicle]:
        ...

    @abstractmethod
    async def create(self, vehicle: Vehicle) -> int:
        """Insert ``vehicle`` and return the identifier the store assigned."""

    @abstractmethod
    async def update(self, vehicle_id: int, vehicle: Vehicle) -> None:
        ...

    @abstractmethod
    async def delete(self, vehicle_id: int) -> None:
        ...

    async def start(self) -> None:
        """Open backend connections."""

    async def stop(self) -> None:
        """Release backend connections."""

    async def health_check(self) -> bool:
        return True

    async def __aenter__(self) -> "VehicleStore":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
