"""
PostgreSQL persistence layer for Vehicles Service.
"""

import asyncio
from typing import List, Optional

import asyncpg

from shared.logging import get_logger
from shared.errors import StoreError, RecordNotFoundError
from ..models import Vehicle
from .base import VehicleStore

# Driver-level failures surfaced as StoreError
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class PostgreSQLVehicleStore(VehicleStore):
    """PostgreSQL persistence layer for vehicles."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.logger = get_logger("vehicles.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            # Create tables if they don't exist
            await self._create_tables()

            self.logger.info("PostgreSQL persistence started")

        except _DRIVER_ERRORS as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise StoreError(f"Failed to start PostgreSQL persistence: {e}") from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise StoreError("PostgreSQL persistence not started")
        return self.pool

    async def _create_tables(self):
        """Create database tables."""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS vehicle (
                    id SERIAL PRIMARY KEY,
                    brand VARCHAR(100),
                    model VARCHAR(100),
                    year INTEGER,
                    plate VARCHAR(20),
                    color VARCHAR(50)
                );
            """)

    async def list_all(self) -> List[Vehicle]:
        """Load all vehicles ordered by id."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch("""
                    SELECT id, brand, model, year, plate, color FROM vehicle ORDER BY id
                """)
        except _DRIVER_ERRORS as e:
            self.logger.error("Error loading vehicles", error=str(e))
            raise StoreError(f"Error loading vehicles: {e}") from e

        return [self._row_to_vehicle(row) for row in rows]

    async def create(self, vehicle: Vehicle) -> int:
        """Insert a vehicle and return its new id."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                vehicle_id = await conn.fetchval("""
                    INSERT INTO vehicle (brand, model, year, plate, color)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING id
                """, vehicle.brand, vehicle.model, vehicle.year, vehicle.plate, vehicle.color)
        except _DRIVER_ERRORS as e:
            self.logger.error("Error creating vehicle", plate=vehicle.plate, error=str(e))
            raise StoreError(f"Error creating vehicle: {e}") from e

        self.logger.info("Vehicle saved", vehicle_id=vehicle_id, plate=vehicle.plate)
        return vehicle_id

    async def update(self, vehicle_id: int, vehicle: Vehicle) -> None:
        """Overwrite every attribute of an existing vehicle."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                result = await conn.execute("""
                    UPDATE vehicle
                    SET brand = $1, model = $2, year = $3, plate = $4, color = $5
                    WHERE id = $6
                """, vehicle.brand, vehicle.model, vehicle.year, vehicle.plate, vehicle.color, vehicle_id)
        except _DRIVER_ERRORS as e:
            self.logger.error("Error updating vehicle", vehicle_id=vehicle_id, error=str(e))
            raise StoreError(f"Error updating vehicle {vehicle_id}: {e}") from e

        if result == "UPDATE 0":
            self.logger.warning("Vehicle not found for update", vehicle_id=vehicle_id)
            raise RecordNotFoundError(vehicle_id)

        self.logger.info("Vehicle updated", vehicle_id=vehicle_id)

    async def delete(self, vehicle_id: int) -> None:
        """Delete a vehicle."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                result = await conn.execute("""
                    DELETE FROM vehicle WHERE id = $1
                """, vehicle_id)
        except _DRIVER_ERRORS as e:
            self.logger.error("Error deleting vehicle", vehicle_id=vehicle_id, error=str(e))
            raise StoreError(f"Error deleting vehicle {vehicle_id}: {e}") from e

        if result == "DELETE 0":
            self.logger.warning("Vehicle not found for deletion", vehicle_id=vehicle_id)
            raise RecordNotFoundError(vehicle_id)

        self.logger.info("Vehicle deleted", vehicle_id=vehicle_id)

    def _row_to_vehicle(self, row) -> Vehicle:
        """Convert database row to Vehicle object."""
        return Vehicle(
            id=row['id'],
            brand=row['brand'],
            model=row['model'],
            year=row['year'],
            plate=row['plate'],
            color=row['color']
        )

    async def health_check(self) -> bool:
        """Check database health."""
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except _DRIVER_ERRORS:
            return False
