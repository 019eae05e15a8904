"""
Vehicles service for the Vehicles access layer.
"""

from typing import Dict, List, Optional

from fastapi import Body, Response

from shared.base_service import BaseService
from shared.errors import CacheUnavailable

from .cache.base import CacheStore
from .cache.redis_cache import RedisCacheStore
from .coordinator import CacheCoordinator
from .models import Vehicle, VehicleCreatedResponse
from .persistence.base import VehicleStore
from .persistence.postgres import PostgreSQLVehicleStore


class VehiclesService(BaseService):
    """Vehicles service implementation.

    Owns the lifecycle of the store and cache handles; both are opened in the
    application lifespan and closed on shutdown.
    """

    def __init__(
        self,
        store: Optional[VehicleStore] = None,
        cache: Optional[CacheStore] = None,
    ):
        super().__init__("vehicles", 8020)

        self.store = store or PostgreSQLVehicleStore(
            self.config.postgres_dsn,
            min_size=self.config.postgres_min_pool_size,
            max_size=self.config.postgres_max_pool_size,
            command_timeout=self.config.postgres_command_timeout,
        )
        self.cache = cache or RedisCacheStore(
            self.config.redis_url,
            default_ttl=self.config.redis_default_ttl_seconds,
            socket_timeout=self.config.redis_socket_timeout,
        )
        self.coordinator = CacheCoordinator(
            self.store,
            self.cache,
            cache_key=self.config.cache_key,
            ttl_seconds=self.config.cache_ttl_seconds,
            metrics=self.metrics,
        )

        self._setup_vehicle_routes()

    def _setup_vehicle_routes(self):
        """Set up vehicle-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "vehicles",
                "message": "Vehicles Access Layer - Vehicles Service",
                "version": "1.0.0",
                "capabilities": ["caching", "persistence"]
            }

        @self.app.get("/api/vehicle", response_model=List[Vehicle])
        async def list_vehicles():
            """List every vehicle."""
            return await self.coordinator.get_collection()

        @self.app.post("/api/vehicle", status_code=201, response_model=VehicleCreatedResponse)
        async def create_vehicle(vehicle: Optional[Vehicle] = Body(None)):
            """Create a vehicle."""
            vehicle_id = await self.coordinator.add(vehicle)
            return VehicleCreatedResponse(id=vehicle_id)

        @self.app.put("/api/vehicle/{vehicle_id}", status_code=204)
        async def update_vehicle(vehicle_id: int, vehicle: Optional[Vehicle] = Body(None)):
            """Update a vehicle."""
            await self.coordinator.update(vehicle_id, vehicle)
            return Response(status_code=204)

        @self.app.delete("/api/vehicle/{vehicle_id}", status_code=204)
        async def delete_vehicle(vehicle_id: int):
            """Delete a vehicle."""
            await self.coordinator.delete(vehicle_id)
            return Response(status_code=204)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check vehicles service dependencies."""
        dependencies = {}

        dependencies["redis"] = "ok" if await self.cache.health_check() else "error"
        dependencies["postgres"] = "ok" if await self.store.health_check() else "error"

        return dependencies

    async def start(self):
        """Start vehicles service components."""
        await self.store.start()

        try:
            await self.cache.start()
        except CacheUnavailable as e:
            # Reads fall back to the store until Redis answers again
            self.logger.warning("Starting without cache", error=e.message)

        self.logger.info("Vehicles service started")

    async def stop(self):
        """Stop vehicles service components."""
        await self.cache.stop()
        await self.store.stop()

        self.logger.info("Vehicles service stopped")


def create_app():
    """Create vehicles service application."""
    service = VehiclesService()
    return service.app


if __name__ == "__main__":
    service = VehiclesService()
    service.run()
