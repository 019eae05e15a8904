"""
Persistence package for Vehicles Service.

The VehicleStore port is the authoritative source for the collection;
PostgreSQLVehicleStore implements it on an asyncpg pool.
"""

from .base import VehicleStore
from .postgres import PostgreSQLVehicleStore

__all__ = ["VehicleStore", "PostgreSQLVehicleStore"]
