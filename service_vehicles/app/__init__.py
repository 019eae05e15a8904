"""
Vehicles Service package for the Vehicles access layer.

Serves the vehicle collection through a cache-aside coordinator that keeps a
single Redis snapshot of the whole collection in front of PostgreSQL:

- app.main: API surface for reading and mutating vehicles, plus health.
- app.coordinator: cache-aside read, mutate-then-invalidate, degradation.
- app.cache: CacheStore port, Redis adapter, snapshot codec.
- app.persistence: VehicleStore port and PostgreSQL adapter.

Guidelines:
- The service is stateless; rely on external cache/DB.
- Cache failures degrade to store reads; store failures reach the caller.
"""
