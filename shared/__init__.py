"""
Shared utilities for the Vehicles access layer.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (lifespan, health, metrics)
- test_helpers: In-memory backends and data factories for tests

Do not import from service_* packages into shared/, except in test_helpers
which builds fixtures for them.
"""
