#!/usr/bin/env python3
"""
Prime or drop the Redis snapshot of the vehicle collection.

Runs the same coordinator the Vehicles service uses, so a warm run loads the
collection from PostgreSQL and writes the snapshot with the configured TTL.
Useful after bulk imports done directly against the database, which bypass
the service's invalidation.
"""

import argparse
import asyncio
import json
from pathlib import Path
import sys

from shared.config import BaseConfig
from shared.errors import CacheUnavailable, StoreError
from shared.logging import configure_logging
from service_vehicles.app.cache.redis_cache import RedisCacheStore
from service_vehicles.app.coordinator import CacheCoordinator
from service_vehicles.app.persistence.postgres import PostgreSQLVehicleStore


async def warm(
    *,
    redis_url: str,
    postgres_dsn: str,
    cache_key: str,
    ttl_seconds: int,
    invalidate: bool,
    skip_load: bool,
) -> dict:
    """Execute invalidation and/or cache warming and return the summary."""
    summary = {"cache_key": cache_key, "ttl_seconds": ttl_seconds, "invalidated": None, "loaded": None}

    async with PostgreSQLVehicleStore(postgres_dsn) as store:
        cache = RedisCacheStore(redis_url)
        try:
            await cache.start()
            coordinator = CacheCoordinator(store, cache, cache_key=cache_key, ttl_seconds=ttl_seconds)

            if invalidate:
                summary["invalidated"] = await coordinator.invalidate()

            if not skip_load:
                vehicles = await coordinator.get_collection()
                summary["loaded"] = len(vehicles)
                summary["cached"] = await cache.exists(cache_key)
        finally:
            await cache.stop()

    return summary


def _parse_args(config: BaseConfig) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Warm or invalidate the vehicles snapshot cache.")
    parser.add_argument("--redis-url", default=config.redis_url, help="Redis connection URL")
    parser.add_argument("--postgres-dsn", default=config.postgres_dsn, help="PostgreSQL DSN")
    parser.add_argument("--cache-key", default=config.cache_key, help="Snapshot cache key")
    parser.add_argument("--ttl", type=int, default=config.cache_ttl_seconds, help="Snapshot TTL in seconds")
    parser.add_argument("--invalidate", action="store_true", help="Drop the current snapshot first")
    parser.add_argument("--no-load", action="store_true", help="Only invalidate; do not reload the snapshot")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args()


def main() -> int:
    config = BaseConfig()
    configure_logging("vehicles", config.log_level)
    args = _parse_args(config)

    try:
        summary = asyncio.run(
            warm(
                redis_url=args.redis_url,
                postgres_dsn=args.postgres_dsn,
                cache_key=args.cache_key,
                ttl_seconds=args.ttl,
                invalidate=args.invalidate,
                skip_load=args.no_load,
            )
        )
    except KeyboardInterrupt:
        return 130
    except StoreError as exc:
        print(f"[cache-warm] store failed: {exc}", file=sys.stderr)
        return 1
    except CacheUnavailable as exc:
        print(f"[cache-warm] cache unavailable: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
