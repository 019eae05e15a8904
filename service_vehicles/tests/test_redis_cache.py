"""
Unit tests for the Redis cache store.
"""

import pytest
from unittest.mock import AsyncMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError, TimeoutError as RedisTimeoutError

from shared.errors import CacheUnavailable
from shared.test_helpers import FakeClock, InMemoryCacheStore, InMemoryVehicleStore, VehicleFactory
from service_vehicles.app.cache.redis_cache import RedisCacheStore
from service_vehicles.app.coordinator import CacheCoordinator


class TestRedisCacheStore:
    """Test cases for RedisCacheStore."""

    @pytest.fixture
    def client(self):
        """Mock redis.asyncio client."""
        return AsyncMock()

    @pytest.fixture
    def cache(self, client):
        return RedisCacheStore("redis://localhost:6379/0", client=client)

    @pytest.mark.asyncio
    async def test_get_returns_payload(self, cache, client):
        client.get.return_value = '[{"id": 1}]'

        result = await cache.get("vehicles-cache")

        assert result == '[{"id": 1}]'
        client.get.assert_awaited_once_with("vehicles-cache")

    @pytest.mark.asyncio
    async def test_get_returns_none_when_absent(self, cache, client):
        client.get.return_value = None

        assert await cache.get("vehicles-cache") is None

    @pytest.mark.asyncio
    async def test_set_passes_ttl_as_expiry(self, cache, client):
        await cache.set("vehicles-cache", "[]", 1200)

        client.set.assert_awaited_once_with("vehicles-cache", "[]", ex=1200)

    @pytest.mark.asyncio
    async def test_set_without_ttl_uses_default(self, client):
        cache = RedisCacheStore("redis://localhost:6379/0", default_ttl=60, client=client)

        await cache.set("vehicles-cache", "[]")

        client.set.assert_awaited_once_with("vehicles-cache", "[]", ex=60)

    @pytest.mark.asyncio
    async def test_set_without_any_ttl_never_expires(self, cache, client):
        await cache.set("vehicles-cache", "[]")

        client.set.assert_awaited_once_with("vehicles-cache", "[]", ex=None)

    @pytest.mark.asyncio
    async def test_delete_absent_key_is_noop(self, cache, client):
        client.delete.return_value = 0

        await cache.delete("vehicles-cache")

        client.delete.assert_awaited_once_with("vehicles-cache")

    @pytest.mark.asyncio
    async def test_exists(self, cache, client):
        client.exists.return_value = 1
        assert await cache.exists("vehicles-cache") is True

        client.exists.return_value = 0
        assert await cache.exists("vehicles-cache") is False

    @pytest.mark.asyncio
    async def test_refresh_ttl_on_existing_key(self, cache, client):
        client.expire.return_value = True

        assert await cache.refresh_ttl("vehicles-cache", 1200) is True
        client.expire.assert_awaited_once_with("vehicles-cache", 1200)

    @pytest.mark.asyncio
    async def test_refresh_ttl_on_missing_key(self, cache, client):
        client.expire.return_value = False

        assert await cache.refresh_ttl("vehicles-cache", 1200) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation,args", [
        ("get", ("vehicles-cache",)),
        ("set", ("vehicles-cache", "[]", 60)),
        ("delete", ("vehicles-cache",)),
        ("exists", ("vehicles-cache",)),
        ("refresh_ttl", ("vehicles-cache", 60)),
    ])
    @pytest.mark.parametrize("error", [
        RedisConnectionError("Connection refused"),
        RedisTimeoutError("Timeout reading from socket"),
        OSError("Network unreachable"),
    ])
    async def test_backend_errors_raise_cache_unavailable(self, cache, client, operation, args, error):
        redis_method = "expire" if operation == "refresh_ttl" else operation
        getattr(client, redis_method).side_effect = error

        with pytest.raises(CacheUnavailable) as exc_info:
            await getattr(cache, operation)(*args)

        assert exc_info.value.operation == operation
        assert exc_info.value.key == "vehicles-cache"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_undecodable_payload_raises_cache_unavailable(self, cache, client):
        error = UnicodeDecodeError("utf-8", b"\xff\xfe garbage", 0, 1, "invalid start byte")
        client.get.side_effect = error

        with pytest.raises(CacheUnavailable) as exc_info:
            await cache.get("vehicles-cache")

        assert exc_info.value.operation == "get"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_undecodable_payload_falls_back_to_store(self, cache, client):
        client.get.side_effect = UnicodeDecodeError("utf-8", b"\xff\xfe garbage", 0, 1, "invalid start byte")
        client.expire.return_value = True
        store = InMemoryVehicleStore(VehicleFactory.create_test_vehicles())

        vehicles = await CacheCoordinator(store, cache).get_collection()

        assert [v.id for v in vehicles] == [1, 2, 3]
        assert store.list_calls == 1
        client.set.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_calls_before_start_raise_cache_unavailable(self):
        cache = RedisCacheStore("redis://localhost:6379/0")

        with pytest.raises(CacheUnavailable):
            await cache.get("vehicles-cache")

    @pytest.mark.asyncio
    async def test_start_builds_client_and_pings(self):
        client = AsyncMock()
        with patch("service_vehicles.app.cache.redis_cache.redis.from_url", return_value=client) as from_url:
            cache = RedisCacheStore("redis://cache:6379/1", socket_timeout=2.0)
            await cache.start()

        from_url.assert_called_once()
        assert from_url.call_args.args == ("redis://cache:6379/1",)
        assert from_url.call_args.kwargs["decode_responses"] is True
        assert from_url.call_args.kwargs["socket_timeout"] == 2.0
        client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_start_keeps_client_for_reconnect(self, cache, client):
        client.ping.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(CacheUnavailable):
            await cache.start()

        assert cache.redis is client
        client.get.return_value = None
        assert await cache.get("vehicles-cache") is None

    @pytest.mark.asyncio
    async def test_stop_closes_client_once(self, cache, client):
        await cache.stop()
        await cache.stop()

        client.aclose.assert_awaited_once()
        assert cache.redis is None

    @pytest.mark.asyncio
    async def test_context_manager_lifecycle(self, client):
        async with RedisCacheStore("redis://localhost:6379/0", client=client) as cache:
            client.ping.assert_awaited_once()
            assert cache.redis is client

        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_health_check(self, cache, client):
        assert await cache.health_check() is True

        client.ping.side_effect = RedisConnectionError("down")
        assert await cache.health_check() is False


class TestSnapshotExpiry:
    """TTL semantics shared by every CacheStore."""

    @pytest.mark.asyncio
    async def test_entry_absent_after_ttl_elapses(self):
        clock = FakeClock()
        cache = InMemoryCacheStore(clock=clock)
        await cache.set("vehicles-cache", "[]", 30)

        clock.advance(29)
        assert await cache.get("vehicles-cache") == "[]"

        clock.advance(1)
        assert await cache.get("vehicles-cache") is None
        assert await cache.exists("vehicles-cache") is False

    @pytest.mark.asyncio
    async def test_refresh_ttl_only_touches_existing_keys(self):
        clock = FakeClock()
        cache = InMemoryCacheStore(clock=clock)

        assert await cache.refresh_ttl("vehicles-cache", 30) is False
        assert await cache.exists("vehicles-cache") is False

        await cache.set("vehicles-cache", "[]", 30)
        clock.advance(20)
        assert await cache.refresh_ttl("vehicles-cache", 30) is True
        clock.advance(20)
        assert await cache.get("vehicles-cache") == "[]"
