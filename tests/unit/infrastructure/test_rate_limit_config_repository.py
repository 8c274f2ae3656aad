import json
from unittest.mock import AsyncMock

import pytest
from redis.asyncio import Redis

from flowstat.core.exceptions import RegistryError
from flowstat.infrastructure.repositories.rate_limit_config_repository import (
    InMemoryResourceRateLimitConfigRepository,
    RedisResourceRateLimitConfigRepository,
    parse_config,
)
from tests.factories import create_fake_config


def _entry(id, resource, **extra):
    return json.dumps({"id": id, "resource": resource, "type": 4, **extra})


@pytest.fixture
def redis_client():
    mock_redis = AsyncMock(spec=Redis)
    mock_redis.hgetall = AsyncMock(return_value={})
    return mock_redis


def test_in_memory_lookup_and_removal():
    registry = InMemoryResourceRateLimitConfigRepository([create_fake_config("/a", id=5)])

    assert registry.get_resource_rate_limit_config("/a").id == 5
    assert registry.get_resource_rate_limit_config("/b") is None

    registry.remove("/a")
    assert registry.get_resource_rate_limit_config("/a") is None


def test_saving_a_deleted_config_removes_it():
    registry = InMemoryResourceRateLimitConfigRepository([create_fake_config("/a", id=5)])

    registry.save(create_fake_config("/a", id=5, is_deleted=True))

    assert len(registry) == 0


def test_parse_config_rejects_garbage():
    with pytest.raises(RegistryError):
        parse_config("not json")
    with pytest.raises(RegistryError):
        parse_config(json.dumps({"resource": "/a"}))


@pytest.mark.asyncio
async def test_load_reads_hash_and_skips_bad_entries(redis_client):
    redis_client.hgetall.return_value = {
        "1": _entry(1, "/orders/list"),
        "2": _entry(2, "payment-service"),
        "3": "{broken",
        "4": _entry(4, "/gone", isDeleted=True),
    }
    registry = RedisResourceRateLimitConfigRepository(redis_client, "fizz_rate_limit", "channel")

    loaded = await registry.load()

    redis_client.hgetall.assert_awaited_once_with("fizz_rate_limit")
    assert loaded == 2
    assert registry.get_resource_rate_limit_config("/orders/list").id == 1
    assert registry.get_resource_rate_limit_config("/gone") is None


@pytest.mark.asyncio
async def test_reload_replaces_previous_content(redis_client):
    registry = RedisResourceRateLimitConfigRepository(redis_client, "h", "c")
    redis_client.hgetall.return_value = {"1": _entry(1, "/old")}
    await registry.load()
    redis_client.hgetall.return_value = {"2": _entry(2, "/new")}

    await registry.load()

    assert registry.get_resource_rate_limit_config("/old") is None
    assert registry.get_resource_rate_limit_config("/new").id == 2


def test_channel_messages_update_and_delete(redis_client):
    registry = RedisResourceRateLimitConfigRepository(redis_client, "h", "c")

    registry.apply_message(_entry(9, "/orders/list"))
    assert registry.get_resource_rate_limit_config("/orders/list").id == 9

    registry.apply_message(_entry(9, "/orders/list", isDeleted=True))
    assert registry.get_resource_rate_limit_config("/orders/list") is None

    registry.apply_message("garbage")
    assert len(registry) == 0


@pytest.mark.parametrize("raw", ["123", "[1, 2]", '"x"', "null"])
def test_parse_config_rejects_json_that_is_not_an_object(raw):
    with pytest.raises(RegistryError):
        parse_config(raw)


@pytest.mark.asyncio
async def test_load_skips_entries_that_are_not_objects(redis_client):
    redis_client.hgetall.return_value = {"1": _entry(1, "/orders/list"), "2": "123", "3": "[1, 2]"}
    registry = RedisResourceRateLimitConfigRepository(redis_client, "h", "c")

    loaded = await registry.load()

    assert loaded == 1
    assert registry.get_resource_rate_limit_config("/orders/list").id == 1


def test_non_object_channel_message_is_ignored(redis_client):
    registry = RedisResourceRateLimitConfigRepository(redis_client, "h", "c")
    registry.apply_message(_entry(9, "/orders/list"))

    registry.apply_message("[1, 2]")
    registry.apply_message("123")

    assert registry.get_resource_rate_limit_config("/orders/list").id == 9
    assert len(registry) == 1
