import json
from unittest.mock import AsyncMock

import pytest
from redis.asyncio import Redis

from flowstat.core.config.runtime import FlowStatRuntimeConfig, FlowStatSnapshot
from flowstat.infrastructure.services.config_watcher import FlowStatConfigWatcher


@pytest.fixture
def runtime_config():
    return FlowStatRuntimeConfig(FlowStatSnapshot())


@pytest.fixture
def watcher(runtime_config):
    redis_client = AsyncMock(spec=Redis)
    redis_client.publish = AsyncMock(return_value=2)
    return FlowStatConfigWatcher(redis_client, runtime_config, channel="flowstat_config_updates")


def test_message_updates_runtime_config(watcher, runtime_config):
    watcher.handle_message(json.dumps({"flowControl": True, "dest": "KAFKA", "queue": "topic_a"}))

    assert runtime_config.current() == FlowStatSnapshot(enabled=True, dest="kafka", queue="topic_a")


def test_partial_message_keeps_other_values(watcher, runtime_config):
    watcher.handle_message(json.dumps({"flowControl": True}))

    snapshot = runtime_config.current()
    assert snapshot.enabled is True
    assert snapshot.dest == "redis"
    assert snapshot.queue == "fizz_resource_access_stat"


@pytest.mark.parametrize(
    "payload",
    ["not json", "[1, 2]", json.dumps({"queue": ""}), json.dumps({"flowControl": "sometimes"})],
)
def test_invalid_messages_are_ignored(watcher, runtime_config, payload):
    before = runtime_config.current()

    watcher.handle_message(payload)

    assert runtime_config.current() == before


@pytest.mark.asyncio
async def test_publish_uses_config_center_keys(watcher):
    receivers = await watcher.publish(enabled=True, dest="kafka")

    assert receivers == 2
    channel, payload = watcher._redis.publish.await_args.args
    assert channel == "flowstat_config_updates"
    assert json.loads(payload) == {"flowControl": True, "dest": "kafka"}


def test_string_false_keeps_reporting_off(watcher, runtime_config):
    watcher.handle_message(json.dumps({"flowControl": "false"}))

    assert runtime_config.current().enabled is False
