import pytest

from flowstat.core.config.runtime import FlowStatRuntimeConfig, FlowStatSnapshot
from flowstat.core.config.settings import Settings
from flowstat.core.exceptions import ConfigurationError


def test_defaults_are_disabled_redis_and_fixed_queue():
    snapshot = FlowStatRuntimeConfig().current()

    assert snapshot == FlowStatSnapshot(
        enabled=False, dest="redis", queue="fizz_resource_access_stat"
    )


def test_from_settings(monkeypatch):
    monkeypatch.setenv("FLOW_CONTROL", "true")
    monkeypatch.setenv("FLOW_STAT_SCHED_DEST", " Kafka ")
    monkeypatch.setenv("FLOW_STAT_SCHED_QUEUE", "stat_topic")

    snapshot = FlowStatRuntimeConfig.from_settings(Settings()).current()

    assert snapshot == FlowStatSnapshot(enabled=True, dest="kafka", queue="stat_topic")


def test_update_swaps_snapshot_and_keeps_old_one_intact():
    config = FlowStatRuntimeConfig()
    before = config.current()

    after = config.update(enabled=True, queue="other")

    assert before.enabled is False
    assert after is config.current()
    assert (after.enabled, after.dest, after.queue) == (True, "redis", "other")


def test_update_rejects_unknown_keys_and_empty_queue():
    config = FlowStatRuntimeConfig()

    with pytest.raises(ConfigurationError) as exc:
        config.update(cron="* * * * *")
    assert exc.value.code == "unknown_setting"

    with pytest.raises(ConfigurationError):
        config.update(queue="")


def test_apply_payload_maps_config_center_keys():
    config = FlowStatRuntimeConfig()

    config.apply_payload({"flowControl": True, "dest": "kafka", "ignored": 1})

    assert config.current() == FlowStatSnapshot(enabled=True, dest="kafka")


def test_apply_empty_payload_is_a_no_op():
    config = FlowStatRuntimeConfig()
    before = config.current()

    assert config.apply_payload({}) is before


@pytest.mark.parametrize("raw,expected", [("false", False), ("true", True), (False, False), (1, True)])
def test_flag_strings_are_parsed_not_truth_tested(raw, expected):
    config = FlowStatRuntimeConfig(FlowStatSnapshot(enabled=not expected))

    config.apply_payload({"flowControl": raw})

    assert config.current().enabled is expected


@pytest.mark.parametrize("raw", ["maybe", "", [True], None])
def test_invalid_flag_is_rejected_and_snapshot_kept(raw):
    config = FlowStatRuntimeConfig()
    before = config.current()

    with pytest.raises(ConfigurationError) as exc:
        config.apply_payload({"flowControl": raw})

    assert exc.value.code == "invalid_flag"
    assert config.current() is before
