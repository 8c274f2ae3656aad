import pytest

from flowstat.core.exceptions import StatsSourceError
from flowstat.infrastructure.stats.in_memory_flow_stat import InMemoryFlowStatSource
from tests.factories import BASE_SLOT, create_fake_window


@pytest.fixture
def source():
    store = InMemoryFlowStatSource(clock=lambda: BASE_SLOT)
    for offset in (0, 10_000, 20_000):
        store.record_window("/orders/list", create_fake_window(start_time=BASE_SLOT + offset))
    store.record_window("payment-service", create_fake_window(start_time=BASE_SLOT + 20_000))
    return store


def test_current_time_slot_uses_clock(source):
    assert source.current_time_slot_id() == BASE_SLOT


def test_range_is_half_open(source):
    result = source.get_resource_time_window_stats(None, BASE_SLOT, BASE_SLOT + 20_000)

    assert [r.resource_id for r in result] == ["/orders/list"]
    assert [w.start_time for w in result[0].windows] == [BASE_SLOT, BASE_SLOT + 10_000]


def test_resource_filter(source):
    result = source.get_resource_time_window_stats(
        "payment-service", BASE_SLOT, BASE_SLOT + 30_000
    )

    assert [r.resource_id for r in result] == ["payment-service"]


def test_empty_range_returns_empty_list(source):
    assert source.get_resource_time_window_stats(None, BASE_SLOT + 60_000, BASE_SLOT + 70_000) == []


def test_eviction_drops_old_windows(source):
    dropped = source.evict_before(BASE_SLOT + 20_000)

    assert dropped == 2
    result = source.get_resource_time_window_stats(None, BASE_SLOT, BASE_SLOT + 30_000)
    assert sorted(r.resource_id for r in result) == ["/orders/list", "payment-service"]


def test_other_window_sizes_are_rejected(source):
    with pytest.raises(StatsSourceError):
        source.get_resource_time_window_stats(None, BASE_SLOT, BASE_SLOT + 10_000, 1)


def test_default_clock_is_second_aligned():
    assert InMemoryFlowStatSource().current_time_slot_id() % 1000 == 0
