import pytest

from flowstat.core.config.runtime import FlowStatRuntimeConfig, FlowStatSnapshot
from flowstat.core.metrics import MetricsCollector
from flowstat.domain.flow_stats.services import RecordBuilder, ResourceClassifier
from flowstat.domain.services.flow_stat_report_service import FlowStatReportService
from flowstat.infrastructure.repositories.rate_limit_config_repository import (
    InMemoryResourceRateLimitConfigRepository,
)
from flowstat.infrastructure.stats.in_memory_flow_stat import InMemoryFlowStatSource
from tests.factories import BASE_SLOT, SERVER_IP, RecordingDispatcher


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def stats_source():
    """Stats store whose clock sits 5 seconds into the 12:00:10 window."""
    return InMemoryFlowStatSource(clock=lambda: BASE_SLOT + 15_000)


@pytest.fixture
def registry():
    return InMemoryResourceRateLimitConfigRepository()


@pytest.fixture
def runtime_config():
    return FlowStatRuntimeConfig(FlowStatSnapshot(enabled=True))


@pytest.fixture
def redis_dispatcher():
    return RecordingDispatcher("redis")


@pytest.fixture
def kafka_dispatcher():
    return RecordingDispatcher("kafka")


@pytest.fixture
def report_service(stats_source, registry, runtime_config, redis_dispatcher, kafka_dispatcher, metrics):
    return FlowStatReportService(
        stats_source=stats_source,
        classifier=ResourceClassifier(registry),
        record_builder=RecordBuilder(SERVER_IP),
        dispatchers={"redis": redis_dispatcher, "kafka": kafka_dispatcher},
        runtime_config=runtime_config,
        metrics=metrics,
    )
