import pytest

from flowstat.domain.flow_stats.entities import ClassifiedResource
from flowstat.domain.flow_stats.services import ResourceClassifier, classify_resource_type
from flowstat.domain.flow_stats.value_objects import GLOBAL_RESOURCE, ResourceType
from flowstat.infrastructure.repositories.rate_limit_config_repository import (
    InMemoryResourceRateLimitConfigRepository,
)
from tests.factories import create_fake_config


@pytest.mark.parametrize(
    "resource,expected",
    [
        (GLOBAL_RESOURCE, ResourceType.GLOBAL),
        ("/orders/list", ResourceType.API),
        ("/", ResourceType.API),
        ("payment-service", ResourceType.SERVICE),
        ("GLOBAL", ResourceType.GLOBAL),
        ("global", ResourceType.SERVICE),
        ("_global", ResourceType.SERVICE),
    ],
)
def test_classify_resource_type(resource, expected):
    assert classify_resource_type(resource) is expected


def test_registered_resource_gets_its_config_id():
    registry = InMemoryResourceRateLimitConfigRepository([create_fake_config("/orders/list", id=17)])
    classifier = ResourceClassifier(registry)

    assert classifier.classify("/orders/list") == ClassifiedResource(
        resource="/orders/list", config_id=17, type=ResourceType.API
    )


def test_unregistered_resource_defaults_to_id_zero():
    classifier = ResourceClassifier(InMemoryResourceRateLimitConfigRepository())

    classified = classifier.classify("payment-service")

    assert classified.config_id == 0
    assert classified.type is ResourceType.SERVICE


def test_global_resource_lookup(mocker):
    registry = mocker.Mock()
    registry.get_resource_rate_limit_config.return_value = create_fake_config(GLOBAL_RESOURCE, id=1)

    classified = ResourceClassifier(registry).classify(GLOBAL_RESOURCE)

    registry.get_resource_rate_limit_config.assert_called_once_with(GLOBAL_RESOURCE)
    assert classified.config_id == 1
    assert classified.type is ResourceType.GLOBAL
