import pytest

from flowstat.core.exceptions import (
    ConfigurationError,
    DispatchError,
    FlowStatError,
    RegistryError,
    StatsSourceError,
)


@pytest.mark.parametrize(
    "exc_class,code",
    [
        (ConfigurationError, "configuration_error"),
        (StatsSourceError, "stats_source_error"),
        (RegistryError, "registry_error"),
        (DispatchError, "dispatch_error"),
    ],
)
def test_default_codes(exc_class, code):
    error = exc_class("something failed")

    assert isinstance(error, FlowStatError)
    assert error.code == code
    assert str(error) == "something failed"


def test_custom_code():
    assert ConfigurationError("bad", code="invalid_cron").code == "invalid_cron"
