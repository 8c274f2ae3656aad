from __future__ import annotations

"""Re-export factory functions for generating fake test data."""

# flake8: noqa: F401 – re-export

from .dispatchers import SERVER_IP, RecordingDispatcher
from .flow_stats import (
    BASE_SLOT,
    create_fake_config,
    create_fake_resource_stat,
    create_fake_window,
)

__all__ = [
    "RecordingDispatcher",
    "SERVER_IP",
    "BASE_SLOT",
    "create_fake_config",
    "create_fake_resource_stat",
    "create_fake_window",
]
