from __future__ import annotations

"""Structured exception hierarchy for the flow statistics reporter.

Each exception carries a machine-readable `code` for programmatic handling and
a human-readable `message` for logging. None of them is allowed to escape a
reporting tick; they surface in logs, metrics and the HTTP layer.
"""

from typing import Final

__all__: Final = [
    "FlowStatError",
    "ConfigurationError",
    "StatsSourceError",
    "RegistryError",
    "DispatchError",
]


class FlowStatError(Exception):
    """Base exception class for all custom errors in the reporter.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(FlowStatError):
    """Raised when a configuration value or runtime update is invalid."""

    def __init__(self, message: str, code: str = "configuration_error"):
        super().__init__(message, code)


class StatsSourceError(FlowStatError):
    """Raised when the statistics engine cannot answer a window query."""

    def __init__(self, message: str, code: str = "stats_source_error"):
        super().__init__(message, code)


class RegistryError(FlowStatError):
    """Raised when the rate limit configuration registry cannot be loaded
    or receives a malformed entry."""

    def __init__(self, message: str, code: str = "registry_error"):
        super().__init__(message, code)


class DispatchError(FlowStatError):
    """Raised when a record cannot be handed to its sink.

    Publish failures that happen after the hand-off are never raised; they are
    logged and counted by the dispatcher.
    """

    def __init__(self, message: str, code: str = "dispatch_error"):
        super().__init__(message, code)
