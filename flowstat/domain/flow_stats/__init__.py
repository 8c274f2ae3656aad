"""
Flow Statistics Domain

Value objects, entities, collaborator interfaces and pure services of the
periodic flow statistics report.
"""

from .entities import ClassifiedResource, ResourceRateLimitConfig
from .repositories import FlowStatSource, ResourceRateLimitConfigRepository
from .services import (
    RecordBuilder,
    ResourceClassifier,
    align_report_window,
    classify_resource_type,
)
from .value_objects import (
    GLOBAL_RESOURCE,
    WINDOW_SIZE_MILLIS,
    WINDOW_SIZE_SECONDS,
    ReportRecord,
    ReportWindow,
    ResourceTimeWindowStat,
    ResourceType,
    TimeWindowStat,
)

__all__ = [
    "ClassifiedResource",
    "FlowStatSource",
    "GLOBAL_RESOURCE",
    "RecordBuilder",
    "ReportRecord",
    "ReportWindow",
    "ResourceClassifier",
    "ResourceRateLimitConfig",
    "ResourceRateLimitConfigRepository",
    "ResourceTimeWindowStat",
    "ResourceType",
    "TimeWindowStat",
    "WINDOW_SIZE_MILLIS",
    "WINDOW_SIZE_SECONDS",
    "align_report_window",
    "classify_resource_type",
]
