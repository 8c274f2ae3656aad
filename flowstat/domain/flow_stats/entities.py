"""Flow Statistics Domain Entities

Entities:
- ResourceRateLimitConfig: A rate limit configuration owned by the registry

The reporter reads these entities to enrich records with a configuration id.
They are created and mutated only by the registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .value_objects import ResourceType


@dataclass
class ResourceRateLimitConfig:
    """Entity representing the rate limit configuration of one resource.

    Identity is the registry ``id``; ``resource`` is the identifier the
    statistics engine uses for the same traffic target.
    """

    id: int
    resource: str
    type: Optional[ResourceType] = None
    enable: bool = True
    qps: int = -1
    concurrents: int = -1
    is_deleted: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResourceRateLimitConfig:
        """Build an entity from the registry's JSON representation.

        Raises:
            KeyError: When ``id`` or ``resource`` is missing.
            ValueError: When ``id`` is not an integer.
        """
        raw_type = data.get("type")
        return cls(
            id=int(data["id"]),
            resource=data["resource"],
            type=ResourceType(int(raw_type)) if raw_type is not None else None,
            enable=bool(data.get("enable", True)),
            qps=int(data.get("qps", -1)),
            concurrents=int(data.get("concurrents", -1)),
            is_deleted=bool(data.get("isDeleted", False)),
        )


@dataclass(frozen=True, slots=True)
class ClassifiedResource:
    """A resource identifier resolved to its configuration id and type."""

    resource: str
    config_id: int
    type: ResourceType
