"""ConfigMap resource builder."""
from __future__ import annotations

from typing import Dict

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata


class ConfigMapConfig(ResourceModel):
    """Configuration for a ConfigMap holding plain environment values."""

    name: str
    namespace: str
    data: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        extra: Dict[str, object] = {}
        if self.data:
            extra["data"] = {key: self.data[key] for key in sorted(self.data)}
        return ResourceDefinition(
            api_version="v1",
            kind=ResourceKind.CONFIG_MAP,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            extra=extra,
        )
