"""Secret resource builder."""
from __future__ import annotations

from typing import Dict

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata


class SecretConfig(ResourceModel):
    """Configuration for a Kubernetes Secret."""

    name: str
    namespace: str
    type: str = "Opaque"
    data: Dict[str, str] = Field(default_factory=dict)
    string_data: Dict[str, str] = Field(default_factory=dict, alias="stringData")
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        extra: Dict[str, object] = {"type": self.type}
        if self.data:
            extra["data"] = dict(self.data)
        if self.string_data:
            extra["stringData"] = dict(self.string_data)

        return ResourceDefinition(
            api_version="v1",
            kind=ResourceKind.SECRET,
            metadata=object_metadata(self.name, self.namespace, self.labels, self.annotations),
            spec=None,
            extra=extra,
        )
