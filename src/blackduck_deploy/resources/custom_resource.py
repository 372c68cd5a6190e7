"""CustomResourceDefinition passthrough."""
from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel


class CustomResourceDefinitionConfig(ResourceModel):
    """Wraps an already-authored CRD so it can travel in a component list."""

    name: str
    namespace: str
    spec: Dict[str, Any]
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        metadata: Dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return ResourceDefinition(
            api_version="apiextensions.k8s.io/v1",
            kind=ResourceKind.CUSTOM_RESOURCE_DEFINITION,
            metadata=metadata,
            spec=dict(self.spec),
        )
