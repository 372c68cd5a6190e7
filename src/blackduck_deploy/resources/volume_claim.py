"""PersistentVolumeClaim resource builder."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata


class PersistentVolumeClaimConfig(ResourceModel):
    """Configuration for a claim backing one persistent mount point."""

    name: str
    namespace: str
    size: str = "2Gi"
    storage_class: Optional[str] = Field(default=None, alias="storageClass")
    access_modes: List[str] = Field(default_factory=lambda: ["ReadWriteOnce"], alias="accessModes")
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        spec: Dict[str, object] = {
            "accessModes": list(self.access_modes),
            "resources": {"requests": {"storage": self.size}},
        }
        if self.storage_class:
            spec["storageClassName"] = self.storage_class
        return ResourceDefinition(
            api_version="v1",
            kind=ResourceKind.PERSISTENT_VOLUME_CLAIM,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            spec=spec,
        )
