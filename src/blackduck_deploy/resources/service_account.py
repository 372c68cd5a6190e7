"""ServiceAccount and RoleBinding resource builders."""
from __future__ import annotations

from typing import Dict, List

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata


class ServiceAccountConfig(ResourceModel):
    """Configuration for the service account the application pods run as."""

    name: str
    namespace: str
    image_pull_secrets: List[str] = Field(default_factory=list, alias="imagePullSecrets")
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        extra: Dict[str, object] = {}
        if self.image_pull_secrets:
            extra["imagePullSecrets"] = [{"name": name} for name in self.image_pull_secrets]
        return ResourceDefinition(
            api_version="v1",
            kind=ResourceKind.SERVICE_ACCOUNT,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            extra=extra,
        )


class RoleBindingConfig(ResourceModel):
    """Binds a cluster role to a service account inside one namespace."""

    name: str
    namespace: str
    cluster_role: str = Field(..., alias="clusterRole")
    service_account: str = Field(..., alias="serviceAccount")
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        return ResourceDefinition(
            api_version="rbac.authorization.k8s.io/v1",
            kind=ResourceKind.ROLE_BINDING,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            extra={
                "roleRef": {
                    "apiGroup": "rbac.authorization.k8s.io",
                    "kind": "ClusterRole",
                    "name": self.cluster_role,
                },
                "subjects": [
                    {
                        "kind": "ServiceAccount",
                        "name": self.service_account,
                        "namespace": self.namespace,
                    }
                ],
            },
        )
