"""Service and Route resource builders."""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata

SERVICE_TYPES = ("ClusterIP", "NodePort", "LoadBalancer")
TLS_TERMINATIONS = ("edge", "passthrough", "reencrypt")


class ServiceConfig(ResourceModel):
    """Configuration for a Service fronting one subcomponent."""

    name: str
    namespace: str
    port: int
    target_port: Optional[int] = Field(default=None, alias="targetPort")
    port_name: Optional[str] = Field(default=None, alias="portName")
    type: str = "ClusterIP"
    selector: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)

    @property
    def resolved_port_name(self) -> str:
        return self.port_name or f"port-{self.port}"

    def to_resource(self) -> ResourceDefinition:
        if self.type not in SERVICE_TYPES:
            raise ValueError(f"Unsupported service type {self.type!r}; expected one of {', '.join(SERVICE_TYPES)}.")
        spec: Dict[str, object] = {
            "type": self.type,
            "ports": [
                {
                    "name": self.resolved_port_name,
                    "port": self.port,
                    "targetPort": self.target_port or self.port,
                    "protocol": "TCP",
                }
            ],
        }
        if self.selector:
            spec["selector"] = dict(self.selector)
        return ResourceDefinition(
            api_version="v1",
            kind=ResourceKind.SERVICE,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            spec=spec,
        )


class RouteConfig(ResourceModel):
    """Configuration for an OpenShift Route exposing a Service."""

    name: str
    namespace: str
    service_name: str = Field(..., alias="serviceName")
    port_name: str = Field(..., alias="portName")
    tls_termination: str = Field(default="passthrough", alias="tlsTermination")
    host: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        spec: Dict[str, object] = {
            "to": {"kind": "Service", "name": self.service_name, "weight": 100},
            "port": {"targetPort": self.port_name},
            "tls": {
                "termination": self.tls_termination,
                "insecureEdgeTerminationPolicy": "Redirect",
            },
            "wildcardPolicy": "None",
        }
        if self.host:
            spec["host"] = self.host
        return ResourceDefinition(
            api_version="route.openshift.io/v1",
            kind=ResourceKind.ROUTE,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            spec=spec,
        )
