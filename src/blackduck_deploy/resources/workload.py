"""Deployment resource builder and the container/pod pieces it is made of."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from .base import ResourceDefinition, ResourceKind, ResourceModel, object_metadata


class ProbeConfig(ResourceModel):
    """Command-style health check."""

    command: List[str]
    delay: int = Field(default=240, alias="initialDelaySeconds")
    interval: int = Field(default=30, alias="periodSeconds")
    timeout: int = Field(default=10, alias="timeoutSeconds")
    failure_threshold: int = Field(default=10, alias="failureThreshold")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exec": {"command": list(self.command)},
            "initialDelaySeconds": self.delay,
            "periodSeconds": self.interval,
            "timeoutSeconds": self.timeout,
            "failureThreshold": self.failure_threshold,
        }


class NodeAffinity(ResourceModel):
    """One node selector requirement applied to a subcomponent's pods."""

    key: str
    operator: str = "In"
    values: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        requirement: Dict[str, Any] = {"key": self.key, "operator": self.operator}
        if self.values:
            requirement["values"] = list(self.values)
        return requirement


class ContainerConfig(ResourceModel):
    """A single container inside a subcomponent pod."""

    name: str
    image: str
    pull_policy: str = Field(default="Always", alias="imagePullPolicy")
    resources: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    env_from_config_maps: List[str] = Field(default_factory=list)
    env: List[Dict[str, Any]] = Field(default_factory=list)
    volume_mounts: List[Dict[str, str]] = Field(default_factory=list, alias="volumeMounts")
    ports: List[int] = Field(default_factory=list)
    liveness_probe: Optional[ProbeConfig] = Field(default=None, alias="livenessProbe")
    uid: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        container: Dict[str, Any] = {
            "name": self.name,
            "image": self.image,
            "imagePullPolicy": self.pull_policy,
        }
        if self.resources:
            container["resources"] = {key: dict(value) for key, value in self.resources.items()}
        if self.env_from_config_maps:
            container["envFrom"] = [{"configMapRef": {"name": name}} for name in self.env_from_config_maps]
        if self.env:
            container["env"] = [dict(entry) for entry in self.env]
        if self.volume_mounts:
            container["volumeMounts"] = [dict(mount) for mount in self.volume_mounts]
        if self.ports:
            container["ports"] = [{"containerPort": port, "protocol": "TCP"} for port in self.ports]
        if self.liveness_probe:
            container["livenessProbe"] = self.liveness_probe.to_dict()
        if self.uid is not None:
            container["securityContext"] = {"runAsUser": self.uid}
        return container


class PodConfig(ResourceModel):
    """Everything that goes into a pod template, before platform adjustments."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    containers: List[ContainerConfig]
    volumes: List[Dict[str, Any]] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)
    pull_secrets: List[str] = Field(default_factory=list, alias="imagePullSecrets")
    node_affinities: List[NodeAffinity] = Field(default_factory=list, alias="nodeAffinities")
    service_account: Optional[str] = Field(default=None, alias="serviceAccountName")
    fs_group: Optional[int] = Field(default=None, alias="fsGroup")

    def to_template(self) -> Dict[str, Any]:
        pod_spec: Dict[str, Any] = {
            "containers": [container.to_dict() for container in self.containers],
        }
        if self.volumes:
            pod_spec["volumes"] = [dict(volume) for volume in self.volumes]
        if self.pull_secrets:
            pod_spec["imagePullSecrets"] = [{"name": name} for name in self.pull_secrets]
        if self.service_account:
            pod_spec["serviceAccountName"] = self.service_account
        if self.node_affinities:
            pod_spec["affinity"] = {
                "nodeAffinity": {
                    "requiredDuringSchedulingIgnoredDuringExecution": {
                        "nodeSelectorTerms": [
                            {"matchExpressions": [entry.to_dict() for entry in self.node_affinities]}
                        ]
                    }
                }
            }
        if self.fs_group is not None:
            pod_spec["securityContext"] = {"fsGroup": self.fs_group}
        return {"metadata": {"labels": dict(self.labels)}, "spec": pod_spec}


class DeploymentConfig(ResourceModel):
    """Configuration for the workload running one subcomponent."""

    name: str
    namespace: str
    replicas: int = 1
    selector: Dict[str, str]
    pod: PodConfig
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(self) -> ResourceDefinition:
        if self.replicas < 0:
            raise ValueError(f"Replica count for {self.name} must not be negative.")
        spec: Dict[str, Any] = {
            "replicas": self.replicas,
            "selector": {"matchLabels": dict(self.selector)},
            "strategy": {"type": "Recreate"},
            "template": self.pod.to_template(),
        }
        return ResourceDefinition(
            api_version="apps/v1",
            kind=ResourceKind.DEPLOYMENT,
            metadata=object_metadata(self.name, self.namespace, self.labels),
            spec=spec,
        )
