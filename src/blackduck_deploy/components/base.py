"""Shared machinery for subcomponent builders."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from ..config import ApplicationSpec
from ..errors import Diagnostics
from ..flavors import FlavorResolver
from ..images import ImageResolver
from ..platforms import PlatformAdapter
from ..resources.base import ResourceDefinition
from ..resources.service import ServiceConfig
from ..resources.workload import ContainerConfig, DeploymentConfig, PodConfig, ProbeConfig
from ..utils import component_labels, resource_name, version_labels
from ..volumes import MountSpec, VolumeSelector

_LOG = logging.getLogger(__name__)

SHARED_COMPONENT = "shared"


def config_map_name(spec: ApplicationSpec) -> str:
    return resource_name(spec.name, "config")


def database_secret_name(spec: ApplicationSpec) -> str:
    return resource_name(spec.name, "db-creds")


def service_account_name(spec: ApplicationSpec) -> str:
    return resource_name(spec.name, "service-account")


def certificate_secret_name(spec: ApplicationSpec) -> str:
    return resource_name(spec.name, "webserver-certificate")


@dataclass
class BuildContext:
    """Read-only collaborators handed to a builder, plus its own diagnostics.

    ``peers`` maps every registered subcomponent to the port its Service
    exposes, so builders can reference each other's addresses.
    """

    spec: ApplicationSpec
    flavors: FlavorResolver
    images: ImageResolver
    platform: PlatformAdapter
    volumes: Callable[[str, str], VolumeSelector] = VolumeSelector
    peers: Mapping[str, int] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def volume_selector(self, component: str) -> VolumeSelector:
        return self.volumes(self.spec.name, component)


@dataclass
class BuildResult:
    """Objects produced by one builder, in emission order."""

    component: str
    workload: Optional[ResourceDefinition] = None
    services: List[ResourceDefinition] = field(default_factory=list)
    routes: List[ResourceDefinition] = field(default_factory=list)
    claims: List[ResourceDefinition] = field(default_factory=list)
    extra: List[ResourceDefinition] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def resources(self) -> Iterator[ResourceDefinition]:
        if self.workload is not None:
            yield self.workload
        yield from self.services
        yield from self.routes
        yield from self.claims
        yield from self.extra


@dataclass(frozen=True)
class Subcomponent:
    """One containerized service of the application: a Deployment and its Service.

    Subclasses add component specific environment or volumes through
    :meth:`environment` and :meth:`extra_volumes`.
    """

    name: str
    port: int
    mounts: Tuple[MountSpec, ...] = ()
    probe: Optional[ProbeConfig] = None
    scalable: bool = False
    exposed: bool = False

    def environment(self, spec: ApplicationSpec) -> List[Dict[str, Any]]:
        return []

    def extra_volumes(self, spec: ApplicationSpec) -> List[Tuple[Dict[str, Any], Dict[str, str]]]:
        """Pairs of (pod volume, container mount) beyond the data mounts."""

        return []

    def build(self, ctx: BuildContext) -> BuildResult:
        spec = ctx.spec
        name = resource_name(spec.name, self.name)
        labels = component_labels(spec.name, self.name)

        selector = ctx.volume_selector(self.name)
        volumes = selector.volumes_for(self.mounts, spec.persistent_storage)
        resolved = ctx.images.resolve(spec, self.name, ctx.diagnostics)
        envelope = ctx.flavors.resolve(spec.size, self.name, ctx.diagnostics)
        extras = self.extra_volumes(spec)

        container = ContainerConfig(
            name=self.name,
            image=resolved.image,
            resources=envelope.to_resources(),
            env_from_config_maps=[config_map_name(spec)],
            env=self.environment(spec),
            volume_mounts=[volume.to_mount() for volume in volumes] + [mount for _, mount in extras],
            ports=[self.port],
            liveness_probe=self.probe if self.probe and spec.liveness_probes else None,
            uid=resolved.uid,
        )
        pod = ctx.platform.adapt(
            PodConfig(
                containers=[container],
                volumes=[volume.to_volume() for volume in volumes] + [volume for volume, _ in extras],
                labels=version_labels(spec.name, self.name, spec.version),
                pull_secrets=list(spec.pull_secrets),
                node_affinities=list(spec.node_affinities.get(self.name, [])),
                service_account=service_account_name(spec),
            )
        )
        replicas = spec.replicas_for(self.name) if self.scalable else 1
        workload = DeploymentConfig(
            name=name,
            namespace=spec.namespace,
            replicas=replicas,
            selector=labels,
            pod=pod,
            labels=labels,
        )
        exposure = ctx.platform.expose(
            ServiceConfig(
                name=name,
                namespace=spec.namespace,
                port=self.port,
                port_name=f"port-{self.port}",
                selector=labels,
                labels=labels,
            ),
            exposed=self.exposed,
            service_type=spec.exposed_service_type,
            tls_termination=spec.tls_termination,
        )
        claims = selector.claims_for(
            self.mounts,
            spec.persistent_storage,
            namespace=spec.namespace,
            labels=labels,
            storage_class=spec.storage_class,
            sizes=spec.claim_sizes,
        )
        _LOG.debug("Built %s with image %s and %d volume(s)", name, resolved.image, len(volumes))

        return BuildResult(
            component=self.name,
            workload=workload.to_resource(),
            services=[exposure.service.to_resource()],
            routes=[exposure.route.to_resource()] if exposure.route else [],
            claims=[claim.to_resource() for claim in claims],
            diagnostics=ctx.diagnostics,
        )
