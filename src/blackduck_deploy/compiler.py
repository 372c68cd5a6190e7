"""Compile an ApplicationSpec into the ordered list of objects that deploy it."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, List, Optional, Protocol, Sequence

from .components.base import BuildContext, BuildResult, Subcomponent
from .components.coordination import COORDINATION
from .components.database import DATABASE
from .components.registration import REGISTRATION
from .components.shared import SharedResources
from .components.webapp import WEBAPP
from .components.webserver import WEBSERVER
from .config import ApplicationSpec, check_certificate_requirement, check_supported_version
from .errors import Diagnostics
from .flavors import FlavorResolver
from .images import ImageResolver
from .platforms import PlatformAdapter
from .resources.base import ResourceDefinition, ResourceKind

_LOG = logging.getLogger(__name__)


class Builder(Protocol):
    name: str

    def build(self, ctx: BuildContext) -> BuildResult:
        ...


# Shared objects and storage-backed services come before their dependents.
DEFAULT_BUILDERS: Sequence[Builder] = (
    SharedResources(),
    COORDINATION,
    DATABASE,
    REGISTRATION,
    WEBAPP,
    WEBSERVER,
)


class ComponentList:
    """Every object of one application instance, grouped by kind.

    ``flatten`` returns them kind by kind in :class:`ResourceKind` order and in
    insertion order within a kind. The list is sealed once compiled.
    """

    def __init__(self) -> None:
        self._slices: Dict[ResourceKind, List[ResourceDefinition]] = {kind: [] for kind in ResourceKind}
        self.diagnostics = Diagnostics()
        self._sealed = False

    def add(self, resource: ResourceDefinition) -> None:
        if self._sealed:
            raise RuntimeError("Component list is sealed; compile a new one instead.")
        self._slices[ResourceKind(resource.kind)].append(resource)

    def seal(self) -> None:
        self._sealed = True

    def of_kind(self, kind: ResourceKind) -> List[ResourceDefinition]:
        return list(self._slices[kind])

    @property
    def deployments(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.DEPLOYMENT)

    @property
    def services(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.SERVICE)

    @property
    def config_maps(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.CONFIG_MAP)

    @property
    def service_accounts(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.SERVICE_ACCOUNT)

    @property
    def role_bindings(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.ROLE_BINDING)

    @property
    def secrets(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.SECRET)

    @property
    def persistent_volume_claims(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.PERSISTENT_VOLUME_CLAIM)

    @property
    def routes(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.ROUTE)

    @property
    def custom_resource_definitions(self) -> List[ResourceDefinition]:
        return self.of_kind(ResourceKind.CUSTOM_RESOURCE_DEFINITION)

    def flatten(self) -> List[ResourceDefinition]:
        return [resource for kind in ResourceKind for resource in self._slices[kind]]

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(items) for kind, items in self._slices.items() if items}

    def find(self, kind: ResourceKind, name: str) -> Optional[ResourceDefinition]:
        for resource in self._slices[kind]:
            if resource.name == name:
                return resource
        return None

    def __iter__(self) -> Iterator[ResourceDefinition]:
        return iter(self.flatten())

    def __len__(self) -> int:
        return sum(len(items) for items in self._slices.values())


class Compiler:
    """Drive every registered builder and collect their objects in a fixed order."""

    def __init__(
        self,
        builders: Optional[Sequence[Builder]] = None,
        flavors: Optional[FlavorResolver] = None,
        images: Optional[ImageResolver] = None,
        max_workers: int = 1,
    ) -> None:
        self.builders: Sequence[Builder] = tuple(DEFAULT_BUILDERS if builders is None else builders)
        self.flavors = flavors or FlavorResolver()
        self.images = images or ImageResolver()
        self.max_workers = max(1, max_workers)

    def compile(self, spec: ApplicationSpec) -> ComponentList:
        # Fail before any builder runs.
        check_supported_version(spec.version)
        check_certificate_requirement(spec.version, spec.certificate, spec.certificate_key)
        self.flavors.flavor(spec.size)

        platform = PlatformAdapter(spec.platform)
        peers = {builder.name: builder.port for builder in self.builders if isinstance(builder, Subcomponent)}
        _LOG.info(
            "Compiling %s %s for %s (size %s, persistent storage %s)",
            spec.name,
            spec.version,
            spec.platform.value,
            spec.size,
            spec.persistent_storage,
        )

        def run(builder: Builder) -> BuildResult:
            ctx = BuildContext(
                spec=spec,
                flavors=self.flavors,
                images=self.images,
                platform=platform,
                peers=peers,
                diagnostics=Diagnostics(),
            )
            return builder.build(ctx)

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(run, self.builders))
        else:
            results = [run(builder) for builder in self.builders]

        components = ComponentList()
        for result in results:
            for resource in result.resources():
                components.add(resource)
            components.diagnostics.extend(result.diagnostics)
        components.seal()

        _LOG.info("Compiled %d objects with %d warning(s)", len(components), len(components.diagnostics))
        return components


def compile_application(
    spec: ApplicationSpec,
    flavors: Optional[FlavorResolver] = None,
    max_workers: int = 1,
) -> ComponentList:
    """Compile ``spec`` with the default builders."""

    return Compiler(flavors=flavors, max_workers=max_workers).compile(spec)
