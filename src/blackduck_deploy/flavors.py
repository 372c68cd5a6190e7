"""Named deployment sizes and the CPU/memory envelopes they give each component."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import ConfigDict, Field, ValidationError

from .errors import ConfigurationError, Diagnostics, SizingGapWarning
from .resources.base import ResourceModel

_LOG = logging.getLogger(__name__)


class ResourceEnvelope(ResourceModel):
    """CPU and memory requests/limits for one container."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    cpu_request: Optional[str] = Field(default=None, alias="cpuRequest")
    cpu_limit: Optional[str] = Field(default=None, alias="cpuLimit")
    memory_request: Optional[str] = Field(default=None, alias="memoryRequest")
    memory_limit: Optional[str] = Field(default=None, alias="memoryLimit")

    def to_resources(self) -> Dict[str, Dict[str, str]]:
        """Return the ``resources`` block of a container spec."""

        resources: Dict[str, Dict[str, str]] = {}
        requests = {"cpu": self.cpu_request, "memory": self.memory_request}
        limits = {"cpu": self.cpu_limit, "memory": self.memory_limit}
        for section, values in (("requests", requests), ("limits", limits)):
            present = {key: value for key, value in values.items() if value}
            if present:
                resources[section] = present
        return resources


def _envelope(cpu_request: str, cpu_limit: Optional[str], memory: str) -> ResourceEnvelope:
    # Memory request and limit are always equal.
    return ResourceEnvelope(
        cpu_request=cpu_request,
        cpu_limit=cpu_limit,
        memory_request=memory,
        memory_limit=memory,
    )


# Used for any component a flavor does not list.
DEFAULT_ENVELOPE = _envelope("500m", "1", "1Gi")

Flavor = Dict[str, ResourceEnvelope]

FLAVORS: Dict[str, Flavor] = {
    "small": {
        "coordination": _envelope("500m", None, "640Mi"),
        "database": _envelope("1", "1", "3Gi"),
        "registration": _envelope("500m", "1", "1Gi"),
        "webapp": _envelope("1", "1", "2560Mi"),
        "webserver": _envelope("200m", "1", "512Mi"),
    },
    "medium": {
        "coordination": _envelope("500m", None, "640Mi"),
        "database": _envelope("2", "2", "8Gi"),
        "registration": _envelope("500m", "1", "1Gi"),
        "webapp": _envelope("2", "2", "5Gi"),
        "webserver": _envelope("200m", "1", "512Mi"),
    },
    "large": {
        "coordination": _envelope("1", None, "1Gi"),
        "database": _envelope("4", "4", "12Gi"),
        "registration": _envelope("1", "1", "1Gi"),
        "webapp": _envelope("3", "3", "9728Mi"),
        "webserver": _envelope("500m", "1", "1Gi"),
    },
    "xlarge": {
        "coordination": _envelope("1", None, "2Gi"),
        "database": _envelope("6", "6", "24Gi"),
        "registration": _envelope("1", "1", "1Gi"),
        "webapp": _envelope("4", "4", "19Gi"),
        "webserver": _envelope("500m", "1", "2Gi"),
    },
}


class FlavorResolver:
    """Look up resource envelopes by size name and logical component."""

    def __init__(self, table: Optional[Mapping[str, Flavor]] = None) -> None:
        source = FLAVORS if table is None else table
        self.table: Dict[str, Flavor] = {size.lower(): dict(flavor) for size, flavor in source.items()}

    def sizes(self) -> List[str]:
        return list(self.table)

    def flavor(self, size: str) -> Flavor:
        """Return the whole flavor for ``size``, failing on unknown names."""

        try:
            return self.table[size.strip().lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown size {size!r}; expected one of {', '.join(self.sizes())}."
            ) from None

    def resolve(self, size: str, component: str, diagnostics: Optional[Diagnostics] = None) -> ResourceEnvelope:
        flavor = self.flavor(size)
        envelope = flavor.get(component)
        if envelope is None:
            warning = SizingGapWarning(
                component,
                f"size {size!r} has no resource envelope for {component}; using the default envelope",
            )
            if diagnostics is not None:
                diagnostics.record(warning)
            else:
                _LOG.warning("%s", warning)
            return DEFAULT_ENVELOPE
        return envelope


def load_flavors(path: str | Path, base: Optional[Mapping[str, Flavor]] = None) -> Dict[str, Flavor]:
    """Read a flavor overlay from YAML and merge it over ``base``.

    The file maps size names to component names to envelopes::

        small:
          webapp: {cpuRequest: "1", cpuLimit: "2", memoryRequest: 3Gi, memoryLimit: 3Gi}
    """

    document_path = Path(path)
    try:
        data = yaml.safe_load(document_path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Flavor file {document_path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Flavor file {document_path} must contain a mapping at the top level.")

    merged: Dict[str, Flavor] = {
        size.lower(): dict(flavor) for size, flavor in (FLAVORS if base is None else base).items()
    }
    for size, components in data.items():
        if not isinstance(components, dict):
            raise ConfigurationError(f"Flavor {size!r} in {document_path} must map components to envelopes.")
        target = merged.setdefault(str(size).lower(), {})
        for component, values in components.items():
            try:
                target[str(component)] = ResourceEnvelope.model_validate(values or {})
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid envelope for {size}/{component}: {exc}") from exc
        _LOG.debug("Loaded flavor %s with %d components from %s", size, len(components), document_path)
    return merged
