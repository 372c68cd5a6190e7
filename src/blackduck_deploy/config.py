"""Configuration models and helpers for BlackDuck deployments."""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError
from .resources.service import SERVICE_TYPES, TLS_TERMINATIONS
from .resources.workload import NodeAffinity

MINIMUM_VERSION = (2020, 4, 0)
# Versions before this need a certificate and key for the web server.
CERTIFICATE_REQUIRED_BEFORE = (2020, 6, 0)

_VERSION_PATTERN = re.compile(r"^(\d{4})\.(\d{1,2})(?:\.(\d+))?$")


class Platform(str, Enum):
    KUBERNETES = "kubernetes"
    OPENSHIFT = "openshift"


def parse_version(version: str) -> Tuple[int, int, int]:
    """Split a calendar version such as ``2023.1`` or ``2020.4.0``."""

    match = _VERSION_PATTERN.match(version.strip())
    if not match:
        raise ConfigurationError(f"Version {version!r} is not a calendar version of the form YYYY.M[.P].")
    year, month, patch = match.groups()
    return int(year), int(month), int(patch or 0)


def check_supported_version(version: str) -> None:
    if parse_version(version) < MINIMUM_VERSION:
        minimum = ".".join(str(part) for part in MINIMUM_VERSION)
        raise ConfigurationError(f"Version {version} is not supported; {minimum} or newer is required.")


def check_certificate_requirement(version: str, certificate: Optional[str], certificate_key: Optional[str]) -> None:
    if parse_version(version) < CERTIFICATE_REQUIRED_BEFORE and not (certificate and certificate_key):
        cutoff = ".".join(str(part) for part in CERTIFICATE_REQUIRED_BEFORE)
        raise ConfigurationError(f"Version {version} needs both a certificate and a certificate key (before {cutoff}).")


class ClusterContext(BaseModel):
    """Connection context used when applying compiled objects to a cluster."""

    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    verify_ssl: bool = True
    field_manager: str = Field(default="blackduck-deploy")


class ApplicationSpec(BaseModel):
    """Everything needed to compile one BlackDuck instance.

    The model is frozen; one instance is shared read-only by every builder
    during a compile.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    namespace: str
    version: str
    persistent_storage: bool = Field(default=True, alias="persistentStorage")
    platform: Platform = Platform.KUBERNETES
    size: str = "small"
    image_registries: Tuple[str, ...] = Field(default=(), alias="imageRegistries")
    image_uids: Dict[str, int] = Field(default_factory=dict, alias="imageUids")
    liveness_probes: bool = Field(default=True, alias="livenessProbes")
    pull_secrets: Tuple[str, ...] = Field(default=(), alias="pullSecrets")
    default_registry: str = Field(default="docker.io/blackducksoftware", alias="defaultRegistry")
    image_prefix: str = Field(default="blackduck", alias="imagePrefix")
    replicas: Dict[str, int] = Field(default_factory=dict)
    exposed_service_type: str = Field(default="ClusterIP", alias="exposedServiceType")
    tls_termination: str = Field(default="passthrough", alias="tlsTermination")
    storage_class: Optional[str] = Field(default=None, alias="storageClass")
    claim_sizes: Dict[str, str] = Field(default_factory=dict, alias="claimSizes")
    node_affinities: Dict[str, List[NodeAffinity]] = Field(default_factory=dict, alias="nodeAffinities")
    environs: Dict[str, str] = Field(default_factory=dict)
    certificate: Optional[str] = None
    certificate_key: Optional[str] = Field(default=None, alias="certificateKey")
    database_password: str = Field(default="blackduck", alias="databasePassword")

    @field_validator("platform", mode="before")
    @classmethod
    def _normalize_platform(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("exposed_service_type")
    @classmethod
    def _check_service_type(cls, value: str) -> str:
        if value not in SERVICE_TYPES:
            raise ValueError(f"must be one of {', '.join(SERVICE_TYPES)}")
        return value

    @field_validator("tls_termination")
    @classmethod
    def _check_tls_termination(cls, value: str) -> str:
        if value not in TLS_TERMINATIONS:
            raise ValueError(f"must be one of {', '.join(TLS_TERMINATIONS)}")
        return value

    @field_validator("replicas")
    @classmethod
    def _check_replicas(cls, value: Dict[str, int]) -> Dict[str, int]:
        negative = sorted(component for component, count in value.items() if count < 0)
        if negative:
            raise ValueError(f"replica counts must not be negative: {', '.join(negative)}")
        return value

    @field_validator("name", "namespace", "version")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @property
    def is_openshift(self) -> bool:
        return self.platform is Platform.OPENSHIFT

    def replicas_for(self, component: str) -> int:
        return self.replicas.get(component, 1)

    @classmethod
    def from_file(cls, path: str | Path) -> "ApplicationSpec":
        document_path = Path(path)
        data = yaml.safe_load(document_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("Application file must contain a mapping at the top level.")
        return cls.model_validate(data)


class DeployConfig(BaseModel):
    """File format of the ``apply`` command: where to deploy and what."""

    context: ClusterContext = Field(default_factory=ClusterContext)
    application: ApplicationSpec

    @classmethod
    def from_file(cls, path: str | Path) -> "DeployConfig":
        document_path = Path(path)
        data = yaml.safe_load(document_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a mapping at the top level.")
        return cls.model_validate(data)
