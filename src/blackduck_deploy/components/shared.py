"""Objects every subcomponent depends on: configuration, credentials, identity."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

from ..config import ApplicationSpec
from ..resources.config_map import ConfigMapConfig
from ..resources.secret import SecretConfig
from ..resources.service_account import ServiceAccountConfig
from ..utils import component_labels, resource_name
from .base import (
    SHARED_COMPONENT,
    BuildContext,
    BuildResult,
    certificate_secret_name,
    config_map_name,
    database_secret_name,
    service_account_name,
)

_LOG = logging.getLogger(__name__)

DATABASE_USER = "blackduck"


def environment_values(spec: ApplicationSpec, peers: Dict[str, int]) -> Dict[str, str]:
    """Config map entries: the address of every peer service, then user overrides."""

    values: Dict[str, str] = {
        "BLACKDUCK_NAMESPACE": spec.namespace,
        "BLACKDUCK_VERSION": spec.version,
        "BLACKDUCK_DATABASE_USER": DATABASE_USER,
    }
    for component, port in peers.items():
        key = component.upper().replace("-", "_")
        values[f"BLACKDUCK_{key}_HOST"] = resource_name(spec.name, component)
        values[f"BLACKDUCK_{key}_PORT"] = str(port)
    values.update(spec.environs)
    return values


@dataclass(frozen=True)
class SharedResources:
    """Builds the namespace-wide objects; produces no workload."""

    name: str = SHARED_COMPONENT

    def build(self, ctx: BuildContext) -> BuildResult:
        spec = ctx.spec
        labels = component_labels(spec.name, self.name)
        account = service_account_name(spec)

        result = BuildResult(component=self.name, diagnostics=ctx.diagnostics)
        result.extra.append(
            ConfigMapConfig(
                name=config_map_name(spec),
                namespace=spec.namespace,
                data=environment_values(spec, dict(ctx.peers)),
                labels=labels,
            ).to_resource()
        )
        result.extra.append(
            ServiceAccountConfig(
                name=account,
                namespace=spec.namespace,
                image_pull_secrets=list(spec.pull_secrets),
                labels=labels,
            ).to_resource()
        )
        for binding in ctx.platform.role_bindings(account, spec.namespace, labels, pinned_uids=bool(spec.image_uids)):
            result.extra.append(binding.to_resource())
        result.extra.append(
            SecretConfig(
                name=database_secret_name(spec),
                namespace=spec.namespace,
                string_data={"username": DATABASE_USER, "password": spec.database_password},
                labels=labels,
            ).to_resource()
        )
        if spec.certificate and spec.certificate_key:
            result.extra.append(
                SecretConfig(
                    name=certificate_secret_name(spec),
                    namespace=spec.namespace,
                    type="kubernetes.io/tls",
                    string_data={"tls.crt": spec.certificate, "tls.key": spec.certificate_key},
                    labels=labels,
                ).to_resource()
            )
        elif spec.certificate or spec.certificate_key:
            _LOG.warning("Both a certificate and its key are needed; the web server keeps its self-signed certificate")
        return result
