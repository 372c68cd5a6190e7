"""Kubernetes/OpenShift differences, kept in one place."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import Platform
from .resources.service import RouteConfig, ServiceConfig
from .resources.service_account import RoleBindingConfig
from .resources.workload import PodConfig

_LOG = logging.getLogger(__name__)

KUBERNETES_FS_GROUP = 0
ANYUID_CLUSTER_ROLE = "system:openshift:scc:anyuid"


@dataclass(frozen=True)
class Exposure:
    service: ServiceConfig
    route: Optional[RouteConfig] = None


class PlatformAdapter:
    """Adjust pods and pick exposure objects for the target platform."""

    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    @property
    def is_openshift(self) -> bool:
        return self.platform is Platform.OPENSHIFT

    def adapt(self, pod: PodConfig) -> PodConfig:
        """Return ``pod`` with the platform's filesystem group.

        On Kubernetes the group is fixed to 0 so non-root containers can
        write their volumes. OpenShift assigns it through its security
        context constraints, so it stays unset there.
        """

        fs_group = None if self.is_openshift else KUBERNETES_FS_GROUP
        return pod.model_copy(update={"fs_group": fs_group})

    def expose(
        self,
        service: ServiceConfig,
        exposed: bool = False,
        service_type: str = "ClusterIP",
        tls_termination: str = "passthrough",
    ) -> Exposure:
        """Service for every component, plus a Route for exposed ones on OpenShift."""

        if exposed:
            service = service.model_copy(update={"type": service_type})
        if not (exposed and self.is_openshift):
            return Exposure(service=service)

        route = RouteConfig(
            name=service.name,
            namespace=service.namespace,
            service_name=service.name,
            port_name=service.resolved_port_name,
            tls_termination=tls_termination,
            labels=dict(service.labels),
        )
        _LOG.debug("Exposing %s through an OpenShift route (%s)", service.name, tls_termination)
        return Exposure(service=service, route=route)

    def role_bindings(
        self,
        service_account: str,
        namespace: str,
        labels: Dict[str, str],
        pinned_uids: bool,
    ) -> List[RoleBindingConfig]:
        """Extra bindings the service account needs on this platform.

        Pinned container UIDs fall outside OpenShift's restricted range, so
        the account is granted the ``anyuid`` constraint there.
        """

        if not (self.is_openshift and pinned_uids):
            return []
        return [
            RoleBindingConfig(
                name=f"{service_account}-anyuid",
                namespace=namespace,
                cluster_role=ANYUID_CLUSTER_ROLE,
                service_account=service_account,
                labels=dict(labels),
            )
        ]
