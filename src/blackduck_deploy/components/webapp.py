"""Web application builder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..config import ApplicationSpec
from ..resources.workload import ProbeConfig
from ..volumes import MountSpec
from .base import Subcomponent
from .database import database_credentials_env


@dataclass(frozen=True)
class WebappSubcomponent(Subcomponent):
    def environment(self, spec: ApplicationSpec) -> List[Dict[str, Any]]:
        return database_credentials_env(spec, "HUB_POSTGRES_USER_PASSWORD")


WEBAPP = WebappSubcomponent(
    name="webapp",
    port=8443,
    mounts=(MountSpec(name="logs", path="/opt/blackduck/hub/logs", size="2Gi"),),
    probe=ProbeConfig(
        command=[
            "/usr/local/bin/docker-healthcheck.sh",
            "https://127.0.0.1:8443/api/health-checks/liveness",
            "/opt/blackduck/hub/hub-webapp/security/root.crt",
        ],
        delay=360,
        failure_threshold=10,
    ),
    scalable=True,
)
