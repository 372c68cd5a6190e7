"""License registration service builder."""
from __future__ import annotations

from ..resources.workload import ProbeConfig
from ..volumes import MountSpec
from .base import Subcomponent

REGISTRATION = Subcomponent(
    name="registration",
    port=8443,
    mounts=(MountSpec(name="data", path="/opt/blackduck/hub/hub-registration/config", size="2Gi"),),
    probe=ProbeConfig(
        command=[
            "/usr/local/bin/docker-healthcheck.sh",
            "https://localhost:8443/registration/health-checks/liveness",
            "/opt/blackduck/hub/hub-registration/security/root.crt",
        ],
        delay=240,
    ),
)
