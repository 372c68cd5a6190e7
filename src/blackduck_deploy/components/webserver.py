"""Web server (the exposed front door) builder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..config import ApplicationSpec
from ..resources.workload import ProbeConfig
from .base import Subcomponent, certificate_secret_name

CERTIFICATE_MOUNT_PATH = "/tmp/secrets/WEBSERVER_CUSTOM_CERT_FILE"


@dataclass(frozen=True)
class WebserverSubcomponent(Subcomponent):
    def extra_volumes(self, spec: ApplicationSpec) -> List[Tuple[Dict[str, Any], Dict[str, str]]]:
        if not (spec.certificate and spec.certificate_key):
            return []
        volume = {
            "name": "certificate",
            "secret": {"secretName": certificate_secret_name(spec), "defaultMode": 0o444},
        }
        mount = {"name": "certificate", "mountPath": CERTIFICATE_MOUNT_PATH}
        return [(volume, mount)]


WEBSERVER = WebserverSubcomponent(
    name="webserver",
    port=8443,
    probe=ProbeConfig(
        command=[
            "/usr/local/bin/docker-healthcheck.sh",
            "https://localhost:8443/health-checks/liveness",
            "/tmp/secrets/WEBSERVER_CUSTOM_CERT_FILE",
        ],
        delay=180,
    ),
    scalable=True,
    exposed=True,
)
