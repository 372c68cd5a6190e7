"""PostgreSQL database builder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..config import ApplicationSpec
from ..resources.workload import ProbeConfig
from ..volumes import MountSpec
from .base import Subcomponent, database_secret_name


def database_credentials_env(spec: ApplicationSpec, variable: str) -> List[Dict[str, Any]]:
    """Environment entry reading the database password from the shared secret."""

    return [
        {
            "name": variable,
            "valueFrom": {"secretKeyRef": {"name": database_secret_name(spec), "key": "password"}},
        }
    ]


@dataclass(frozen=True)
class DatabaseSubcomponent(Subcomponent):
    def environment(self, spec: ApplicationSpec) -> List[Dict[str, Any]]:
        return database_credentials_env(spec, "POSTGRESQL_PASSWORD")


DATABASE = DatabaseSubcomponent(
    name="database",
    port=5432,
    mounts=(MountSpec(name="data", path="/var/lib/pgsql/data", size="150Gi"),),
    probe=ProbeConfig(command=["pg_isready", "-h", "localhost", "-p", "5432"], delay=240, interval=30, timeout=10),
)
