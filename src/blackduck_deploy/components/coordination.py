"""Coordination service (ZooKeeper) builder."""
from __future__ import annotations

from ..resources.workload import ProbeConfig
from ..volumes import MountSpec
from .base import Subcomponent

COORDINATION = Subcomponent(
    name="coordination",
    port=2181,
    mounts=(MountSpec(name="data", path="/opt/blackduck/zookeeper/data", size="4Gi"),),
    probe=ProbeConfig(command=["zkServer.sh", "status", "/opt/blackduck/zookeeper/conf/zoo.cfg"]),
)
