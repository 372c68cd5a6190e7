"""Persistent or ephemeral volumes for subcomponent mount points."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .resources.volume_claim import PersistentVolumeClaimConfig
from .utils import resource_name


class VolumeKind(str, Enum):
    PERSISTENT_CLAIM = "persistent-claim"
    EPHEMERAL = "ephemeral"


@dataclass(frozen=True)
class MountSpec:
    """A named directory a subcomponent needs to keep."""

    name: str
    path: str
    size: str = "2Gi"


@dataclass(frozen=True)
class VolumeSpec:
    name: str
    mount_path: str
    kind: VolumeKind
    claim_name: Optional[str] = None

    def to_volume(self) -> Dict[str, Any]:
        if self.kind is VolumeKind.PERSISTENT_CLAIM:
            return {"name": self.name, "persistentVolumeClaim": {"claimName": self.claim_name}}
        return {"name": self.name, "emptyDir": {}}

    def to_mount(self) -> Dict[str, str]:
        return {"name": self.name, "mountPath": self.mount_path}


class VolumeSelector:
    """Pick the volume strategy for every mount point of one subcomponent."""

    def __init__(self, app_name: str, component: str) -> None:
        self.app_name = app_name
        self.component = component

    def claim_name(self, mount: MountSpec) -> str:
        return resource_name(self.app_name, self.component, mount.name)

    def volumes_for(self, mounts: Sequence[MountSpec], persistent: bool) -> List[VolumeSpec]:
        volumes: List[VolumeSpec] = []
        for mount in mounts:
            if persistent:
                volumes.append(
                    VolumeSpec(
                        name=mount.name,
                        mount_path=mount.path,
                        kind=VolumeKind.PERSISTENT_CLAIM,
                        claim_name=self.claim_name(mount),
                    )
                )
            else:
                volumes.append(VolumeSpec(name=mount.name, mount_path=mount.path, kind=VolumeKind.EPHEMERAL))
        return volumes

    def claims_for(
        self,
        mounts: Sequence[MountSpec],
        persistent: bool,
        namespace: str,
        labels: Optional[Mapping[str, str]] = None,
        storage_class: Optional[str] = None,
        sizes: Optional[Mapping[str, str]] = None,
    ) -> List[PersistentVolumeClaimConfig]:
        """Claims backing :meth:`volumes_for` output; empty when not persistent.

        ``sizes`` is keyed ``<component>-<mount>`` and wins over the mount's
        own default size.
        """

        if not persistent:
            return []
        sizes = sizes or {}
        return [
            PersistentVolumeClaimConfig(
                name=self.claim_name(mount),
                namespace=namespace,
                size=sizes.get(f"{self.component}-{mount.name}", mount.size),
                storage_class=storage_class,
                labels=dict(labels or {}),
            )
            for mount in mounts
        ]
