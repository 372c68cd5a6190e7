from blackduck_deploy.volumes import MountSpec, VolumeKind, VolumeSelector

MOUNTS = (
    MountSpec(name="data", path="/opt/data", size="4Gi"),
    MountSpec(name="logs", path="/opt/logs"),
)


def test_persistent_volumes_are_bound_to_named_claims():
    volumes = VolumeSelector("app", "coordination").volumes_for(MOUNTS, persistent=True)
    assert [volume.name for volume in volumes] == ["data", "logs"]
    assert [volume.claim_name for volume in volumes] == ["app-coordination-data", "app-coordination-logs"]
    assert all(volume.kind is VolumeKind.PERSISTENT_CLAIM for volume in volumes)
    assert volumes[0].to_volume() == {"name": "data", "persistentVolumeClaim": {"claimName": "app-coordination-data"}}
    assert volumes[0].to_mount() == {"name": "data", "mountPath": "/opt/data"}


def test_ephemeral_volumes_never_reference_a_claim():
    volumes = VolumeSelector("app", "coordination").volumes_for(MOUNTS, persistent=False)
    for volume in volumes:
        assert volume.kind is VolumeKind.EPHEMERAL
        assert volume.claim_name is None
        assert volume.to_volume() == {"name": volume.name, "emptyDir": {}}


def test_volume_selection_is_deterministic():
    selector = VolumeSelector("app", "database")
    assert selector.volumes_for(MOUNTS, True) == VolumeSelector("app", "database").volumes_for(MOUNTS, True)


def test_claims_follow_persistence_and_size_overrides():
    selector = VolumeSelector("app", "coordination")
    assert selector.claims_for(MOUNTS, persistent=False, namespace="ns") == []

    claims = selector.claims_for(
        MOUNTS,
        persistent=True,
        namespace="ns",
        labels={"component": "coordination"},
        storage_class="fast",
        sizes={"coordination-logs": "8Gi"},
    )
    assert [claim.name for claim in claims] == ["app-coordination-data", "app-coordination-logs"]
    assert [claim.size for claim in claims] == ["4Gi", "8Gi"]
    assert all(claim.storage_class == "fast" for claim in claims)
