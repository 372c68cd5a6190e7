from blackduck_deploy.config import Platform
from blackduck_deploy.platforms import ANYUID_CLUSTER_ROLE, PlatformAdapter
from blackduck_deploy.resources.service import ServiceConfig
from blackduck_deploy.resources.workload import ContainerConfig, PodConfig


def _pod() -> PodConfig:
    return PodConfig(containers=[ContainerConfig(name="webserver", image="quay.io/a/webserver:1")])


def _service() -> ServiceConfig:
    return ServiceConfig(name="app-webserver", namespace="ns", port=8443, labels={"component": "webserver"})


def test_kubernetes_pods_get_fixed_fs_group():
    adapted = PlatformAdapter(Platform.KUBERNETES).adapt(_pod())
    assert adapted.fs_group == 0
    assert adapted.to_template()["spec"]["securityContext"] == {"fsGroup": 0}


def test_openshift_pods_leave_fs_group_unset():
    adapted = PlatformAdapter(Platform.OPENSHIFT).adapt(_pod().model_copy(update={"fs_group": 0}))
    assert adapted.fs_group is None
    assert "securityContext" not in adapted.to_template()["spec"]


def test_kubernetes_exposure_is_a_typed_service_only():
    exposure = PlatformAdapter(Platform.KUBERNETES).expose(_service(), exposed=True, service_type="LoadBalancer")
    assert exposure.route is None
    assert exposure.service.type == "LoadBalancer"


def test_openshift_exposure_adds_route():
    exposure = PlatformAdapter(Platform.OPENSHIFT).expose(
        _service(), exposed=True, service_type="ClusterIP", tls_termination="reencrypt"
    )
    assert exposure.route is not None
    assert exposure.route.name == "app-webserver"
    assert exposure.route.service_name == "app-webserver"
    assert exposure.route.port_name == "port-8443"
    assert exposure.route.tls_termination == "reencrypt"
    assert exposure.route.labels == {"component": "webserver"}


def test_internal_services_are_never_routed():
    exposure = PlatformAdapter(Platform.OPENSHIFT).expose(_service(), exposed=False, service_type="LoadBalancer")
    assert exposure.route is None
    assert exposure.service.type == "ClusterIP"


def test_anyuid_binding_only_on_openshift_with_pinned_uids():
    kubernetes = PlatformAdapter(Platform.KUBERNETES)
    openshift = PlatformAdapter(Platform.OPENSHIFT)
    assert kubernetes.role_bindings("app-service-account", "ns", {}, pinned_uids=True) == []
    assert openshift.role_bindings("app-service-account", "ns", {}, pinned_uids=False) == []

    bindings = openshift.role_bindings("app-service-account", "ns", {"app": "blackduck"}, pinned_uids=True)
    assert len(bindings) == 1
    assert bindings[0].cluster_role == ANYUID_CLUSTER_ROLE
    assert bindings[0].service_account == "app-service-account"
