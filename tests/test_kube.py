from unittest.mock import MagicMock

import pytest
from kubernetes.client import ApiException

from blackduck_deploy.compiler import compile_application
from blackduck_deploy.config import ClusterContext
from blackduck_deploy.kube import ClusterAPI
from blackduck_deploy.operations.deploy import DeployOperations
from blackduck_deploy.resources.base import ResourceDefinition, ResourceKind

from conftest import make_spec


def _build_definition() -> ResourceDefinition:
    return ResourceDefinition(
        api_version="v1",
        kind=ResourceKind.SERVICE,
        metadata={"name": "app-webserver", "namespace": "blackduck", "labels": {}},
        spec={"type": "ClusterIP"},
    )


def _make_api() -> ClusterAPI:
    api = ClusterAPI.__new__(ClusterAPI)
    api.context = ClusterContext()
    api.dynamic = MagicMock()
    return api


def _resource(api: ClusterAPI) -> MagicMock:
    resource = MagicMock()
    resource.namespaced = True
    api.dynamic.resources.get.return_value = resource
    return resource


def test_apply_creates_when_missing():
    api = _make_api()
    resource = _resource(api)
    resource.get.side_effect = ApiException(status=404, reason="not found")

    result = api.apply(_build_definition())

    assert result is resource.create.return_value
    resource.create.assert_called_once()
    assert resource.create.call_args.kwargs["namespace"] == "blackduck"
    api.dynamic.resources.get.assert_called_with(api_version="v1", kind="Service")


def test_apply_replaces_existing_with_resource_version():
    api = _make_api()
    resource = _resource(api)
    resource.get.return_value.to_dict.return_value = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": "app-webserver", "resourceVersion": "42", "uid": "abc"},
        "spec": {"type": "NodePort", "clusterIP": "10.0.0.1"},
        "status": {},
    }

    api.apply(_build_definition())

    body = resource.replace.call_args.kwargs["body"]
    assert body["metadata"]["resourceVersion"] == "42"
    assert "uid" not in body["metadata"]
    assert "status" not in body
    assert body["spec"] == {"type": "ClusterIP", "clusterIP": "10.0.0.1"}


def test_apply_creates_when_get_forbidden():
    api = _make_api()
    resource = _resource(api)
    resource.get.side_effect = ApiException(status=403, reason="forbidden")

    result = api.apply(_build_definition())

    assert result is resource.create.return_value
    resource.create.assert_called_once()
    resource.patch.assert_not_called()


def test_apply_patches_when_create_conflicts_on_forbidden_get():
    api = _make_api()
    resource = _resource(api)
    resource.get.side_effect = ApiException(status=403, reason="forbidden")
    resource.create.side_effect = ApiException(status=409, reason="conflict")

    result = api.apply(_build_definition())

    assert result is resource.patch.return_value
    resource.patch.assert_called_once()
    assert "namespace" not in resource.patch.call_args.kwargs["body"]["metadata"]


def test_delete_ignores_missing_objects():
    api = _make_api()
    resource = _resource(api)
    resource.delete.side_effect = ApiException(status=404, reason="not found")

    api.delete(_build_definition())

    resource.delete.assert_called_once_with(name="app-webserver", namespace="blackduck")


def test_deploy_operations_apply_in_list_order():
    components = compile_application(make_spec())
    api = MagicMock()

    DeployOperations(api).apply_all(components)

    applied = [call.args[0] for call in api.apply.call_args_list]
    assert applied == components.flatten()


def test_deploy_operations_dry_run_skips_cluster():
    components = compile_application(make_spec())
    rendered = DeployOperations(None).apply_all(components, dry_run=True)
    assert len(rendered) == len(components)
    with pytest.raises(ValueError):
        DeployOperations(None).apply_all(components)


def test_deploy_operations_delete_in_reverse_order():
    components = compile_application(make_spec())
    api = MagicMock()

    DeployOperations(api).delete_all(components)

    deleted = [call.args[0] for call in api.delete.call_args_list]
    assert deleted == list(reversed(components.flatten()))
