"""Low-level Kubernetes client helpers for applying compiled objects."""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional

from kubernetes import config
from kubernetes.client import ApiException
from kubernetes.dynamic import DynamicClient, ResourceInstance

from .config import ClusterContext
from .resources.base import ResourceDefinition
from .utils import deep_merge


_LOG = logging.getLogger(__name__)


def _as_dict(result: Any) -> Dict[str, Any]:
    return result.to_dict() if isinstance(result, ResourceInstance) else result


class ClusterAPI:
    """Wrapper around the Kubernetes dynamic client."""

    def __init__(self, context: ClusterContext) -> None:
        self.context = context
        api_client = config.new_client_from_config(
            config_file=context.kubeconfig,
            context=context.context,
        )
        api_client.configuration.verify_ssl = context.verify_ssl
        self.api_client = api_client
        self.dynamic = DynamicClient(api_client)

    def apply(self, definition: ResourceDefinition, namespace: Optional[str] = None) -> Dict[str, Any]:
        """Create or replace a resource to match the provided definition."""

        body = copy.deepcopy(definition.to_dict())
        target_namespace = namespace or definition.namespace
        resource = self.dynamic.resources.get(api_version=definition.api_version, kind=definition.kind.value)
        if resource.namespaced and not target_namespace:
            raise ValueError(f"Namespace must be provided for {definition.kind.value} resources.")
        if not resource.namespaced:
            target_namespace = None
            body.get("metadata", {}).pop("namespace", None)

        resource_name = definition.name
        try:
            existing = resource.get(name=resource_name, namespace=target_namespace)
        except ApiException as exc:
            if exc.status == 404:
                _LOG.debug("Creating %s/%s", definition.kind.value, resource_name)
                created = resource.create(
                    body=body,
                    namespace=target_namespace,
                    field_manager=self.context.field_manager,
                )
                return _as_dict(created)
            if exc.status in (401, 403):
                _LOG.info(
                    "Insufficient permissions to read %s/%s; attempting create-or-patch",
                    definition.kind.value,
                    resource_name,
                )
                return self._create_or_patch_without_get(
                    resource=resource,
                    definition=definition,
                    body=body,
                    namespace=target_namespace,
                )
            raise

        existing_dict = existing.to_dict()
        resource_version = existing_dict.get("metadata", {}).get("resourceVersion")
        merged_body = deep_merge(self._sanitize_existing(existing_dict), body)
        if resource_version:
            merged_body.setdefault("metadata", {})["resourceVersion"] = resource_version

        _LOG.debug("Updating %s/%s", definition.kind.value, resource_name)
        updated = resource.replace(
            name=resource_name,
            namespace=target_namespace,
            body=merged_body,
            field_manager=self.context.field_manager,
        )
        return _as_dict(updated)

    def _create_or_patch_without_get(
        self,
        resource: Any,
        definition: ResourceDefinition,
        body: Dict[str, Any],
        namespace: Optional[str],
    ) -> Dict[str, Any]:
        """Fallback used when GET permission is denied."""

        try:
            created = resource.create(body=body, namespace=namespace, field_manager=self.context.field_manager)
            return _as_dict(created)
        except ApiException as exc:
            if exc.status != 409:
                raise

        patch_body = copy.deepcopy(body)
        metadata = patch_body.get("metadata")
        if metadata:
            metadata.pop("namespace", None)
            metadata.pop("resourceVersion", None)

        _LOG.debug("Patching %s/%s without prior GET", definition.kind.value, definition.name)
        patched = resource.patch(
            name=definition.name,
            namespace=namespace,
            body=patch_body,
            content_type="application/merge-patch+json",
            field_manager=self.context.field_manager,
        )
        return _as_dict(patched)

    def delete(self, definition: ResourceDefinition) -> None:
        """Delete a resource if it exists."""

        resource = self.dynamic.resources.get(api_version=definition.api_version, kind=definition.kind.value)
        try:
            resource.delete(name=definition.name, namespace=definition.namespace)
            _LOG.info("Deleted %s/%s", definition.kind.value, definition.name)
        except ApiException as exc:
            if exc.status != 404:
                raise
            _LOG.debug("Resource %s/%s not found during delete", definition.kind.value, definition.name)

    @staticmethod
    def _sanitize_existing(body: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = copy.deepcopy(body)
        metadata = sanitized.get("metadata", {})
        for field in [
            "creationTimestamp",
            "managedFields",
            "resourceVersion",
            "selfLink",
            "uid",
            "generation",
        ]:
            metadata.pop(field, None)
        sanitized.pop("status", None)
        return sanitized
