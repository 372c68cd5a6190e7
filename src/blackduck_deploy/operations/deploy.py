"""Operations that push a compiled component list to a cluster."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..compiler import ComponentList
from ..kube import ClusterAPI

_LOG = logging.getLogger(__name__)


class DeployOperations:
    """Apply or remove every object of a compiled application, in list order."""

    def __init__(self, api: Optional[ClusterAPI]) -> None:
        self.api = api

    def apply_all(self, components: ComponentList, dry_run: bool = False) -> List[Dict[str, object]]:
        if not dry_run and self.api is None:
            raise ValueError("A cluster connection is required unless running with dry_run.")
        applied: List[Dict[str, object]] = []
        for definition in components.flatten():
            if dry_run or self.api is None:
                _LOG.info("Would apply %s %s/%s", definition.kind.value, definition.namespace, definition.name)
                applied.append(definition.to_dict())
                continue
            _LOG.info("Applying %s %s/%s", definition.kind.value, definition.namespace, definition.name)
            applied.append(self.api.apply(definition))
        return applied

    def delete_all(self, components: ComponentList) -> None:
        """Delete dependents first, the reverse of the apply order."""

        if self.api is None:
            raise ValueError("A cluster connection is required to delete resources.")
        for definition in reversed(components.flatten()):
            self.api.delete(definition)
