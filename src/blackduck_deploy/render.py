"""Serialize compiled components as manifests."""
from __future__ import annotations

import io
import json
from typing import Any, Dict, Iterable, List

from ruamel.yaml import YAML

from .resources.base import ResourceDefinition

yaml = YAML()
yaml.explicit_start = True
yaml.width = 120
yaml.indent(mapping=2, sequence=4, offset=2)

OUTPUT_FORMATS = ("yaml", "json")


def _documents(resources: Iterable[ResourceDefinition]) -> List[Dict[str, Any]]:
    return [resource.to_dict() for resource in resources]


def render_yaml(resources: Iterable[ResourceDefinition]) -> str:
    """One YAML document per object, in the given order."""

    stream = io.StringIO()
    documents = _documents(resources)
    if documents:
        yaml.dump_all(documents, stream)
    return stream.getvalue()


def render_json(resources: Iterable[ResourceDefinition]) -> str:
    """A single ``v1/List`` holding every object."""

    body = {"apiVersion": "v1", "kind": "List", "items": _documents(resources)}
    return json.dumps(body, indent=2) + "\n"


def render(resources: Iterable[ResourceDefinition], output: str = "yaml") -> str:
    if output == "yaml":
        return render_yaml(resources)
    if output == "json":
        return render_json(resources)
    raise ValueError(f"Unsupported output format {output!r}; expected one of {', '.join(OUTPUT_FORMATS)}.")
