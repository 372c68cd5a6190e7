"""Utility helpers shared across the BlackDuck deploy package."""
from __future__ import annotations

import copy
from typing import Any, Dict

APP_LABEL = "blackduck"


def deep_merge(base: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep merge of ``base`` with ``new`` without mutating the inputs."""

    merged: Dict[str, Any] = copy.deepcopy(base)
    for key, value in new.items():
        if isinstance(value, dict):
            base_sub = merged.get(key, {})
            if not isinstance(base_sub, dict):
                merged[key] = copy.deepcopy(value)
            else:
                merged[key] = deep_merge(base_sub, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def resource_name(app_name: str, *parts: str) -> str:
    """Deterministic object name: ``<appName>-<part>-<part>...``."""

    return "-".join([app_name, *parts])


def component_labels(app_name: str, component: str) -> Dict[str, str]:
    """Labels every object of ``component`` carries, used to correlate objects across compiles."""

    return {"app": APP_LABEL, "name": app_name, "component": component}


def version_labels(app_name: str, component: str, version: str) -> Dict[str, str]:
    labels = component_labels(app_name, component)
    labels["version"] = version
    return labels
