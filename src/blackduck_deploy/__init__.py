"""Compile BlackDuck application specs into Kubernetes manifests."""

from .compiler import Compiler, ComponentList, compile_application  # noqa: F401
from .config import ApplicationSpec, Platform  # noqa: F401
from .errors import ConfigurationError  # noqa: F401

__all__ = ["ApplicationSpec", "Compiler", "ComponentList", "ConfigurationError", "Platform", "compile_application"]
