"""Error and diagnostic types raised while compiling an application."""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional


_LOG = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Invalid input that must abort the compile before any object is produced."""


class CompileWarning(UserWarning):
    """Non-fatal anomaly. The compile substitutes a documented default and carries on."""

    def __init__(self, component: str, message: str) -> None:
        super().__init__(message)
        self.component = component
        self.message = message

    def __str__(self) -> str:
        return f"{self.component}: {self.message}"


class OverrideParseWarning(CompileWarning):
    """An image override matched a container but is not a valid image reference."""


class SizingGapWarning(CompileWarning):
    """The selected flavor has no resource envelope for a component."""


class Diagnostics:
    """Ordered collection of the warnings raised by one builder."""

    def __init__(self, warnings: Optional[List[CompileWarning]] = None) -> None:
        self._warnings: List[CompileWarning] = list(warnings or [])

    def record(self, warning: CompileWarning) -> None:
        _LOG.warning("%s", warning)
        self._warnings.append(warning)

    def extend(self, other: "Diagnostics") -> None:
        self._warnings.extend(other)

    def __iter__(self) -> Iterator[CompileWarning]:
        return iter(self._warnings)

    def __len__(self) -> int:
        return len(self._warnings)

    def of_type(self, warning_type: type) -> List[CompileWarning]:
        return [entry for entry in self._warnings if isinstance(entry, warning_type)]
