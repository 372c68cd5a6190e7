"""Container image and UID resolution for subcomponents."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .config import ApplicationSpec
from .errors import Diagnostics, OverrideParseWarning

_LOG = logging.getLogger(__name__)

_PATH_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
_IMAGE_PATTERN = re.compile(
    r"^(?P<registry>[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::\d+)?)"
    rf"/(?P<repository>{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*)"
    r":(?P<tag>[\w][\w.-]{0,127})$"
)


@dataclass(frozen=True)
class ImageReference:
    registry: str
    repository: str
    tag: str

    def __str__(self) -> str:
        return f"{self.registry}/{self.repository}:{self.tag}"


def parse_image_reference(text: str) -> ImageReference:
    """Parse ``registry/repository:tag``; raise ``ValueError`` for anything else."""

    match = _IMAGE_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"{text!r} is not an image reference of the form registry/repository:tag")
    return ImageReference(**match.groupdict())


@dataclass(frozen=True)
class ResolvedImage:
    image: str
    uid: Optional[int] = None
    overridden: bool = False


def default_image(spec: ApplicationSpec, logical_name: str) -> str:
    repository = f"{spec.image_prefix}-{logical_name}" if spec.image_prefix else logical_name
    return f"{spec.default_registry.rstrip('/')}/{repository}:{spec.version}"


class ImageResolver:
    """Resolve the image and optional UID a subcomponent container runs with.

    Overrides in ``spec.image_registries`` are scanned in order and the first
    entry containing the logical name wins. An entry that matches but does not
    parse is reported and skipped. Without a usable override the image is
    synthesized from the default registry, the image prefix and the version,
    so resolution always succeeds.
    """

    def resolve(
        self,
        spec: ApplicationSpec,
        logical_name: str,
        diagnostics: Optional[Diagnostics] = None,
    ) -> ResolvedImage:
        image = self._override(spec, logical_name, diagnostics)
        overridden = image is not None
        if image is None:
            image = default_image(spec, logical_name)
            _LOG.debug("No image override for %s, using %s", logical_name, image)

        uid = spec.image_uids.get(logical_name)
        if uid is not None:
            _LOG.info("UID for %s was overridden to %d", logical_name, uid)
        return ResolvedImage(image=image, uid=uid, overridden=overridden)

    @staticmethod
    def _override(
        spec: ApplicationSpec,
        logical_name: str,
        diagnostics: Optional[Diagnostics],
    ) -> Optional[str]:
        for candidate in spec.image_registries:
            if logical_name not in candidate:
                continue
            try:
                parse_image_reference(candidate)
            except ValueError as exc:
                warning = OverrideParseWarning(logical_name, f"ignoring image override: {exc}")
                if diagnostics is not None:
                    diagnostics.record(warning)
                else:
                    _LOG.warning("%s", warning)
                continue
            _LOG.info("Image for %s was overridden to %s", logical_name, candidate)
            return candidate
        return None
