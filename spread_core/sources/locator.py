"""Turn user supplied spread references into fetchable locations.

A reference is classified by the first matching rule in ``CLASSIFICATION_RULES``:

    name@1.2.0, name@latest     -> BARE_NAME_WITH_VERSION
    /spread/button              -> HOMEPAGE_RELATIVE (needs a homepage)
    C:/spreads/button.json      -> LOCAL_PATH (glob, first match)
    https://host/spread/button  -> ABSOLUTE_URL (sibling registry.json)
    button                      -> BARE_NAME (central registry)
"""

from __future__ import annotations

import glob
import logging
import ntpath
import os
import re
from typing import Callable

from ..errors import (
    ComponentNotFoundError,
    HomepageRequiredError,
    LocalFileNotFoundError,
    SpreadNotFoundError,
    SpreadResolutionError,
)
from ..versions import LATEST_TAG, is_version_like, select_version
from .models import ReferenceKind, ResolvedLocation
from .registry import RegistryClient, component_name, sibling_registry_url

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def split_version_suffix(reference: str) -> tuple[str, str] | None:
    if "@" not in reference:
        return None
    name, suffix = reference.rsplit("@", 1)
    if suffix == LATEST_TAG or is_version_like(suffix):
        return name, suffix
    return None


def _is_local_path(reference: str) -> bool:
    return os.path.isabs(reference) or ntpath.isabs(reference)


def _is_url(reference: str) -> bool:
    return bool(_URL_RE.match(reference))


CLASSIFICATION_RULES: tuple[tuple[ReferenceKind, Callable[[str], bool]], ...] = (
    (ReferenceKind.BARE_NAME_WITH_VERSION, lambda ref: split_version_suffix(ref) is not None),
    (ReferenceKind.HOMEPAGE_RELATIVE, lambda ref: ref.startswith("/")),
    (ReferenceKind.LOCAL_PATH, _is_local_path),
    (ReferenceKind.ABSOLUTE_URL, _is_url),
    (ReferenceKind.BARE_NAME, lambda ref: True),
)


def classify_reference(reference: str, *, allow_version_suffix: bool = True) -> ReferenceKind:
    for kind, matches in CLASSIFICATION_RULES:
        if kind is ReferenceKind.BARE_NAME_WITH_VERSION and not allow_version_suffix:
            continue
        if matches(reference):
            return kind
    return ReferenceKind.BARE_NAME


def _normalize_homepage(homepage: str) -> str:
    value = homepage.strip().rstrip("/")
    if not _is_url(value):
        value = f"http://{value}"
    return value


class SpreadLocator:
    def __init__(self, registry: RegistryClient) -> None:
        self.registry = registry

    def resolve(
        self,
        reference: str,
        version_hint: str | None = None,
        homepage: str | None = None,
    ) -> ResolvedLocation:
        return self._resolve(reference.strip(), version_hint, homepage, original=reference, allow_split=True)

    def _resolve(
        self,
        reference: str,
        version_hint: str | None,
        homepage: str | None,
        *,
        original: str,
        allow_split: bool,
    ) -> ResolvedLocation:
        kind = classify_reference(reference, allow_version_suffix=allow_split)
        logger.debug("classified reference=%s kind=%s hint=%s", reference, kind.value, version_hint)

        if kind is ReferenceKind.BARE_NAME_WITH_VERSION:
            name, version = split_version_suffix(reference) or (reference, version_hint)
            return self._resolve(name, version, homepage, original=original, allow_split=False)
        if kind is ReferenceKind.HOMEPAGE_RELATIVE:
            if not homepage:
                raise HomepageRequiredError(
                    f"homepage is required to resolve partial URL '{original}'", reference=original
                )
            full_url = f"{_normalize_homepage(homepage)}{reference}"
            return self._resolve(full_url, version_hint, homepage, original=original, allow_split=False)
        if kind is ReferenceKind.LOCAL_PATH:
            return self._resolve_local(reference, original)
        if kind is ReferenceKind.ABSOLUTE_URL:
            return self._resolve_url(reference, version_hint, original)
        return self._resolve_name(reference, version_hint, original)

    def _resolve_local(self, reference: str, original: str) -> ResolvedLocation:
        matches = sorted(path for path in glob.glob(reference) if os.path.isfile(path))
        if not matches:
            raise LocalFileNotFoundError(f"file not found: {reference}", reference=original)
        logger.debug("local spread %s -> %s", reference, matches[0])
        return ResolvedLocation(location=matches[0], reference=original, kind=ReferenceKind.LOCAL_PATH)

    def _resolve_url(self, url: str, version_hint: str | None, original: str) -> ResolvedLocation:
        name = component_name(url)
        try:
            record = self.registry.sibling_registry(url)
            entry = record.get(name)
            if entry is None:
                raise ComponentNotFoundError(
                    f"component '{name}' not found in registry at {sibling_registry_url(url)}",
                    reference=original,
                )
            version = select_version(entry.versions, version_hint, subject=f"component '{name}'")
        except SpreadResolutionError as exc:
            raise _with_reference(exc, f"failed to resolve component from {url}", original) from exc
        location = entry.artifact_url(version)
        logger.info("resolved %s -> %s", original, location)
        return ResolvedLocation(location=location, reference=original, kind=ReferenceKind.ABSOLUTE_URL, version=version)

    def _resolve_name(self, name: str, version_hint: str | None, original: str) -> ResolvedLocation:
        try:
            entry = self.registry.lookup(name)
            if entry is None:
                raise SpreadNotFoundError(
                    f"spread '{name}' not found in the centralized registry", reference=original
                )
            version = select_version(entry.versions, version_hint, subject=f"spread '{name}'")
        except SpreadResolutionError as exc:
            raise _with_reference(exc, f"failed to resolve spread '{original}'", original) from exc
        location = entry.artifact_url(version)
        logger.info("resolved %s -> %s", original, location)
        return ResolvedLocation(location=location, reference=original, kind=ReferenceKind.BARE_NAME, version=version)


def _with_reference(exc: SpreadResolutionError, prefix: str, reference: str) -> SpreadResolutionError:
    """Re-raise ``exc`` with the same type, naming the original reference."""
    return type(exc)(f"{prefix}: {exc}", reference=reference)
