"""Version ordering and selection helpers."""

from __future__ import annotations

import re
from typing import Iterable

from .errors import NoVersionsAvailableError, VersionNotFoundError

LATEST_TAG = "latest"

_VERSION_LIKE_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_EXACT_VERSION_RE = re.compile(r"^v?\d+(?:\.\d+)*(?:[-+][0-9A-Za-z.-]+)?$")
_COMPONENT_RE = re.compile(r"^(\d+)(.*)$")


def is_version_like(value: str) -> bool:
    """Loose check used when splitting ``name@version`` references."""
    return bool(_VERSION_LIKE_RE.match((value or "").strip()))


def is_exact_version(value: str) -> bool:
    return bool(_EXACT_VERSION_RE.match((value or "").strip()))


def version_key(version: str) -> tuple[tuple[int, str], ...]:
    """Numeric-aware sort key: ``1.10.0`` sorts above ``1.9.9``."""
    raw = (version or "").strip()
    if raw[:1] in ("v", "V"):
        raw = raw[1:]
    parts: list[tuple[int, str]] = []
    for component in raw.split("."):
        match = _COMPONENT_RE.match(component)
        if match:
            parts.append((int(match.group(1)), match.group(2)))
        else:
            parts.append((-1, component))
    return tuple(parts)


def latest_version(versions: Iterable[str]) -> str | None:
    candidates = [item for item in versions if str(item).strip()]
    if not candidates:
        return None
    return max(candidates, key=version_key)


def select_version(available: Iterable[str], hint: str | None = None, *, subject: str = "spread") -> str:
    """Pick one version from ``available``.

    ``hint`` may be an exact version, ``"latest"`` or ``None``. An exact hint
    must be present in ``available``; otherwise the highest version wins.
    """
    versions = [str(item) for item in available]
    if not versions:
        raise NoVersionsAvailableError(f"no versions available for {subject}", reference=subject)
    requested = (hint or "").strip()
    if not requested or requested == LATEST_TAG:
        best = latest_version(versions)
        if best is None:
            raise NoVersionsAvailableError(f"no versions available for {subject}", reference=subject)
        return best
    if requested not in versions:
        raise VersionNotFoundError(f"version '{requested}' for {subject} not found", reference=subject)
    return requested
