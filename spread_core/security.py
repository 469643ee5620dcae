"""Path and URL helpers used before touching the filesystem or logging URLs."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from .errors import MaterializationError


def safe_output_path(base_dir: Path, relative_path: str) -> Path:
    target = (base_dir / relative_path).resolve()
    root = base_dir.resolve()
    if target == root:
        raise MaterializationError(f"file target resolves to the project root: {relative_path}")
    if root not in target.parents:
        raise MaterializationError(f"path traversal blocked for file target: {relative_path}")
    return target


def redact_url(url: str) -> str:
    if "://" not in url:
        return url
    parsed = urlsplit(url)
    if not parsed.password:
        return url
    safe_netloc = parsed.netloc.replace(parsed.password, "***")
    return url.replace(parsed.netloc, safe_netloc)
