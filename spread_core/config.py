"""Project settings (``.spread/config.toml``) and ``spread.json`` access."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import SpreadConfigError

SPREAD_CONFIG_FILE = "spread.json"
SETTINGS_FILE = Path(".spread") / "config.toml"
DEFAULT_REGISTRY_URL = "https://spread.neploom.com/api/github?action=getRawRegistry"
REGISTRY_URL_ENV = "SPREAD_REGISTRY_URL"


@dataclass(frozen=True)
class SpreadSettings:
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout_seconds: float | None = 30.0
    package_manager: str = "npm"
    conflict_policy: str = "interactive"
    homepage: str | None = None


def _load_settings_section(project_root: Path) -> dict[str, Any]:
    config_path = project_root / SETTINGS_FILE
    if not config_path.exists():
        return {}
    try:
        payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    section = payload.get("spread")
    return section if isinstance(section, dict) else {}


def _string_or_none(value: Any) -> str | None:
    if value is None:
        return None
    data = str(value).strip()
    return data if data else None


def _timeout(value: Any) -> float | None:
    if value is None:
        return 30.0
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 30.0
    # 0 (or negative) means "wait forever"
    return seconds if seconds > 0 else None


def load_settings(project_root: Path) -> SpreadSettings:
    section = _load_settings_section(project_root)
    registry_url = (
        _string_or_none(os.environ.get(REGISTRY_URL_ENV))
        or _string_or_none(section.get("registry_url"))
        or DEFAULT_REGISTRY_URL
    )
    return SpreadSettings(
        registry_url=registry_url,
        timeout_seconds=_timeout(section.get("timeout_seconds")),
        package_manager=_string_or_none(section.get("package_manager")) or "npm",
        conflict_policy=_string_or_none(section.get("conflict_policy")) or "interactive",
        homepage=_string_or_none(section.get("homepage")),
    )


def load_spread_config(project_root: Path) -> dict[str, Any] | None:
    """Read ``spread.json``; returns ``None`` when the project has none."""
    config_path = project_root / SPREAD_CONFIG_FILE
    if not config_path.exists():
        return None
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SpreadConfigError(f"error reading {SPREAD_CONFIG_FILE}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SpreadConfigError(f"{SPREAD_CONFIG_FILE} must contain a JSON object")
    return payload


def resolve_homepage(project_root: Path, settings: SpreadSettings) -> str | None:
    config = load_spread_config(project_root)
    if config is not None:
        homepage = _string_or_none(config.get("homepage"))
        if homepage:
            return homepage
    return settings.homepage
