"""Hand merged package requirements to the project's package manager."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..errors import PackageInstallError
from .conflicts import ConflictResolutionStrategy

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


@dataclass(frozen=True)
class InstallPlan:
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.dependencies and not self.dev_dependencies


def read_package_json(project_root: Path) -> dict[str, Any] | None:
    path = project_root / PACKAGE_JSON
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("error reading %s, ignoring declared project dependencies", path)
        return None
    return payload if isinstance(payload, dict) else None


def _declared(package_json: dict[str, Any] | None, section: str) -> dict[str, str]:
    if not package_json:
        return {}
    value = package_json.get(section)
    if not isinstance(value, dict):
        return {}
    return {str(name): str(version) for name, version in value.items()}


def _plan_section(
    requested: Mapping[str, str],
    declared: Mapping[str, str],
    strategy: ConflictResolutionStrategy,
) -> tuple[str, ...]:
    specifiers: list[str] = []
    for name, version in requested.items():
        existing = declared.get(name)
        chosen: str | None = version
        if existing is not None and existing != version:
            chosen = strategy.resolve(name, existing, version)
        if chosen is None:
            logger.info("not installing %s", name)
            continue
        specifiers.append(f"{name}@{chosen}")
    return tuple(specifiers)


def plan_installation(
    dependencies: Mapping[str, str],
    dev_dependencies: Mapping[str, str],
    project_root: Path,
    strategy: ConflictResolutionStrategy,
) -> InstallPlan:
    """Reconcile traversal results with what ``package.json`` already declares."""
    package_json = read_package_json(project_root)
    return InstallPlan(
        dependencies=_plan_section(dependencies, _declared(package_json, "dependencies"), strategy),
        dev_dependencies=_plan_section(dev_dependencies, _declared(package_json, "devDependencies"), strategy),
    )


class PackageManagerInvoker:
    def __init__(self, project_root: Path, *, executable: str = "npm") -> None:
        self.project_root = project_root
        self.executable = executable

    def command_for(self, specifiers: list[str] | tuple[str, ...], *, dev: bool = False) -> list[str]:
        command = [self.executable, "install"]
        if dev:
            command.append("--save-dev")
        command.extend(specifiers)
        return command

    def install(self, specifiers: list[str] | tuple[str, ...], *, dev: bool = False) -> None:
        if not specifiers:
            return
        command = self.command_for(specifiers, dev=dev)
        logger.info("running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                cwd=str(self.project_root),
            )
        except FileNotFoundError as exc:
            raise PackageInstallError(
                f"{self.executable} not found. Install it and ensure it is available in PATH."
            ) from exc
        if result.returncode != 0:
            detail = (result.stderr or "").strip()
            raise PackageInstallError(f"failed to install packages (exit={result.returncode}): {detail}")

    def apply(self, plan: InstallPlan) -> None:
        self.install(plan.dependencies)
        self.install(plan.dev_dependencies, dev=True)
