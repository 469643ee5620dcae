from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .conflicts import ConflictResolutionStrategy

logger = logging.getLogger(__name__)


@dataclass
class PackageMap:
    """One dependency section (runtime or dev) of the accumulator."""

    strategy: ConflictResolutionStrategy
    versions: dict[str, str] = field(default_factory=dict)
    decided: set[str] = field(default_factory=set)
    skipped: set[str] = field(default_factory=set)

    def add(self, name: str, version: str) -> None:
        if name in self.skipped or name in self.decided:
            # the strategy already answered for this name during this traversal
            return
        existing = self.versions.get(name)
        if existing is None:
            self.versions[name] = version
            return
        if existing == version:
            return
        chosen = self.strategy.resolve(name, existing, version)
        self.decided.add(name)
        if chosen is None:
            logger.info("skipping package %s", name)
            self.versions.pop(name, None)
            self.skipped.add(name)
            return
        self.versions[name] = chosen

    def merge(self, packages: Mapping[str, str]) -> None:
        for name, version in packages.items():
            self.add(name, version)

    def specifiers(self) -> list[str]:
        return [f"{name}@{version}" for name, version in self.versions.items()]


class DependencyAccumulator:
    def __init__(self, strategy: ConflictResolutionStrategy) -> None:
        self.runtime = PackageMap(strategy)
        self.dev = PackageMap(strategy)

    @property
    def dependencies(self) -> dict[str, str]:
        return dict(self.runtime.versions)

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return dict(self.dev.versions)

    def merge(self, dependencies: Mapping[str, str], dev_dependencies: Mapping[str, str]) -> None:
        self.runtime.merge(dependencies)
        self.dev.merge(dev_dependencies)
