"""The ``add`` flow: resolve, fetch, walk, then install packages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import requests

from ..config import SpreadSettings, load_settings, resolve_homepage
from ..sources.fetcher import ArtifactFetcher
from ..sources.locator import SpreadLocator, split_version_suffix
from ..sources.models import ResolvedLocation, SpreadDescriptor
from ..sources.registry import RegistryClient
from ..versions import LATEST_TAG
from .accumulator import DependencyAccumulator
from .conflicts import ConflictResolutionStrategy, conflict_strategy_for
from .graph import DependencyGraphTraverser, TraversalReport
from .materialize import FileMaterializer
from .packages import InstallPlan, PackageManagerInvoker, plan_installation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddResult:
    location: ResolvedLocation
    spread: SpreadDescriptor
    report: TraversalReport
    plan: InstallPlan | None


class SpreadInstaller:
    def __init__(
        self,
        project_root: Path,
        *,
        settings: SpreadSettings | None = None,
        homepage: str | None = None,
        strategy: ConflictResolutionStrategy | None = None,
        session: requests.Session | None = None,
        invoker: PackageManagerInvoker | None = None,
    ) -> None:
        self.project_root = project_root.resolve()
        self.settings = settings or load_settings(self.project_root)
        self.homepage = homepage or resolve_homepage(self.project_root, self.settings)
        self.strategy = strategy or conflict_strategy_for(self.settings.conflict_policy)
        session = session or requests.Session()
        self.registry = RegistryClient(self.settings.registry_url, timeout=self.settings.timeout_seconds, session=session)
        self.locator = SpreadLocator(self.registry)
        self.fetcher = ArtifactFetcher(timeout=self.settings.timeout_seconds, session=session)
        self.materializer = FileMaterializer(self.project_root, self.fetcher)
        self.invoker = invoker or PackageManagerInvoker(self.project_root, executable=self.settings.package_manager)

    def resolve(self, reference: str, version: str | None = None) -> ResolvedLocation:
        return self.locator.resolve(reference, version, self.homepage)

    def add(self, reference: str, version: str | None = None, *, install_packages: bool = True) -> AddResult:
        location = self.resolve(reference, version)
        spread = self.fetcher.fetch(location)
        logger.info("installing %s into %s", spread.identity, self.project_root)

        traverser = DependencyGraphTraverser(
            self.locator,
            self.fetcher,
            self.materializer,
            homepage=self.homepage,
        )
        report = traverser.run(spread, DependencyAccumulator(self.strategy), root_key=_root_key(reference, version))
        for failure in report.failures:
            logger.warning("spread dependency %s was skipped: %s", failure.key, failure.error)

        plan: InstallPlan | None = None
        if install_packages:
            plan = plan_installation(report.dependencies, report.dev_dependencies, self.project_root, self.strategy)
            self.invoker.apply(plan)
        return AddResult(location=location, spread=spread, report=report, plan=plan)


def _root_key(reference: str, version: str | None) -> str:
    name, requirement = split_version_suffix(reference.strip()) or (reference.strip(), version or LATEST_TAG)
    return f"{name}@{requirement}"
