"""Recursive walk over a spread and the spreads it depends on.

The walk is depth first and follows declaration order. All mutable state
for one walk lives in a ``TraversalContext`` that is handed down every
recursive call:

* ``visited`` holds ``reference@requirement`` keys. A key is added before
  its branch is processed, so cycles stop at the second encounter. The
  root seeds it with its own ``name@version``, so a dependency pointing back
  at the root by exact version is not fetched again.
* ``seen_spreads`` holds ``name@version`` identities of fetched spreads,
  the root included. A spread reached through two different references is
  still materialized once.

A failure inside a dependency branch is logged, recorded in
``failures`` and the walk moves on to the next sibling. Failures on the
root itself, version selection failures and anything raised by the
conflict strategy propagate and abort the walk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from ..errors import (
    FetchFailedError,
    MaterializationError,
    NoVersionsAvailableError,
    SpreadResolutionError,
    VersionNotFoundError,
)
from ..sources.fetcher import ArtifactFetcher
from ..sources.locator import SpreadLocator
from ..sources.models import SpreadDescriptor
from ..versions import LATEST_TAG, is_exact_version
from .accumulator import DependencyAccumulator
from .materialize import FileMaterializer

logger = logging.getLogger(__name__)

_BRANCH_ERRORS = (
    SpreadResolutionError,
    FetchFailedError,
    MaterializationError,
    requests.RequestException,
    OSError,
)

_FATAL_ERRORS = (VersionNotFoundError, NoVersionsAvailableError)


@dataclass(frozen=True)
class BranchFailure:
    reference: str
    requirement: str
    error: str

    @property
    def key(self) -> str:
        return f"{self.reference}@{self.requirement}"


@dataclass
class TraversalContext:
    accumulator: DependencyAccumulator
    visited: set[str] = field(default_factory=set)
    seen_spreads: set[str] = field(default_factory=set)
    installed: list[str] = field(default_factory=list)
    failures: list[BranchFailure] = field(default_factory=list)

    def mark_spread(self, spread: SpreadDescriptor) -> bool:
        """Record ``spread``; returns ``False`` if it was already processed."""
        if spread.identity in self.seen_spreads:
            return False
        self.seen_spreads.add(spread.identity)
        self.installed.append(spread.identity)
        return True


@dataclass(frozen=True)
class TraversalReport:
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str]
    visited: frozenset[str]
    installed: tuple[str, ...]
    failures: tuple[BranchFailure, ...]


class DependencyGraphTraverser:
    def __init__(
        self,
        locator: SpreadLocator,
        fetcher: ArtifactFetcher,
        materializer: FileMaterializer,
        *,
        homepage: str | None = None,
    ) -> None:
        self.locator = locator
        self.fetcher = fetcher
        self.materializer = materializer
        self.homepage = homepage

    def run(
        self,
        root: SpreadDescriptor,
        accumulator: DependencyAccumulator,
        *,
        root_key: str | None = None,
    ) -> TraversalReport:
        """Walk ``root``; ``root_key`` is the ``reference@requirement`` it was added by."""
        context = TraversalContext(accumulator=accumulator)
        if root_key:
            context.visited.add(root_key)
        self.walk(root, context)
        return TraversalReport(
            dependencies=accumulator.dependencies,
            dev_dependencies=accumulator.dev_dependencies,
            visited=frozenset(context.visited),
            installed=tuple(context.installed),
            failures=tuple(context.failures),
        )

    def walk(self, root: SpreadDescriptor, context: TraversalContext) -> None:
        context.visited.add(root.identity)
        if context.mark_spread(root):
            self.materializer.materialize_all(root.files)
        self._expand(root, context)

    def _expand(self, spread: SpreadDescriptor, context: TraversalContext) -> None:
        context.accumulator.merge(spread.dependencies, spread.dev_dependencies)
        for reference, requirement in spread.spread_dependencies.items():
            key = f"{reference}@{requirement}"
            if key in context.visited:
                logger.debug("skipping visited spread dependency %s", key)
                continue
            context.visited.add(key)
            try:
                self._visit(reference, requirement, context)
            except _FATAL_ERRORS:
                raise
            except _BRANCH_ERRORS as exc:
                logger.warning("failed to process spread dependency %s: %s", key, exc)
                context.failures.append(BranchFailure(reference=reference, requirement=requirement, error=str(exc)))

    def _visit(self, reference: str, requirement: str, context: TraversalContext) -> None:
        location = self.locator.resolve(reference, self._hint_for(requirement), self.homepage)
        spread = self.fetcher.fetch(location)
        if not context.mark_spread(spread):
            logger.debug("spread %s already processed, not walking it again", spread.identity)
            return
        logger.info("installing spread dependency %s", spread.identity)
        self.materializer.materialize_all(spread.files)
        self._expand(spread, context)

    @staticmethod
    def _hint_for(requirement: str) -> str | None:
        value = (requirement or "").strip()
        if value == LATEST_TAG or is_exact_version(value):
            return value
        return None
