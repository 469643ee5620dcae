"""Strategies deciding which version wins when a package is requested twice."""

from __future__ import annotations

import enum
import logging
from typing import Protocol

import questionary

from ..errors import SpreadConfigError

logger = logging.getLogger(__name__)


class ConflictChoice(enum.Enum):
    EXISTING = "existing"
    NEW = "new"
    SKIP = "skip"


class ConflictResolutionStrategy(Protocol):
    def resolve(self, package: str, existing: str, new: str) -> str | None:
        """Return the version to keep, or ``None`` to drop the package."""
        ...


class PolicyConflictResolver:
    """Headless resolver that always applies the same choice."""

    def __init__(self, choice: ConflictChoice) -> None:
        self.choice = choice

    def resolve(self, package: str, existing: str, new: str) -> str | None:
        logger.info("version conflict for %s: %s vs %s -> %s", package, existing, new, self.choice.value)
        if self.choice is ConflictChoice.EXISTING:
            return existing
        if self.choice is ConflictChoice.NEW:
            return new
        return None


class InteractiveConflictResolver:
    def resolve(self, package: str, existing: str, new: str) -> str | None:
        answer = questionary.select(
            f"Version conflict detected for {package}. Which version would you like to use?",
            choices=[
                questionary.Choice(title=f"Use existing version ({existing})", value=ConflictChoice.EXISTING.value),
                questionary.Choice(title=f"Use new version ({new})", value=ConflictChoice.NEW.value),
                questionary.Choice(title="Skip", value=ConflictChoice.SKIP.value),
            ],
            default=ConflictChoice.EXISTING.value,
        ).ask()
        # a cancelled prompt keeps what is already there
        if answer is None or answer == ConflictChoice.EXISTING.value:
            return existing
        if answer == ConflictChoice.NEW.value:
            return new
        return None


def conflict_strategy_for(policy: str) -> ConflictResolutionStrategy:
    name = (policy or "interactive").strip().lower()
    if name == "interactive":
        return InteractiveConflictResolver()
    try:
        return PolicyConflictResolver(ConflictChoice(name))
    except ValueError as exc:
        raise SpreadConfigError(
            f"unknown conflict policy '{policy}' (expected interactive, existing, new or skip)"
        ) from exc
