from .accumulator import DependencyAccumulator, PackageMap
from .conflicts import (
    ConflictChoice,
    ConflictResolutionStrategy,
    InteractiveConflictResolver,
    PolicyConflictResolver,
    conflict_strategy_for,
)
from .graph import BranchFailure, DependencyGraphTraverser, TraversalContext, TraversalReport
from .materialize import BINARY_EXTENSIONS, FileMaterializer, is_binary_target
from .packages import InstallPlan, PackageManagerInvoker, plan_installation
from .service import AddResult, SpreadInstaller

__all__ = [
    "AddResult",
    "BINARY_EXTENSIONS",
    "BranchFailure",
    "ConflictChoice",
    "ConflictResolutionStrategy",
    "DependencyAccumulator",
    "DependencyGraphTraverser",
    "FileMaterializer",
    "InstallPlan",
    "InteractiveConflictResolver",
    "PackageManagerInvoker",
    "PackageMap",
    "PolicyConflictResolver",
    "SpreadInstaller",
    "TraversalContext",
    "TraversalReport",
    "conflict_strategy_for",
    "is_binary_target",
    "plan_installation",
]
