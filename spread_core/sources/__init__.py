from .fetcher import ArtifactFetcher
from .locator import CLASSIFICATION_RULES, SpreadLocator, classify_reference, split_version_suffix
from .models import (
    ReferenceKind,
    RegistryEntry,
    RegistryRecord,
    ResolvedLocation,
    SpreadDescriptor,
    SpreadFileEntry,
)
from .registry import RegistryClient, component_name, sibling_registry_url

__all__ = [
    "ArtifactFetcher",
    "CLASSIFICATION_RULES",
    "ReferenceKind",
    "RegistryClient",
    "RegistryEntry",
    "RegistryRecord",
    "ResolvedLocation",
    "SpreadDescriptor",
    "SpreadFileEntry",
    "SpreadLocator",
    "classify_reference",
    "component_name",
    "sibling_registry_url",
    "split_version_suffix",
]
