from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_SPREAD_VERSION = "0.0.0"


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


class ReferenceKind(enum.Enum):
    BARE_NAME_WITH_VERSION = "bare_name_with_version"
    HOMEPAGE_RELATIVE = "homepage_relative"
    LOCAL_PATH = "local_path"
    ABSOLUTE_URL = "absolute_url"
    BARE_NAME = "bare_name"


@dataclass(frozen=True)
class ResolvedLocation:
    location: str
    reference: str
    kind: ReferenceKind
    version: str | None = None

    @property
    def is_remote(self) -> bool:
        return self.location.lower().startswith(("http://", "https://"))

    def __str__(self) -> str:
        return self.location


@dataclass(frozen=True)
class SpreadFileEntry:
    path: str | None = None
    absolute: str | None = None
    target: str | None = None
    content: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SpreadFileEntry":
        return cls(
            path=_optional_str(payload.get("path")),
            absolute=_optional_str(payload.get("absolute")),
            target=_optional_str(payload.get("target")),
            content=_optional_str(payload.get("content")),
        )


@dataclass(frozen=True)
class SpreadDescriptor:
    name: str
    version: str = DEFAULT_SPREAD_VERSION
    description: str | None = None
    type: str | None = None
    keywords: tuple[str, ...] = ()
    files: tuple[SpreadFileEntry, ...] = ()
    # read-only views, excluded from the hash
    spread_dependencies: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)
    dependencies: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)
    dev_dependencies: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)

    def __post_init__(self) -> None:
        for name in ("spread_dependencies", "dependencies", "dev_dependencies"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    @property
    def identity(self) -> str:
        return f"{self.name}@{self.version}"

    @classmethod
    def from_payload(cls, payload: Any) -> "SpreadDescriptor":
        if not isinstance(payload, dict):
            raise ValueError("spread document must be a JSON object")
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("spread.name is required")
        files = payload.get("files", [])
        if files is None:
            files = []
        if not isinstance(files, list):
            raise ValueError("spread.files must be a list")
        entries: list[SpreadFileEntry] = []
        for item in files:
            if not isinstance(item, dict):
                raise ValueError("spread.files entries must be objects")
            entries.append(SpreadFileEntry.from_payload(item))
        keywords = payload.get("keywords")
        return cls(
            name=name.strip(),
            version=str(payload.get("version") or DEFAULT_SPREAD_VERSION),
            description=_optional_str(payload.get("description")),
            type=_optional_str(payload.get("type")),
            keywords=tuple(str(item) for item in keywords) if isinstance(keywords, list) else (),
            files=tuple(entries),
            spread_dependencies=_string_mapping(payload.get("spreadDependencies"), "spreadDependencies"),
            dependencies=_string_mapping(payload.get("dependencies"), "dependencies"),
            dev_dependencies=_string_mapping(payload.get("devDependencies"), "devDependencies"),
        )


@dataclass(frozen=True)
class RegistryEntry:
    name: str
    spread: str
    versions: tuple[str, ...]

    def artifact_url(self, version: str) -> str:
        return f"{self.spread}@{version}.json"


@dataclass(frozen=True)
class RegistryRecord:
    spreads: Mapping[str, RegistryEntry]

    def get(self, name: str) -> RegistryEntry | None:
        return self.spreads.get(name)

    @classmethod
    def from_payload(cls, payload: Any) -> "RegistryRecord":
        if not isinstance(payload, dict):
            raise ValueError("registry document must be a JSON object")
        spreads = payload.get("spreads")
        if not isinstance(spreads, dict):
            raise ValueError("registry.spreads must be an object")
        entries: dict[str, RegistryEntry] = {}
        for name, info in spreads.items():
            if not isinstance(info, dict):
                continue
            versions = info.get("versions")
            entries[str(name)] = RegistryEntry(
                name=str(name),
                spread=str(info.get("spread") or ""),
                versions=tuple(str(item) for item in versions) if isinstance(versions, list) else (),
            )
        return cls(spreads=entries)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _string_mapping(value: Any, label: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"spread.{label} must be an object")
    return {str(key): str(item) for key, item in value.items()}
