"""Write spread file entries to disk.

Writes are not transactional: if one entry fails, the files written before
it stay on disk.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Iterable, Protocol

import requests

from ..errors import MaterializationError, MissingPayloadError
from ..security import safe_output_path
from ..sources.models import SpreadFileEntry

logger = logging.getLogger(__name__)

BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg", ".webp",
        ".mp3", ".wav", ".ogg",
        ".mp4", ".avi", ".mov", ".wmv", ".flv", ".mkv", ".webm",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".tar", ".gz", ".rar", ".7z",
    }
)


class RemotePayloadSource(Protocol):
    def fetch_bytes(self, url: str) -> bytes: ...

    def fetch_text(self, url: str) -> str: ...


def is_binary_target(target: str) -> bool:
    return Path(target).suffix.lower() in BINARY_EXTENSIONS


class FileMaterializer:
    def __init__(self, project_root: Path, remote: RemotePayloadSource) -> None:
        self.project_root = project_root.resolve()
        self.remote = remote

    def materialize(self, entry: SpreadFileEntry) -> Path | None:
        if not entry.target:
            return None
        destination = safe_output_path(self.project_root, entry.target)
        if entry.content is None and not entry.absolute:
            kind = "binary" if is_binary_target(entry.target) else "text"
            raise MissingPayloadError(
                f"{kind} file {entry.target} must have either content or an absolute URL"
            )
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            if is_binary_target(entry.target):
                destination.write_bytes(self._binary_payload(entry))
            else:
                destination.write_text(self._text_payload(entry), encoding="utf-8")
        except requests.RequestException as exc:
            raise MaterializationError(f"failed to download {entry.absolute} for {entry.target}: {exc}") from exc
        logger.debug("wrote %s", destination)
        return destination

    def materialize_all(self, entries: Iterable[SpreadFileEntry]) -> list[Path]:
        written: list[Path] = []
        for entry in entries:
            path = self.materialize(entry)
            if path is not None:
                written.append(path)
        return written

    def _binary_payload(self, entry: SpreadFileEntry) -> bytes:
        if entry.content is not None:
            try:
                return base64.b64decode(entry.content, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise MaterializationError(f"invalid base64 content for {entry.target}: {exc}") from exc
        return self.remote.fetch_bytes(str(entry.absolute))

    def _text_payload(self, entry: SpreadFileEntry) -> str:
        if entry.content is not None:
            return entry.content
        return self.remote.fetch_text(str(entry.absolute))
