"""Retrieve spread descriptors and remote file payloads."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from ..errors import FetchFailedError
from ..security import redact_url
from .models import ResolvedLocation, SpreadDescriptor

logger = logging.getLogger(__name__)


def _is_remote(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


class ArtifactFetcher:
    """Single-attempt reader for local or remote spread documents."""

    def __init__(self, *, timeout: float | None = 30.0, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, location: ResolvedLocation | str) -> SpreadDescriptor:
        target = str(location)
        try:
            payload = self._read_json(target)
            descriptor = SpreadDescriptor.from_payload(payload)
        except (requests.RequestException, OSError, ValueError) as exc:
            raise FetchFailedError(target, exc) from exc
        logger.info("fetched %s from %s", descriptor.identity, redact_url(target))
        return descriptor

    def fetch_bytes(self, url: str) -> bytes:
        return self._get(url).content

    def fetch_text(self, url: str) -> str:
        return self._get(url).text

    def _read_json(self, location: str) -> object:
        if _is_remote(location):
            return self._get(location).json()
        return json.loads(Path(location).read_text(encoding="utf-8"))

    def _get(self, url: str) -> requests.Response:
        logger.debug("GET %s", redact_url(url))
        r = self.session.get(url, timeout=self.timeout)
        r.raise_for_status()
        return r
