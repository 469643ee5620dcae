"""HTTP access to the central registry and to sibling ``registry.json`` files."""

from __future__ import annotations

import logging
import posixpath
from urllib.parse import urlsplit, urlunsplit

import requests

from ..config import DEFAULT_REGISTRY_URL
from ..errors import RegistryNotFoundAtUrlError, RegistryUnavailableError
from ..security import redact_url
from .models import RegistryEntry, RegistryRecord

log = logging.getLogger(__name__)

REGISTRY_FILE = "registry.json"


def sibling_registry_url(url: str) -> str:
    """``https://host/spread/button`` -> ``https://host/spread/registry.json``."""
    parsed = urlsplit(url)
    directory = posixpath.dirname(parsed.path.rstrip("/") or "/")
    path = posixpath.join(directory or "/", REGISTRY_FILE)
    return urlunsplit((parsed.scheme, parsed.netloc, path, "", ""))


def component_name(url: str) -> str:
    return posixpath.basename(urlsplit(url).path.rstrip("/"))


class RegistryClient:
    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        *,
        timeout: float | None = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.registry_url = registry_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def central_registry(self) -> RegistryRecord:
        log.debug("reading central registry url=%s", redact_url(self.registry_url))
        try:
            r = self.session.get(self.registry_url, timeout=self.timeout)
            r.raise_for_status()
            return RegistryRecord.from_payload(r.json())
        except (requests.RequestException, ValueError) as exc:
            raise RegistryUnavailableError(
                f"could not fetch or parse the centralized registry: {exc}"
            ) from exc

    def lookup(self, name: str) -> RegistryEntry | None:
        return self.central_registry().get(name)

    def sibling_registry(self, url: str) -> RegistryRecord:
        registry_url = sibling_registry_url(url)
        log.debug("reading sibling registry url=%s", redact_url(registry_url))
        try:
            r = self.session.get(registry_url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RegistryUnavailableError(f"could not fetch {registry_url}: {exc}") from exc
        if r.status_code == 404:
            raise RegistryNotFoundAtUrlError(
                f"could not find registry.json at {registry_url}. "
                "A direct link to a spread file is not supported."
            )
        try:
            r.raise_for_status()
            return RegistryRecord.from_payload(r.json())
        except (requests.RequestException, ValueError) as exc:
            raise RegistryUnavailableError(f"could not read {registry_url}: {exc}") from exc
