"""Error taxonomy shared by the spread resolution and install engine."""

from __future__ import annotations


class SpreadError(Exception):
    """Base class for every error raised by spread_core."""

    code: str = "SPREAD_ERROR"


class SpreadConfigError(SpreadError):
    code = "CONFIG_ERROR"


class SpreadResolutionError(SpreadError):
    """A reference could not be turned into a fetchable location."""

    code = "RESOLUTION_ERROR"

    def __init__(self, message: str, *, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class SpreadNotFoundError(SpreadResolutionError):
    code = "SPREAD_NOT_FOUND"


class VersionNotFoundError(SpreadResolutionError):
    code = "VERSION_NOT_FOUND"


class NoVersionsAvailableError(SpreadResolutionError):
    code = "NO_VERSIONS_AVAILABLE"


class HomepageRequiredError(SpreadResolutionError):
    code = "HOMEPAGE_REQUIRED"


class RegistryUnavailableError(SpreadResolutionError):
    code = "REGISTRY_UNAVAILABLE"


class RegistryNotFoundAtUrlError(SpreadResolutionError):
    code = "REGISTRY_NOT_FOUND_AT_URL"


class ComponentNotFoundError(SpreadResolutionError):
    code = "COMPONENT_NOT_FOUND"


class LocalFileNotFoundError(SpreadResolutionError):
    code = "FILE_NOT_FOUND"


class FetchFailedError(SpreadError):
    code = "FETCH_FAILED"

    def __init__(self, location: str, cause: BaseException | str) -> None:
        super().__init__(f"failed to fetch spread from {location}: {cause}")
        self.location = location
        self.cause = cause


class MaterializationError(SpreadError):
    code = "MATERIALIZATION_ERROR"


class MissingPayloadError(MaterializationError):
    code = "MISSING_PAYLOAD"


class PackageInstallError(SpreadError):
    code = "PACKAGE_INSTALL_ERROR"
