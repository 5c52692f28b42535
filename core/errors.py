"""
Errors
======

Exception hierarchy for Crux.

Resolution errors describe a malformed request and abort a batch.
Infrastructure errors describe resources that could not be read.
Content failures are never raised here: they are collected as
ValidationFailure values and only surface through BatchValidationError.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from core.models import ValidationFailure


class CruxError(Exception):
    """Base class for all Crux errors."""


class UsageError(CruxError):
    """Bad command-line usage."""


# ==============================================================================
# RESOLUTION
# ==============================================================================
class ResolutionError(CruxError):
    """A pattern could not be turned into validation targets."""

    def __init__(self, pattern: str, message: str) -> None:
        super().__init__(message)
        self.pattern = pattern


class UnsupportedPathError(ResolutionError):
    """Pattern walks above the base directory with '..'."""

    def __init__(self, pattern: str) -> None:
        super().__init__(
            pattern, f"Relative paths using '..' are not currently supported: {pattern}"
        )


class PatternNotFoundError(ResolutionError):
    """Pattern matched no files."""

    def __init__(self, pattern: str) -> None:
        super().__init__(pattern, f"No such file: {pattern}")


# ==============================================================================
# INFRASTRUCTURE
# ==============================================================================
class InfrastructureError(CruxError):
    """A resource needed for validation could not be read or compiled."""

    def __init__(self, location: str, message: str) -> None:
        super().__init__(message)
        self.location = location


class DocumentLoadError(InfrastructureError):
    """The document to validate is missing, unreachable or not well-formed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(location, f"Unable to load {location}: {reason}")
        self.reason = reason


class SchemaLoadError(InfrastructureError):
    """A schema referenced by a document could not be read."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(location, f"Unable to load schema {location}: {reason}")
        self.reason = reason


class SchematronLoadError(InfrastructureError):
    """The Schematron rule file could not be read or compiled."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(location, f"Unable to load Schematron rules {location}: {reason}")
        self.reason = reason


class CatalogError(InfrastructureError):
    """A catalog file is missing, remote or malformed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(location, f"Unable to load catalog {location}: {reason}")
        self.reason = reason


class RemoteResourceBlockedError(InfrastructureError):
    """A remote resource was needed while remote resources are disabled."""

    def __init__(self, url: str) -> None:
        super().__init__(
            url,
            f"Remote resource {url} was not fetched because remote resources are "
            "disabled (use -r to allow them, or map the resource in a catalog)",
        )
        self.url = url


class ResourceFetchError(InfrastructureError):
    """A remote resource could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(url, f"Unable to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


# ==============================================================================
# AGGREGATE
# ==============================================================================
class BatchValidationError(CruxError):
    """All failures of a batch, raised as one error."""

    def __init__(self, failures: Sequence["ValidationFailure"]) -> None:
        self.failures: List["ValidationFailure"] = list(failures)
        super().__init__(f"{len(self.failures)} validation failure(s)")

    @property
    def cause(self) -> Optional[BaseException]:
        """The first infrastructure fault behind the failures, if any."""
        for failure in self.failures:
            if failure.source_exception is not None:
                return failure.source_exception
        return None
