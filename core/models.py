"""
Models
======

Data structures shared by the resolution, validation and reporting layers.

- ValidationTarget: one concrete file or URI to validate
- BatchRequest: what the caller asked for
- ValidationFailure: one problem found in one target
- BatchResult: validated count plus every failure of a run
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from core.errors import BatchValidationError


@dataclass(frozen=True)
class ValidationTarget:
    """A single resolved file path or remote URI."""

    location: str
    is_local: bool = True

    def __str__(self) -> str:
        return self.location


@dataclass(frozen=True)
class BatchRequest:
    """
    A validation job.

    Attributes:
        input_patterns: File patterns or remote URIs, validated in this order
        catalog_location: Local catalog file(s), ';' separated
        schematron_location: Schematron rule file applied to every target
        allow_remote_resources: Let schema resolution use the network
    """

    input_patterns: Tuple[str, ...] = ()
    catalog_location: Optional[str] = None
    schematron_location: Optional[str] = None
    allow_remote_resources: bool = False

    def __post_init__(self):
        # Accept any sequence but keep the request immutable
        object.__setattr__(self, "input_patterns", tuple(self.input_patterns))


@dataclass(frozen=True)
class ValidationFailure:
    """
    One validation problem.

    Attributes:
        target: File or URI that failed
        message: Human-readable description
        source_exception: Set when the failure is an I/O or resource fault
            rather than a content defect
        validator: "schema" or "schematron" for content failures
        line: Source line, when known
        column: Source column, when known
        location: XPath of the failing node (Schematron)
    """

    target: str
    message: str
    source_exception: Optional[BaseException] = field(default=None, compare=False)
    validator: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    location: Optional[str] = None

    @classmethod
    def from_exception(
        cls, target: str, exc: BaseException, validator: Optional[str] = None
    ) -> "ValidationFailure":
        return cls(
            target=target,
            message=str(exc),
            source_exception=exc,
            validator=validator,
        )

    @property
    def is_infrastructure(self) -> bool:
        return self.source_exception is not None

    def __str__(self) -> str:
        position = self.target
        if self.line:
            position += f":{self.line}"
            if self.column:
                position += f":{self.column}"
        if self.validator:
            position += f" [{self.validator}]"
        return f"{position}: {self.message}"


class BatchResult:
    """
    Outcome of a batch run.

    Created empty, filled by the pipeline while targets are processed, then
    frozen by finalize(). A run succeeded when no failures were recorded.
    """

    def __init__(self):
        self.validated_count = 0
        self._failures: List[ValidationFailure] = []
        self._frozen = False

    @property
    def failures(self) -> Tuple[ValidationFailure, ...]:
        return tuple(self._failures)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def succeeded(self) -> bool:
        return not self._failures

    @property
    def infrastructure_failures(self) -> Tuple[ValidationFailure, ...]:
        return tuple(f for f in self._failures if f.is_infrastructure)

    def record_submission(self) -> None:
        """Count a target handed to the validators."""
        self._check_mutable()
        self.validated_count += 1

    def add_failures(self, failures: Sequence[ValidationFailure]) -> None:
        self._check_mutable()
        self._failures.extend(failures)

    def finalize(self) -> "BatchResult":
        self._frozen = True
        return self

    def raise_for_failures(self) -> int:
        """
        Raise every failure as one BatchValidationError.

        Returns:
            Number of validated targets when the run succeeded

        Raises:
            BatchValidationError: if any failure was recorded; chained to
                the first infrastructure fault when there is one
        """
        if self._failures:
            error = BatchValidationError(self._failures)
            raise error from error.cause
        return self.validated_count

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("BatchResult is finalized and can no longer change")

    def __repr__(self):
        return (
            f"BatchResult(validated_count={self.validated_count}, "
            f"failures={len(self._failures)}, frozen={self._frozen})"
        )
