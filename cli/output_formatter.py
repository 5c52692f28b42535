"""
Output Formatter
================

Handles console output formatting.
Follows SRP: Only handles output formatting.
"""

import sys
import traceback
from typing import Sequence, TextIO

from core.models import BatchResult, ValidationFailure


class OutputFormatter:
    """
    Formatter for console output.

    Follows SRP: Only handles output formatting.
    """

    def __init__(self, stream: TextIO = None, error_stream: TextIO = None):
        """
        Initialize output formatter.

        Args:
            stream: Standard output (default: sys.stdout)
            error_stream: Error output (default: sys.stderr)
        """
        self.stream = stream or sys.stdout
        self.error_stream = error_stream or sys.stderr

    def print_failures(self, failures: Sequence[ValidationFailure]) -> None:
        """
        Print every content failure, one per line.

        Args:
            failures: Failures in batch order
        """
        for failure in failures:
            print(f"Validation FAILED on {failure}", file=self.error_stream)

    def print_cause(self, failure: ValidationFailure, debug: bool = False) -> None:
        """
        Print the infrastructure fault behind a failure.

        Args:
            failure: Failure carrying a source exception
            debug: Include the traceback
        """
        cause = failure.source_exception
        self.print_error(f"{failure.target}: {cause}")
        if debug and cause is not None:
            traceback.print_exception(type(cause), cause, cause.__traceback__, file=self.error_stream)

    def print_result(self, result: BatchResult, debug: bool = False) -> None:
        """
        Print a batch result.

        When infrastructure faults occurred only their causes are printed;
        otherwise every content failure is listed one by one.

        Args:
            result: Finalized batch result
            debug: Include tracebacks of infrastructure faults
        """
        if result.succeeded:
            self.print_success(f"{result.validated_count} file(s) validated")
            return

        infrastructure = result.infrastructure_failures
        if infrastructure:
            for failure in infrastructure:
                self.print_cause(failure, debug)
        else:
            self.print_failures(result.failures)

        print("-" * 80, file=self.stream)
        print("Summary:", file=self.stream)
        print(f"  Total files checked: {result.validated_count}", file=self.stream)
        print(f"  Failures: {len(result.failures)}", file=self.stream)
        failed_targets = {f.target for f in result.failures}
        print(f"  Files with failures: {len(failed_targets)}", file=self.stream)

    def print_error(self, message: str) -> None:
        """
        Print error message.

        Args:
            message: Error message
        """
        print(f"ERROR: {message}", file=self.error_stream)

    def print_warning(self, message: str) -> None:
        """
        Print warning message.

        Args:
            message: Warning message
        """
        print(f"WARNING: {message}", file=self.error_stream)

    def print_success(self, message: str) -> None:
        """
        Print success message.

        Args:
            message: Success message
        """
        print(f"✓ {message}", file=self.stream)
