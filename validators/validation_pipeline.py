"""
validation_pipeline.py

Orchestrates batch validation: pattern expansion → XSD → Schematron.

Every pattern is expanded before its files are validated, in the order the
caller gave them. A pattern that cannot be expanded (no match, '..'
segment) aborts the whole run; content failures are collected and the run
keeps going so a single pass reports every problem of the batch.

Usage:
    pipeline = ValidationPipeline(log_level=logging.DEBUG)
    result = pipeline.run(BatchRequest(input_patterns=["*.xml"], schematron_location="rules.sch"))
    if not result.succeeded:
        for failure in result.failures:
            print(failure)
"""

import logging
import time
from typing import List, Optional

import requests

from core.errors import DocumentLoadError
from core.models import BatchRequest, BatchResult, ValidationFailure, ValidationTarget
from core.resource_loader import ResourceLoader
from managers.target_manager import TargetManager

from .schema_validator import SchemaValidator
from .schematron_validator import SchematronValidator


class ValidationPipeline:
    """Orchestrates schema → Schematron validation over a batch of targets."""

    def __init__(
        self,
        schema_validator_cls=SchemaValidator,
        schematron_validator_cls=SchematronValidator,
        target_manager: Optional[TargetManager] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
        log_level: int = logging.INFO,
    ):
        """
        Initialize validation pipeline.

        Args:
            schema_validator_cls: Factory taking a ResourceLoader
            schematron_validator_cls: Factory taking a ResourceLoader
            target_manager: Pattern expansion (dependency injection)
            session: HTTP session shared by all remote fetches of a run
            logger: Diagnostic sink (default: this module's logger)
            log_level: Lowest level the pipeline emits
        """
        self.schema_validator_cls = schema_validator_cls
        self.schematron_validator_cls = schematron_validator_cls
        self.target_manager = target_manager or TargetManager()
        self.session = session
        self.logger = logger or logging.getLogger(__name__)
        self.log_level = log_level

    def run(self, request: BatchRequest) -> BatchResult:
        """
        Validate every target of a batch.

        Args:
            request: Patterns, catalog, Schematron file and remote policy

        Returns:
            Finalized BatchResult

        Raises:
            ResolutionError: if a pattern cannot be expanded
            CatalogError: if the catalog cannot be read
            SchematronLoadError: if the rule file cannot be used
        """
        loader = ResourceLoader.for_request(request, session=self.session)
        schema_validator = self.schema_validator_cls(loader)
        schematron_validator = None
        if request.schematron_location is not None:
            schematron_validator = self.schematron_validator_cls(loader)

        result = BatchResult()
        for pattern in request.input_patterns:
            targets = self.target_manager.expand(pattern)
            for target in targets:
                result.record_submission()
                start = time.perf_counter()

                failures = self._validate_target(
                    target, request, schema_validator, schematron_validator
                )
                result.add_failures(failures)

                elapsed_ms = (time.perf_counter() - start) * 1000
                if failures:
                    self._log(
                        logging.INFO,
                        "Validation of %s found %d problem(s), took %d ms",
                        target, len(failures), elapsed_ms,
                    )
                else:
                    self._log(logging.INFO, "Validation successful, took %d ms", elapsed_ms)

        self._log(
            logging.DEBUG,
            "%d file(s) validated, %d failure(s)",
            result.validated_count, len(result.failures),
        )
        return result.finalize()

    def _validate_target(
        self,
        target: ValidationTarget,
        request: BatchRequest,
        schema_validator,
        schematron_validator,
    ) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []

        self._log(logging.INFO, self._schema_message(target, request.catalog_location))
        try:
            failures.extend(schema_validator.validate(target))
        except DocumentLoadError as e:
            # Nothing more can be checked on a document that cannot be read
            return [ValidationFailure.from_exception(target.location, e)]

        # Schematron runs even when the schema already reported problems
        if schematron_validator is not None:
            self._log(
                logging.INFO,
                "Validating file %s against Schematron rules (%s)",
                target, request.schematron_location,
            )
            try:
                failures.extend(
                    schematron_validator.validate(target, request.schematron_location)
                )
            except DocumentLoadError as e:
                failures.append(ValidationFailure.from_exception(target.location, e))
        return failures

    @staticmethod
    def _schema_message(target: ValidationTarget, catalog_location: Optional[str]) -> str:
        message = f"Validating file {target} against XML schema"
        if catalog_location is not None:
            message += f" using the following catalog(s): {catalog_location}"
        return message

    def _log(self, level: int, message: str, *args) -> None:
        if level < self.log_level:
            return
        # the threshold is the only gate; logger levels are left alone
        record = self.logger.makeRecord(
            self.logger.name, level, __file__, 0, message, args, None
        )
        self.logger.handle(record)
