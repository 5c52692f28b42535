"""
Validation Service
==================

Library entry point for batch validation.
Follows SRP: Only turns caller arguments into a batch run.
"""

import logging
from typing import Optional

from core.models import BatchRequest, BatchResult
from core.settings import DEFAULT_ALLOW_REMOTE_RESOURCES
from validators.validation_pipeline import ValidationPipeline


class ValidationService:
    """
    Service responsible for running validation batches.

    Follows SRP: Only handles request construction and result handling.
    """

    def __init__(
        self,
        pipeline: Optional[ValidationPipeline] = None,
        allow_remote_resources: bool = DEFAULT_ALLOW_REMOTE_RESOURCES,
        log_level: int = logging.INFO,
    ):
        """
        Initialize validation service.

        Args:
            pipeline: Validation pipeline (dependency injection)
            allow_remote_resources: Let schema resolution use the network
            log_level: Diagnostic level for the default pipeline
        """
        self.pipeline = pipeline or ValidationPipeline(log_level=log_level)
        self.allow_remote_resources = allow_remote_resources

    def build_request(
        self,
        catalog_file: Optional[str],
        schematron_file: Optional[str],
        *paths: str,
    ) -> BatchRequest:
        """
        Build a batch request.

        Args:
            catalog_file: Local catalog file(s), may be None
            schematron_file: Local Schematron (.sch) file, may be None
            paths: XML/XSD paths with optional wildcards, or remote URIs

        Returns:
            Immutable BatchRequest
        """
        return BatchRequest(
            input_patterns=paths,
            catalog_location=catalog_file,
            schematron_location=schematron_file,
            allow_remote_resources=self.allow_remote_resources,
        )

    def run(self, request: BatchRequest) -> BatchResult:
        """
        Run a batch and return its result.

        Args:
            request: Batch to run

        Returns:
            Finalized BatchResult, successful or carrying every failure
        """
        return self.pipeline.run(request)

    def validate(
        self,
        catalog_file: Optional[str],
        schematron_file: Optional[str],
        *paths: str,
    ) -> int:
        """
        Validate any number of XML or XSD files.

        Args:
            catalog_file: Local catalog file(s), may be None
            schematron_file: Local Schematron (.sch) file, may be None
            paths: XML/XSD paths with optional wildcards, or remote URIs

        Returns:
            Number of files validated

        Raises:
            BatchValidationError: if any file failed validation
            ResolutionError: if a pattern could not be expanded
        """
        request = self.build_request(catalog_file, schematron_file, *paths)
        return self.run(request).raise_for_failures()
