#!/usr/bin/env python3
"""
Crux - CLI Entry Point
======================

Validates XML and XSD files against their XML Schema and, optionally,
against Schematron rules. Every failure of the batch is reported before
the process exits.

Architecture:
- Services: Batch validation workflow
- Managers: Pattern classification and expansion
- Validators: Schema, Schematron and batch orchestration
- Core: Models, errors, catalog and resource loading
- CLI: User interface (parsing, formatting)

Usage:
    python crux_cli.py file.xml
    python crux_cli.py "*.xml" -c catalog.xml -s rules.sch
    python crux_cli.py http://foo.org/myschema.xsd -r
"""

import logging
import sys
import traceback
from typing import List, Optional

# Service layer
from services import ValidationService

# Pipeline
from validators import ValidationPipeline

# CLI layer
from cli import CommandParser, OutputFormatter

from core.errors import CatalogError, ResolutionError, SchematronLoadError
from core.settings import LOG_DATE_FORMAT, LOG_FORMAT

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def configure_logging() -> None:
    """Send diagnostics to stderr. -d is honored by the pipeline threshold, not here."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    # Parse arguments
    parser = CommandParser()
    args = parser.parse_args(argv)
    formatter = OutputFormatter()

    # Validate arguments
    if not parser.validate_args(args):
        return EXIT_FAILED

    log_level = parser.log_level(args)
    configure_logging()

    service = ValidationService(
        pipeline=ValidationPipeline(log_level=log_level),
        allow_remote_resources=args.allow_remote,
    )

    # Execute batch
    try:
        request = service.build_request(args.catalog, args.schematron, *args.files)
        result = service.run(request)
    except ResolutionError as e:
        # a readable message rather than the full stack trace
        formatter.print_error(str(e))
        return EXIT_FAILED
    except (CatalogError, SchematronLoadError) as e:
        formatter.print_error(str(e))
        return EXIT_FAILED
    except KeyboardInterrupt:
        formatter.print_warning("Operation cancelled by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        traceback.print_exc()
        return EXIT_FAILED

    formatter.print_result(result, debug=args.debug)
    return EXIT_OK if result.succeeded else EXIT_FAILED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
