"""
Command Parser
==============

Handles CLI argument parsing.
Follows SRP: Only handles command-line argument parsing.
"""

import argparse
import logging
from typing import Any, List, Optional

from core.errors import UsageError
from core.settings import SAMPLE_CATALOG


class CommandParser:
    """
    Parser for command-line arguments.

    Follows SRP: Only handles argument parsing.
    """

    def __init__(self):
        """Initialize command parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all options.

        Returns:
            Configured ArgumentParser
        """
        parser = argparse.ArgumentParser(
            prog="crux",
            usage="%(prog)s [OPTIONS] [XML/XSD FILES]\t (XML/XSD files may include wildcards)",
            description="Validate XML and XSD files against their XML Schema and, "
            "optionally, against Schematron rules",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=f"""
A simple catalog file which would utilize a local copy of http://www.w3.org/1999/xlink.xsd would be:

{SAMPLE_CATALOG}

Examples:
  crux file.xml                     -validation of a local XML file based on schema locations in the file
  crux *.xml                        -validation of *.xml local XML files based on schema locations in the files
  crux file?.xml                    -validation of local XML files like file1.xml, fileA.xml, and so on
  crux 'data/**/*.xml'              -validation of XML files in data/ and all of its subdirectories
  crux http://foo.org/myschema.xsd  -validation of a remote schema
  crux file.xml -c catalog.xml      -validation of a local XML file using local copies of schemas as defined in catalog.xml
  crux file.xml -s rules.sch        -validation of a local XML file against both its XML schema and Schematron rules
  crux myschema.xsd                 -validation of a local schema
            """
        )

        parser.add_argument(
            "files",
            nargs="+",
            metavar="FILE",
            help="XML/XSD file patterns or remote URLs"
        )

        parser.add_argument(
            "-c",
            dest="catalog",
            metavar="CATALOG_FILE",
            help="Local catalog file (several may be separated with ';')"
        )

        parser.add_argument(
            "-s",
            dest="schematron",
            metavar="SCHEMATRON_FILE",
            help="Local Schematron rule file"
        )

        parser.add_argument(
            "-r",
            dest="allow_remote",
            action="store_true",
            help="Allow remote schema resolution (disabled by default)"
        )

        parser.add_argument(
            "-d",
            dest="debug",
            action="store_true",
            help="Enable debugging messages"
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> Any:
        """
        Parse command-line arguments.

        Options and files may be interleaved, as in 'crux a.xml -c catalog.xml b.xml'.

        Args:
            args: Arguments to parse (default: sys.argv)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_intermixed_args(args)

    def validate_args(self, args: Any) -> bool:
        """
        Validate parsed arguments.

        Args:
            args: Parsed arguments namespace

        Returns:
            True if arguments are valid
        """
        try:
            self.check_args(args)
        except UsageError as e:
            print(f"Error: {e}")
            return False
        return True

    def check_args(self, args: Any) -> None:
        """
        Raises:
            UsageError: if an option or file name is empty
        """
        for option, value in (("-c", args.catalog), ("-s", args.schematron)):
            if value is not None and not value.strip():
                raise UsageError(f"{option} needs a file name")

        if any(not pattern.strip() for pattern in args.files):
            raise UsageError("empty file name")

    def log_level(self, args: Any) -> int:
        return logging.DEBUG if args.debug else logging.INFO
