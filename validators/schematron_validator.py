import logging
from typing import Dict, List, Optional

from lxml import etree
from lxml.isoschematron import Schematron

from core.errors import DocumentLoadError, SchematronLoadError
from core.models import ValidationFailure, ValidationTarget
from core.resource_loader import ResourceLoader
from core.settings import SVRL_NAMESPACE
from managers.path_classifier import PathClassifier

logger = logging.getLogger(__name__)

VALIDATOR_NAME = "schematron"
SVRL = {"svrl": SVRL_NAMESPACE}


def _source_line(doc: etree._ElementTree, location: str) -> Optional[int]:
    # SVRL locations are XPaths into the validated document
    if not location:
        return None
    try:
        nodes = doc.xpath(location)
    except (etree.XPathError, TypeError):
        return None
    if isinstance(nodes, list) and nodes and isinstance(nodes[0], etree._Element):
        return nodes[0].sourceline
    return None


def report_failures(
    target: ValidationTarget, doc: etree._ElementTree, report: etree._ElementTree
) -> List[ValidationFailure]:
    """Every failed assert of an SVRL report as a ValidationFailure."""
    failures = []
    for failed in report.findall(".//svrl:failed-assert", namespaces=SVRL):
        location = failed.get("location", "")
        test = failed.get("test", "")
        # Prefer svrl:text content if present
        text_el = failed.find("svrl:text", namespaces=SVRL)
        message = " ".join(text_el.itertext()).strip() if text_el is not None else ""
        message = " ".join(message.split())
        if not message:
            message = (failed.text or "").strip() or f"Assertion failed (test: {test})"
        failures.append(
            ValidationFailure(
                target=target.location,
                message=message,
                validator=VALIDATOR_NAME,
                line=_source_line(doc, location),
                location=location or None,
            )
        )
    return failures


class SchematronValidator:
    """Validates targets against a Schematron rule file."""

    def __init__(self, loader: ResourceLoader):
        self.loader = loader
        self.classifier = PathClassifier()
        self._rules: Dict[str, Schematron] = {}

    def load_rules(self, schematron_location: str) -> Schematron:
        """
        Compile a rule file, once per location.

        Raises:
            SchematronLoadError: if the rule file is unreadable or not valid Schematron
        """
        schematron = self._rules.get(schematron_location)
        if schematron is not None:
            return schematron

        context = self.loader.open_context()
        try:
            rules_doc = context.load_document(self.classifier.classify(schematron_location))
        except DocumentLoadError as e:
            raise SchematronLoadError(schematron_location, e.reason) from e

        try:
            schematron = Schematron(rules_doc, store_report=True)
        except (etree.SchematronParseError, etree.XSLTParseError) as e:
            raise SchematronLoadError(schematron_location, str(e)) from e
        if context.issues:
            raise SchematronLoadError(schematron_location, str(context.issues[0]))

        logger.debug("Compiled Schematron rules from %s", schematron_location)
        self._rules[schematron_location] = schematron
        return schematron

    def validate(
        self, target: ValidationTarget, schematron_location: str
    ) -> List[ValidationFailure]:
        """
        Validate one target against the rules.

        Returns:
            One failure per failed assertion, empty when all rules hold

        Raises:
            SchematronLoadError: if the rule file cannot be used
            DocumentLoadError: if the target cannot be read
        """
        schematron = self.load_rules(schematron_location)
        context = self.loader.open_context()
        doc = context.load_document(target)

        if schematron.validate(doc):
            failures = []
        else:
            report = schematron.validation_report
            failures = report_failures(target, doc, report) if report is not None else []
            if not failures:
                # Fallback to error_log if the report didn't yield anything
                failures = [
                    ValidationFailure(
                        target=target.location,
                        message=entry.message,
                        validator=VALIDATOR_NAME,
                    )
                    for entry in schematron.error_log
                ] or [
                    ValidationFailure(
                        target=target.location,
                        message="Schematron validation failed",
                        validator=VALIDATOR_NAME,
                    )
                ]

        failures.extend(
            ValidationFailure.from_exception(target.location, issue, VALIDATOR_NAME)
            for issue in context.issues
        )
        return failures
