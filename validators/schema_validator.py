"""
schema_validator.py

XML Schema validation of a single target with lxml.

- XML documents are validated against the schema they declare through
  xsi:schemaLocation / xsi:noNamespaceSchemaLocation (or, without hints,
  against a catalog entry for their root namespace).
- XSD files are checked by compiling them; libxml2 rejects schemas that do
  not conform to the schema-for-schemas.

Content problems are returned as ValidationFailure values. A document that
cannot be read at all raises DocumentLoadError.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from lxml import etree

from core.errors import InfrastructureError
from core.models import ValidationFailure, ValidationTarget
from core.resource_loader import LoadContext, ResourceLoader
from core.settings import (
    XSD_NAMESPACE,
    XSD_SCHEMA_TAG,
    XSI_NO_NAMESPACE_SCHEMA_LOCATION,
    XSI_SCHEMA_LOCATION,
)
from managers.path_classifier import join_location

logger = logging.getLogger(__name__)

VALIDATOR_NAME = "schema"

SchemaLocations = Tuple[Tuple[str, str], ...]


def schema_locations(doc: etree._ElementTree) -> List[Tuple[str, str]]:
    """(namespace, location) pairs declared on the root element, resolved
    against the document's own location. No-namespace hints use ''."""
    root = doc.getroot()
    base = doc.docinfo.URL or ""
    locations = []

    hint = root.get(XSI_SCHEMA_LOCATION)
    if hint:
        tokens = hint.split()
        # a dangling namespace without a location is ignored, as parsers do
        for namespace, location in zip(tokens[::2], tokens[1::2]):
            locations.append((namespace, join_location(base, location)))

    no_namespace = root.get(XSI_NO_NAMESPACE_SCHEMA_LOCATION)
    if no_namespace and no_namespace.strip():
        locations.append(("", join_location(base, no_namespace.strip())))
    return locations


def driver_schema(locations: Sequence[Tuple[str, str]]) -> str:
    """A schema that pulls several schema documents together."""
    root = etree.Element(XSD_SCHEMA_TAG, nsmap={"xs": XSD_NAMESPACE})
    for namespace, location in locations:
        if namespace:
            etree.SubElement(
                root,
                f"{{{XSD_NAMESPACE}}}import",
                namespace=namespace,
                schemaLocation=location,
            )
        else:
            etree.SubElement(root, f"{{{XSD_NAMESPACE}}}include", schemaLocation=location)
    return etree.tostring(root, encoding="unicode")


class SchemaValidator:
    """Validates targets against their declared XML Schema."""

    def __init__(self, loader: ResourceLoader):
        self.loader = loader
        self._schemas: Dict[SchemaLocations, etree.XMLSchema] = {}

    def validate(self, target: ValidationTarget) -> List[ValidationFailure]:
        """
        Validate one target.

        Args:
            target: Local file or remote URI

        Returns:
            Failures found, empty when the target is valid

        Raises:
            DocumentLoadError: if the target cannot be read or is not well-formed
        """
        context = self.loader.open_context()
        doc = context.load_document(target)

        if doc.getroot().tag == XSD_SCHEMA_TAG:
            logger.debug("%s is a schema document, compiling it", target)
            failures = self._check_schema_document(target, doc, context)
        else:
            failures = self._validate_instance(target, doc, context)

        return failures + self._issue_failures(target, context)

    # ------------------------------------------------------------------
    # XSD targets
    # ------------------------------------------------------------------
    def _check_schema_document(
        self, target: ValidationTarget, doc: etree._ElementTree, context: LoadContext
    ) -> List[ValidationFailure]:
        try:
            etree.XMLSchema(doc)
        except etree.XMLSchemaParseError as e:
            return self._compile_failures(target, doc.docinfo.URL, e, context)
        return []

    # ------------------------------------------------------------------
    # XML targets
    # ------------------------------------------------------------------
    def _validate_instance(
        self, target: ValidationTarget, doc: etree._ElementTree, context: LoadContext
    ) -> List[ValidationFailure]:
        locations = schema_locations(doc)
        if not locations:
            namespace = etree.QName(doc.getroot()).namespace
            mapped = self.loader.map_namespace(namespace) if namespace else None
            if mapped:
                locations = [(namespace, mapped)]
        if not locations:
            return [
                ValidationFailure(
                    target=target.location,
                    message=(
                        f"No XML Schema declared for root element "
                        f"'{doc.getroot().tag}' (use xsi:schemaLocation or "
                        f"xsi:noNamespaceSchemaLocation, or map its namespace in a catalog)"
                    ),
                    validator=VALIDATOR_NAME,
                )
            ]

        key = tuple(locations)
        schema = self._schemas.get(key)
        if schema is None:
            issues_before = len(context.issues)
            try:
                if len(locations) == 1:
                    schema_doc = context.load_resource(locations[0][1])
                else:
                    schema_doc = context.parse_string(driver_schema(locations))
            except InfrastructureError as e:
                return [ValidationFailure.from_exception(target.location, e, VALIDATOR_NAME)]

            try:
                schema = etree.XMLSchema(schema_doc)
            except etree.XMLSchemaParseError as e:
                return self._compile_failures(target, None, e, context)

            # a schema built around a blocked import is not reusable
            if len(context.issues) == issues_before:
                self._schemas[key] = schema

        if schema.validate(doc):
            return []
        return [
            ValidationFailure(
                target=target.location,
                message=entry.message,
                validator=VALIDATOR_NAME,
                line=entry.line or None,
                column=entry.column or None,
            )
            for entry in schema.error_log
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _compile_failures(
        self,
        target: ValidationTarget,
        own_url: Optional[str],
        error: etree.XMLSchemaParseError,
        context: LoadContext,
    ) -> List[ValidationFailure]:
        # blocked or failed fetches were answered with an empty document
        unavailable = {issue.location for issue in context.issues}
        failures = []
        skipped = False
        for entry in error.error_log:
            if entry.level < etree.ErrorLevels.ERROR:
                continue
            if unavailable and entry.filename in unavailable | {None, "<string>"}:
                skipped = True
                continue
            if own_url and entry.filename == own_url:
                failures.append(
                    ValidationFailure(
                        target=target.location,
                        message=entry.message,
                        validator=VALIDATOR_NAME,
                        line=entry.line or None,
                        column=entry.column or None,
                    )
                )
            else:
                failures.append(
                    ValidationFailure(
                        target=target.location,
                        message=f"Schema error in {entry.filename}:{entry.line}: {entry.message}",
                        validator=VALIDATOR_NAME,
                    )
                )
        if not failures and not skipped:
            failures.append(
                ValidationFailure(
                    target=target.location,
                    message=f"Schema could not be compiled: {error}",
                    validator=VALIDATOR_NAME,
                )
            )
        return failures

    def _issue_failures(
        self, target: ValidationTarget, context: LoadContext
    ) -> List[ValidationFailure]:
        failures = []
        seen = set()
        for issue in context.issues:
            if str(issue) in seen:
                continue
            seen.add(str(issue))
            failures.append(ValidationFailure.from_exception(target.location, issue, VALIDATOR_NAME))
        return failures
