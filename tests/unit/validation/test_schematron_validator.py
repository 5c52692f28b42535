"""SchematronValidator unit tests."""

import pytest

from core.errors import DocumentLoadError, SchematronLoadError
from core.models import ValidationTarget
from validators.schematron_validator import SchematronValidator


class TestValidate:
    def test_rules_hold(self, note_files, rules_file, offline_loader) -> None:
        note_files("a.xml", to="Bob")
        validator = SchematronValidator(offline_loader)
        assert validator.validate(ValidationTarget("a.xml"), "rules.sch") == []

    def test_failed_assertion(self, note_files, rules_file, offline_loader) -> None:
        note_files("a.xml", to="Nobody")
        failures = SchematronValidator(offline_loader).validate(
            ValidationTarget("a.xml"), "rules.sch"
        )
        assert len(failures) == 1
        failure = failures[0]
        assert failure.message == "A note must be addressed to somebody"
        assert failure.validator == "schematron"
        assert failure.target == "a.xml"
        assert failure.location
        assert failure.line is not None
        assert not failure.is_infrastructure

    def test_schema_validity_is_not_checked(self, note_files, rules_file, offline_loader) -> None:
        # priority is not an integer, which only the schema cares about
        note_files("a.xml", priority="high")
        validator = SchematronValidator(offline_loader)
        assert validator.validate(ValidationTarget("a.xml"), "rules.sch") == []

    def test_unreadable_target(self, rules_file, offline_loader) -> None:
        with pytest.raises(DocumentLoadError):
            SchematronValidator(offline_loader).validate(
                ValidationTarget("missing.xml"), "rules.sch"
            )


class TestLoadRules:
    def test_missing_rule_file(self, workspace, offline_loader) -> None:
        with pytest.raises(SchematronLoadError) as exc_info:
            SchematronValidator(offline_loader).load_rules("missing.sch")
        assert exc_info.value.location == "missing.sch"

    def test_not_a_schematron_file(self, write, offline_loader) -> None:
        write("rules.sch", "<rules/>")
        with pytest.raises(SchematronLoadError):
            SchematronValidator(offline_loader).load_rules("rules.sch")

    def test_malformed_rule_file(self, write, offline_loader) -> None:
        write("rules.sch", "<schema")
        with pytest.raises(SchematronLoadError):
            SchematronValidator(offline_loader).load_rules("rules.sch")

    def test_rules_compiled_once(self, rules_file, offline_loader) -> None:
        validator = SchematronValidator(offline_loader)
        assert validator.load_rules("rules.sch") is validator.load_rules("rules.sch")
