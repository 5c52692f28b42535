"""Unit tests for the batch data model."""

import pytest

from core.errors import BatchValidationError, DocumentLoadError
from core.models import BatchRequest, BatchResult, ValidationFailure, ValidationTarget


class TestBatchRequest:
    def test_defaults(self) -> None:
        request = BatchRequest()
        assert request.input_patterns == ()
        assert request.catalog_location is None
        assert request.schematron_location is None
        assert request.allow_remote_resources is False

    def test_patterns_are_frozen_as_tuple(self) -> None:
        patterns = ["a.xml", "b.xml"]
        request = BatchRequest(input_patterns=patterns)
        patterns.append("c.xml")
        assert request.input_patterns == ("a.xml", "b.xml")

    def test_request_is_immutable(self) -> None:
        request = BatchRequest(input_patterns=["a.xml"])
        with pytest.raises(AttributeError):
            request.allow_remote_resources = True


class TestValidationFailure:
    def test_str_with_position(self) -> None:
        failure = ValidationFailure(
            target="a.xml", message="bad value", validator="schema", line=4, column=7
        )
        assert str(failure) == "a.xml:4:7 [schema]: bad value"

    def test_str_without_position(self) -> None:
        assert str(ValidationFailure(target="a.xml", message="oops")) == "a.xml: oops"

    def test_from_exception_is_infrastructure(self) -> None:
        error = DocumentLoadError("a.xml", "not well-formed")
        failure = ValidationFailure.from_exception("a.xml", error)
        assert failure.is_infrastructure
        assert failure.source_exception is error
        assert "not well-formed" in failure.message

    def test_content_failure_is_not_infrastructure(self) -> None:
        assert not ValidationFailure(target="a.xml", message="bad").is_infrastructure


class TestBatchResult:
    def test_empty_result_succeeds(self) -> None:
        result = BatchResult().finalize()
        assert result.succeeded
        assert result.validated_count == 0
        assert result.failures == ()

    def test_failures_do_not_change_the_count(self) -> None:
        result = BatchResult()
        for _ in range(3):
            result.record_submission()
        result.add_failures([ValidationFailure(target="a.xml", message="bad")])
        result.finalize()
        assert result.validated_count == 3
        assert not result.succeeded
        assert len(result.failures) == 1

    def test_finalized_result_rejects_changes(self) -> None:
        result = BatchResult().finalize()
        assert result.frozen
        with pytest.raises(RuntimeError):
            result.record_submission()
        with pytest.raises(RuntimeError):
            result.add_failures([ValidationFailure(target="a.xml", message="bad")])

    def test_raise_for_failures_returns_count_on_success(self) -> None:
        result = BatchResult()
        result.record_submission()
        assert result.finalize().raise_for_failures() == 1

    def test_raise_for_failures_aggregates_in_order(self) -> None:
        first = ValidationFailure(target="one.xml", message="bad")
        second = ValidationFailure(target="three.xml", message="worse")
        result = BatchResult()
        result.add_failures([first])
        result.add_failures([second])
        with pytest.raises(BatchValidationError) as exc_info:
            result.finalize().raise_for_failures()
        assert exc_info.value.failures == [first, second]
        assert exc_info.value.cause is None

    def test_raise_for_failures_chains_infrastructure_cause(self) -> None:
        error = DocumentLoadError("two.xml", "missing")
        result = BatchResult()
        result.add_failures(
            [
                ValidationFailure(target="one.xml", message="bad"),
                ValidationFailure.from_exception("two.xml", error),
            ]
        )
        with pytest.raises(BatchValidationError) as exc_info:
            result.finalize().raise_for_failures()
        assert exc_info.value.cause is error
        assert exc_info.value.__cause__ is error
        assert result.infrastructure_failures == (result.failures[1],)


class TestValidationTarget:
    def test_str_is_location(self) -> None:
        assert str(ValidationTarget("a.xml")) == "a.xml"
        assert ValidationTarget("http://x.org/a.xml", is_local=False).is_local is False
