"""Tests for core types: Result[T], Diag and FailureKind."""

from notegen.core import Diag, FailureKind, Result, Severity


def test_severity_values() -> None:
    assert Severity.ERROR == "error"
    assert Severity.WARNING == "warning"
    assert Severity.INFO == "info"


def test_failure_kinds_are_distinct() -> None:
    assert len({k.value for k in FailureKind}) == len(FailureKind)
    assert FailureKind.PERSIST_FAILURE == "PERSIST_FAILURE"


def test_diag_with_hint() -> None:
    d = Diag(severity=Severity.ERROR, code=FailureKind.INVOCATION_FAILURE, message="boom", hint="HTTP 502")
    assert d.hint == "HTTP 502"
    assert d.code == "INVOCATION_FAILURE"


def test_result_empty_is_ok() -> None:
    r: Result[str] = Result()
    assert r.ok is True
    assert r.has_errors is False
    assert r.first_error is None


def test_result_error_helper() -> None:
    r: Result[str] = Result(data="hello")
    r.error(FailureKind.RESOLUTION_FAILURE, "no source")
    assert r.ok is False
    assert r.diagnostics[0].severity == Severity.ERROR
    assert r.first_error is not None
    assert r.first_error.message == "no source"


def test_first_error_skips_warnings() -> None:
    r: Result[str] = Result()
    r.warning("SLOW", "took a while")
    r.info("NOTE", "fyi")
    assert r.ok is True
    assert r.first_error is None

    r.error("FIRST", "first failure")
    r.error("SECOND", "second failure")
    assert r.first_error is not None
    assert r.first_error.code == "FIRST"


def test_result_serialization() -> None:
    r: Result[str] = Result(data="test")
    r.warning("W", "warn")
    d = r.model_dump()
    assert d["data"] == "test"
    assert d["diagnostics"][0]["severity"] == "warning"
