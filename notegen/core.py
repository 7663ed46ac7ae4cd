"""Core types used across all modules."""

from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class FailureKind(StrEnum):
    """Error codes for each stage of the generation flow."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    RESOLUTION_FAILURE = "RESOLUTION_FAILURE"
    INVOCATION_FAILURE = "INVOCATION_FAILURE"
    RECONCILIATION_FAILURE = "RECONCILIATION_FAILURE"
    PERSIST_FAILURE = "PERSIST_FAILURE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class Diag(BaseModel):
    """A structured diagnostic message.

    ``message`` is safe to return to a caller; ``hint`` carries internal detail
    for logs only.
    """

    severity: Severity
    code: str
    message: str
    hint: str | None = None


class Result(BaseModel, Generic[T]):  # noqa: UP046 — Pydantic requires Generic[T] subclass
    """Result container that pairs output with diagnostics.

    Stage functions never throw for classified failures (missing source,
    rejected request, malformed response). They return Result with
    diagnostics instead.
    """

    data: T | None = None
    diagnostics: list[Diag] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.has_errors

    @property
    def first_error(self) -> Diag | None:
        for d in self.diagnostics:
            if d.severity == Severity.ERROR:
                return d
        return None

    def error(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.ERROR, code=code, message=message, hint=hint))

    def warning(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.WARNING, code=code, message=message, hint=hint))

    def info(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.INFO, code=code, message=message, hint=hint))
