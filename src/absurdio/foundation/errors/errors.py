"""Failure reports and exceptions surfaced by fail-fast supervision.

A supervised group can only ever terminate by failing, so every outcome is
described by a ``FailureReport`` and raised as one of the exceptions below.
Uses Pydantic for validation and serialization of reports.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    computed_field,
    field_validator,
)


class FailureKind(StrEnum):
    """How a supervised group came to terminate.

    Used for programmatic handling and exit-status decisions.
    """
    FAILED = "failed"            # Task returned Err(...) through its Result channel
    CRASHED = "crashed"          # Task raised an exception
    CANCELLED = "cancelled"      # Task was cancelled by someone other than the group
    EMPTY = "empty"              # Group was run with no tasks
    IMPOSSIBLE = "impossible"    # A Never-typed task produced a value


_HEADLINES: dict[FailureKind, str] = {
    FailureKind.FAILED: "{who} exited with {message}",
    FailureKind.CRASHED: "{who} crashed: {message}",
    FailureKind.CANCELLED: "{who} was cancelled unexpectedly ({message})",
    FailureKind.EMPTY: "{who}: {message}",
    FailureKind.IMPOSSIBLE: "{who}: impossible state, {message}",
}


class FailureReport(BaseModel):
    """Consolidated description of why a group terminated.

    Attributes:
        group: Name of the supervising group
        kind: Failure classification
        message: Human-readable cause (error text, exception message)
        task: Name of the task whose completion ended the group
        index: Spawn index of that task
        cancelled: Siblings that received a cancellation request
        unwinding: Cancelled siblings still running when the drain window closed
        details: Optional extra info (exception type, traceback)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Failure Report",
            "description": "Why a fail-fast group terminated",
            "examples": [{
                "group": "main",
                "kind": "failed",
                "message": "Counter is >= 3",
                "task": "counter",
                "index": 1,
                "cancelled": 1,
            }],
        },
    )

    group: Annotated[str, Field(min_length=1, description="Supervising group name")]
    kind: FailureKind
    message: Annotated[str, Field(min_length=1, description="Human-readable cause")]
    task: str | None = Field(default=None, description="Task that ended the group")
    index: NonNegativeInt | None = Field(default=None, description="Spawn index of that task")
    cancelled: NonNegativeInt = Field(default=0, description="Siblings asked to cancel")
    unwinding: NonNegativeInt = Field(default=0, description="Siblings still unwinding after drain")
    details: str | None = Field(default=None, description="Extra diagnostic info")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: object) -> str:
        """Accept exceptions and arbitrary Err payloads; fall back when blank."""
        if isinstance(v, str):
            return v.strip() or "<no message>"
        return str(v).strip() or type(v).__name__

    @computed_field
    @property
    def severity(self) -> str:
        """Severity level for logging/display."""
        return "critical" if self.kind is FailureKind.IMPOSSIBLE else "error"

    @property
    def who(self) -> str:
        if self.task is None:
            return f"group {self.group!r}"
        return f"task {self.task!r} (#{self.index})" if self.index is not None else f"task {self.task!r}"

    def render(self) -> str:
        """Format the report as a single human-readable line."""
        line = _HEADLINES[self.kind].format(who=self.who, message=self.message)
        if self.cancelled:
            line += f"; cancelled {self.cancelled} sibling{'s' if self.cancelled != 1 else ''}"
        if self.unwinding:
            line += f", {self.unwinding} still unwinding"
        return line

    __str__ = render


class SupervisionError(Exception):
    """Exception wrapping a FailureReport for raising.

    Raised exactly once by a terminating group. ``error`` keeps the original
    Err payload or exception object when there is one.
    """

    __slots__ = ("report", "error")
    kind: ClassVar[FailureKind]

    def __init__(self, report: FailureReport, error: object = None) -> None:
        self.report = report
        self.error = error
        super().__init__(report.render())
        if (expected := getattr(type(self), "kind", None)) is not None and report.kind is not expected:
            raise ValueError(f"{type(self).__name__} needs a {expected!s} report, got {report.kind!s}")


class TaskFailedError(SupervisionError):
    """A task's own logic failed and returned Err through its Result channel."""
    kind = FailureKind.FAILED


class TaskCrashedError(SupervisionError):
    """A task raised an exception instead of returning through its Result channel."""
    kind = FailureKind.CRASHED


class TaskCancelledError(SupervisionError):
    """A task stopped because an outside actor cancelled it."""
    kind = FailureKind.CANCELLED


class EmptyGroupError(SupervisionError):
    """The group was asked to wait but held no tasks."""
    kind = FailureKind.EMPTY


class ImpossibleStateError(AssertionError):
    """A value of an uninhabited type was observed.

    This is a contract violation by the code that produced it, never an
    ordinary failure: callers must not catch it to recover.
    """

    __slots__ = ("report",)

    def __init__(self, message: str = "Never witnessed", *, report: FailureReport | None = None) -> None:
        if report is not None and report.kind is not FailureKind.IMPOSSIBLE:
            raise ValueError(f"ImpossibleStateError needs an impossible-kind report, got {report.kind}")
        self.report = report
        super().__init__(report.render() if report else f"impossible state: {message}")
