"""Audit trail models for batch recategorization runs.

A batch run evaluates every taxpayer of a studio against one period. The
trail records what was computed for each taxpayer, results that look like
incomplete period configuration, and taxpayers that could not be evaluated.
"""

import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class AuditSeverity(str, Enum):
    """Severity levels for audit events."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEntry(BaseModel):
    """Single processing step of a batch run.

    Attributes:
        timestamp: When this entry was created (UTC)
        step: Name of the step (e.g. "recategorize")
        action: Human-readable description of what was done
        taxpayer_id: Taxpayer the step applies to, if any
        input_value: Inputs of the step, rendered as text
        output_value: Outcome of the step, rendered as text
        notes: Additional context
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    action: str
    taxpayer_id: Optional[str] = None
    input_value: Optional[str] = None
    output_value: Optional[str] = None
    notes: Optional[str] = None


class AuditWarning(BaseModel):
    """Result that was produced but deserves human review.

    Attributes:
        timestamp: When this warning was created (UTC)
        code: Machine-readable warning code (e.g. "ZERO_TOTAL_FEE")
        message: Human-readable warning message
        taxpayer_id: Taxpayer whose result triggered the warning
        severity: Warning severity level
        suggested_action: Recommended action to resolve the warning
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    code: str
    message: str
    taxpayer_id: Optional[str] = None
    severity: AuditSeverity = AuditSeverity.WARNING
    suggested_action: Optional[str] = None


class AuditError(BaseModel):
    """Taxpayer that could not be evaluated.

    Attributes:
        timestamp: When this error occurred (UTC)
        code: Machine-readable error code (e.g. "INVALID_TAXPAYER")
        message: Human-readable error message
        taxpayer_id: Taxpayer being processed when the error occurred
        exception_type: Python exception type name (if from an exception)
        stack_trace: Stack trace for debugging (if available)
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    code: str
    message: str
    taxpayer_id: Optional[str] = None
    exception_type: Optional[str] = None
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        code: str,
        taxpayer_id: Optional[str] = None,
    ) -> "AuditError":
        """Create an AuditError from a Python exception.

        Args:
            exc: The exception that occurred
            code: Machine-readable error code
            taxpayer_id: Taxpayer being processed

        Returns:
            AuditError with exception details populated
        """
        return cls(
            code=code,
            message=str(exc),
            taxpayer_id=taxpayer_id,
            exception_type=type(exc).__name__,
            stack_trace="".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
        )


class AuditTrail(BaseModel):
    """Complete audit trail for a batch run.

    Attributes:
        run_id: Unique identifier for this run
        period_code: Code of the period evaluated
        started_at: When processing started (UTC)
        completed_at: When processing completed (UTC), None if still running
        status: Current status ("running", "completed")
        entries: All audit entries
        warnings: All warnings
        errors: All errors
    """
    run_id: str
    period_code: Optional[str] = None
    started_at: datetime = Field(default_factory=_utc_now)
    completed_at: Optional[datetime] = None
    status: str = "running"
    entries: list[AuditEntry] = Field(default_factory=list)
    warnings: list[AuditWarning] = Field(default_factory=list)
    errors: list[AuditError] = Field(default_factory=list)

    def add_entry(
        self,
        step: str,
        action: str,
        taxpayer_id: Optional[str] = None,
        input_value: Optional[str] = None,
        output_value: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AuditEntry:
        """Add an audit entry to the trail."""
        entry = AuditEntry(
            step=step,
            action=action,
            taxpayer_id=taxpayer_id,
            input_value=input_value,
            output_value=output_value,
            notes=notes,
        )
        self.entries.append(entry)
        return entry

    def add_warning(
        self,
        code: str,
        message: str,
        taxpayer_id: Optional[str] = None,
        severity: AuditSeverity = AuditSeverity.WARNING,
        suggested_action: Optional[str] = None,
    ) -> AuditWarning:
        """Add a warning to the trail."""
        warning = AuditWarning(
            code=code,
            message=message,
            taxpayer_id=taxpayer_id,
            severity=severity,
            suggested_action=suggested_action,
        )
        self.warnings.append(warning)
        return warning

    def add_error(
        self,
        code: str,
        message: str,
        taxpayer_id: Optional[str] = None,
        exception: Optional[Exception] = None,
    ) -> AuditError:
        """Add an error to the trail.

        When an exception is given its type and traceback are captured.
        """
        if exception is not None:
            error = AuditError.from_exception(
                exc=exception,
                code=code,
                taxpayer_id=taxpayer_id,
            )
        else:
            error = AuditError(code=code, message=message, taxpayer_id=taxpayer_id)
        self.errors.append(error)
        return error

    def complete(self, status: str = "completed") -> None:
        """Mark the audit trail as complete."""
        self.completed_at = _utc_now()
        self.status = status

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def duration_seconds(self) -> Optional[float]:
        """Duration of the run in seconds, None while running."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def get_entries_for_taxpayer(self, taxpayer_id: str) -> list[AuditEntry]:
        return [e for e in self.entries if e.taxpayer_id == taxpayer_id]

    def summary(self) -> dict[str, object]:
        """Summary statistics of the run."""
        return {
            "run_id": self.run_id,
            "period_code": self.period_code,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "entry_count": len(self.entries),
            "warning_count": len(self.warnings),
            "error_count": len(self.errors),
        }
