"""Tests for audit trail models."""

from datetime import timezone
import json

import pytest

from recablix_core.models.audit import (
    AuditEntry,
    AuditError,
    AuditSeverity,
    AuditTrail,
    AuditWarning,
)


class TestAuditEntry:
    """Tests for AuditEntry model."""

    def test_create_basic_entry(self):
        """Should create entry with step and action."""
        entry = AuditEntry(step="recategorize", action="Recategorized Juan Pérez")
        assert entry.step == "recategorize"
        assert entry.taxpayer_id is None

    def test_timestamp_is_utc(self):
        """Timestamp should be UTC timezone-aware."""
        entry = AuditEntry(step="recategorize", action="Test")
        assert entry.timestamp.tzinfo == timezone.utc

    def test_serializes_to_json(self):
        entry = AuditEntry(
            step="recategorize",
            action="Recategorized",
            taxpayer_id="c1",
            output_value="category=A",
        )
        data = json.loads(entry.model_dump_json())
        assert data["taxpayer_id"] == "c1"
        assert data["output_value"] == "category=A"


class TestAuditWarning:
    """Tests for AuditWarning model."""

    def test_default_severity(self):
        warning = AuditWarning(code="ZERO_TOTAL_FEE", message="Total fee is zero")
        assert warning.severity == AuditSeverity.WARNING
        assert warning.suggested_action is None


class TestAuditError:
    """Tests for AuditError model."""

    def test_create_basic_error(self):
        error = AuditError(code="INVALID_TAXPAYER", message="Bad CUIT")
        assert error.exception_type is None
        assert error.stack_trace is None

    def test_from_exception(self):
        """Should capture exception type and traceback."""
        try:
            raise ValueError("Dígito verificador inválido")
        except ValueError as e:
            error = AuditError.from_exception(e, code="INVALID_TAXPAYER", taxpayer_id="c1")

        assert error.message == "Dígito verificador inválido"
        assert error.exception_type == "ValueError"
        assert "ValueError" in error.stack_trace
        assert error.taxpayer_id == "c1"


class TestAuditTrail:
    """Tests for AuditTrail model."""

    @pytest.fixture
    def empty_trail(self) -> AuditTrail:
        """Create an empty audit trail."""
        return AuditTrail(run_id="test-run-001", period_code="261")

    def test_create_trail(self, empty_trail: AuditTrail):
        """Should create trail with run_id."""
        assert empty_trail.run_id == "test-run-001"
        assert empty_trail.status == "running"
        assert empty_trail.completed_at is None
        assert len(empty_trail.entries) == 0
        assert len(empty_trail.warnings) == 0
        assert len(empty_trail.errors) == 0

    def test_started_at_is_utc(self, empty_trail: AuditTrail):
        assert empty_trail.started_at.tzinfo == timezone.utc

    def test_add_entry(self, empty_trail: AuditTrail):
        entry = empty_trail.add_entry(
            step="recategorize",
            action="Recategorized Juan Pérez",
            taxpayer_id="c1",
            input_value="sales=8000000",
            output_value="category=A",
        )
        assert empty_trail.entries == [entry]

    def test_add_warning(self, empty_trail: AuditTrail):
        warning = empty_trail.add_warning(
            code="ZERO_TOTAL_FEE",
            message="Total fee is zero",
            taxpayer_id="c1",
            severity=AuditSeverity.INFO,
        )
        assert empty_trail.warnings == [warning]
        assert empty_trail.has_warnings is True
        assert warning.severity == AuditSeverity.INFO

    def test_add_error(self, empty_trail: AuditTrail):
        error = empty_trail.add_error(code="INVALID_TAXPAYER", message="Bad data")
        assert empty_trail.errors == [error]
        assert empty_trail.has_errors is True
        assert error.exception_type is None

    def test_add_error_from_exception(self, empty_trail: AuditTrail):
        try:
            raise KeyError("province")
        except KeyError as e:
            error = empty_trail.add_error(
                code="INVALID_TAXPAYER",
                message="ignored",
                taxpayer_id="c2",
                exception=e,
            )

        assert error.exception_type == "KeyError"
        assert error.taxpayer_id == "c2"

    def test_complete_trail(self, empty_trail: AuditTrail):
        empty_trail.complete()
        assert empty_trail.status == "completed"
        assert empty_trail.completed_at.tzinfo == timezone.utc

    def test_duration_seconds(self, empty_trail: AuditTrail):
        assert empty_trail.duration_seconds is None
        empty_trail.complete()
        assert empty_trail.duration_seconds >= 0

    def test_get_entries_for_taxpayer(self, empty_trail: AuditTrail):
        empty_trail.add_entry(step="recategorize", action="A", taxpayer_id="c1")
        empty_trail.add_entry(step="recategorize", action="B", taxpayer_id="c2")
        empty_trail.add_entry(step="report", action="C", taxpayer_id="c1")

        entries = empty_trail.get_entries_for_taxpayer("c1")
        assert [e.action for e in entries] == ["A", "C"]

    def test_summary(self, empty_trail: AuditTrail):
        empty_trail.add_entry(step="recategorize", action="A")
        empty_trail.add_warning(code="W", message="w")
        empty_trail.complete()

        summary = empty_trail.summary()
        assert summary["run_id"] == "test-run-001"
        assert summary["period_code"] == "261"
        assert summary["status"] == "completed"
        assert summary["entry_count"] == 1
        assert summary["warning_count"] == 1
        assert summary["error_count"] == 0

    def test_serializes_to_json(self, empty_trail: AuditTrail):
        empty_trail.add_entry(step="recategorize", action="A")
        data = json.loads(empty_trail.model_dump_json())
        assert data["run_id"] == "test-run-001"
        assert len(data["entries"]) == 1


class TestAuditSeverity:
    def test_severity_values(self):
        assert AuditSeverity.INFO.value == "info"
        assert AuditSeverity.WARNING.value == "warning"
        assert AuditSeverity.ERROR.value == "error"
