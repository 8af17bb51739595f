"""Custom exceptions for the Recablix recategorization engine.

This module provides a hierarchy of exception classes for the seams around
the calculation core: loading period tables, reading configuration and
validating taxpayer input. All exceptions inherit from RecablixError, making
it easy to catch all application-specific errors.

The calculation functions themselves never raise for missing scale or fee
component rows. Incomplete period configuration degrades to zero or absent
components in the result instead.

Example:
    try:
        tables = PeriodTables.from_json("reca_261.json")
    except PeriodDataError as e:
        logger.error("period_load_failed", period=e.period_code, error=str(e))
        raise
"""

from typing import Any, Optional


class RecablixError(Exception):
    """Base exception for all Recablix errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise RecablixError("Something went wrong", details={"code": 500})
        RecablixError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize RecablixError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or corrected input. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(RecablixError):
    """Error raised when taxpayer or table data fails validation.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Invalid CUIT",
        ...     field="cuit",
        ...     value="20-1234-5",
        ...     constraint="Format XX-XXXXXXXX-X",
        ... )
        ValidationError: Invalid CUIT
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class PeriodDataError(RecablixError):
    """Error raised when the tables of a recategorization period cannot be loaded.

    Raised by the period loaders when a period has no scale rows, or when a
    period document is unreadable or malformed.

    Attributes:
        period_code: Code of the period being loaded (e.g. "261").
        table: The table that failed to load ("scales", "fee_components").
        source: Path or identifier of the data source.

    Example:
        >>> raise PeriodDataError(
        ...     "No scales found for period",
        ...     period_code="261",
        ...     table="scales",
        ... )
        PeriodDataError: No scales found for period
    """

    def __init__(
        self,
        message: str,
        *,
        period_code: Optional[str] = None,
        table: Optional[str] = None,
        source: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize PeriodDataError.

        Args:
            message: Human-readable error description.
            period_code: Code of the period being loaded.
            table: Name of the table that could not be loaded.
            source: File path or identifier the data was read from.
            details: Optional dictionary with additional context.
            recoverable: Whether loading can be retried. Defaults to False
                since missing period configuration needs an administrator.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.period_code = period_code
        self.table = table
        self.source = source

        if period_code:
            self.details["period_code"] = period_code
        if table:
            self.details["table"] = table
        if source:
            self.details["source"] = source


class ConfigurationError(RecablixError):
    """Error raised when application configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Unknown default province",
        ...     config_key="RECABLIX_DEFAULT_PROVINCE_CODE",
        ...     expected="Province code 901-924",
        ... )
        ConfigurationError: Unknown default province
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "RecablixError",
    "ValidationError",
    "PeriodDataError",
    "ConfigurationError",
]
