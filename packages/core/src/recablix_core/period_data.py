"""Period tables loaded once per batch.

A batch run fetches the scales and fee components of one period a single
time and then evaluates every taxpayer against them. This module bundles
both tables with the period they belong to and loads them from plain records
or a JSON document.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pydantic
import structlog
from pydantic import BaseModel, Field, field_validator

from .exceptions import PeriodDataError
from .models import (
    CATEGORY_ORDER,
    GOODS_TAX_CODE,
    HEALTH_CODE,
    MUNICIPAL_SUFFIX,
    PENSION_CODE,
    SERVICES_TAX_CODE,
    Category,
    FeeComponentRow,
    FeeComponentType,
    RecategorizationResult,
    Scale,
    TaxpayerInput,
)
from .recategorization import recategorize

logger = structlog.get_logger()

# Components every defined category is expected to price
STANDARD_COMPONENT_CODES = (GOODS_TAX_CODE, SERVICES_TAX_CODE, PENSION_CODE, HEALTH_CODE)


class RecaPeriod(BaseModel):
    """A recategorization period (e.g. first semester of 2026).

    Sales periods use the YYYYMM format of the transactions table.
    """
    code: str
    year: int
    semester: int = Field(ge=1, le=2)
    sales_period_start: Optional[str] = None
    sales_period_end: Optional[str] = None
    fee_period_start: Optional[str] = None
    fee_period_end: Optional[str] = None

    @field_validator(
        "sales_period_start", "sales_period_end", "fee_period_start", "fee_period_end"
    )
    @classmethod
    def check_yyyymm(cls, v: Optional[str]) -> Optional[str]:
        """Periods are six digits, YYYYMM, with a valid month."""
        if v is None or v == "":
            return None
        if len(v) != 6 or not v.isdigit() or not 1 <= int(v[4:]) <= 12:
            raise ValueError(f"Period must be YYYYMM: {v}")
        return v


class PeriodTables(BaseModel):
    """Scales and fee components of one period."""

    period: Optional[RecaPeriod] = None
    scales: list[Scale]
    fee_components: list[FeeComponentRow] = Field(default_factory=list)

    @property
    def period_code(self) -> Optional[str]:
        return self.period.code if self.period else None

    @classmethod
    def from_records(
        cls,
        scales: Iterable[Union[Scale, dict[str, Any]]],
        fee_components: Iterable[Union[FeeComponentRow, dict[str, Any]]],
        period: Optional[Union[RecaPeriod, dict[str, Any]]] = None,
    ) -> "PeriodTables":
        """Build the tables from rows as returned by the data layer.

        Raises:
            PeriodDataError: When there are no scale rows or a row is malformed.
        """
        period_code = None
        if isinstance(period, RecaPeriod):
            period_code = period.code
        elif isinstance(period, dict):
            period_code = period.get("code")

        scales = list(scales)
        if not scales:
            raise PeriodDataError(
                f"No scales found for period: {period_code or 'unknown'}",
                period_code=period_code,
                table="scales",
            )

        try:
            tables = cls(
                period=period,
                scales=scales,
                fee_components=list(fee_components),
            )
        except pydantic.ValidationError as e:
            raise PeriodDataError(
                f"Malformed period tables: {e.error_count()} invalid field(s)",
                period_code=period_code,
                details={"errors": e.errors(include_url=False)},
            ) from e

        logger.info(
            "period_tables_loaded",
            period=period_code,
            scales=len(tables.scales),
            fee_components=len(tables.fee_components),
        )
        return tables

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "PeriodTables":
        """Load the tables from a JSON document.

        The document holds "period", "scales" and "fee_components" keys.

        Raises:
            PeriodDataError: When the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PeriodDataError(
                f"Cannot read period tables: {e}",
                source=str(path),
            ) from e

        if not isinstance(data, dict):
            raise PeriodDataError(
                "Period document must be a JSON object",
                source=str(path),
            )

        return cls.from_records(
            scales=data.get("scales") or [],
            fee_components=data.get("fee_components") or [],
            period=data.get("period"),
        )

    def configuration_gaps(self) -> list[str]:
        """List configuration missing from the period.

        The engine degrades to zero or absent components on missing rows;
        this check lets a caller refuse to run a batch on incomplete tables.
        """
        gaps: list[str] = []
        defined = {s.category for s in self.scales}

        for letter in CATEGORY_ORDER:
            if Category(letter) not in defined:
                gaps.append(f"Missing scale for category {letter}")

        present = {(r.component_code, r.category) for r in self.fee_components}
        for category in sorted(defined, key=lambda c: c.ordinal):
            for code in STANDARD_COMPONENT_CODES:
                if (code, category) not in present:
                    gaps.append(f"Missing fee component {code} for category {category.value}")

        for row in self.fee_components:
            if row.component_type != FeeComponentType.PROVINCIAL_LEVY or not row.has_municipal:
                continue
            municipal_code = f"{row.province_code}{MUNICIPAL_SUFFIX}"
            if (municipal_code, row.category) not in present:
                gaps.append(
                    f"Missing municipal component {municipal_code} for category {row.category.value}"
                )

        return gaps

    def recategorize(self, taxpayer: TaxpayerInput) -> RecategorizationResult:
        """Recategorize one taxpayer against these tables."""
        return recategorize(self.scales, self.fee_components, taxpayer)
