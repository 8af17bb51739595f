"""Batch recategorization of every client of a studio.

The period tables are loaded once and each client is evaluated
independently. A client that cannot be evaluated is recorded in the audit
trail and skipped; it never aborts the run.
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Union

import structlog
from pydantic import BaseModel, Field

from .config import RecablixConfig
from .exceptions import RecablixError, ValidationError
from .models import (
    AuditTrail,
    Category,
    CategoryChange,
    ClientActivity,
    RecategorizationResult,
    TaxpayerInput,
)
from .period_data import PeriodTables

logger = structlog.get_logger()


class TransactionType(str, Enum):
    SALE = "SALE"
    PURCHASE = "PURCHASE"


class SaleTransaction(BaseModel):
    """A monthly sales or purchase total recorded for a client."""
    client_id: str
    period: str = Field(pattern=r"^\d{6}$", description="YYYYMM")
    transaction_type: TransactionType = TransactionType.SALE
    amount: Decimal


class ClientRecaData(BaseModel):
    """Recategorization profile stored with a client. Every field may be unset."""
    activity: Optional[ClientActivity] = None
    province_code: Optional[str] = None
    works_in_rd: Optional[bool] = None
    is_retired: Optional[bool] = None
    dependents: Optional[int] = None
    local_m2: Optional[Decimal] = None
    annual_rent: Optional[Decimal] = None
    annual_mw: Optional[Decimal] = None
    previous_category: Optional[str] = None
    previous_fee: Optional[Decimal] = None


class ClientRecord(BaseModel):
    """A client as returned by the data layer."""
    id: str
    name: str
    cuit: Optional[str] = None
    reca_data: Optional[ClientRecaData] = None


def sum_sales_by_client(
    transactions: Iterable[SaleTransaction],
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> dict[str, Decimal]:
    """Sum SALE amounts per client within [start, end] (YYYYMM, inclusive).

    Purchases are ignored. Open bounds include every period.

    Raises:
        ValidationError: When start is after end.
    """
    if start and end and start > end:
        raise ValidationError(
            f"Sales period start {start} is after end {end}",
            field="sales_period",
            value=f"{start}-{end}",
            constraint="start <= end",
        )

    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.transaction_type != TransactionType.SALE:
            continue
        if start and tx.period < start:
            continue
        if end and tx.period > end:
            continue
        totals[tx.client_id] = totals.get(tx.client_id, Decimal("0")) + tx.amount
    return totals


def build_taxpayer(
    client: ClientRecord,
    period_sales: Decimal,
    config: RecablixConfig,
) -> TaxpayerInput:
    """Assemble the taxpayer snapshot from a client profile and its sales.

    Missing profile data falls back to the configured defaults; zero
    parameters and a zero previous fee count as not declared.
    """
    reca = client.reca_data or ClientRecaData()
    return TaxpayerInput(
        id=client.id,
        name=client.name,
        cuit=client.cuit,
        activity=reca.activity or config.default_activity,
        province_code=reca.province_code or config.default_province_code,
        works_in_rd=reca.works_in_rd or False,
        is_retired=reca.is_retired or False,
        dependents=reca.dependents or 0,
        local_m2=reca.local_m2 or None,
        annual_rent=reca.annual_rent or None,
        annual_mw=reca.annual_mw or None,
        period_sales=period_sales,
        previous_category=reca.previous_category or None,
        previous_fee=reca.previous_fee or None,
    )


class BatchStats(BaseModel):
    """Totals shown above the recategorization table."""
    total: int = 0
    up: int = 0
    down: int = 0
    same: int = 0
    new: int = 0
    total_previous_fee: Decimal = Decimal("0")
    total_new_fee: Decimal = Decimal("0")


class BatchResult(BaseModel):
    """Results of a batch run with its audit trail."""
    results: list[RecategorizationResult] = Field(default_factory=list)
    audit_trail: AuditTrail

    def stats(self) -> BatchStats:
        """Count category movements and sum previous and new fees."""
        counts = {change: 0 for change in CategoryChange}
        previous_total = Decimal("0")
        new_total = Decimal("0")
        for r in self.results:
            counts[r.comparison.category_change] += 1
            previous_total += r.comparison.previous_fee or Decimal("0")
            new_total += r.total_fee
        return BatchStats(
            total=len(self.results),
            up=counts[CategoryChange.UP],
            down=counts[CategoryChange.DOWN],
            same=counts[CategoryChange.SAME],
            new=counts[CategoryChange.NEW],
            total_previous_fee=previous_total,
            total_new_fee=new_total,
        )

    def filter(
        self,
        search: str = "",
        change: Union[CategoryChange, str] = "all",
    ) -> list[RecategorizationResult]:
        """Results whose client name contains search and whose change matches.

        change is a CategoryChange or "all".
        """
        needle = search.lower()
        selected = []
        for r in self.results:
            if needle and needle not in r.client.name.lower():
                continue
            if change != "all" and r.comparison.category_change != CategoryChange(change):
                continue
            selected.append(r)
        return selected

    def by_category(self) -> dict[Category, int]:
        """Number of clients per final category."""
        counts: dict[Category, int] = {}
        for r in self.results:
            counts[r.category.final_category] = counts.get(r.category.final_category, 0) + 1
        return counts


class RecategorizationBatch:
    """
    Recategorize a set of clients against one period.

    The period tables are held for the whole run so they are fetched once
    per batch, not once per client.
    """

    def __init__(self, tables: PeriodTables, config: Optional[RecablixConfig] = None):
        """
        Initialize the batch with the period tables.

        Args:
            tables: Scales and fee components of the period
            config: Defaults for incomplete client profiles (default: from environment)
        """
        self.tables = tables
        self.config = config or RecablixConfig()

    def run(
        self,
        clients: Iterable[ClientRecord],
        transactions: Iterable[SaleTransaction] = (),
        sales_period_start: Optional[str] = None,
        sales_period_end: Optional[str] = None,
    ) -> BatchResult:
        """
        Recategorize every client.

        Sales are summed from the transactions within the sales period; the
        bounds default to the period's own sales range.

        Args:
            clients: Client records with their recategorization profile
            transactions: Monthly sale/purchase totals of the clients
            sales_period_start: First YYYYMM included (overrides the period)
            sales_period_end: Last YYYYMM included (overrides the period)

        Returns:
            BatchResult with one result per client that could be evaluated
        """
        period = self.tables.period
        start = sales_period_start or (period.sales_period_start if period else None)
        end = sales_period_end or (period.sales_period_end if period else None)

        trail = AuditTrail(run_id=str(uuid.uuid4()), period_code=self.tables.period_code)
        sales = sum_sales_by_client(transactions, start, end)

        logger.info(
            "batch_started",
            run_id=trail.run_id,
            period=self.tables.period_code,
            sales_period_start=start,
            sales_period_end=end,
        )

        results: list[RecategorizationResult] = []
        for client in clients:
            try:
                taxpayer = build_taxpayer(
                    client, sales.get(client.id, Decimal("0")), self.config
                )
                result = self.tables.recategorize(taxpayer)
            except (ValueError, RecablixError) as e:
                logger.warning(
                    "recategorization_failed",
                    run_id=trail.run_id,
                    client_id=client.id,
                    error=str(e),
                )
                trail.add_error(
                    code="INVALID_TAXPAYER",
                    message=str(e),
                    taxpayer_id=client.id,
                    exception=e,
                )
                continue

            trail.add_entry(
                step="recategorize",
                action=f"Recategorized {client.name}",
                taxpayer_id=client.id,
                input_value=f"sales={taxpayer.period_sales}",
                output_value=(
                    f"category={result.category.final_category.value}, "
                    f"total_fee={result.total_fee}, "
                    f"change={result.comparison.category_change.value}"
                ),
            )

            if result.total_fee == 0:
                trail.add_warning(
                    code="ZERO_TOTAL_FEE",
                    message=(
                        f"Total fee is zero for category "
                        f"{result.category.final_category.value}"
                    ),
                    taxpayer_id=client.id,
                    suggested_action="Check the fee components configured for the period",
                )

            results.append(result)

        trail.complete()
        logger.info(
            "batch_completed",
            run_id=trail.run_id,
            evaluated=len(results),
            errors=len(trail.errors),
            warnings=len(trail.warnings),
        )
        return BatchResult(results=results, audit_trail=trail)
