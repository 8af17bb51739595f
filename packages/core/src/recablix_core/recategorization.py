"""Recategorization engine.

Combines category determination and fee components to produce the new
monotributo fee of a taxpayer, and compares it with the previously recorded
category and fee.

All functions here are pure: they work on scale and fee component tables
that the caller loaded once for the period.
"""

from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .category import resolve_category
from .fee_components import compute_fee_components
from .models import (
    Category,
    CategoryChange,
    ClientRef,
    Comparison,
    FeeComponentRow,
    RecategorizationResult,
    Scale,
    TaxpayerInput,
)

logger = structlog.get_logger()


def compare_categories(previous: Category, new: Category) -> int:
    """Signed distance between two categories.

    Positive = moved up, negative = moved down, 0 = unchanged.
    """
    return Category(new).ordinal - Category(previous).ordinal


def classify_change(previous: Optional[Category], new: Category) -> CategoryChange:
    """Classify the category movement; NEW when there is no previous category."""
    if not previous:
        return CategoryChange.NEW
    diff = compare_categories(previous, new)
    if diff > 0:
        return CategoryChange.UP
    if diff < 0:
        return CategoryChange.DOWN
    return CategoryChange.SAME


def fee_change_percent(total_fee: Decimal, previous_fee: Optional[Decimal]) -> Optional[Decimal]:
    """Percentage change against the previous fee.

    None when there is no previous fee. A recorded previous fee of zero is
    treated the same way.
    """
    if not previous_fee:
        return None
    return (total_fee - previous_fee) / previous_fee * 100


def recategorize(
    scales: Sequence[Scale],
    fee_rows: Sequence[FeeComponentRow],
    taxpayer: TaxpayerInput,
) -> RecategorizationResult:
    """
    Compute the complete recategorization of one taxpayer.

    Args:
        scales: Scale rows of the period
        fee_rows: Fee component rows of the period
        taxpayer: Taxpayer snapshot for the period

    Returns:
        RecategorizationResult with category, fee breakdown, total fee and
        comparison against the previous record
    """
    # Step 1: Category
    category = resolve_category(
        scales,
        income=taxpayer.period_sales,
        m2=taxpayer.local_m2,
        mw=taxpayer.annual_mw,
        rent=taxpayer.annual_rent,
    )
    logger.debug(
        "category_resolved",
        taxpayer_id=taxpayer.id,
        by_income=category.category_by_income.value,
        by_m2=category.category_by_m2.value,
        by_mw=category.category_by_mw.value,
        by_rent=category.category_by_rent.value,
        final=category.final_category.value,
    )

    # Step 2: Fee components
    fees = compute_fee_components(
        fee_rows,
        category=category.final_category,
        activity=taxpayer.activity,
        province_code=taxpayer.province_code,
        works_in_rd=taxpayer.works_in_rd,
        is_retired=taxpayer.is_retired,
        dependents=taxpayer.dependents,
    )

    # Step 3: Total
    total_fee = fees.subtotals.total

    # Step 4: Comparison
    change = classify_change(taxpayer.previous_category, category.final_category)
    previous_fee = taxpayer.previous_fee
    fee_change = total_fee - (previous_fee if previous_fee is not None else Decimal("0"))

    logger.debug(
        "fee_computed",
        taxpayer_id=taxpayer.id,
        total_fee=str(total_fee),
        components=len(fees.components),
        change=change.value,
    )

    return RecategorizationResult(
        client=ClientRef(id=taxpayer.id, name=taxpayer.name),
        category=category,
        fee_components=fees,
        total_fee=total_fee,
        comparison=Comparison(
            previous_category=taxpayer.previous_category,
            previous_fee=previous_fee,
            category_change=change,
            fee_change=fee_change,
            fee_change_percent=fee_change_percent(total_fee, previous_fee),
        ),
    )
