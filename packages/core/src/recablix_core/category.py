"""Category determination for monotributo recategorization.

The category of a taxpayer is the MAXIMUM of the categories determined
independently by each parameter:
- Gross annual income
- Floor area used by the activity (m²)
- Annual electric energy consumption
- Annual rent paid

Each parameter is scanned on its own, so rent alone can push a taxpayer to a
high category while every other parameter sits at "A".
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from .models import (
    Category,
    CategoryDetails,
    CategoryResult,
    ParameterDetail,
    Scale,
)

ZERO = Decimal("0")


def sort_scales(scales: Iterable[Scale]) -> list[Scale]:
    """Return scale rows ordered A -> K by category position."""
    return sorted(scales, key=lambda s: s.category.ordinal)


def category_for_value(
    scales: Sequence[Scale],
    value: Optional[Decimal],
    parameter: str,
) -> Category:
    """Determine the category driven by one parameter.

    Returns the first category (in A -> K order) whose ceiling for the
    parameter is >= value. A value exactly at a ceiling stays in that
    category.

    Args:
        scales: Scale rows of the period
        value: Taxpayer value for the parameter
        parameter: One of "income", "m2", "mw", "rent"

    Returns:
        Lowest category for absent, zero or negative values; the highest
        defined category when the value exceeds every ceiling.
    """
    if not value or value <= 0:
        return Category.lowest()

    ordered = sort_scales(scales)
    for scale in ordered:
        if value <= scale.ceiling_for(parameter):
            return scale.category

    # Exceeds every ceiling: clamp to the top category
    if ordered:
        return ordered[-1].category
    return Category.highest()


def max_category(categories: Iterable[Optional[Category]]) -> Category:
    """Return the furthest category from "A" by position.

    Example: [A, C, D, B] -> D
    """
    max_index = 0
    for category in categories:
        if category is not None and category.ordinal > max_index:
            max_index = category.ordinal
    return Category.from_ordinal(max_index)


def resolve_category(
    scales: Sequence[Scale],
    income: Optional[Decimal],
    m2: Optional[Decimal] = None,
    mw: Optional[Decimal] = None,
    rent: Optional[Decimal] = None,
) -> CategoryResult:
    """Determine the monotributo category from the period scales.

    Pure function: works on already loaded scale rows.

    Args:
        scales: Scale rows of the period
        income: Gross annual income (period sales)
        m2: Floor area, None when not declared
        mw: Annual energy consumption, None when not declared
        rent: Annual rent paid, None when not declared

    Returns:
        CategoryResult with per-parameter categories, the final category and
        value/limit details against the final category's ceilings.
    """
    income_value = income if income is not None else ZERO
    m2_value = m2 if m2 is not None else ZERO
    mw_value = mw if mw is not None else ZERO
    rent_value = rent if rent is not None else ZERO

    by_income = category_for_value(scales, income_value, "income")
    by_m2 = category_for_value(scales, m2_value, "m2")
    by_mw = category_for_value(scales, mw_value, "mw")
    by_rent = category_for_value(scales, rent_value, "rent")

    final = max_category([by_income, by_m2, by_mw, by_rent])

    final_scale = next((s for s in scales if s.category == final), None)

    def detail(value: Decimal, parameter: str) -> ParameterDetail:
        # Missing row for the final category: limits default to zero
        limit = final_scale.ceiling_for(parameter) if final_scale else ZERO
        return ParameterDetail(value=value, limit=limit)

    return CategoryResult(
        final_category=final,
        category_by_income=by_income,
        category_by_m2=by_m2,
        category_by_mw=by_mw,
        category_by_rent=by_rent,
        details=CategoryDetails(
            income=detail(income_value, "income"),
            m2=detail(m2_value, "m2"),
            mw=detail(mw_value, "mw"),
            rent=detail(rent_value, "rent"),
        ),
    )
