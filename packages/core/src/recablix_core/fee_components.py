"""Monthly fee components per taxpayer conditions.

| Component   | Code     | Rule                                               |
|-------------|----------|----------------------------------------------------|
| Tax         | B20/S20  | GOODS -> B20, SERVICES/LEASE -> S20, LEASE_SMALL -> 0 |
| Pension     | 021/21J  | RD -> 0, retired -> 021 at category A, else 021    |
| Health      | 024      | RD -> 0, else 024 x (1 + dependents)               |
| Provincial  | 9XX      | Row for the taxpayer's province code               |
| Municipal   | 9XXM     | Only when the provincial row has_municipal         |

Tax, pension and health always produce one line: applied=False with a
reason when the taxpayer is not eligible, applied=False without a reason
when the period has no row for it. Provincial and municipal levies produce
no line at all when the period has no row for them.
"""

from decimal import Decimal
from typing import Optional, Sequence

from .models import (
    GOODS_TAX_CODE,
    HEALTH_CODE,
    MUNICIPAL_SUFFIX,
    PENSION_CODE,
    RETIREE_PENSION_CODE,
    SERVICES_TAX_CODE,
    Category,
    ClientActivity,
    FeeComponent,
    FeeComponentRow,
    FeeComponentsResult,
    FeeComponentType,
    FeeSubtotals,
)

# Retirees always pay the floor contribution of this category
RETIREE_PENSION_CATEGORY = Category.A

REASON_LEASE_SMALL_TAX = "Locador ≤2 inmuebles"
REASON_DEPENDENT_LABOR = "Trabaja en Relación de Dependencia"
REASON_LEASE_SMALL = "Solo locación ≤2 inmuebles"


def tax_component_code(activity: ClientActivity) -> Optional[str]:
    """Tax component code for an activity.

    - GOODS -> B20
    - SERVICES/LEASE -> S20
    - LEASE_SMALL -> None (no tax component)
    """
    if activity == ClientActivity.GOODS:
        return GOODS_TAX_CODE
    if activity in (ClientActivity.SERVICES, ClientActivity.LEASE):
        return SERVICES_TAX_CODE
    return None


def _find(
    rows: Sequence[FeeComponentRow],
    code: str,
    category: Category,
) -> Optional[FeeComponentRow]:
    return next(
        (r for r in rows if r.component_code == code and r.category == category),
        None,
    )


def _exemption_reason(works_in_rd: bool, activity: ClientActivity) -> Optional[str]:
    """Reason pension and health do not apply; dependent labor wins."""
    if works_in_rd:
        return REASON_DEPENDENT_LABOR
    if activity == ClientActivity.LEASE_SMALL:
        return REASON_LEASE_SMALL
    return None


def _unconfigured(code: str, description: str, component_type: FeeComponentType) -> FeeComponent:
    """Line for an eligible component whose row is missing from the period."""
    return FeeComponent(
        code=code,
        description=description,
        type=component_type,
        value=Decimal("0"),
        applied=False,
    )


def _health_description(dependents: int) -> str:
    multiplier = 1 + dependents
    if multiplier <= 1:
        return "Obra Social"
    plural = "s" if dependents > 1 else ""
    return f"Obra Social (×{multiplier} por {dependents} adherente{plural})"


def compute_fee_components(
    rows: Sequence[FeeComponentRow],
    category: Category,
    activity: ClientActivity,
    province_code: str,
    works_in_rd: bool = False,
    is_retired: bool = False,
    dependents: int = 0,
) -> FeeComponentsResult:
    """Compute the fee components of a taxpayer for a category.

    Pure function: works on the already loaded fee component table.

    Args:
        rows: Every fee component row of the period
        category: Final category of the taxpayer
        activity: Activity classification
        province_code: Home province code (e.g. "904")
        works_in_rd: Employed under a dependent labor contract
        is_retired: Retired taxpayer
        dependents: Number of health insurance dependents

    Returns:
        FeeComponentsResult with the ordered lines and the five subtotals.
    """
    components: list[FeeComponent] = []
    tax = pension = health = provincial = municipal = Decimal("0")

    category_rows = [r for r in rows if r.category == category]

    # 1. Tax component
    tax_code = tax_component_code(activity)
    if tax_code:
        row = next((r for r in category_rows if r.component_code == tax_code), None)
        if row:
            tax = row.value
            components.append(FeeComponent(
                code=tax_code,
                description=row.description,
                type=FeeComponentType.TAX,
                value=tax,
                applied=True,
            ))
        else:
            components.append(
                _unconfigured(tax_code, "Componente Impositivo", FeeComponentType.TAX)
            )
    else:
        components.append(FeeComponent(
            code=FeeComponentType.TAX.value,
            description="Componente Impositivo",
            type=FeeComponentType.TAX,
            value=Decimal("0"),
            applied=False,
            reason=REASON_LEASE_SMALL_TAX,
        ))

    exemption = _exemption_reason(works_in_rd, activity)

    # 2. Pension component
    if exemption:
        components.append(FeeComponent(
            code=FeeComponentType.PENSION.value,
            description="Jubilatorio",
            type=FeeComponentType.PENSION,
            value=Decimal("0"),
            applied=False,
            reason=exemption,
        ))
    elif is_retired:
        # Looked up across the whole table, not only the taxpayer's category
        row = _find(rows, PENSION_CODE, RETIREE_PENSION_CATEGORY)
        if row:
            pension = row.value
            components.append(FeeComponent(
                code=RETIREE_PENSION_CODE,
                description="Jubilatorio (aporte mínimo)",
                type=FeeComponentType.PENSION,
                value=pension,
                applied=True,
            ))
        else:
            components.append(_unconfigured(
                RETIREE_PENSION_CODE, "Jubilatorio (aporte mínimo)", FeeComponentType.PENSION
            ))
    else:
        row = _find(category_rows, PENSION_CODE, category)
        if row:
            pension = row.value
            components.append(FeeComponent(
                code=PENSION_CODE,
                description="Jubilatorio",
                type=FeeComponentType.PENSION,
                value=pension,
                applied=True,
            ))
        else:
            components.append(
                _unconfigured(PENSION_CODE, "Jubilatorio", FeeComponentType.PENSION)
            )

    # 3. Health insurance component
    if exemption:
        components.append(FeeComponent(
            code=FeeComponentType.HEALTH.value,
            description="Obra Social",
            type=FeeComponentType.HEALTH,
            value=Decimal("0"),
            applied=False,
            reason=exemption,
        ))
    else:
        row = _find(category_rows, HEALTH_CODE, category)
        if row:
            health = row.value * (1 + dependents)
            components.append(FeeComponent(
                code=HEALTH_CODE,
                description=_health_description(dependents),
                type=FeeComponentType.HEALTH,
                value=health,
                applied=True,
            ))
        else:
            components.append(
                _unconfigured(HEALTH_CODE, "Obra Social", FeeComponentType.HEALTH)
            )

    # 4. Provincial levy
    provincial_row = next(
        (
            r for r in rows
            if r.component_type == FeeComponentType.PROVINCIAL_LEVY
            and r.province_code == province_code
            and r.category == category
        ),
        None,
    )

    if provincial_row:
        provincial = provincial_row.value
        components.append(FeeComponent(
            code=provincial_row.component_code,
            description=provincial_row.description,
            type=FeeComponentType.PROVINCIAL_LEVY,
            value=provincial,
            applied=True,
        ))

        # 5. Municipal levy
        if provincial_row.has_municipal:
            municipal_code = f"{province_code}{MUNICIPAL_SUFFIX}"
            municipal_row = _find(rows, municipal_code, category)
            if municipal_row:
                municipal = municipal_row.value
                components.append(FeeComponent(
                    code=municipal_code,
                    description=f"{provincial_row.description} Municipal",
                    type=FeeComponentType.PROVINCIAL_LEVY,
                    value=municipal,
                    applied=True,
                ))

    return FeeComponentsResult(
        components=tuple(components),
        subtotals=FeeSubtotals(
            tax=tax,
            pension=pension,
            health=health,
            provincial=provincial,
            municipal=municipal,
        ),
    )
