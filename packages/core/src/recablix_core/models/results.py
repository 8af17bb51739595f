"""Result records produced by the recategorization engine.

Every result is a value object: produced once per evaluation and frozen.
Field names and the applied/reason shape of fee components are read
verbatim by report and export code.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from recablix_core.models.tables import Category, FeeComponentType


class CategoryChange(str, Enum):
    """Movement of the new category relative to the previous one."""
    UP = "UP"
    DOWN = "DOWN"
    SAME = "SAME"
    NEW = "NEW"


# =============================================================================
# CATEGORY RESOLUTION
# =============================================================================

class ParameterDetail(BaseModel):
    """Taxpayer value next to the final category's ceiling for one parameter."""

    model_config = {"frozen": True}

    value: Decimal
    limit: Decimal

    @computed_field
    @property
    def headroom(self) -> Decimal:
        """Distance left before the ceiling (negative when over it)."""
        return self.limit - self.value


class CategoryDetails(BaseModel):
    """Audit detail for the four parameters."""

    model_config = {"frozen": True}

    income: ParameterDetail
    m2: ParameterDetail
    mw: ParameterDetail
    rent: ParameterDetail


class CategoryResult(BaseModel):
    """Category driven by each parameter and the final (maximum) category."""

    model_config = {"frozen": True}

    final_category: Category
    category_by_income: Category
    category_by_m2: Category
    category_by_mw: Category
    category_by_rent: Category
    details: CategoryDetails


# =============================================================================
# FEE COMPONENTS
# =============================================================================

class FeeComponent(BaseModel):
    """One line of the fee breakdown.

    Components that do not apply carry value 0, applied=False and the reason
    shown to the taxpayer.
    """

    model_config = {"frozen": True}

    code: str
    description: str
    type: FeeComponentType
    value: Decimal
    applied: bool
    reason: Optional[str] = None


class FeeSubtotals(BaseModel):
    """Applied values summed per component category."""

    model_config = {"frozen": True}

    tax: Decimal = Decimal("0")
    pension: Decimal = Decimal("0")
    health: Decimal = Decimal("0")
    provincial: Decimal = Decimal("0")
    municipal: Decimal = Decimal("0")

    @computed_field
    @property
    def total(self) -> Decimal:
        """tax + pension + health + provincial + municipal."""
        return self.tax + self.pension + self.health + self.provincial + self.municipal


class FeeComponentsResult(BaseModel):
    """Ordered fee breakdown plus the five subtotals."""

    model_config = {"frozen": True}

    components: tuple[FeeComponent, ...] = Field(default_factory=tuple)
    subtotals: FeeSubtotals = Field(default_factory=FeeSubtotals)

    def get_component(self, code: str) -> Optional[FeeComponent]:
        """Return the component with the given code, if present."""
        for component in self.components:
            if component.code == code:
                return component
        return None

    def components_of_type(self, component_type: FeeComponentType) -> list[FeeComponent]:
        """Return every component of the given type, in order."""
        return [c for c in self.components if c.type == component_type]


# =============================================================================
# RECATEGORIZATION
# =============================================================================

class ClientRef(BaseModel):
    """Identity of the evaluated taxpayer."""

    model_config = {"frozen": True}

    id: str
    name: str


class Comparison(BaseModel):
    """New category and fee against the previously recorded ones."""

    model_config = {"frozen": True}

    previous_category: Optional[Category] = None
    previous_fee: Optional[Decimal] = None
    category_change: CategoryChange
    fee_change: Decimal
    fee_change_percent: Optional[Decimal] = None


class RecategorizationResult(BaseModel):
    """Complete recategorization of one taxpayer for one period."""

    model_config = {"frozen": True}

    client: ClientRef
    category: CategoryResult
    fee_components: FeeComponentsResult
    total_fee: Decimal
    comparison: Comparison
