"""Period configuration tables for monotributo recategorization.

A recategorization period ("RECA") publishes two tables that apply
uniformly to every taxpayer evaluated against it:

- Scales: one row per category letter with the four ceilings
  (annual income, floor area, energy, annual rent).
- Fee components: the monthly value of each fee component per category
  (tax, pension, health insurance, provincial and municipal levies).

Both tables are authored by period configuration tooling and are read-only
to the calculation engine.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMERATIONS
# =============================================================================

CATEGORY_ORDER = "ABCDEFGHIJK"


class Category(str, Enum):
    """Monotributo category letters in their fixed order.

    Ordering always uses the position in CATEGORY_ORDER, never string
    comparison of the letters.
    """
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"

    @property
    def ordinal(self) -> int:
        """Position of the letter in the fixed category sequence."""
        return CATEGORY_ORDER.index(self.value)

    @classmethod
    def lowest(cls) -> "Category":
        """First category of the sequence."""
        return cls(CATEGORY_ORDER[0])

    @classmethod
    def highest(cls) -> "Category":
        """Last category of the sequence."""
        return cls(CATEGORY_ORDER[-1])

    @classmethod
    def from_ordinal(cls, index: int) -> "Category":
        """Category at the given position of the sequence."""
        return cls(CATEGORY_ORDER[index])


class ClientActivity(str, Enum):
    """Activity classification of a taxpayer."""
    GOODS = "BIENES"
    SERVICES = "SERVICIOS"
    LEASE = "LOCACION"
    LEASE_SMALL = "SOLO_LOC_2_INM"  # Lessor of at most two properties

    @property
    def label(self) -> str:
        """Human-readable label for forms and reports."""
        return _ACTIVITY_LABELS[self]


_ACTIVITY_LABELS = {
    ClientActivity.GOODS: "Venta de Bienes",
    ClientActivity.SERVICES: "Prestación de Servicios",
    ClientActivity.LEASE: "Locación",
    ClientActivity.LEASE_SMALL: "Solo Locación (hasta 2 inmuebles)",
}


class FeeComponentType(str, Enum):
    """Type tag of a fee component row."""
    TAX = "IMP"
    PENSION = "JUB"
    HEALTH = "OS"
    PROVINCIAL_LEVY = "IBP"


# Well-known component codes
GOODS_TAX_CODE = "B20"
SERVICES_TAX_CODE = "S20"
PENSION_CODE = "021"
RETIREE_PENSION_CODE = "21J"
HEALTH_CODE = "024"
MUNICIPAL_SUFFIX = "M"


# =============================================================================
# TABLE ROWS
# =============================================================================

class Scale(BaseModel):
    """Ceilings of one category for one period."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "category": "A",
                    "max_annual_income": "10206600",
                    "max_local_m2": "30",
                    "max_annual_mw": "3330",
                    "max_annual_rent": "2373628",
                }
            ]
        }
    }

    category: Category
    max_annual_income: Decimal = Field(description="Maximum gross annual income")
    max_local_m2: Decimal = Field(description="Maximum floor area in m²")
    max_annual_mw: Decimal = Field(description="Maximum annual energy consumption")
    max_annual_rent: Decimal = Field(description="Maximum annual rent paid")

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        """Accept lowercase or padded letters."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def ceiling_for(self, parameter: str) -> Decimal:
        """Return the ceiling for a parameter key (income, m2, mw, rent)."""
        return getattr(self, SCALE_FIELDS[parameter])


SCALE_FIELDS = {
    "income": "max_annual_income",
    "m2": "max_local_m2",
    "mw": "max_annual_mw",
    "rent": "max_annual_rent",
}


class FeeComponentRow(BaseModel):
    """Value of one fee component for one category of a period.

    The component_type tag selects the eligibility and lookup rule applied
    by the fee calculator. Provincial levy rows also carry the province code
    and whether the province has a municipal counterpart.
    """
    component_code: str
    description: str = ""
    component_type: FeeComponentType
    category: Category
    value: Decimal = Decimal("0")
    province_code: Optional[str] = None
    has_municipal: bool = False
    in_simplified_regime: bool = Field(
        default=False,
        description="Province folds this levy into the simplified national regime",
    )

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        """Accept lowercase or padded letters."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("value", mode="before")
    @classmethod
    def null_value_is_zero(cls, v):
        """Rows authored without a value count as zero."""
        if v is None:
            return Decimal("0")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_empty(cls, v):
        if v is None:
            return ""
        return v

    @field_validator("has_municipal", "in_simplified_regime", mode="before")
    @classmethod
    def null_flag_is_false(cls, v):
        if v is None:
            return False
        return v
