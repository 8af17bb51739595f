"""Taxpayer snapshot evaluated against a recategorization period."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from recablix_core.models.tables import Category, ClientActivity
from recablix_core.validation import validate_cuit


class TaxpayerInput(BaseModel):
    """Period-scoped snapshot of one taxpayer.

    Assembled by the surrounding application from the client profile and the
    summed sales of the period. previous_category and previous_fee are only
    used for comparison and never feed the new calculation.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "c-0001",
                    "name": "Juan Pérez",
                    "activity": "SERVICIOS",
                    "province_code": "901",
                    "works_in_rd": False,
                    "is_retired": False,
                    "dependents": 1,
                    "local_m2": None,
                    "annual_rent": None,
                    "annual_mw": None,
                    "period_sales": "8000000",
                    "previous_category": "A",
                    "previous_fee": "50000",
                }
            ]
        }
    }

    id: str
    name: str
    cuit: Optional[str] = Field(default=None, description="Tax id, XX-XXXXXXXX-X")
    activity: ClientActivity = ClientActivity.SERVICES
    province_code: str = "901"
    works_in_rd: bool = Field(
        default=False,
        description="Employed under a dependent labor contract",
    )
    is_retired: bool = False
    dependents: int = Field(default=0, ge=0, le=6)
    local_m2: Optional[Decimal] = None
    annual_rent: Optional[Decimal] = None
    annual_mw: Optional[Decimal] = None
    period_sales: Decimal = Decimal("0")
    previous_category: Optional[Category] = None
    previous_fee: Optional[Decimal] = None

    @field_validator("cuit")
    @classmethod
    def check_cuit(cls, v: Optional[str]) -> Optional[str]:
        """Reject malformed CUITs; blank is treated as absent."""
        if v is None or not v.strip():
            return None
        check = validate_cuit(v)
        if not check.valid:
            raise ValueError(check.error)
        return v.strip()

    @field_validator("previous_category", mode="before")
    @classmethod
    def blank_previous_category(cls, v):
        """An empty previous category means there is no previous record."""
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v
