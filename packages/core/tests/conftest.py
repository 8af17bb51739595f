"""Shared fixtures: RECA 261 scales (January 2026) and fee components."""

from decimal import Decimal

import pytest

from recablix_core.models import FeeComponentRow, Scale, TaxpayerInput
from recablix_core.period_data import PeriodTables, RecaPeriod

SCALE_ROWS = [
    ("A", "10206600", "30", "3330", "2373628"),
    ("B", "14953850", "45", "5000", "2373628"),
    ("C", "20967040", "60", "6700", "3243958"),
    ("D", "26030780", "85", "10000", "3243958"),
    ("E", "30619800", "110", "13000", "4114288"),
    ("F", "38373650", "150", "16500", "4114288"),
    ("G", "45890130", "200", "20000", "4905497"),
    ("H", "69626410", "200", "20000", "7120883"),
    ("I", "77934110", "200", "20000", "7120883"),
    ("J", "89248400", "200", "20000", "7120883"),
    ("K", "107604500", "200", "20000", "7120883"),
]


def _rows(code, description, component_type, values, **extra):
    return [
        {
            "component_code": code,
            "description": description,
            "component_type": component_type,
            "category": category,
            "value": value,
            **extra,
        }
        for category, value in values.items()
    ]


FEE_COMPONENT_RECORDS = (
    _rows("B20", "IMP-Bienes", "IMP", {
        "A": "4747.251", "B": "9019.788", "C": "14241.764", "D": "23578.036",
        "E": "37661.559", "F": "49054.972", "G": "60764.858", "H": "174066.018",
    })
    + _rows("S20", "IMP-Servicios", "IMP", {
        "A": "7596.402", "B": "14431.658", "C": "22786.841", "D": "35673.656",
        "H": "278505.646",
    })
    + _rows("021", "JUB-Aporta", "JUB", {
        "A": "13663.17", "B": "15029.48", "C": "16804.54", "D": "19398.11",
        "H": "36845.97",
    })
    # Published retiree rows; the engine prices retirees with 021 at A instead
    + _rows("21J", "JUB-Jubilado", "JUB", {c: "12000" for c in "ABCDH"})
    + _rows("024", "Obra Social", "OS", {c: "31437.374" for c in "ABCDH"})
    + _rows("901", "IIBB CABA", "IBP", {"A": "0", "H": "0"},
            province_code="901", has_municipal=False)
    + _rows("904", "IIBB Córdoba", "IBP", {"A": "4500", "H": "12000"},
            province_code="904", has_municipal=True)
    + _rows("904M", "Municipal Córdoba", "IBP", {"A": "1500", "H": "4000"})
)


@pytest.fixture
def scales() -> list[Scale]:
    """RECA 261 scale rows, A to K."""
    return [
        Scale(
            category=category,
            max_annual_income=Decimal(income),
            max_local_m2=Decimal(m2),
            max_annual_mw=Decimal(mw),
            max_annual_rent=Decimal(rent),
        )
        for category, income, m2, mw, rent in SCALE_ROWS
    ]


@pytest.fixture
def fee_rows() -> list[FeeComponentRow]:
    """Fee component rows for a subset of categories and two provinces."""
    return [FeeComponentRow(**record) for record in FEE_COMPONENT_RECORDS]


@pytest.fixture
def period() -> RecaPeriod:
    return RecaPeriod(
        code="261",
        year=2026,
        semester=1,
        sales_period_start="202501",
        sales_period_end="202512",
        fee_period_start="202602",
        fee_period_end="202607",
    )


@pytest.fixture
def tables(scales, fee_rows, period) -> PeriodTables:
    return PeriodTables(period=period, scales=scales, fee_components=fee_rows)


@pytest.fixture
def taxpayer() -> TaxpayerInput:
    """Services provider in CABA, category A by income."""
    return TaxpayerInput(
        id="c-0001",
        name="Juan Pérez",
        activity="SERVICIOS",
        province_code="901",
        dependents=1,
        period_sales=Decimal("8000000"),
        previous_category="A",
        previous_fee=Decimal("50000"),
    )
