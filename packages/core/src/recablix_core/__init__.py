"""Recablix Core - Monotributo recategorization calculations."""

__version__ = "0.1.0"

from .batch import RecategorizationBatch, BatchResult
from .category import resolve_category
from .fee_components import compute_fee_components
from .models import Category, ClientActivity, TaxpayerInput, RecategorizationResult
from .period_data import PeriodTables, RecaPeriod
from .recategorization import recategorize, compare_categories

__all__ = [
    "RecategorizationBatch",
    "BatchResult",
    "resolve_category",
    "compute_fee_components",
    "Category",
    "ClientActivity",
    "TaxpayerInput",
    "RecategorizationResult",
    "PeriodTables",
    "RecaPeriod",
    "recategorize",
    "compare_categories",
]
