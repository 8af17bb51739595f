"""Data models for recablix-core.

This package provides:
- Period tables: scales and fee component rows (tables.py)
- The taxpayer snapshot evaluated per period (taxpayer.py)
- Category, fee and recategorization results (results.py)
- Audit trail for batch runs (audit.py)
"""

from recablix_core.models.tables import (
    # Enumerations
    CATEGORY_ORDER,
    Category,
    ClientActivity,
    FeeComponentType,
    # Component codes
    GOODS_TAX_CODE,
    SERVICES_TAX_CODE,
    PENSION_CODE,
    RETIREE_PENSION_CODE,
    HEALTH_CODE,
    MUNICIPAL_SUFFIX,
    # Rows
    SCALE_FIELDS,
    Scale,
    FeeComponentRow,
)

from recablix_core.models.taxpayer import TaxpayerInput

from recablix_core.models.results import (
    CategoryChange,
    ParameterDetail,
    CategoryDetails,
    CategoryResult,
    FeeComponent,
    FeeSubtotals,
    FeeComponentsResult,
    ClientRef,
    Comparison,
    RecategorizationResult,
)

from recablix_core.models.audit import (
    AuditSeverity,
    AuditEntry,
    AuditWarning,
    AuditError,
    AuditTrail,
)

__all__ = [
    # Enumerations
    "CATEGORY_ORDER",
    "Category",
    "ClientActivity",
    "FeeComponentType",
    "CategoryChange",
    # Component codes
    "GOODS_TAX_CODE",
    "SERVICES_TAX_CODE",
    "PENSION_CODE",
    "RETIREE_PENSION_CODE",
    "HEALTH_CODE",
    "MUNICIPAL_SUFFIX",
    # Period tables
    "SCALE_FIELDS",
    "Scale",
    "FeeComponentRow",
    # Taxpayer
    "TaxpayerInput",
    # Results
    "ParameterDetail",
    "CategoryDetails",
    "CategoryResult",
    "FeeComponent",
    "FeeSubtotals",
    "FeeComponentsResult",
    "ClientRef",
    "Comparison",
    "RecategorizationResult",
    # Audit trail
    "AuditSeverity",
    "AuditEntry",
    "AuditWarning",
    "AuditError",
    "AuditTrail",
]
