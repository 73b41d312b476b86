"""
Data Models Package

This package contains all Pydantic models used in Jarbook:
stored records, the static category catalog, derived view models
and audit events.
"""

from jarbook.models.records import (
    COLOR_CLASSES,
    DEFAULT_JARS,
    BankAccount,
    Category,
    CategoryType,
    ColorTag,
    Debt,
    DebtDraft,
    Expense,
    ExpenseDraft,
    Income,
    IncomeDraft,
    IncomeType,
    Jar,
    JarDraft,
    JarPreset,
    SubCategory,
    ValidationIssue,
    ValidationResult,
    color_class,
    new_id,
)
from jarbook.models.catalog import (
    CATEGORIES,
    categories_of_type,
    find_category,
    find_sub_category,
)
from jarbook.models.views import (
    AllocationSummary,
    Bubble,
    CategoryShare,
    DashboardSummary,
    DebtPortfolio,
    GridCell,
    JarAllocation,
    TimeRange,
)
from jarbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "COLOR_CLASSES",
    "DEFAULT_JARS",
    "BankAccount",
    "Category",
    "CategoryType",
    "ColorTag",
    "Debt",
    "DebtDraft",
    "Expense",
    "ExpenseDraft",
    "Income",
    "IncomeDraft",
    "IncomeType",
    "Jar",
    "JarDraft",
    "JarPreset",
    "SubCategory",
    "ValidationIssue",
    "ValidationResult",
    "color_class",
    "new_id",
    # Catalog
    "CATEGORIES",
    "categories_of_type",
    "find_category",
    "find_sub_category",
    # Views
    "AllocationSummary",
    "Bubble",
    "CategoryShare",
    "DashboardSummary",
    "DebtPortfolio",
    "GridCell",
    "JarAllocation",
    "TimeRange",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
