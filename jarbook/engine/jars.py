"""
Jar Allocation Model

Envelope budgeting over regular income. Each jar claims a percentage of
regular income; irregular income is tracked but never split.

Over-allocation (jars summing past 100%) is advisory: the remaining
percentage simply goes negative.
"""

from decimal import Decimal
from typing import Iterable, Optional, TypeVar

from jarbook.engine.money import HUNDRED, ZERO, percent_of
from jarbook.models.records import DEFAULT_JARS, Income, IncomeType, Jar
from jarbook.models.views import AllocationSummary, JarAllocation


def total_allocated_percentage(jars: Iterable[Jar]) -> Decimal:
    return sum((j.percentage for j in jars), ZERO)


def remaining_allocatable(jars: Iterable[Jar]) -> Decimal:
    """100 minus the allocated percentage; negative when over-allocated."""
    return HUNDRED - total_allocated_percentage(jars)


def allocated_amount(jar: Jar, regular_income_total: Decimal) -> Decimal:
    return regular_income_total * jar.percentage / HUNDRED


def jar_progress(jar: Jar) -> Optional[Decimal]:
    """
    Percent of the jar's target reached.

    None when the jar has no target (or a zero one): such jars show no
    progress bar at all.
    """
    if not jar.target_amount:
        return None
    return percent_of(jar.current_amount, jar.target_amount)


def apply_default_preset() -> list[Jar]:
    """
    The six canonical jars with fresh ids and empty balances.

    This replaces whatever jars exist. Callers offer it only while the
    jar list is empty.
    """
    return [
        Jar(
            name=preset.name,
            description=preset.description,
            percentage=preset.percentage,
            emoji=preset.emoji,
            color=preset.color,
            current_amount=ZERO,
        )
        for preset in DEFAULT_JARS
    ]


def _income_total(incomes: Iterable[Income], income_type: IncomeType) -> Decimal:
    return sum((i.amount for i in incomes if i.type == income_type), ZERO)


def regular_income_total(incomes: Iterable[Income]) -> Decimal:
    return _income_total(incomes, IncomeType.REGULAR)


def irregular_income_total(incomes: Iterable[Income]) -> Decimal:
    return _income_total(incomes, IncomeType.IRREGULAR)


def total_income(incomes: Iterable[Income]) -> Decimal:
    return sum((i.amount for i in incomes), ZERO)


def allocation_summary(jars: Iterable[Jar], incomes: Iterable[Income]) -> AllocationSummary:
    """Everything the jar screen shows, derived in one pass."""
    jars = list(jars)
    incomes = list(incomes)
    regular = regular_income_total(incomes)
    irregular = irregular_income_total(incomes)
    allocated = total_allocated_percentage(jars)
    return AllocationSummary(
        regular_income=regular,
        irregular_income=irregular,
        total_income=regular + irregular,
        allocated_percentage=allocated,
        remaining_percentage=HUNDRED - allocated,
        allocations=[
            JarAllocation(
                jar=jar,
                allocated_amount=allocated_amount(jar, regular),
                progress=jar_progress(jar),
            )
            for jar in jars
        ],
    )


# -----------------------------------------------------------------------------
# List helpers for the bulk-replace persistence calls
# -----------------------------------------------------------------------------

T = TypeVar("T", Jar, Income)


def upsert(records: Iterable[T], record: T) -> list[T]:
    """Replace the record with the same id in place, or append it."""
    records = list(records)
    for idx, existing in enumerate(records):
        if existing.id == record.id:
            records[idx] = record
            return records
    records.append(record)
    return records


def remove(records: Iterable[T], record_id: str) -> list[T]:
    return [r for r in records if r.id != record_id]

