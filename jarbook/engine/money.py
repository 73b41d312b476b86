"""
Money and calendar helpers shared by the engine and the dashboard.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")

THAI_MONTHS = (
    "มกราคม", "กุมภาพันธ์", "มีนาคม", "เมษายน",
    "พฤษภาคม", "มิถุนายน", "กรกฎาคม", "สิงหาคม",
    "กันยายน", "ตุลาคม", "พฤศจิกายน", "ธันวาคม",
)

# Thai Buddhist era is 543 years ahead of the Gregorian calendar
BUDDHIST_ERA_OFFSET = 543


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    """Snap value into the closed interval [low, high]."""
    return max(low, min(high, value))


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is not positive."""
    if whole <= 0:
        return ZERO
    return part / whole * HUNDRED


def format_currency(amount: Decimal, decimals: int = 2, symbol: str = "฿") -> str:
    """
    Render an amount with thousands separators and fixed decimals.

    >>> format_currency(Decimal("1234.5"))
    '฿1,234.50'
    >>> format_currency(Decimal("1234.5"), decimals=0)
    '฿1,235'
    """
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.{decimals}f}"


def in_month(moment: datetime, month: int, year: int) -> bool:
    """Whether moment falls in the calendar month (1-12) of year."""
    return moment.month == month and moment.year == year


def in_year(moment: datetime, year: int) -> bool:
    return moment.year == year


def previous_month(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def next_month(month: int, year: int) -> tuple[int, int]:
    if month == 12:
        return 1, year + 1
    return month + 1, year


def buddhist_year(year: int) -> int:
    return year + BUDDHIST_ERA_OFFSET


def month_label(month: int, year: int) -> str:
    """Header text such as 'มกราคม 2568' for January 2025."""
    return f"{THAI_MONTHS[month - 1]} {buddhist_year(year)}"


def year_label(year: int) -> str:
    return f"ปี {buddhist_year(year)}"


def yearly_projection(monthly_amount: Decimal) -> Decimal:
    """Naive annualisation shown under monthly figures."""
    return monthly_amount * 12
