"""
Core Data Models for Jarbook

These models define the schemas for every record the tracker stores:
expenses, debts, budget jars, incomes and bank accounts.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the camelCase JSON shape of the local blobs
4. Keep money exact (Decimal, never float)

DESIGN DECISION: Python attributes are snake_case; the camelCase alias
generator gives the serialized names. Both names are accepted on input.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Fresh unique identifier for a record."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ColorTag(str, Enum):
    """Gradient colour a card is painted with."""
    PINK = "pink"
    BLUE = "blue"
    PURPLE = "purple"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    MINT = "mint"
    LAVENDER = "lavender"


# Tailwind gradient classes, keyed by colour tag
COLOR_CLASSES: dict[ColorTag, str] = {
    ColorTag.PINK: "bg-gradient-to-br from-pink-200 to-pink-300",
    ColorTag.BLUE: "bg-gradient-to-br from-blue-200 to-cyan-200",
    ColorTag.PURPLE: "bg-gradient-to-br from-purple-200 to-violet-200",
    ColorTag.GREEN: "bg-gradient-to-br from-green-200 to-emerald-200",
    ColorTag.YELLOW: "bg-gradient-to-br from-yellow-200 to-amber-200",
    ColorTag.ORANGE: "bg-gradient-to-br from-orange-200 to-amber-200",
    ColorTag.MINT: "bg-gradient-to-br from-teal-200 to-cyan-200",
    ColorTag.LAVENDER: "bg-gradient-to-br from-indigo-200 to-purple-200",
}


def color_class(tag: Optional[str]) -> str:
    """Display class for a colour tag; unknown tags fall back to pink."""
    try:
        return COLOR_CLASSES[ColorTag(tag)]
    except ValueError:
        return COLOR_CLASSES[ColorTag.PINK]


class CategoryType(str, Enum):
    """Top-level grouping of spending categories."""
    NEEDS = "needs"
    LIFESTYLE = "lifestyle"
    SAVINGS = "savings"
    DEBT = "debt"


class IncomeType(str, Enum):
    """
    Regular income is split across jars by percentage.
    Irregular income is tracked but never allocated.
    """
    REGULAR = "regular"
    IRREGULAR = "irregular"


class RecordModel(BaseModel):
    """Shared config: strip strings, camelCase aliases, accept both names."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# REFERENCE DATA
# =============================================================================

class SubCategory(RecordModel):
    """A finer-grained bucket inside a category."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str


class Category(RecordModel):
    """
    Static spending category.

    Categories are not user-editable; expenses reference them by id.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: CategoryType
    icon: str
    sub_categories: tuple[SubCategory, ...] = ()


# =============================================================================
# USER RECORDS
# =============================================================================

class Expense(RecordModel):
    """A single logged expense."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0, description="Amount spent")
    category_id: str = Field(..., min_length=1)
    sub_category_id: Optional[str] = None
    date: datetime
    color: ColorTag = ColorTag.PINK
    note: Optional[str] = Field(default=None, max_length=1000)
    custom_icon: Optional[str] = Field(
        default=None,
        description="Image reference (URL or data URI) replacing the category icon"
    )


class Debt(RecordModel):
    """
    A debt being paid off.

    paid_amount is kept inside [0, total_amount] by clamping in the
    payment operation, not by rejecting input here.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    icon: str = "💳"
    total_amount: Decimal = Field(..., ge=0)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0)
    color: ColorTag = ColorTag.PINK
    custom_icon: Optional[str] = None


class Jar(RecordModel):
    """A percentage-based budget envelope over regular income."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    percentage: Decimal = Field(..., ge=0, le=100)
    emoji: str = "💰"
    color: ColorTag = ColorTag.PINK
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    target_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Savings goal; absent or zero means no progress tracking"
    )


class Income(RecordModel):
    """An income entry."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    type: IncomeType = IncomeType.REGULAR
    date: datetime = Field(default_factory=datetime.now)


class BankAccount(RecordModel):
    """
    Groups jars under one bank account.

    Reconciliation against real balances is not implemented.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    jar_ids: list[str] = Field(default_factory=list)
    balance: Decimal = Decimal("0")


# =============================================================================
# SUBMISSION DRAFTS
# =============================================================================

class ExpenseDraft(RecordModel):
    """
    Raw expense form submission.

    All fields are optional because the form may be incomplete; the
    validator decides whether it can become an Expense.
    """

    name: Optional[str] = None
    amount: Optional[Decimal] = None
    category_id: Optional[str] = None
    sub_category_id: Optional[str] = None
    date: Optional[datetime] = None
    color: ColorTag = ColorTag.PINK
    note: Optional[str] = None
    custom_icon: Optional[str] = None

    @classmethod
    def from_record(cls, expense: Expense) -> "ExpenseDraft":
        """Prefill an edit form from a stored expense."""
        return cls(
            name=expense.name,
            amount=expense.amount,
            category_id=expense.category_id,
            sub_category_id=expense.sub_category_id,
            date=expense.date,
            color=expense.color,
            note=expense.note,
            custom_icon=expense.custom_icon,
        )


class DebtDraft(RecordModel):
    """Raw debt form submission."""

    name: Optional[str] = None
    icon: str = "💳"
    total_amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    color: ColorTag = ColorTag.PINK
    custom_icon: Optional[str] = None

    @classmethod
    def from_record(cls, debt: Debt) -> "DebtDraft":
        return cls(
            name=debt.name,
            icon=debt.icon,
            total_amount=debt.total_amount,
            paid_amount=debt.paid_amount,
            color=debt.color,
            custom_icon=debt.custom_icon,
        )


class JarDraft(RecordModel):
    """Raw jar form submission."""

    name: Optional[str] = None
    description: str = ""
    percentage: Optional[Decimal] = None
    emoji: str = "💰"
    color: ColorTag = ColorTag.PINK
    target_amount: Optional[Decimal] = None

    @classmethod
    def from_record(cls, jar: Jar) -> "JarDraft":
        return cls(
            name=jar.name,
            description=jar.description,
            percentage=jar.percentage,
            emoji=jar.emoji,
            color=jar.color,
            target_amount=jar.target_amount,
        )


class IncomeDraft(RecordModel):
    """Raw income form submission."""

    name: Optional[str] = None
    amount: Optional[Decimal] = None
    type: IncomeType = IncomeType.REGULAR


# =============================================================================
# VALIDATION RESULTS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a submission."""

    field: str = Field(..., description="Field with the issue")
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(..., description="Human-readable description of the issue")
    severity: str = Field(..., pattern="^(error|warning|info)$")


class ValidationResult(BaseModel):
    """
    Result of validating one submission.

    Stage 1: Schema validation (required fields, ranges)
    Stage 2: Semantic validation (catalog references, suspicious values)
    """

    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]


# =============================================================================
# DEFAULT JAR PRESET
# =============================================================================

class JarPreset(BaseModel):
    """Template for one of the canonical six jars."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    percentage: Decimal
    emoji: str
    color: ColorTag


DEFAULT_JARS: tuple[JarPreset, ...] = (
    JarPreset(
        name="จำเป็น (Necessities)",
        description="ค่าใช้จ่ายพื้นฐาน เช่น อาหาร เดินทาง ค่าโทรศัพท์",
        percentage=Decimal("55"),
        emoji="🏠",
        color=ColorTag.PINK,
    ),
    JarPreset(
        name="อิสรภาพการเงิน (FIRE)",
        description="ไว้ลงทุน หรือสร้างรายได้ในอนาคต",
        percentage=Decimal("10"),
        emoji="💰",
        color=ColorTag.YELLOW,
    ),
    JarPreset(
        name="การศึกษา (Education)",
        description="คอร์สเรียน หนังสือ หรือสิ่งที่ช่วยพัฒนาตัวเอง",
        percentage=Decimal("10"),
        emoji="📚",
        color=ColorTag.BLUE,
    ),
    JarPreset(
        name="ความบันเทิง (Play)",
        description="ใช้แบบสบายใจ เช่น กินดี ๆ ซื้อของ ดูหนัง เที่ยว",
        percentage=Decimal("10"),
        emoji="🎉",
        color=ColorTag.PURPLE,
    ),
    JarPreset(
        name="เงินสำรองฉุกเฉิน (Savings)",
        description="เก็บไว้ใช้ในเหตุการณ์สำคัญ หรือเป้าหมายระยะยาว",
        percentage=Decimal("10"),
        emoji="🏦",
        color=ColorTag.GREEN,
    ),
    JarPreset(
        name="การบริจาค (Give)",
        description="เพื่อแบ่งปันและช่วยเหลือผู้อื่น",
        percentage=Decimal("5"),
        emoji="❤️",
        color=ColorTag.MINT,
    ),
)
