"""
Static category catalog.

Expenses reference these by id. The catalog is immutable at runtime
and only used for lookups and for building the category picker.
"""

from typing import Optional

from jarbook.models.records import Category, CategoryType, SubCategory


def _cat(id: str, name: str, type: CategoryType, icon: str, *subs: tuple[str, str, str]) -> Category:
    return Category(
        id=id,
        name=name,
        type=type,
        icon=icon,
        sub_categories=tuple(SubCategory(id=s[0], name=s[1], icon=s[2]) for s in subs),
    )


CATEGORIES: tuple[Category, ...] = (
    _cat(
        "food", "อาหาร", CategoryType.NEEDS, "🍽️",
        ("daily-food", "ค่าอาหารประจำวัน", "🍜"),
        ("groceries", "ค่ากับข้าว", "🥬"),
    ),
    _cat(
        "housing", "ที่อยู่อาศัย", CategoryType.NEEDS, "🏠",
        ("rent", "ค่าเช่าบ้าน/คอนโด", "🏢"),
        ("mortgage", "ค่าผ่อนบ้าน", "🏡"),
        ("common-fee", "ค่าส่วนกลาง", "🏗️"),
    ),
    _cat(
        "utilities", "สาธารณูปโภค", CategoryType.NEEDS, "💡",
        ("water", "ค่าน้ำ", "💧"),
        ("electricity", "ค่าไฟ", "⚡"),
        ("internet", "ค่าอินเทอร์เน็ต", "📶"),
        ("phone", "ค่าโทรศัพท์", "📱"),
    ),
    _cat(
        "transport", "การเดินทาง", CategoryType.NEEDS, "🚗",
        ("fuel", "ค่าน้ำมัน", "⛽"),
    ),
    _cat(
        "health", "สุขภาพและส่วนตัว", CategoryType.NEEDS, "💊",
        ("personal-items", "ของใช้ส่วนตัว", "🧴"),
        ("medical", "ค่ารักษาพยาบาล/ยา", "🏥"),
    ),
    _cat(
        "debt-payment", "หนี้สิน", CategoryType.NEEDS, "💳",
        ("car-loan", "ค่าผ่อนรถ", "🚙"),
        ("credit-card", "บัตรเครดิต", "💳"),
        ("home-loan", "ผ่อนบ้าน", "🏠"),
    ),
    _cat(
        "pets", "สัตว์เลี้ยง", CategoryType.NEEDS, "🐾",
        ("cat-litter", "ทรายแมว", "🐱"),
        ("dog-food", "อาหารหมา", "🐕"),
        ("cat-food", "อาหารแมว", "🐈"),
        ("dog-vet", "ค่ารักษาหมา", "🩺"),
        ("cat-vet", "ค่ารักษาแมว", "💉"),
        ("pet-toys", "ของเล่น/ขนม", "🧸"),
    ),
    _cat(
        "entertainment", "บันเทิง", CategoryType.LIFESTYLE, "🎮",
        ("games", "เกม", "🕹️"),
        ("movies", "ดูหนัง", "🎬"),
        ("streaming", "Subscriptions", "📺"),
    ),
    _cat(
        "subscriptions", "Subscriptions", CategoryType.LIFESTYLE, "📺",
        ("netflix", "Netflix", "🎬"),
        ("youtube", "Youtube Premium", "▶️"),
        ("disney", "Disney+", "🏰"),
        ("bilibili", "Bilibili", "📺"),
        ("chatgpt", "ChatGPT", "🤖"),
        ("gemini", "Gemini", "✨"),
        ("hbomax", "HBO Max", "🎥"),
        ("icloud", "iCloud", "☁️"),
        ("squareweb", "Squareweb", "🌐"),
    ),
    _cat(
        "shopping", "ชอปปิง", CategoryType.LIFESTYLE, "🛍️",
        ("clothes", "ชอปปิงเสื้อผ้า", "👗"),
        ("travel", "ท่องเที่ยว", "✈️"),
        ("misc", "เบ็ดเตล็ด", "📦"),
    ),
    _cat(
        "self-development", "พัฒนาตัวเอง", CategoryType.LIFESTYLE, "📚",
        ("books", "ค่าหนังสือ", "📖"),
        ("courses", "คอร์สเรียน", "🎓"),
    ),
    _cat("emergency-fund", "เงินออมฉุกเฉิน", CategoryType.SAVINGS, "🏦"),
    _cat(
        "investment", "เงินลงทุน", CategoryType.SAVINGS, "📈",
        ("stocks", "หุ้น", "📊"),
        ("funds", "กองทุน", "💹"),
    ),
)

_BY_ID: dict[str, Category] = {c.id: c for c in CATEGORIES}


def find_category(category_id: str) -> Optional[Category]:
    """Look up a category by id; None for unknown ids."""
    return _BY_ID.get(category_id)


def find_sub_category(category_id: str, sub_category_id: Optional[str]) -> Optional[SubCategory]:
    category = find_category(category_id)
    if category is None or not sub_category_id:
        return None
    for sub in category.sub_categories:
        if sub.id == sub_category_id:
            return sub
    return None


def categories_of_type(category_type: CategoryType) -> list[Category]:
    """Categories of one type, in catalog order (the picker's order)."""
    return [c for c in CATEGORIES if c.type == category_type]
