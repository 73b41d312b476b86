"""
Visualization Layout

Maps category shares to display geometry for the two dashboard views:
a grid with one enlarged "hero" tile, and a bubble cloud.

Bubble sizes are deliberately NOT proportional to area. The linear map
percentage/100*200 + 50 is clamped to [60, 150] so a 1% category is
still tappable and a 90% category does not swallow the screen.
"""

from decimal import Decimal

from jarbook.engine.money import HUNDRED, clamp
from jarbook.models.views import Bubble, CategoryShare, GridCell

BUBBLE_MIN = Decimal("60")
BUBBLE_MAX = Decimal("150")
BUBBLE_SCALE = Decimal("200")
BUBBLE_OFFSET = Decimal("50")


def bubble_size(percentage: Decimal) -> Decimal:
    """Display diameter for a share; monotonic, bounded to [60, 150]."""
    raw = Decimal(percentage) / HUNDRED * BUBBLE_SCALE + BUBBLE_OFFSET
    return clamp(raw, BUBBLE_MIN, BUBBLE_MAX)


def grid_layout(ranked: list[CategoryShare]) -> list[GridCell]:
    """Grid tiles in ranking order; only the first is the hero."""
    return [GridCell(share=share, hero=(idx == 0)) for idx, share in enumerate(ranked)]


def bubble_layout(ranked: list[CategoryShare]) -> list[Bubble]:
    return [Bubble(share=share, size=bubble_size(share.percentage)) for share in ranked]
