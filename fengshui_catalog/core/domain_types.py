"""Domain Types: closed vocabularies for the catalog.

Invariants:
    - Category has exactly 4 members; their values are the persisted keys
    - YinYang and Auspiciousness values are the current (Vietnamese) schema tokens
    - Legacy (English) tokens live here too, but only the importer reads them

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - RecordId is a NewType over str: ids are opaque tokens, never parsed
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Category(str, Enum):
    """The four catalog categories. Values are the persisted document keys."""
    STARS = "CửuTinh"
    GATES = "BátMôn"
    SPIRITS = "BátThần"
    FORMATIONS = "CáchCục"


class YinYang(str, Enum):
    """Star polarity, current schema."""
    YIN = "Âm"
    YANG = "Dương"


class Auspiciousness(str, Enum):
    """Formation auspiciousness, current schema."""
    FAVORABLE = "Cát"
    UNFAVORABLE = "Hung"
    CONDITIONAL = "Tùy thuộc"


class Element(str, Enum):
    """The five phases (Ngũ Hành). Suggested values for `element`, not enforced."""
    METAL = "Kim"
    WOOD = "Mộc"
    WATER = "Thủy"
    FIRE = "Hỏa"
    EARTH = "Thổ"


# ─── Constants ───────────────────────────────────────────────────

ELEMENT_TYPE_TAG = "NgũHành"

# Categories whose records carry the elementType tag
ELEMENT_TAGGED_CATEGORIES: tuple[Category, ...] = (
    Category.STARS, Category.GATES, Category.SPIRITS,
)

# Legacy (English) schema sentinels
LEGACY_YIN = "Yin"
LEGACY_AUSPICIOUS = "Auspicious"
LEGACY_INAUSPICIOUS = "Inauspicious"

# File name the original browser build used as its localStorage key
STORAGE_KEY = "fengShuiData"
