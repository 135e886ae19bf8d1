"""Legacy Import: normalize an external catalog document into the current schema.

Invariants:
    - Pure function of the input text: no IO, never touches an existing CatalogState
    - All-or-nothing: any parse or shape error raises ImportParseError, nothing is returned
    - Stars, Gates, Spirits get elementType = "NgũHành" stamped on every record
    - Star yinYang: exactly "Yin" → Âm, anything else → Dương
    - Formation auspiciousness: "Auspicious" → Cát, "Inauspicious" → Hung,
      anything else → Tùy thuộc
    - Missing categories become empty lists; categories are converted independently

Design Decisions:
    - Remaps are equality tests against one sentinel with a single default branch,
      not lookup tables; already-current values fall through to the default too
"""

import json
import logging
from typing import Any

from fengshui_catalog.core.catalog_snapshot import category_rows
from fengshui_catalog.core.catalog_state import CatalogState
from fengshui_catalog.core.domain_types import (
    ELEMENT_TAGGED_CATEGORIES, ELEMENT_TYPE_TAG, LEGACY_AUSPICIOUS,
    LEGACY_INAUSPICIOUS, LEGACY_YIN, Auspiciousness, Category, YinYang,
)
from fengshui_catalog.core.errors import ImportParseError
from fengshui_catalog.core.records import record_from_dict

logger = logging.getLogger(__name__)


def convert_yin_yang(value: Any) -> str:
    """Legacy star polarity → current token."""
    return YinYang.YIN.value if value == LEGACY_YIN else YinYang.YANG.value


def convert_auspiciousness(value: Any) -> str:
    """Legacy formation auspiciousness → current token."""
    if value == LEGACY_AUSPICIOUS:
        return Auspiciousness.FAVORABLE.value
    if value == LEGACY_INAUSPICIOUS:
        return Auspiciousness.UNFAVORABLE.value
    return Auspiciousness.CONDITIONAL.value


def convert_row(category: Category, row: dict[str, Any]) -> dict[str, Any]:
    """Apply the per-category field remaps to one raw record dict."""
    converted = dict(row)
    if category in ELEMENT_TAGGED_CATEGORIES:
        converted["elementType"] = ELEMENT_TYPE_TAG
    if category is Category.STARS:
        converted["yinYang"] = convert_yin_yang(row.get("yinYang"))
    if category is Category.FORMATIONS:
        converted["auspiciousness"] = convert_auspiciousness(
            row.get("auspiciousness"),
        )
    return converted


def convert_document(document: Any) -> CatalogState:
    """Build a current-schema CatalogState from a decoded import document."""
    if not isinstance(document, dict):
        raise ImportParseError(
            f"catalog document must be an object, got {type(document).__name__}",
        )
    state = CatalogState()
    for category in Category:
        try:
            rows = category_rows(document, category)
        except ValueError as e:
            raise ImportParseError(str(e)) from e
        state.records[category] = [
            record_from_dict(category, convert_row(category, row))
            for row in rows
        ]
    return state


def parse_import(text: str) -> CatalogState:
    """Parse import text and convert it. Raises ImportParseError on any failure."""
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ImportParseError(str(e)) from e
    state = convert_document(document)
    logger.debug("Import document converted", extra={"counts": state.counts()})
    return state
