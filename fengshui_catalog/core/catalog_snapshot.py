"""Catalog Snapshot: serialization / deserialization for CatalogState.

Invariants:
    - state_to_snapshot produces a JSON-safe dict with exactly the 4 category keys
    - state_from_snapshot accepts any subset of keys; missing or null → empty list
    - Shape problems raise ValueError naming the offending key; callers map it
      to DecodeError (persisted state) or ImportParseError (import)
    - Roundtrip (to_snapshot -> from_snapshot) yields an equal CatalogState
"""

import json
from collections.abc import Mapping
from typing import Any

from fengshui_catalog.core.catalog_state import CatalogState
from fengshui_catalog.core.domain_types import Category
from fengshui_catalog.core.records import record_from_dict, record_to_dict


def state_to_snapshot(state: CatalogState) -> dict[str, list[dict[str, Any]]]:
    """Serialize CatalogState to a JSON-safe dict. Pure, no IO."""
    return {
        category.value: [record_to_dict(r) for r in state.records[category]]
        for category in Category
    }


def category_rows(document: Mapping[str, Any], category: Category) -> list[dict]:
    """Raw record dicts stored under a category key, validated for shape."""
    rows = document.get(category.value)
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise ValueError(
            f"'{category.value}' must be a list, got {type(rows).__name__}",
        )
    for position, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(
                f"'{category.value}'[{position}] must be an object, "
                f"got {type(row).__name__}",
            )
    return rows


def state_from_snapshot(document: Any) -> CatalogState:
    """Reconstruct CatalogState from a snapshot dict. Pure, no IO."""
    if not isinstance(document, dict):
        raise ValueError(
            f"catalog document must be an object, got {type(document).__name__}",
        )
    state = CatalogState()
    for category in Category:
        state.records[category] = [
            record_from_dict(category, row)
            for row in category_rows(document, category)
        ]
    return state


def dumps_snapshot(state: CatalogState, indent: int | None = None) -> str:
    """JSON text of the whole catalog, non-ASCII kept as-is."""
    return json.dumps(state_to_snapshot(state), ensure_ascii=False, indent=indent)
