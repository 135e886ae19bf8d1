"""Catalog State: the in-memory mapping from category to ordered records.

Invariants:
    - Every Category key is always present (possibly with an empty list)
    - Insertion order is preserved; create() appends at the end
    - update() and delete() on an unknown id are silent no-ops
    - Ids are never checked for collisions

Design Decisions:
    - Pure dataclass, no IO: persistence is CatalogStore's job (services/)
    - update()/delete() act on the first matching id only
    - Mutators return a bool/record so callers can log without re-scanning
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from fengshui_catalog.core.domain_types import Category
from fengshui_catalog.core.records import (
    RECORD_TYPES, Record, merge_record, record_from_dict,
)


def _empty_records() -> dict[Category, list[Record]]:
    return {category: [] for category in Category}


@dataclass
class CatalogState:
    """All catalog records, keyed by category. Pure dataclass, no IO."""

    records: dict[Category, list[Record]] = field(default_factory=_empty_records)

    def __post_init__(self) -> None:
        for category in Category:
            self.records.setdefault(category, [])

    # --- Mutations -------------------------------------------------------------

    def create(
        self, category: Category, record: Record | Mapping[str, Any],
    ) -> Record:
        """Append a record to the category. Mappings are converted first."""
        if isinstance(record, Mapping):
            record = record_from_dict(category, record)
        expected = RECORD_TYPES[category]
        if not isinstance(record, expected):
            raise TypeError(
                f"{category.value} expects {expected.__name__}, "
                f"got {type(record).__name__}",
            )
        self.records[category].append(record)
        return record

    def update(
        self, category: Category, record_id: str, patch: Mapping[str, Any],
    ) -> Record | None:
        """Merge patch into the record with this id. None when the id is absent."""
        items = self.records[category]
        for index, item in enumerate(items):
            if item.id == record_id:
                merged = merge_record(item, patch)
                items[index] = merged
                return merged
        return None

    def delete(self, category: Category, record_id: str) -> bool:
        """Remove the first record with this id. False when absent."""
        items = self.records[category]
        for index, item in enumerate(items):
            if item.id == record_id:
                del items[index]
                return True
        return False

    def replace_with(self, other: "CatalogState") -> None:
        """Swap in every category of another state at once."""
        self.records = {category: list(other.records[category]) for category in Category}

    # --- Queries ---------------------------------------------------------------

    def get(self, category: Category, record_id: str) -> Record | None:
        for item in self.records[category]:
            if item.id == record_id:
                return item
        return None

    def items(self, category: Category) -> list[Record]:
        """Copy of the category's sequence, in insertion order."""
        return list(self.records[category])

    def search(
        self, query: str, category: Category | None = None,
    ) -> list[tuple[Category, Record]]:
        """Case-insensitive substring match on name and description.

        Non-text values are skipped. An empty query matches everything in scope.
        """
        needle = query.strip().casefold()
        scope = [category] if category else list(Category)
        hits = []
        for cat in scope:
            for item in self.records[cat]:
                haystack = "\n".join(
                    text for text in (item.name, item.description)
                    if isinstance(text, str)
                ).casefold()
                if needle in haystack:
                    hits.append((cat, item))
        return hits

    def __iter__(self) -> Iterator[tuple[Category, Record]]:
        for category in Category:
            for item in self.records[category]:
                yield category, item

    def __len__(self) -> int:
        return sum(len(items) for items in self.records.values())

    def counts(self) -> dict[str, int]:
        return {category.value: len(self.records[category]) for category in Category}
