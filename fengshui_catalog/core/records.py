"""Catalog Records: one typed record variant per category.

Invariants:
    - Every record has an `id` (str) unique within its category by convention only
    - Persisted field names are camelCase (elementType, yinYang); attributes are snake_case
    - Fields the variant does not know are kept in `extra` and written back unchanged
    - Known fields hold the stored JSON value as is; only `id` is normalized to a
      string (its JSON text, so 7 becomes "7")
    - merge_record() never changes the variant of a record

Design Decisions:
    - Dataclasses, not ORM or pydantic: records are pure values, the API boundary
      validates input separately (schemas/catalog.py)
    - Each variant lists its (attribute, wire name) pairs in FIELDS; conversion and
      merging walk that list instead of doing a generic dict merge
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar
from uuid import uuid4

from fengshui_catalog.core.domain_types import (
    ELEMENT_TYPE_TAG, Auspiciousness, Category, RecordId, YinYang,
)


def new_record_id() -> RecordId:
    """Fresh random id. Collisions are never checked."""
    return RecordId(uuid4().hex)


@dataclass
class CatalogRecord:
    """Fields shared by every category."""

    id: str
    name: Any = ""
    description: Any = ""
    extra: dict[str, Any] = field(default_factory=dict)

    category: ClassVar[Category]
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("id", "id"), ("name", "name"), ("description", "description"),
    )


@dataclass
class StarRecord(CatalogRecord):
    """Cửu Tinh: one of the Nine Stars."""

    element_type: Any = ELEMENT_TYPE_TAG
    element: Any = ""
    yin_yang: Any = YinYang.YANG.value

    category: ClassVar[Category] = Category.STARS
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = CatalogRecord.FIELDS + (
        ("element_type", "elementType"),
        ("element", "element"),
        ("yin_yang", "yinYang"),
    )


@dataclass
class GateRecord(CatalogRecord):
    """Bát Môn: one of the Eight Gates."""

    element_type: Any = ELEMENT_TYPE_TAG
    element: Any = ""
    direction: Any = ""

    category: ClassVar[Category] = Category.GATES
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = CatalogRecord.FIELDS + (
        ("element_type", "elementType"),
        ("element", "element"),
        ("direction", "direction"),
    )


@dataclass
class SpiritRecord(CatalogRecord):
    """Bát Thần: one of the Eight Spirits."""

    element_type: Any = ELEMENT_TYPE_TAG
    element: Any = ""
    nature: Any = ""

    category: ClassVar[Category] = Category.SPIRITS
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = CatalogRecord.FIELDS + (
        ("element_type", "elementType"),
        ("element", "element"),
        ("nature", "nature"),
    )


@dataclass
class FormationRecord(CatalogRecord):
    """Cách Cục: a formation."""

    auspiciousness: Any = Auspiciousness.CONDITIONAL.value

    category: ClassVar[Category] = Category.FORMATIONS
    FIELDS: ClassVar[tuple[tuple[str, str], ...]] = CatalogRecord.FIELDS + (
        ("auspiciousness", "auspiciousness"),
    )


Record = StarRecord | GateRecord | SpiritRecord | FormationRecord

RECORD_TYPES: dict[Category, type[CatalogRecord]] = {
    Category.STARS: StarRecord,
    Category.GATES: GateRecord,
    Category.SPIRITS: SpiritRecord,
    Category.FORMATIONS: FormationRecord,
}


def _id_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _known_keys(record_type: type[CatalogRecord]) -> set[str]:
    keys = set()
    for attr, wire in record_type.FIELDS:
        keys.add(attr)
        keys.add(wire)
    return keys


def record_from_dict(category: Category, data: Mapping[str, Any]) -> Record:
    """Build the category's record variant from a persisted/wire dict.

    Missing or null fields take the variant's defaults; a missing id gets a
    fresh one. Unknown keys land in `extra`.
    """
    record_type = RECORD_TYPES[category]
    values: dict[str, Any] = {}
    for attr, wire in record_type.FIELDS:
        raw = data.get(wire, data.get(attr))
        if raw is not None:
            values[attr] = _id_text(raw) if attr == "id" else raw
    values.setdefault("id", new_record_id())
    known = _known_keys(record_type)
    values["extra"] = {k: v for k, v in data.items() if k not in known}
    return record_type(**values)


def record_to_dict(record: CatalogRecord) -> dict[str, Any]:
    """Serialize a record with wire names; `extra` keys follow the known fields."""
    data: dict[str, Any] = {
        wire: getattr(record, attr) for attr, wire in record.FIELDS
    }
    for key, value in record.extra.items():
        data.setdefault(key, value)
    return data


def merge_record(record: Record, patch: Mapping[str, Any]) -> Record:
    """Shallow merge of patch fields over a record, field by field.

    Patch keys may use either the wire or the attribute name. Unknown keys
    are merged into `extra`. A null value leaves the field unchanged.
    """
    changes: dict[str, Any] = {}
    for attr, wire in record.FIELDS:
        if wire in patch:
            raw = patch[wire]
        elif attr in patch:
            raw = patch[attr]
        else:
            continue
        if raw is not None:
            changes[attr] = _id_text(raw) if attr == "id" else raw

    known = _known_keys(type(record))
    extra_patch = {k: v for k, v in patch.items() if k not in known}
    if extra_patch:
        changes["extra"] = {**record.extra, **extra_patch}
    return replace(record, **changes)
