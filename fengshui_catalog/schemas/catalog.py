"""Catalog Schemas: manual entry and edit bodies, one pair per category.

Invariants:
    - Create bodies fill every current-schema field (defaults for the omitted ones)
    - Patch bodies carry only what the client sent (dump with exclude_unset)
    - yinYang and auspiciousness only accept current-schema tokens here; legacy
      tokens go through the importer instead
    - Unknown fields are allowed and kept (they end up in CatalogRecord.extra)
    - Wire names are camelCase; snake_case attribute names are accepted too
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fengshui_catalog.core.domain_types import (
    ELEMENT_TYPE_TAG, Auspiciousness, Category, YinYang,
)


class _RecordBody(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(None, min_length=1, max_length=200)
    name: str = Field("", max_length=500)
    description: str = Field("", max_length=20_000)

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class StarCreate(_RecordBody):
    element_type: str = Field(ELEMENT_TYPE_TAG, alias="elementType")
    element: str = ""
    yin_yang: YinYang = Field(YinYang.YANG, alias="yinYang")


class GateCreate(_RecordBody):
    element_type: str = Field(ELEMENT_TYPE_TAG, alias="elementType")
    element: str = ""
    direction: str = ""


class SpiritCreate(_RecordBody):
    element_type: str = Field(ELEMENT_TYPE_TAG, alias="elementType")
    element: str = ""
    nature: str = ""


class FormationCreate(_RecordBody):
    auspiciousness: Auspiciousness = Auspiciousness.CONDITIONAL


class _RecordPatch(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(None, min_length=1, max_length=200)
    name: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=20_000)


class StarPatch(_RecordPatch):
    element_type: str | None = Field(None, alias="elementType")
    element: str | None = None
    yin_yang: YinYang | None = Field(None, alias="yinYang")


class GatePatch(_RecordPatch):
    element_type: str | None = Field(None, alias="elementType")
    element: str | None = None
    direction: str | None = None


class SpiritPatch(_RecordPatch):
    element_type: str | None = Field(None, alias="elementType")
    element: str | None = None
    nature: str | None = None


class FormationPatch(_RecordPatch):
    auspiciousness: Auspiciousness | None = None


CREATE_BODIES: dict[Category, type[_RecordBody]] = {
    Category.STARS: StarCreate,
    Category.GATES: GateCreate,
    Category.SPIRITS: SpiritCreate,
    Category.FORMATIONS: FormationCreate,
}

PATCH_BODIES: dict[Category, type[_RecordPatch]] = {
    Category.STARS: StarPatch,
    Category.GATES: GatePatch,
    Category.SPIRITS: SpiritPatch,
    Category.FORMATIONS: FormationPatch,
}


def parse_create(category: Category, body: dict[str, Any]) -> dict[str, Any]:
    """Validate a manual entry; returns a wire-named dict (id omitted if not sent)."""
    model = CREATE_BODIES[category].model_validate(body)
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


def parse_patch(category: Category, body: dict[str, Any]) -> dict[str, Any]:
    """Validate an edit; returns only the fields the client sent, wire-named."""
    model = PATCH_BODIES[category].model_validate(body)
    return model.model_dump(
        by_alias=True, mode="json", exclude_unset=True, exclude_none=True,
    )
