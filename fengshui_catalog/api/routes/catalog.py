"""Catalog Routes: lookup, manual entry, edit/delete, import and export.

Invariants:
    - Fixed paths (/search, /export, /import) are registered before /{category}
    - Mutations always answer with persisted: bool; a failed write is a warning,
      not an error status, because the change still stands in memory
    - PATCH and DELETE on an unknown id succeed with changed: false
    - GET of an unknown id raises ResourceNotFoundError (404)
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import ValidationError

from fengshui_catalog.api.dependencies import get_catalog_store
from fengshui_catalog.core.catalog_snapshot import state_to_snapshot
from fengshui_catalog.core.domain_types import STORAGE_KEY, Category
from fengshui_catalog.core.errors import ResourceNotFoundError
from fengshui_catalog.core.records import record_to_dict
from fengshui_catalog.schemas.catalog import parse_create, parse_patch
from fengshui_catalog.services.catalog_store import CatalogStore, MutationResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


def _mutation_response(result: MutationResult) -> dict:
    return {
        "changed": result.changed,
        "record": record_to_dict(result.record) if result.record else None,
        "persisted": result.persisted,
        "warning": (
            result.write_error.to_notification() if result.write_error else None
        ),
    }


def _validated(parse, category: Category, body: dict[str, Any]) -> dict[str, Any]:
    try:
        return parse(category, body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(), body=body) from e


# ─── Whole catalog ──────────────────────────────────────────────

@router.get("")
async def get_catalog(store: CatalogStore = Depends(get_catalog_store)):
    """All categories with their records."""
    return {
        "data": state_to_snapshot(store.state),
        "counts": store.state.counts(),
    }


@router.get("/search")
async def search_catalog(
    q: str = Query("", max_length=200),
    category: Category | None = Query(None),
    store: CatalogStore = Depends(get_catalog_store),
):
    """Case-insensitive lookup on name and description."""
    hits = store.search(q, category)
    return {
        "query": q,
        "results": [
            {"category": cat.value, "record": record_to_dict(record)}
            for cat, record in hits
        ],
        "count": len(hits),
    }


@router.get("/export")
async def export_catalog(store: CatalogStore = Depends(get_catalog_store)):
    """Download the catalog as a current-schema JSON document."""
    return Response(
        content=store.export_document(),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{STORAGE_KEY}.json"',
        },
    )


@router.post("/import")
async def import_catalog(
    file: UploadFile = File(...),
    store: CatalogStore = Depends(get_catalog_store),
):
    """Replace the catalog with an uploaded .json document (legacy schema allowed)."""
    content = await file.read()
    result = store.import_upload(file.filename, content)
    return {
        "message": result.message,
        "counts": result.counts,
        "persisted": result.persisted,
        "warning": (
            result.write_error.to_notification() if result.write_error else None
        ),
    }


# ─── Per category ───────────────────────────────────────────────

@router.get("/{category}")
async def list_records(
    category: Category, store: CatalogStore = Depends(get_catalog_store),
):
    records = store.records(category)
    return {
        "category": category.value,
        "records": [record_to_dict(r) for r in records],
        "count": len(records),
    }


@router.post("/{category}", status_code=status.HTTP_201_CREATED)
async def create_record(
    category: Category,
    body: dict[str, Any] = Body(...),
    store: CatalogStore = Depends(get_catalog_store),
):
    """Manual entry. The server assigns an id when none is sent."""
    data = _validated(parse_create, category, body)
    return _mutation_response(store.save(category, data))


@router.get("/{category}/{record_id}")
async def get_record(
    category: Category,
    record_id: str,
    store: CatalogStore = Depends(get_catalog_store),
):
    record = store.get(category, record_id)
    if record is None:
        raise ResourceNotFoundError(category.value, record_id)
    return {"category": category.value, "record": record_to_dict(record)}


@router.patch("/{category}/{record_id}")
async def edit_record(
    category: Category,
    record_id: str,
    body: dict[str, Any] = Body(...),
    store: CatalogStore = Depends(get_catalog_store),
):
    """Shallow-merge the sent fields into the record."""
    patch = _validated(parse_patch, category, body)
    return _mutation_response(store.edit(category, record_id, patch))


@router.delete("/{category}/{record_id}")
async def delete_record(
    category: Category,
    record_id: str,
    store: CatalogStore = Depends(get_catalog_store),
):
    return _mutation_response(store.delete(category, record_id))
