"""FastAPI Dependencies: access to the app-owned CatalogStore.

Invariants:
    - The store lives on app.state, never in a module-level global
    - Requests arriving before startup finished get 503
"""

from fastapi import HTTPException, Request, status

from fengshui_catalog.services.catalog_store import CatalogStore


def get_catalog_store(request: Request) -> CatalogStore:
    store = getattr(request.app.state, "catalog_store", None)
    if store is None:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, detail="Catalog not loaded yet",
        )
    return store
