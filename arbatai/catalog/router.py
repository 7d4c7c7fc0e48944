"""
Route definitions for the public catalogue API.

Endpoints under /api/catalog:
- GET  /api/catalog : categories by name and products newest first
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from .public import get_public_catalog
from .schemas import PublicCatalog
from .store import CatalogStore


def get_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("", response_model=PublicCatalog)
def read_public_catalog(store: CatalogStore = Depends(get_store)) -> PublicCatalog:
    return get_public_catalog(store)
