"""
Route definitions for the backoffice (admin) API.

Endpoints under /backoffice:
- POST   /login                 : check the admin password, set the session cookie
- POST   /logout                : clear the session cookie
- GET    /session               : whether the current cookie is a valid session
- GET    /catalog               : full stored document (auth)
- POST   /categories            : create a category (auth)
- DELETE /categories/{id}       : delete a category and its products (auth)
- POST   /products              : create a product (auth)
- DELETE /products/{id}         : delete a product (auth)

The session cookie is scoped to /backoffice, so every route that needs
it must live under this prefix.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status

from ..catalog import mutate
from ..catalog.router import get_store
from ..catalog.schemas import CatalogData, Category, CategoryInput, Product, ProductInput
from ..catalog.store import CatalogStore
from ..errors import ConflictError, ValidationError
from .auth import COOKIE_NAME, BackofficeAuth


logger = logging.getLogger(__name__)


def get_auth(request: Request) -> BackofficeAuth:
    return request.app.state.backoffice_auth


def require_session(request: Request, auth: BackofficeAuth = Depends(get_auth)) -> None:
    if not auth.is_authenticated(request.cookies.get(COOKIE_NAME)):
        raise HTTPException(status_code=401, detail="Authentication required.")


router = APIRouter(prefix="/backoffice", tags=["backoffice"])


@router.post("/login")
def login(
    response: Response,
    password: str = Body(..., embed=True),
    auth: BackofficeAuth = Depends(get_auth),
):
    if not auth.verify_password(password):
        logger.warning("Rejected backoffice login attempt")
        raise HTTPException(status_code=401, detail="Invalid password.")
    auth.apply_cookie(response, auth.issue_session())
    logger.info("Backoffice session issued")
    return {"status": "ok"}


@router.post("/logout")
def logout(response: Response, auth: BackofficeAuth = Depends(get_auth)):
    auth.apply_cookie(response, auth.clear_session())
    return {"status": "ok"}


@router.get("/session")
def session_status(request: Request, auth: BackofficeAuth = Depends(get_auth)):
    return {"authenticated": auth.is_authenticated(request.cookies.get(COOKIE_NAME))}


@router.get("/catalog", response_model=CatalogData, dependencies=[Depends(require_session)])
def read_catalog(store: CatalogStore = Depends(get_store)) -> CatalogData:
    return store.read_catalog()


@router.post(
    "/categories",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_session)],
)
def create_category(req: CategoryInput, store: CatalogStore = Depends(get_store)) -> Category:
    try:
        return mutate.create_category(store, req.name)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/categories/{category_id}", dependencies=[Depends(require_session)])
def delete_category(category_id: str, store: CatalogStore = Depends(get_store)):
    deleted = mutate.delete_category(store, category_id)
    return {"status": "ok", "deleted": deleted}


@router.post(
    "/products",
    response_model=Product,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_session)],
)
def create_product(req: ProductInput, store: CatalogStore = Depends(get_store)) -> Product:
    try:
        return mutate.create_product(store, req)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/products/{product_id}", dependencies=[Depends(require_session)])
def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
    deleted = mutate.delete_product(store, product_id)
    return {"status": "ok", "deleted": deleted}
