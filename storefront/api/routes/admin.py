# storefront/api/routes/admin.py
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from storefront.api.deps import get_catalog, get_store, templates
from storefront.api.schemas.product import ProductDraft
from storefront.database import FileBackedStore, StorageError
from storefront.services.catalog import newest_first, text_filter
from storefront.services.editing import (
    EMPTY_FORM,
    ProductNotFound,
    create_product,
    delete_product,
    form_from_product,
    update_product,
)
from storefront.services.live import CatalogCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], include_in_schema=False)

CHECKBOXES = ("returnAvailable", "freeDelivery", "topBrand")


def _redirect(**params) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    return RedirectResponse(url="/admin" + (f"?{query}" if query else ""), status_code=303)


def _render(request: Request, catalog: CatalogCache, *, search: str = "", form: Optional[Dict[str, Any]] = None,
            editing: Optional[str] = None, errors: Optional[Dict[str, str]] = None,
            notice: str = "", error: str = "", status_code: int = 200):
    products = newest_first(text_filter(catalog.products, search))
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "products": products,
            "search": search,
            "form": form,
            "editing": editing,
            "errors": errors or {},
            "notice": notice,
            "error": error,
        },
        status_code=status_code,
    )


def _errors_by_field(exc: ValidationError) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "form"
        out.setdefault(field, err["msg"])
    return out


async def _read_form(request: Request) -> Dict[str, Any]:
    form = await request.form()
    data: Dict[str, Any] = {k: v for k, v in form.items() if k not in CHECKBOXES}
    # unchecked boxes are simply absent from the post
    for name in CHECKBOXES:
        data[name] = name in form
    return data


@router.get("", response_class=HTMLResponse)
def admin_panel(
    request: Request,
    search: str = "",
    edit: Optional[str] = None,
    new: bool = False,
    notice: str = "",
    error: str = "",
    catalog: CatalogCache = Depends(get_catalog),
):
    """Admin panel: searchable product cards plus the add/edit form."""
    form = None
    editing = None
    if edit:
        product = catalog.get(edit)
        if product is None:
            error = error or "Product not found."
        else:
            form = form_from_product(product)
            editing = edit
    elif new:
        form = dict(EMPTY_FORM)
    return _render(request, catalog, search=search, form=form, editing=editing, notice=notice, error=error)


@router.post("/products", response_class=HTMLResponse)
async def admin_create(request: Request, store: FileBackedStore = Depends(get_store),
                       catalog: CatalogCache = Depends(get_catalog)):
    data = await _read_form(request)
    try:
        draft = ProductDraft.model_validate(data)
    except ValidationError as exc:
        return _render(request, catalog, form=data, errors=_errors_by_field(exc), status_code=422)
    try:
        await run_in_threadpool(create_product, store, draft)
    except StorageError:
        logger.warning("Admin create failed, form kept for resubmission")
        return _render(request, catalog, form=data, error="Error saving product. Please try again.",
                       status_code=503)
    return _redirect(notice="Product added successfully!")


@router.post("/products/{product_id}", response_class=HTMLResponse)
async def admin_update(product_id: str, request: Request, store: FileBackedStore = Depends(get_store),
                       catalog: CatalogCache = Depends(get_catalog)):
    data = await _read_form(request)
    try:
        draft = ProductDraft.model_validate(data)
    except ValidationError as exc:
        return _render(request, catalog, form=data, editing=product_id, errors=_errors_by_field(exc),
                       status_code=422)
    try:
        await run_in_threadpool(update_product, store, product_id, draft)
    except ProductNotFound:
        return _redirect(error="Product not found.")
    except StorageError:
        logger.warning("Admin update of %s failed, form kept for resubmission", product_id)
        return _render(request, catalog, form=data, editing=product_id,
                       error="Error saving product. Please try again.", status_code=503)
    return _redirect(notice="Product updated successfully!")


@router.post("/products/{product_id}/delete")
def admin_delete(product_id: str, store: FileBackedStore = Depends(get_store)):
    try:
        delete_product(store, product_id)
    except ProductNotFound:
        return _redirect(error="Product not found.")
    except StorageError:
        return _redirect(error="Error deleting product. Please try again.")
    return _redirect(notice="Product deleted successfully!")
