# storefront/api/routes/pages.py
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from storefront.api.deps import get_catalog, templates
from storefront.config import settings
from storefront.core.view_state import DEFAULT_BANNERS, BannerCarousel, NavbarState, ProductModal
from storefront.services.catalog import (
    cap_each_category,
    filter_by_category,
    group_by_category,
    list_categories,
    newest_first,
    paginate,
    text_filter,
)
from storefront.services.live import CatalogCache
from storefront.utils.images import render_placeholder

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def home(
    request: Request,
    banner: int = 0,
    product: Optional[str] = None,
    catalog: CatalogCache = Depends(get_catalog),
):
    """
    Home page: promo carousel plus the newest few products of every category.
    `?product=<id>` opens the detail overlay for that product.
    """
    carousel = BannerCarousel(DEFAULT_BANNERS, index=banner, interval_seconds=settings.BANNER_INTERVAL_SECONDS)
    modal = ProductModal()
    if product:
        selected = catalog.get(product)
        if selected:
            modal.open(selected)
    sections = cap_each_category(group_by_category(catalog.products), settings.HOME_CATEGORY_LIMIT)
    return templates.TemplateResponse(
        request,
        "home.html",
        {"carousel": carousel, "modal": modal, "sections": sections, "navbar": NavbarState()},
    )


@router.get("/products", response_class=HTMLResponse, include_in_schema=False)
def product_listing(
    request: Request,
    search: str = "",
    category: str = "",
    page: int = Query(1, ge=1),
    catalog: CatalogCache = Depends(get_catalog),
):
    products = catalog.products
    filtered = filter_by_category(text_filter(products, search), category)
    ordered = newest_first(filtered)
    size = max(settings.LISTING_PAGE_SIZE, 1)
    pages = max(math.ceil(len(ordered) / size), 1)
    return templates.TemplateResponse(
        request,
        "products.html",
        {
            "products": paginate(ordered, size, (page - 1) * size),
            "total": len(ordered),
            "page": page,
            "pages": pages,
            "search": search,
            "category": category,
            "all_categories": list_categories(products),
            "navbar": NavbarState(search_term=search),
        },
    )


@router.get("/search", include_in_schema=False)
def navbar_search(q: str = ""):
    navbar = NavbarState(search_term=q)
    target = navbar.submit_search()
    return RedirectResponse(url=target or "/", status_code=303)


@router.get("/images/placeholder.png", include_in_schema=False)
def placeholder_image(w: int = Query(300, ge=16, le=2000), h: int = Query(200, ge=16, le=2000)):
    png = render_placeholder(w, h, settings.PLACEHOLDER_TEXT)
    return Response(content=png, media_type="image/png", headers={"Cache-Control": "public, max-age=86400"})
