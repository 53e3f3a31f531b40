# storefront/api/routes/products.py
import asyncio
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect

from storefront.api.deps import get_catalog, get_store
from storefront.api.schemas.product import ProductDraft, ProductOut
from storefront.config import settings
from storefront.database import FileBackedStore, Snapshot
from storefront.models.product import CATEGORIES, Product
from storefront.services.catalog import (
    cap_each_category,
    filter_by_category,
    group_by_category,
    list_categories,
    newest_first,
    paginate,
    text_filter,
)
from storefront.services.editing import ProductNotFound, create_product, delete_product, update_product
from storefront.services.live import CatalogCache, SnapshotFeed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def _out(product: Product) -> ProductOut:
    return ProductOut.from_product(product)


@router.get("/", response_model=List[ProductOut])
def list_products(
    q: Optional[str] = Query(None, description="search name, category or details"),
    category: Optional[str] = None,
    limit: int = Query(100, ge=0),
    offset: int = Query(0, ge=0),
    catalog: CatalogCache = Depends(get_catalog),
):
    """
    List products newest first. `q` matches name, category or details
    (case-insensitive); `category` must match exactly.
    """
    filtered = filter_by_category(text_filter(catalog.products, q), category)
    return [_out(p) for p in paginate(newest_first(filtered), limit, offset)]


@router.get("/home", response_model=Dict[str, List[ProductOut]])
def home_sections(
    limit: Optional[int] = Query(None, ge=0, description="products per category"),
    catalog: CatalogCache = Depends(get_catalog),
):
    cap = settings.HOME_CATEGORY_LIMIT if limit is None else limit
    grouped = cap_each_category(group_by_category(catalog.products), cap)
    return {category: [_out(p) for p in products] for category, products in grouped.items()}


@router.get("/categories")
def categories(catalog: CatalogCache = Depends(get_catalog)):
    return {"categories": list_categories(catalog.products), "options": CATEGORIES}


@router.websocket("/ws")
async def products_feed(websocket: WebSocket) -> None:
    """
    Live catalog feed.

    Protocol:
    1. Client connects to /api/products/ws
    2. Server sends {"type": "snapshot", "products": {<id>: {...}, ...}} right away
    3. Server sends another full snapshot after every change; there are no deltas
    Anything the client sends is ignored. Closing the socket ends the subscription.
    """
    store: FileBackedStore = websocket.app.state.store
    await websocket.accept()
    logger.info("Catalog feed connected")
    try:
        async with SnapshotFeed(store, settings.PRODUCTS_PATH) as feed:
            receive = asyncio.ensure_future(websocket.receive_text())
            try:
                while True:
                    update = asyncio.ensure_future(feed.next_snapshot())
                    done, _ = await asyncio.wait({receive, update}, return_when=asyncio.FIRST_COMPLETED)
                    if update in done:
                        await websocket.send_json(_snapshot_message(update.result()))
                    else:
                        update.cancel()
                    if receive in done:
                        receive.result()  # raises WebSocketDisconnect once the client is gone
                        receive = asyncio.ensure_future(websocket.receive_text())
            finally:
                receive.cancel()
    except WebSocketDisconnect:
        logger.info("Catalog feed disconnected")


def _snapshot_message(snapshot: Snapshot) -> dict:
    products = {
        identity: _out(Product.from_record(record, identity=identity)).model_dump(mode="json", by_alias=True)
        for identity, record in snapshot.items()
    }
    return {"type": "snapshot", "products": products}


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, catalog: CatalogCache = Depends(get_catalog)):
    product = catalog.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return _out(product)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product_route(payload: ProductDraft, store: FileBackedStore = Depends(get_store),
                         catalog: CatalogCache = Depends(get_catalog)):
    """
    Create a product. createdAt/updatedAt are stamped here; the store assigns the id.
    """
    identity = create_product(store, payload)
    product = catalog.get(identity) or Product.from_record(store.snapshot(settings.PRODUCTS_PATH)[identity], identity)
    return _out(product)


@router.put("/{product_id}", response_model=ProductOut)
def update_product_route(product_id: str, payload: ProductDraft, store: FileBackedStore = Depends(get_store),
                         catalog: CatalogCache = Depends(get_catalog)):
    try:
        update_product(store, product_id, payload)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    product = catalog.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return _out(product)


@router.delete("/{product_id}")
def delete_product_route(product_id: str, store: FileBackedStore = Depends(get_store)):
    try:
        delete_product(store, product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"ok": True}
