# storefront/services/editing.py
"""
Write path for products: turns a validated ProductDraft into store records.

createdAt is stamped once on create and carried over on every update;
updatedAt is refreshed on every write. Nothing here touches the in-memory
catalog, which only changes when the store pushes a new snapshot.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storefront.api.schemas.product import ProductDraft
from storefront.config import settings
from storefront.database import FileBackedStore
from storefront.models.product import Product, format_timestamp

logger = logging.getLogger(__name__)

# blank admin form
EMPTY_FORM: Dict[str, Any] = {
    "name": "",
    "details": "",
    "specifications": "",
    "aboutItem": "",
    "price": "",
    "rating": "",
    "category": "",
    "imageUrl": "",
    "referralLink": "",
    "returnAvailable": False,
    "freeDelivery": False,
    "topBrand": False,
}


class ProductNotFound(LookupError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_product(store: FileBackedStore, draft: ProductDraft, now: Optional[datetime] = None,
                   path: Optional[str] = None) -> str:
    stamp = format_timestamp(now or _utcnow())
    record = draft.to_record()
    record["createdAt"] = stamp
    record["updatedAt"] = stamp
    identity = store.create(path or settings.PRODUCTS_PATH, record)
    logger.info("Product %s added (%s)", identity, draft.name)
    return identity


def update_product(store: FileBackedStore, identity: str, draft: ProductDraft,
                   now: Optional[datetime] = None, path: Optional[str] = None) -> str:
    """
    Overwrite the editable fields of an existing product. Identity and the
    original createdAt are preserved. Raises ProductNotFound.
    """
    path = path or settings.PRODUCTS_PATH
    existing = store.snapshot(path).get(identity)
    if existing is None:
        raise ProductNotFound(identity)
    record = draft.to_record()
    if existing.get("createdAt"):
        record["createdAt"] = existing["createdAt"]
    record["updatedAt"] = format_timestamp(now or _utcnow())
    if not store.update(path, identity, record):
        # removed between the read and the write
        raise ProductNotFound(identity)
    logger.info("Product %s updated", identity)
    return identity


def delete_product(store: FileBackedStore, identity: str, path: Optional[str] = None) -> None:
    if not store.delete(path or settings.PRODUCTS_PATH, identity):
        raise ProductNotFound(identity)
    logger.info("Product %s deleted", identity)


def form_from_product(product: Product) -> Dict[str, Any]:
    """Prefill the admin form for editing; numbers become text, gaps become blanks."""
    return {
        "name": product.name or "",
        "details": product.details or "",
        "specifications": product.specifications or "",
        "aboutItem": product.about_item or "",
        "price": _number_text(product.price),
        "rating": _number_text(product.rating),
        "category": product.category or "",
        "imageUrl": product.image_url or "",
        "referralLink": product.referral_link or "",
        "returnAvailable": bool(product.return_available),
        "freeDelivery": bool(product.free_delivery),
        "topBrand": bool(product.top_brand),
    }


def _number_text(value: Optional[float]) -> str:
    if value is None:
        return ""
    # 12.0 -> "12", 4.5 -> "4.5"
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)
