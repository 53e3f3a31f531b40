# storefront/services/catalog.py
"""
Read-only projections of the product collection for the home, listing and
admin views. Every function takes the collection as a mapping
identity -> Product and returns new containers; the input is never mutated.
"""
import math
from dataclasses import replace
from datetime import timezone
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

from storefront.models.product import Product

UNCATEGORIZED = "Uncategorized"
MAX_STARS = 5

Collection = Mapping[str, Product]
Grouped = Dict[str, List[Product]]


class StarBreakdown(NamedTuple):
    full: int
    half: bool
    empty: int


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _recency_key(product: Product) -> float:
    ts = product.created_at
    if ts is None:
        return float("-inf")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


def _with_identity(identity: str, product: Product) -> Product:
    if product.id == identity:
        return product
    return replace(product, id=identity)


def _category_of(product: Product) -> str:
    return _text(product.category) or UNCATEGORIZED


def text_filter(collection: Collection, query: Optional[str]) -> Dict[str, Product]:
    """
    Keep products whose name, category or details contain `query`
    (case-insensitive). A blank query keeps everything.
    """
    if not query or not query.strip():
        return dict(collection)
    needle = query.lower()
    out: Dict[str, Product] = {}
    for identity, product in collection.items():
        fields = (product.name, product.category, product.details)
        if any(needle in _text(f).lower() for f in fields):
            out[identity] = product
    return out


def filter_by_category(collection: Collection, category: Optional[str]) -> Dict[str, Product]:
    if not category:
        return dict(collection)
    return {k: p for k, p in collection.items() if _category_of(p) == category}


def newest_first(collection: Collection) -> List[Product]:
    """All products ordered by createdAt descending; undated ones last."""
    products = [_with_identity(k, p) for k, p in collection.items()]
    # sorted() is stable with reverse=True, ties keep collection order
    return sorted(products, key=_recency_key, reverse=True)


def group_by_category(collection: Collection) -> Grouped:
    """
    Bucket products by category, newest first inside each bucket.
    Products with no category land in "Uncategorized". Buckets follow the
    order in which their category is first seen.
    """
    grouped: Grouped = {}
    for identity, product in collection.items():
        grouped.setdefault(_category_of(product), []).append(_with_identity(identity, product))
    for category in grouped:
        grouped[category] = sorted(grouped[category], key=_recency_key, reverse=True)
    return grouped


def cap_each_category(grouped: Mapping[str, Sequence[Product]], limit: int) -> Grouped:
    limit = max(int(limit), 0)
    return {category: list(products[:limit]) for category, products in grouped.items()}


def list_categories(collection: Collection) -> List[str]:
    seen: Dict[str, None] = {}
    for product in collection.values():
        seen.setdefault(_category_of(product), None)
    return list(seen)


def paginate(products: Sequence[Product], limit: int, offset: int = 0) -> List[Product]:
    offset = max(int(offset), 0)
    limit = max(int(limit), 0)
    return list(products[offset: offset + limit])


def star_breakdown(rating) -> StarBreakdown:
    """
    Split a rating into full, half and empty star slots, always five in total.

    >>> star_breakdown(3.5)
    StarBreakdown(full=3, half=True, empty=1)
    """
    try:
        value = float(rating or 0)
    except (TypeError, ValueError):
        value = 0.0
    if math.isnan(value):
        value = 0.0
    value = min(max(value, 0.0), float(MAX_STARS))
    full = math.floor(value)
    half = value % 1 != 0
    empty = max(MAX_STARS - full - (1 if half else 0), 0)
    return StarBreakdown(full=full, half=half, empty=empty)
