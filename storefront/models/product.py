# storefront/models/product.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any
from datetime import datetime, timezone

# categories offered by the admin form; the store itself accepts any text
CATEGORIES = [
    "Electronics", "Fashion", "Home & Garden", "Sports & Outdoors",
    "Books", "Toys & Games", "Health & Beauty", "Automotive",
    "Jewelry", "Food & Beverages", "Office Supplies", "Pet Supplies",
]

_TRUTHY = ("1", "true", "yes", "y", "t", "on")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as written by the editing client
    (e.g. "2024-06-01T10:00:00.000Z" or a bare "2024-06-01").
    Naive values are taken as UTC. Returns None for missing or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    out = ts.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return out.replace("+00:00", "Z")


def _as_float(raw: Any) -> float:
    try:
        return float(raw) if raw not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def _as_bool(raw: Any) -> bool:
    # the file-backed store hands everything back as text
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUTHY
    return bool(raw)


def _as_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return str(raw)


@dataclass
class Product:
    """
    A curated affiliate listing. Store records use camelCase keys
    (imageUrl, createdAt, ...); `from_record` translates.
    Text fields may be None when the stored record lacks them.
    """
    id: Optional[str] = None
    name: Optional[str] = ""
    details: Optional[str] = ""
    specifications: Optional[str] = ""
    about_item: Optional[str] = ""
    price: float = 0.0
    rating: float = 0.0
    category: Optional[str] = ""
    image_url: Optional[str] = ""
    referral_link: Optional[str] = ""
    return_available: bool = False
    free_delivery: bool = False
    top_brand: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any], identity: Optional[str] = None) -> "Product":
        if record is None:
            raise ValueError("Cannot construct Product from None")
        return cls(
            id=identity or _as_text(record.get("id")),
            name=_as_text(record.get("name")),
            details=_as_text(record.get("details")),
            specifications=_as_text(record.get("specifications")),
            about_item=_as_text(record.get("aboutItem")),
            price=_as_float(record.get("price")),
            rating=_as_float(record.get("rating")),
            category=_as_text(record.get("category")),
            image_url=_as_text(record.get("imageUrl")),
            referral_link=_as_text(record.get("referralLink")),
            return_available=_as_bool(record.get("returnAvailable", False)),
            free_delivery=_as_bool(record.get("freeDelivery", False)),
            top_brand=_as_bool(record.get("topBrand", False)),
            created_at=parse_timestamp(record.get("createdAt")),
            updated_at=parse_timestamp(record.get("updatedAt")),
        )
