# tests/conftest.py
import os
import sys
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from storefront.api.schemas.product import ProductDraft  # noqa: E402
from storefront.database import FileBackedStore  # noqa: E402
from storefront.main import create_app  # noqa: E402
from storefront.services.editing import create_product  # noqa: E402


@pytest.fixture
def store(tmp_path):
    """Store rooted in a per-test temp directory, isolated from local data."""
    return FileBackedStore(tmp_path / "data")


@pytest.fixture
def app(store):
    return create_app(store)


@pytest.fixture
def client(app):
    # entering the client runs the lifespan, which subscribes the catalog cache
    with TestClient(app) as c:
        yield c


@pytest.fixture
def product_payload():
    """
    Return a callable building a valid camelCase product payload.
    Usage: payload = product_payload(name="Lamp", category="Books")
    """
    def _fn(**overrides):
        payload = {
            "name": "Bamboo Desk Organizer",
            "details": "Five compartment organizer for pens and notes",
            "specifications": "30 x 15 x 10 cm",
            "aboutItem": "Sustainably sourced bamboo",
            "price": 549.0,
            "rating": 4.3,
            "category": "Office Supplies",
            "imageUrl": "https://img.example.com/organizer.jpg",
            "referralLink": "https://shop.example.com/dp/organizer",
            "returnAvailable": True,
            "freeDelivery": False,
            "topBrand": False,
        }
        payload.update(overrides)
        return payload
    return _fn


@pytest.fixture
def seed_product(store, product_payload):
    """
    Create a product directly through the editing service and return its id.
    Usage: pid = seed_product(created="2024-06-01", name="Lamp", category="Books")
    """
    def _fn(created: str = "2024-01-01T00:00:00", **overrides):
        draft = ProductDraft.model_validate(product_payload(**overrides))
        now = datetime.fromisoformat(created).replace(tzinfo=timezone.utc)
        return create_product(store, draft, now=now)
    return _fn
