# storefront/api/deps.py
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from storefront.database import FileBackedStore
from storefront.models.product import CATEGORIES
from storefront.services.catalog import star_breakdown
from storefront.services.live import CatalogCache
from storefront.utils.images import image_src, placeholder_url

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    stars=star_breakdown,
    image_src=image_src,
    placeholder_url=placeholder_url,
    categories=CATEGORIES,
)


def get_store(request: Request) -> FileBackedStore:
    """
    Dependency that returns the store the app was created with.
    Usage:
        store = Depends(get_store)
    """
    return request.app.state.store


def get_catalog(request: Request) -> CatalogCache:
    """Snapshot cache subscribed during the application lifespan."""
    return request.app.state.catalog
