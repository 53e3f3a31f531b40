# storefront/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from storefront.config import settings
from storefront.database import FileBackedStore, StorageError
from storefront.api.routes import admin as admin_routes
from storefront.api.routes import pages as page_routes
from storefront.api.routes import products as product_routes
from storefront.middleware.cors_config import configure_cors
from storefront.middleware.security_headers import add_security_headers
from storefront.services.live import CatalogCache


logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: subscribe the catalog cache to the products collection
    before serving, and drop the subscription on shutdown.
    """
    # --- startup logic ---
    logging.getLogger("storefront").setLevel(settings.LOG_LEVEL.upper())
    store: FileBackedStore = app.state.store
    cache = CatalogCache()
    app.state.catalog = cache
    try:
        unsubscribe = await asyncio.to_thread(store.subscribe, settings.PRODUCTS_PATH, cache.replace)
        logger.info("Catalog subscribed to %s/%s (%d products)", store.data_dir, settings.PRODUCTS_PATH, len(cache))
    except StorageError as e:
        # stay registered so the catalog fills in on the next successful write
        logger.warning("Could not read products at startup, serving an empty catalog until the next change: %s", e)
        unsubscribe = store.subscribe(settings.PRODUCTS_PATH, cache.replace, initial=False)

    yield
    # --- shutdown logic ---
    unsubscribe()
    logger.info("Shutting down Emerge Home storefront")


async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable, please try again."})


def create_app(store: Optional[FileBackedStore] = None) -> FastAPI:
    app = FastAPI(title="Emerge Home Storefront", version="0.1.0", lifespan=lifespan)
    app.state.store = store if store is not None else FileBackedStore(settings.DATA_DIR)
    configure_cors(app)
    add_security_headers(app)
    app.add_exception_handler(StorageError, storage_error_handler)

    # Mount a static directory if present (logo, css)
    if os.path.isdir("static"):
        app.mount("/static", StaticFiles(directory="static"), name="static")

    app.include_router(product_routes.router)
    app.include_router(admin_routes.router)
    app.include_router(page_routes.router)

    @app.get("/health", tags=["root"])
    async def health():
        status = "ok" if app.state.catalog.version else "degraded"
        return {"status": status, "service": "Emerge Home Storefront", "products": len(app.state.catalog)}

    return app


app = create_app()
