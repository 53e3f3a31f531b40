# storefront/services/live.py
import asyncio
import logging
import threading
from typing import Callable, Dict, Optional

from storefront.database import FileBackedStore, Snapshot
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class CatalogCache:
    """
    Local copy of the products collection, owned by whoever subscribed it.
    Each snapshot replaces the previous one entirely; nothing is merged.
    """

    def __init__(self):
        self._products: Dict[str, Product] = {}
        self._lock = threading.Lock()
        self.version = 0

    def replace(self, snapshot: Snapshot) -> None:
        products = {identity: Product.from_record(record, identity=identity)
                    for identity, record in (snapshot or {}).items()}
        with self._lock:
            self._products = products
            self.version += 1

    @property
    def products(self) -> Dict[str, Product]:
        with self._lock:
            return dict(self._products)

    def get(self, identity: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)


class SnapshotFeed:
    """
    Async view of a store subscription, for WebSocket handlers.

    Store listeners fire on whichever thread performed the write, so snapshots
    are handed to the event loop with call_soon_threadsafe. Leaving the
    `async with` block tears the subscription down.

    Usage:
        async with SnapshotFeed(store, "products") as feed:
            snapshot = await feed.next_snapshot()
    """

    def __init__(self, store: FileBackedStore, path: str):
        self.store = store
        self.path = path
        self._queue: "asyncio.Queue[Snapshot]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def __aenter__(self) -> "SnapshotFeed":
        self._loop = asyncio.get_running_loop()
        self._unsubscribe = await asyncio.to_thread(self.store.subscribe, self.path, self._on_snapshot)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        logger.debug("Snapshot feed for %r closed", self.path)

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, snapshot)

    async def next_snapshot(self) -> Snapshot:
        """Wait for the next snapshot; if several queued up only the newest counts."""
        snapshot = await self._queue.get()
        while not self._queue.empty():
            snapshot = self._queue.get_nowait()
        return snapshot
