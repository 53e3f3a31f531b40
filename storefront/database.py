# storefront/database.py
"""
File-backed document store standing in for the hosted real-time database.

Each collection path maps to one CSV file inside DATA_DIR. Records are keyed
by an opaque identity assigned on create. Subscribers receive the full
collection snapshot immediately and again after every mutation; there are no
deltas, every notification replaces what the subscriber held before.

Usage:
    from storefront.database import FileBackedStore
    store = FileBackedStore("data")
    unsubscribe = store.subscribe("products", lambda snap: print(len(snap)))
    new_id = store.create("products", {"name": "Desk Lamp", "price": 19.5})
    store.update("products", new_id, {"price": 17.0})
    store.delete("products", new_id)
    unsubscribe()
"""

import copy
import logging
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from filelock import FileLock

from storefront.config import settings

logger = logging.getLogger(__name__)

ID_FIELD = "id"

Record = Dict[str, Any]
Snapshot = Dict[str, Record]
Listener = Callable[[Snapshot], None]


class StorageError(Exception):
    """A create/update/delete or read could not be completed by the store."""


@contextmanager
def _storage_errors(action: str, path: str):
    try:
        yield
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.exception("Store %s failed for %r", action, path)
        raise StorageError(f"Could not {action} {path!r}: {exc}") from exc


class FileBackedStore:
    """
    Manages one CSV file per collection path inside data_dir.
    All columns are read back as text; callers coerce types.
    """

    def __init__(self, data_dir: Optional[Path] = None, lock_timeout: Optional[float] = None):
        self.data_dir = Path(data_dir if data_dir is not None else settings.DATA_DIR)
        self.lock_timeout = settings.STORE_LOCK_TIMEOUT if lock_timeout is None else lock_timeout
        self._listeners: Dict[str, List[Listener]] = {}
        self._listeners_lock = threading.Lock()

    def _file_path(self, path: str) -> Path:
        name = path.strip("/").replace("/", "__")
        if not name:
            raise ValueError("Collection path must not be empty")
        return self.data_dir / f"{name}.csv"

    def _lock_for(self, file: Path) -> FileLock:
        return FileLock(str(file) + ".lock", timeout=self.lock_timeout)

    def _read_df(self, file: Path) -> pd.DataFrame:
        if not file.exists() or file.stat().st_size == 0:
            return pd.DataFrame()
        return pd.read_csv(file, dtype=str, keep_default_na=False).fillna("")

    def _write_df_nolock(self, file: Path, df: pd.DataFrame) -> None:
        """Write without acquiring the file lock; caller must hold it."""
        file.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(file, index=False)

    @staticmethod
    def _cell(value: Any) -> str:
        return "" if value is None else str(value)

    # --- the four primitives ---

    def snapshot(self, path: str) -> Snapshot:
        """Full copy of the collection: identity -> record (absent fields omitted)."""
        file = self._file_path(path)
        with _storage_errors("read", path):
            df = self._read_df(file)
        if df.empty:
            return {}
        out: Snapshot = {}
        for row in df.to_dict(orient="records"):
            identity = row.pop(ID_FIELD, "")
            if not identity:
                continue
            out[identity] = {k: v for k, v in row.items() if v != ""}
        return out

    def create(self, path: str, record: Record) -> str:
        """Store a new record and return the identity assigned to it."""
        identity = uuid.uuid4().hex
        row = {k: self._cell(v) for k, v in record.items() if k != ID_FIELD}
        row[ID_FIELD] = identity
        file = self._file_path(path)
        with _storage_errors("create in", path):
            file.parent.mkdir(parents=True, exist_ok=True)
            with self._lock_for(file):
                df = self._read_df(file)
                if df.empty:
                    df = pd.DataFrame([row])
                else:
                    df = pd.concat([df, pd.DataFrame([row])], ignore_index=True, sort=False).fillna("")
                self._write_df_nolock(file, df)
        logger.info("Created %s/%s", path, identity)
        self._notify(path)
        return identity

    def update(self, path: str, identity: str, partial: Record) -> bool:
        """Merge `partial` into the stored record. Returns False if it does not exist."""
        file = self._file_path(path)
        with _storage_errors("update in", path):
            file.parent.mkdir(parents=True, exist_ok=True)
            with self._lock_for(file):
                df = self._read_df(file)
                if df.empty or ID_FIELD not in df.columns:
                    return False
                mask = df[ID_FIELD] == str(identity)
                if not mask.any():
                    return False
                for k, v in partial.items():
                    if k == ID_FIELD:
                        continue
                    if k not in df.columns:
                        df[k] = ""
                    df.loc[mask, k] = self._cell(v)
                self._write_df_nolock(file, df)
        logger.info("Updated %s/%s", path, identity)
        self._notify(path)
        return True

    def delete(self, path: str, identity: str) -> bool:
        """Remove the record permanently. Returns False if it does not exist."""
        file = self._file_path(path)
        with _storage_errors("delete from", path):
            file.parent.mkdir(parents=True, exist_ok=True)
            with self._lock_for(file):
                df = self._read_df(file)
                if df.empty or ID_FIELD not in df.columns:
                    return False
                remaining = df[df[ID_FIELD] != str(identity)]
                if len(remaining) == len(df):
                    return False
                self._write_df_nolock(file, remaining)
        logger.info("Deleted %s/%s", path, identity)
        self._notify(path)
        return True

    # --- subscriptions ---

    def subscribe(self, path: str, listener: Listener, initial: bool = True) -> Callable[[], None]:
        """
        Register `listener` for `path` and deliver the current snapshot right away.
        Returns a callable that removes the subscription (safe to call twice).

        With initial=False the listener is only registered; it first hears
        from the store after the next successful write.
        """
        with self._listeners_lock:
            self._listeners.setdefault(path, []).append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                listeners = self._listeners.get(path, [])
                if listener in listeners:
                    listeners.remove(listener)

        if not initial:
            return unsubscribe
        try:
            listener(self.snapshot(path))
        except StorageError:
            unsubscribe()
            raise
        return unsubscribe

    def listener_count(self, path: str) -> int:
        with self._listeners_lock:
            return len(self._listeners.get(path, []))

    def _notify(self, path: str) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners.get(path, []))
        if not listeners:
            return
        try:
            snap = self.snapshot(path)
        except StorageError:
            # the write itself went through; subscribers catch up on the next change
            return
        for listener in listeners:
            try:
                listener(copy.deepcopy(snap))
            except Exception:
                # one broken subscriber must not starve the others
                logger.exception("Snapshot listener failed for %r", path)
