"""
Redirect store: the redirect table plus the allocation cursor, persisted as
a single JSON document.

The cursor is guarded by `cursor_lock`, held only by the allocator. Saving
uses a separate lock so file I/O never blocks allocation.
"""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from shortlink_app.errors import StorageLoadFailedError, StorageSaveFailedError
from shortlink_app.schemas.store import StoreDocument
from shortlink_app.storage.table import RedirectTable

logger = logging.getLogger(__name__)


class RedirectStore:
    """
    In-memory redirect state backed by a JSON file.

    Attributes:
        table: Symbol -> destination map
        last_symbol: Most recently issued symbol (the cursor)
        cursor_lock: Serializes allocations
        path: Data file location
    """

    def __init__(
        self,
        path: Union[str, Path],
        redirects: Optional[Dict[str, str]] = None,
        last_symbol: str = ""
    ):
        self.path = Path(path)
        self.table = RedirectTable(redirects)
        self.last_symbol = last_symbol
        self.cursor_lock = threading.Lock()
        self._save_lock = threading.Lock()

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RedirectStore":
        """
        Load the store from disk.

        A missing or unreadable file is not fatal: the failure is logged
        and an empty store is returned.
        """
        path = Path(path)
        try:
            document = cls._read_document(path)
        except StorageLoadFailedError as e:
            logger.warning("Could not load redirects, starting empty: %s", e)
            return cls(path=path)

        logger.info("Loaded %d redirects from %s", len(document.redirects), path)
        return cls(path=path, redirects=document.redirects, last_symbol=document.last_symbol)

    @staticmethod
    def _read_document(path: Path) -> StoreDocument:
        try:
            contents = path.read_text(encoding="utf-8")
            return StoreDocument.model_validate_json(contents)
        except (OSError, ValueError) as e:
            raise StorageLoadFailedError(f"{path}: {e}") from e

    def to_document(self) -> StoreDocument:
        return StoreDocument(redirects=self.table.snapshot(), last_symbol=self.last_symbol)

    def save(self) -> None:
        """
        Write the full state to disk.

        The document goes to a temporary file in the same directory which
        then replaces the data file, so a crash mid-write leaves the last
        completed save intact.

        Raises:
            StorageSaveFailedError: If the file could not be written
        """
        with self._save_lock:
            payload = self.to_document().model_dump_json()
            temp_path = None
            try:
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                    delete=False
                ) as f:
                    temp_path = f.name
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                Path(temp_path).replace(self.path)
            except OSError as e:
                if temp_path is not None:
                    Path(temp_path).unlink(missing_ok=True)
                logger.error("Could not save redirects to %s: %s", self.path, e)
                raise StorageSaveFailedError(f"{self.path}: {e}") from e

    def add_redirect(self, symbol: str, destination: str) -> None:
        logger.info("Adding redirect from %r to %r", symbol, destination)
        previous = self.table.insert(symbol, destination)
        if previous is not None and previous != destination:
            logger.info("Redirect %r replaced %r", symbol, previous)

    def get_redirect(self, symbol: str) -> Optional[str]:
        return self.table.get(symbol)
