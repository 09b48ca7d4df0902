"""Persistent store for the admin table.

The whole table lives in one serialized JSON document under a fixed key.
``load`` never fails: a missing or unreadable document is an empty table,
and the next ``save`` replaces it.
"""

import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from pydantic import ValidationError

from loyalty_pro.config import get_settings
from loyalty_pro.models import AdminTable, admin_table_adapter

logger = structlog.get_logger(__name__)

DB_KEY = "loyaltyAdmins_DB"


class DocumentStore(ABC):
    """Abstract single-document store.

    Subclasses provide raw blob access; decoding, encoding and the
    corrupt-document policy live here.

    Subclasses must implement:
    - _read_blob(): Return the stored document bytes, or None if absent
    - _write_blob(): Replace the stored document
    """

    def __init__(self, key: str = DB_KEY):
        self.key = key
        self._logger = logger.bind(store=type(self).__name__, key=key)

    @abstractmethod
    async def _read_blob(self) -> bytes | None:
        """Return the stored document, or None on first run."""
        pass

    @abstractmethod
    async def _write_blob(self, blob: bytes) -> None:
        """Replace the stored document wholesale."""
        pass

    async def load(self) -> AdminTable:
        """Load the admin table, or an empty one if absent or corrupt."""
        try:
            blob = await self._read_blob()
        except OSError as e:
            self._logger.warning("store_read_failed", error=str(e))
            return {}

        if not blob:
            return {}

        try:
            table = admin_table_adapter.validate_json(blob)
        except ValidationError as e:
            self._logger.warning("store_load_failed", error_count=e.error_count())
            return {}

        self._logger.debug("store_loaded", admins=len(table))
        return table

    async def save(self, table: AdminTable) -> None:
        """Replace the stored document with ``table``.

        Write failures propagate to the caller.
        """
        blob = self.dump(table)
        await self._write_blob(blob)
        self._logger.debug("store_saved", admins=len(table), size=len(blob))

    @staticmethod
    def dump(table: AdminTable) -> bytes:
        """Serialize ``table`` the way it is persisted."""
        return admin_table_adapter.dump_json(table, by_alias=True, indent=2)


class MemoryStore(DocumentStore):
    """Process-local store keeping serialized documents in a dict."""

    def __init__(self, key: str = DB_KEY, blobs: dict[str, bytes] | None = None):
        super().__init__(key)
        self.blobs: dict[str, bytes] = blobs if blobs is not None else {}

    async def _read_blob(self) -> bytes | None:
        return self.blobs.get(self.key)

    async def _write_blob(self, blob: bytes) -> None:
        self.blobs[self.key] = blob


class JSONFileStore(DocumentStore):
    """Store backed by a JSON file, replaced atomically on every save."""

    def __init__(self, path: str | Path | None = None, key: str = DB_KEY):
        super().__init__(key)
        self.path = Path(path or get_settings().ledger_store_path)

    async def _read_blob(self) -> bytes | None:
        return await asyncio.to_thread(self._read_file)

    async def _write_blob(self, blob: bytes) -> None:
        await asyncio.to_thread(self._write_file, blob)

    def _read_file(self) -> bytes | None:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def _write_file(self, blob: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(blob)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
