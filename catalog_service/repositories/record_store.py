"""
JSON-file-backed record store.

One store owns one collection document: a JSON object holding a single array
under the collection's key. Every operation reads the whole document from disk;
every mutation writes the whole document back. All cycles on a collection are
serialized through one asyncio.Lock, so concurrent requests cannot overwrite
each other's changes.
"""

import asyncio
import json
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

from ..exceptions import StorageException
from ..logging_config import get_logger
from ..metrics import track_store_operation

logger = get_logger(__name__)

Document = Dict[str, Any]


class JsonRecordStore:
    """
    Whole-document persistence for a named collection.

    Attributes:
        file_path: Backing JSON file
        collection: Key of the record array inside the document
    """

    def __init__(self, file_path: Path, collection: str) -> None:
        self.file_path = Path(file_path)
        self.collection = collection
        self._lock = asyncio.Lock()

    # --- Document primitives -------------------------------------------------

    async def load(self) -> Document:
        """
        Read and parse the collection document.

        Creates and persists an empty document when the file does not exist.

        Raises:
            StorageException: If the file cannot be read or parsed
        """
        return await asyncio.to_thread(self._read_document)

    async def save(self, document: Document) -> None:
        """
        Overwrite the collection file with the full document.

        Raises:
            StorageException: If the file cannot be written
        """
        await asyncio.to_thread(self._write_document, document)

    # --- Serialized access ---------------------------------------------------

    async def read(self) -> List[Dict[str, Any]]:
        """Return the current record list."""
        start = time.perf_counter()
        success = False
        try:
            async with self._lock:
                document = await self.load()
            success = True
            return document[self.collection]
        finally:
            track_store_operation(
                self.collection, "read", success, time.perf_counter() - start
            )

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Hold the collection lock for a load, mutate, save cycle.

        The body mutates the yielded record list in place. The document is
        saved only when the body completes without raising.
        """
        start = time.perf_counter()
        success = False
        try:
            async with self._lock:
                document = await self.load()
                records = document[self.collection]
                yield records
                await self.save(document)
            success = True
        finally:
            track_store_operation(
                self.collection, "mutate", success, time.perf_counter() - start
            )

    # --- Blocking I/O, run in worker threads ---------------------------------

    def _read_document(self) -> Document:
        try:
            raw = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(
                "Collection file missing, initializing",
                collection=self.collection,
            )
            document: Document = {self.collection: []}
            self._write_document(document)
            return document
        except OSError as e:
            logger.error("Failed to read collection", collection=self.collection, error=str(e))
            raise StorageException(self.collection, "read", "unreadable file") from e

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse collection", collection=self.collection, error=str(e))
            raise StorageException(self.collection, "read", "invalid JSON") from e

        if not isinstance(document, dict) or not isinstance(document.get(self.collection), list):
            logger.error("Collection document has unexpected shape", collection=self.collection)
            raise StorageException(self.collection, "read", "unexpected document shape")
        return document

    def _write_document(self, document: Document) -> None:
        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
        except ValueError as e:
            # NaN and Infinity have no JSON representation
            logger.error("Failed to serialize collection", collection=self.collection, error=str(e))
            raise StorageException(self.collection, "write", "non-finite number") from e

        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            logger.error("Failed to write collection", collection=self.collection, error=str(e))
            raise StorageException(self.collection, "write", "unwritable file") from e
