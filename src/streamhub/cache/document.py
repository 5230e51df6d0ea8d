"""Whole-document JSON persistence shared by every store."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from streamhub.core.exceptions import PersistenceWriteError

logger = logging.getLogger(__name__)


class JsonDocument:
    """Async JSON file wrapper. File I/O runs in a worker thread."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def read(self) -> Any | None:
        """Return the parsed document, or None when it is missing or corrupt."""
        return await asyncio.to_thread(self._read_sync)

    async def write(self, payload: Any) -> None:
        """
        Replace the document with ``payload``.

        Raises:
            PersistenceWriteError: The file could not be written.
        """
        serialized = json.dumps(payload, indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write_sync, serialized)
        except OSError as e:
            raise PersistenceWriteError(
                message=f"Failed to write {self._path}: {e}",
                path=self._path,
            ) from e

    def _read_sync(self) -> Any | None:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read {self._path}: {e}")
            return None

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt document {self._path}: {e}")
            return None

    def _write_sync(self, serialized: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f".{self._path.name}.tmp")
        tmp_path.write_text(serialized, encoding="utf-8")
        os.replace(tmp_path, self._path)


class DocumentStore(ABC):
    """
    In-memory state backed by one JSON document.

    Subclasses keep their state in memory and rewrite the whole document
    after every mutation. Mutations and their writes run under a single
    lock so writers to the same document never interleave. A failed write
    is logged and swallowed; the in-memory state stays authoritative and
    the next mutation writes everything again.
    """

    def __init__(self, path: Path | str) -> None:
        self._document = JsonDocument(path)
        self._lock = asyncio.Lock()
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._document.path

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Populate state from disk; a missing or invalid document means empty."""
        raw = await self._document.read()
        async with self._lock:
            try:
                self._restore(raw)
            except Exception as e:
                logger.warning(f"Resetting {self.path.name}, unreadable contents: {e}")
                self._restore(None)
            self._loaded = True
        logger.info(f"Loaded {self.path.name}")

    async def _persist(self) -> bool:
        """Write the current state. Caller must hold ``self._lock``."""
        try:
            await self._document.write(self._serialize())
        except PersistenceWriteError as e:
            logger.warning(f"Persistence failed, keeping in-memory state: {e.message}")
            return False
        return True

    @abstractmethod
    def _serialize(self) -> Any:
        """Return the JSON-ready representation of the state."""
        ...

    @abstractmethod
    def _restore(self, raw: Any | None) -> None:
        """Replace the state from a parsed document (None means empty)."""
        ...
