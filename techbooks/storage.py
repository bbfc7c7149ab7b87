"""
JSON file persistence shared by the reading queue and the favourites.

A collection is stored as a single JSON document of the form
``{"items": {"<id>": {...}, ...}}``.  Writes go to a temporary file in
the same directory which then replaces the target, so readers never
see a half-written file.  All access goes through one re-entrant lock
per store; repositories hold it across several calls via ``lock``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Union


logger = logging.getLogger(__name__)

Records = Dict[str, Dict[str, Any]]


class StorageError(Exception):
    """Raised when a collection cannot be read from or written to disk."""


class JsonFileStore:
    """A lock-guarded JSON document holding one keyed collection."""

    def __init__(self, path: Union[str, Path]):
        if not str(path):
            raise StorageError("filestore path is required")
        self.path = Path(path)
        self.lock = threading.RLock()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write({})
                logger.info("Created empty collection file %s", self.path)
        except OSError as exc:
            raise StorageError(f"cannot initialise {self.path}: {exc}") from exc

    def load(self) -> Records:
        """Read the whole collection.

        An empty file is treated as an empty collection.  A missing or
        malformed file raises ``StorageError``.
        """
        with self.lock:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as exc:
                raise StorageError(f"cannot read {self.path}: {exc}") from exc
            if not raw.strip():
                return {}
            try:
                data = json.loads(raw)
            except ValueError as exc:
                raise StorageError(f"malformed JSON in {self.path}: {exc}") from exc
            if not isinstance(data, dict):
                raise StorageError(f"unexpected document in {self.path}")
            items = data.get("items") or {}
            if not isinstance(items, dict):
                raise StorageError(f"unexpected 'items' value in {self.path}")
            return items

    def persist(self, items: Records) -> None:
        """Replace the collection on disk with ``items``."""
        with self.lock:
            try:
                self._write(items)
            except OSError as exc:
                raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def _write(self, items: Records) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self.path.stem}-", suffix=".json", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"items": items}, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            # Leave no stray temporary files behind.
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
