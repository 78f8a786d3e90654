"""A JSON document on disk with all-or-nothing transactions.

Every write goes through ``transaction()``: an exclusive ``flock`` is
held for the duration of that one operation, the caller mutates a
private copy of the document, and the copy replaces the file atomically
(temp file + ``os.replace``) only if the block finishes without raising.
An exception anywhere inside the block leaves the file exactly as it
was, so readers never see half of an operation.
"""

from __future__ import annotations

import copy
import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class JsonStore:

    def __init__(self, file_path: Path, tables: tuple[str, ...]) -> None:
        self._file_path = file_path
        self._tables = tables
        self._lock_path = file_path.with_name(f".{file_path.name}.lock")

    @property
    def file_path(self) -> Path:
        return self._file_path

    def read(self) -> Document:
        """Snapshot of the current document (never partially written)."""
        if not self._file_path.exists():
            return self._empty()
        with open(self._file_path, "r", encoding="utf-8") as f:
            doc = json.load(f)
        for table in self._tables:
            doc.setdefault(table, [])
        return doc

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        with self._lock():
            staged = copy.deepcopy(self.read())
            yield staged
            self._write(staged)

    # --- Internal helpers -----------------------------------------------------

    def _empty(self) -> Document:
        return {table: [] for table in self._tables}

    @contextmanager
    def _lock(self) -> Iterator[None]:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _write(self, doc: Document) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.stem}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self._file_path)
        except Exception:
            logger.exception("failed to write %s", self._file_path)
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
