"""A JSON array on disk, shared by the file-backed repositories.

Writes go through a temporary file and ``os.replace`` so that a reader
always sees either the old or the new content, never a torn file.  The
instance lock serialises read-modify-write cycles within one process.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    @contextmanager
    def editing(self) -> Iterator[list[dict]]:
        """Yield the records for in-place edits, then persist them.

        Nothing is written if the block raises.
        """
        with self._lock:
            records = self.load()
            yield records
            self._persist(records)

    @staticmethod
    def next_id(records: list[dict]) -> str:
        if not records:
            return "1"
        return str(max(int(r["id"]) for r in records) + 1)

    def _persist(self, records: list[dict]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(records, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
