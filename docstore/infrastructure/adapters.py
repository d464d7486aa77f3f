"""Persistence Adapters — JSON, JSON5 and in-memory snapshot storage.

Invariants:
    - read() returns None when the file does not exist (Database falls back to default)
    - write() is atomic: temp file in the same directory, then os.replace
    - Writes through one adapter are serialized by an asyncio.Lock
    - Blocking file IO runs in a worker thread (event loop never blocks)

Design Decisions:
    - One TextFileAdapter parameterized by parse/stringify: JSON and JSON5 differ
      only in codec (ADR: mirrors lowdb DataFile)
    - MemoryAdapter deep-copies on write: tests can assert on the persisted
      snapshot without aliasing the live store
"""

import asyncio
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Callable

import json5

from docstore.core.domain_types import Data


def _json_stringify(data: Data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _json5_stringify(data: Data) -> str:
    return json5.dumps(data, indent=2, ensure_ascii=False)


class TextFileAdapter:
    """Snapshot stored as a text document, decoded by `parse`."""

    def __init__(
        self,
        path: str | os.PathLike,
        parse: Callable[[str], object],
        stringify: Callable[[Data], str],
    ):
        self.path = Path(path)
        self._parse = parse
        self._stringify = stringify
        self._lock = asyncio.Lock()

    async def read(self) -> Data | None:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, data: Data) -> None:
        # Serialize on the loop thread so later in-memory edits don't race the dump
        text = self._stringify(data)
        async with self._lock:
            await asyncio.to_thread(self._write_sync, text)

    def _read_sync(self) -> Data | None:
        if not self.path.exists():
            return None
        return self._parse(self.path.read_text(encoding="utf-8"))

    def _write_sync(self, text: str) -> None:
        fd, tmp = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class JSONFileAdapter(TextFileAdapter):
    def __init__(self, path: str | os.PathLike):
        super().__init__(path, json.loads, _json_stringify)


class JSON5FileAdapter(TextFileAdapter):
    def __init__(self, path: str | os.PathLike):
        super().__init__(path, json5.loads, _json5_stringify)


class MemoryAdapter:
    """Keeps the last written snapshot in memory."""

    def __init__(self, data: Data | None = None):
        self.data = copy.deepcopy(data) if data is not None else None
        self.writes = 0

    async def read(self) -> Data | None:
        return copy.deepcopy(self.data) if self.data is not None else None

    async def write(self, data: Data) -> None:
        self.data = copy.deepcopy(data)
        self.writes += 1


def adapter_for_file(path: str | os.PathLike) -> TextFileAdapter:
    """Pick the codec from the file extension (.json5 -> JSON5, else JSON)."""
    if Path(path).suffix.lower() == ".json5":
        return JSON5FileAdapter(path)
    return JSONFileAdapter(path)
