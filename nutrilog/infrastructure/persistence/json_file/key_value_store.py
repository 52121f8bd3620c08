"""JSON file key-value store.

All pairs live in one JSON object on local disk, the way the device
key-value store of the mobile app keeps them in a single file. Writes go
through a temporary file and ``os.replace`` so a reader never observes a
half-written document. Blocking file I/O runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


class JsonFileKeyValueStore:
    """
    File-backed implementation of IKeyValueStore.

    Writers are serialized with an asyncio.Lock, so read-modify-write of the
    document is safe inside one process. Multiple processes sharing the same
    file are not supported.

    Example:
        >>> store = JsonFileKeyValueStore(Path("data/nutrilog.json"))
        >>> await store.set_item("@meals:user123", "[]")
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> Dict[str, str]:
        """
        Read the whole document.

        Raises:
            ValueError: If the file is not a JSON object of strings
                (json.JSONDecodeError is a ValueError)
        """
        if not self._path.exists():
            return {}

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Storage file {self._path} does not hold a JSON object")
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write_document(self, document: Dict[str, str]) -> None:
        _ensure_dir(self._path.parent)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)

    async def get_item(self, key: str) -> Optional[str]:
        document = await asyncio.to_thread(self._read_document)
        return document.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
            document[key] = value
            await asyncio.to_thread(self._write_document, document)
        logger.debug("Key written", key=key, path=str(self._path))

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
            if key not in document:
                return
            del document[key]
            await asyncio.to_thread(self._write_document, document)
        logger.debug("Key removed", key=key, path=str(self._path))
