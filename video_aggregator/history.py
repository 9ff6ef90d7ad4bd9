import asyncio
import json
import logging
import os
import time
from pathlib import Path
from typing import Callable

from .config import (
    HISTORY_CACHE_TTL,
    HISTORY_DOCUMENT_KEY,
    HISTORY_MAX_ENTRIES,
    HISTORY_PATH,
)


# === 💾 STORAGE ===
class TTLCache:
    def __init__(self, ttl: float = HISTORY_CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._value = None
        self._stored_at = 0.0

    def get(self):
        if self._value is None:
            return None
        if self._clock() - self._stored_at >= self.ttl:
            self.invalidate()
            return None
        return self._value

    def set(self, value):
        self._value = value
        self._stored_at = self._clock()

    def invalidate(self):
        self._value = None
        self._stored_at = 0.0


class JsonDocumentStore:
    def __init__(self, path: str | os.PathLike | None = HISTORY_PATH, key: str = HISTORY_DOCUMENT_KEY):
        self.path = Path(path) if path else None
        self.key = key
        self._memory: list[dict] = []

    def _read(self) -> list[dict]:
        if self.path is None:
            return list(self._memory)
        if not self.path.exists():
            return []
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logging.error(f"HISTORY READ ERROR - {self.path}: {e}")
            return []
        entries = document.get(self.key) if isinstance(document, dict) else None
        return entries if isinstance(entries, list) else []

    def _write(self, entries: list[dict]):
        if self.path is None:
            self._memory = list(entries)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(
            json.dumps({self.key: entries}, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        os.replace(tmp, self.path)

    async def load(self) -> list[dict]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read)

    async def save(self, entries: list[dict]):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, entries)


def _clean(entries) -> list[dict]:
    return [
        {"query": e["query"]}
        for e in entries
        if isinstance(e, dict) and isinstance(e.get("query"), str) and e["query"]
    ]


# === 🕘 HISTORY ===
class SearchHistory:
    def __init__(
        self,
        store: JsonDocumentStore | None = None,
        max_entries: int = HISTORY_MAX_ENTRIES,
        cache: TTLCache | None = None,
    ):
        self.store = store or JsonDocumentStore()
        self.max_entries = max_entries
        self.cache = cache or TTLCache()
        self._lock = asyncio.Lock()

    async def record(self, query: str) -> list[dict]:
        async with self._lock:
            self.cache.invalidate()
            entries = _clean(await self.store.load())
            entries = [e for e in entries if e["query"] != query]
            entries.insert(0, {"query": query})
            del entries[self.max_entries:]

            await self.store.save(entries)
            self.cache.set(entries)
            logging.info(f"HISTORY - saved '{query}' ({len(entries)} total)")
            return list(entries)

    async def recent(self) -> list[dict]:
        cached = self.cache.get()
        if cached is not None:
            logging.debug("HISTORY - served from cache")
            return [dict(e) for e in cached[: self.max_entries]]

        entries = _clean(await self.store.load())[: self.max_entries]
        self.cache.set(entries)
        return [dict(e) for e in entries]
