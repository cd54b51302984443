"""In-process record store for development and tests."""

import asyncio
from typing import Optional, Sequence

import structlog

from reellens.models.schemas import ReelRecord, normalize_username
from reellens.storage.base import ReelStore

logger = structlog.get_logger(__name__)


class InMemoryReelStore(ReelStore):
    """Dict-backed store guarded by an asyncio lock."""

    name = "memory"

    def __init__(self) -> None:
        self._records: dict[str, ReelRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def get_by_url(self, url: str) -> Optional[ReelRecord]:
        async with self._lock:
            return self._records.get(url)

    async def upsert(self, record: ReelRecord) -> ReelRecord:
        async with self._lock:
            self._records[record.url] = record
        logger.debug("record_upserted", store=self.name, url=record.url)
        return record

    async def find_by_urls(self, urls: Sequence[str]) -> list[ReelRecord]:
        wanted = set(urls)
        async with self._lock:
            return [record for url, record in self._records.items() if url in wanted]

    async def find_by_username(self, username: str) -> list[ReelRecord]:
        key = normalize_username(username)
        async with self._lock:
            matches = [
                record for record in self._records.values()
                if normalize_username(record.username) == key
            ]
        return sorted(matches, key=lambda r: r.post_date, reverse=True)
