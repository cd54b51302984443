"""Supabase-backed record store."""

import asyncio
from typing import Any, Callable, Optional, Sequence

import structlog
from supabase import Client, create_client

from reellens.core.exceptions import ConfigurationError, StorageError
from reellens.models.schemas import ReelRecord, normalize_username
from reellens.storage.base import ReelStore
from reellens.storage.mapping import document_to_record, record_to_document

logger = structlog.get_logger(__name__)


class SupabaseReelStore(ReelStore):
    """
    Store records in a Supabase (PostgREST) table keyed by ``url``.

    The supabase client is synchronous, so every query runs in the default
    executor.

    Example:
        store = SupabaseReelStore(url="https://xyz.supabase.co", key="...")
        record = await store.get_by_url("https://www.instagram.com/reel/abc/")
    """

    name = "supabase"

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        table: str = "reels",
        client: Optional[Client] = None,
    ):
        """
        Args:
            url: Supabase project URL.
            key: Supabase service key.
            table: Table holding one row per reel URL.
            client: Pre-built client (tests).

        Raises:
            ConfigurationError: If neither a client nor URL and key are given.
        """
        if client is None:
            if not url or not key:
                raise ConfigurationError(
                    "Supabase URL and key are required for the supabase store",
                    config_key="SUPABASE_URL",
                )
            client = create_client(url, key)
        self.client = client
        self.table = table

    async def _execute(self, operation: str, query: Callable[[], Any]) -> list[dict]:
        """Run a blocking query and return its rows.

        Raises:
            StorageError: If the query fails.
        """
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, query)
        except Exception as e:
            logger.error(
                "storage_query_failed",
                store=self.name,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageError(
                f"Failed to {operation} reel records",
                {"table": self.table, "error": str(e)},
            ) from e
        return result.data or []

    def _rows_to_records(self, rows: list[dict]) -> list[ReelRecord]:
        try:
            return [document_to_record(row) for row in rows]
        except ValueError as e:
            raise StorageError("Stored reel record is malformed", {"error": str(e)}) from e

    async def get_by_url(self, url: str) -> Optional[ReelRecord]:
        query = self.client.table(self.table).select("*").eq("url", url).limit(1)
        rows = await self._execute("read", query.execute)
        records = self._rows_to_records(rows)
        return records[0] if records else None

    async def upsert(self, record: ReelRecord) -> ReelRecord:
        document = record_to_document(record)
        query = self.client.table(self.table).upsert(document, on_conflict="url")
        await self._execute("write", query.execute)
        logger.info("record_upserted", store=self.name, url=record.url)
        return record

    async def find_by_urls(self, urls: Sequence[str]) -> list[ReelRecord]:
        if not urls:
            return []
        query = self.client.table(self.table).select("*").in_("url", list(urls))
        rows = await self._execute("read", query.execute)
        return self._rows_to_records(rows)

    async def find_by_username(self, username: str) -> list[ReelRecord]:
        query = (
            self.client.table(self.table)
            .select("*")
            .eq("username_key", normalize_username(username))
            .order("post_date", desc=True)
        )
        rows = await self._execute("read", query.execute)
        return sorted(self._rows_to_records(rows), key=lambda r: r.post_date, reverse=True)

    async def health_check(self) -> bool:
        try:
            query = self.client.table(self.table).select("url").limit(1)
            await self._execute("health_check", query.execute)
        except StorageError:
            return False
        return True
