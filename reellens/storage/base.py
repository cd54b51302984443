"""Abstract record store."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from reellens.models.schemas import ReelRecord


class ReelStore(ABC):
    """
    Keyed store of ReelRecords, one per canonical reel URL.

    Implementations must make ``upsert`` a whole-document replace keyed by
    ``url``. Concurrent upserts of the same URL resolve last-writer-wins.
    """

    name: str = "base"

    @abstractmethod
    async def get_by_url(self, url: str) -> Optional[ReelRecord]:
        """Return the record stored for ``url``, or None."""

    @abstractmethod
    async def upsert(self, record: ReelRecord) -> ReelRecord:
        """Insert or fully replace the record keyed by ``record.url``."""

    @abstractmethod
    async def find_by_urls(self, urls: Sequence[str]) -> list[ReelRecord]:
        """Return the stored records whose URL is in ``urls``."""

    @abstractmethod
    async def find_by_username(self, username: str) -> list[ReelRecord]:
        """Return a creator's records, newest ``post_date`` first.

        ``username`` is matched case-insensitively without a leading '@'.
        """

    async def health_check(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"
