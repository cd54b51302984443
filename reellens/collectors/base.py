"""Base adapter interface for all reel scraping providers.

All adapters should extend BaseReelAdapter and implement the required methods.
"""

from abc import ABC, abstractmethod

from reellens.models.schemas import ScrapedReel


class BaseReelAdapter(ABC):
    """Abstract base class for reel scraping providers.

    An adapter performs exactly one attempt per call; it never retries.
    Concrete adapters convert their provider-specific payload into a
    ScrapedReel before returning.
    """

    name: str = "base"

    @abstractmethod
    async def attempt(self, url: str) -> ScrapedReel:
        """Scrape a single reel.

        Args:
            url: Instagram reel URL.

        Returns:
            Normalized ScrapedReel.

        Raises:
            CollectorError: If this provider could not produce the reel.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the adapter is configured and operational.

        Returns:
            True if the adapter can be attempted.
        """
        ...

    async def aclose(self) -> None:
        """Release any network resources held by the adapter."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
