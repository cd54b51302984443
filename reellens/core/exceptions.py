"""
Core exception hierarchy for ReelLens.

Provides standardized exception types with HTTP mapping. The RetryableError
and PermanentError markers only describe whether a later request could
succeed; no component retries automatically. All components should use these
exceptions instead of generic Exception.
"""

from typing import Any, Optional


# =============================================================================
# Base Exceptions
# =============================================================================


class ReelLensError(Exception):
    """Base exception for all ReelLens errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RetryableError(ReelLensError):
    """
    Transient errors that may succeed on a later request.

    Examples: Rate limits, timeouts, temporary network issues.
    """

    pass


class PermanentError(ReelLensError):
    """
    Errors that won't be fixed by retrying.

    Examples: Invalid input, missing required data, authentication failures.
    """

    pass


# =============================================================================
# Request Errors
# =============================================================================


class InvalidRequestError(PermanentError):
    """Raised when a request is malformed (bad URL, wrong number of URLs)."""

    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidReelURLError(InvalidRequestError):
    """Raised when a URL does not point at an Instagram reel."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("Invalid Instagram Reel URL", {"url": url})


class NotFoundError(PermanentError):
    """Raised when no stored record matches the requested key."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


# =============================================================================
# Initialization Errors
# =============================================================================


class InitializationError(PermanentError):
    """Raised when a critical component fails to initialize."""

    def __init__(self, component: str, message: str, details: Optional[dict[str, Any]] = None):
        self.component = component
        super().__init__(f"[{component}] {message}", details)


class ConfigurationError(PermanentError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)


# =============================================================================
# Collector Errors
# =============================================================================


class CollectorError(ReelLensError):
    """Base exception for a single scraping provider failure."""

    code = "SCRAPING_ERROR"

    def __init__(
        self,
        collector_type: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.collector_type = collector_type
        super().__init__(f"[{collector_type}] {message}", details)


class CollectorRateLimitError(CollectorError, RetryableError):
    """Raised when a provider rate limits us."""

    pass


class CollectorTimeoutError(CollectorError, RetryableError):
    """Raised when a provider call times out."""

    pass


class CollectorAuthError(CollectorError, PermanentError):
    """Raised when provider authentication fails."""

    pass


class CollectorNotFoundError(CollectorError, PermanentError):
    """Raised when the provider has no data for the reel."""

    pass


# =============================================================================
# Scraping Errors
# =============================================================================


class ScrapingError(ReelLensError):
    """Raised when reel data could not be scraped."""

    code = "SCRAPING_ERROR"

    def __init__(
        self,
        message: str = "Failed to scrape Instagram data",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)


class AllProvidersFailedError(ScrapingError):
    """Raised after every configured provider has been tried and failed."""

    def __init__(self, url: str, errors: dict[str, str]):
        self.url = url
        self.errors = errors
        last_error = next(reversed(errors.values()), "No scraping providers configured")
        super().__init__(
            f"All scraping methods failed. Last error: {last_error}",
            {"url": url, "providers": list(errors.keys())},
        )


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(RetryableError):
    """Raised when the record store cannot be read or written."""

    code = "STORAGE_ERROR"
