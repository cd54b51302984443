"""
Core infrastructure modules for ReelLens.

Provides common utilities used across the application:
- exceptions: Standardized exception hierarchy
- container: Dependency container building services from settings
- logging_config: structlog setup
"""

from reellens.core.exceptions import (
    ReelLensError,
    RetryableError,
    PermanentError,
    InvalidRequestError,
    InvalidReelURLError,
    NotFoundError,
    InitializationError,
    ConfigurationError,
    CollectorError,
    CollectorRateLimitError,
    CollectorTimeoutError,
    CollectorAuthError,
    CollectorNotFoundError,
    ScrapingError,
    AllProvidersFailedError,
    StorageError,
)

from reellens.core.logging_config import configure_logging

__all__ = [
    # Exceptions
    "ReelLensError",
    "RetryableError",
    "PermanentError",
    "InvalidRequestError",
    "InvalidReelURLError",
    "NotFoundError",
    "InitializationError",
    "ConfigurationError",
    "CollectorError",
    "CollectorRateLimitError",
    "CollectorTimeoutError",
    "CollectorAuthError",
    "CollectorNotFoundError",
    "ScrapingError",
    "AllProvidersFailedError",
    "StorageError",
    # Logging
    "configure_logging",
]
