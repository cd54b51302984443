"""Adapter registry for runtime provider selection.

Provides decorator-based registration and a factory function for reel
scraping adapters.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reellens.collectors.base import BaseReelAdapter


class AdapterType(Enum):
    """Supported scraping providers, in default preference order."""

    APIFY = "apify"
    RAPIDAPI = "rapidapi"
    HTML = "html"


# Highest-fidelity provider first, generic page scrape last.
DEFAULT_ADAPTER_ORDER: tuple[AdapterType, ...] = (
    AdapterType.APIFY,
    AdapterType.RAPIDAPI,
    AdapterType.HTML,
)

_adapters: dict[AdapterType, type["BaseReelAdapter"]] = {}


def register_adapter(adapter_type: AdapterType):
    """Decorator to register an adapter class.

    Args:
        adapter_type: The AdapterType enum value for this adapter.

    Returns:
        Decorator function that registers the class.

    Example:
        @register_adapter(AdapterType.APIFY)
        class ApifyReelAdapter(BaseReelAdapter):
            ...
    """

    def decorator(cls: type["BaseReelAdapter"]):
        _adapters[adapter_type] = cls
        return cls

    return decorator


def get_adapter(adapter_type: AdapterType, **kwargs: Any) -> "BaseReelAdapter":
    """Factory function to get an adapter instance.

    Args:
        adapter_type: The type of adapter to instantiate.
        **kwargs: Constructor arguments for the adapter.

    Returns:
        Instantiated adapter.

    Raises:
        ValueError: If the adapter type is not registered.
    """
    if adapter_type not in _adapters:
        raise ValueError(f"Unknown adapter type: {adapter_type}")
    return _adapters[adapter_type](**kwargs)


def list_adapters() -> list[AdapterType]:
    """List all registered adapter types.

    Returns:
        List of registered AdapterType values.
    """
    return list(_adapters.keys())
