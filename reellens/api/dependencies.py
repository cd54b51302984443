"""FastAPI dependency injection providers.

Route handlers receive services through these functions so tests can swap
them with ``app.dependency_overrides``.
"""

from fastapi import Depends

from reellens.core.container import DependencyContainer, get_container
from reellens.services.reconciler import ReelReconciler
from reellens.storage.base import ReelStore


def get_reconciler(
    container: DependencyContainer = Depends(get_container),
) -> ReelReconciler:
    """
    Get the record reconciler.

    Raises:
        InitializationError: If a required component is misconfigured.
    """
    return container.reconciler


def get_store(
    container: DependencyContainer = Depends(get_container),
) -> ReelStore:
    """
    Get the record store.

    Raises:
        InitializationError: If the storage backend is misconfigured.
    """
    return container.store
