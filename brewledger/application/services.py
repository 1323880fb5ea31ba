"""
Service factory functions for dependency injection.

Wires infrastructure implementations to the application layer. Use cases
fall back to these when no collaborator is injected.
"""

from brewledger.application.gateway import YearDatasetGateway
from brewledger.core.interfaces import IYearStore

# Singleton instances
_dataset_gateway: YearDatasetGateway | None = None


async def get_dataset_gateway(store: IYearStore | None = None) -> YearDatasetGateway:
    """
    Get or create the YearDatasetGateway.

    Args:
        store: Optional year store override; a new gateway is built around it

    Returns:
        Configured YearDatasetGateway
    """
    global _dataset_gateway

    if store is not None:
        return YearDatasetGateway(store)

    if _dataset_gateway is None:
        # Lazy import infrastructure to avoid circular imports
        from brewledger.infrastructure.storage.sqlite import get_year_store

        _dataset_gateway = YearDatasetGateway(await get_year_store())
    return _dataset_gateway


def reset_services() -> None:
    """Reset singleton instances (for testing)."""
    global _dataset_gateway
    _dataset_gateway = None
