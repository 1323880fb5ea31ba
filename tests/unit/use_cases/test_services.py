"""Unit tests for the service factories."""

from brewledger.application.gateway import YearDatasetGateway
from brewledger.application.services import get_dataset_gateway, reset_services


async def test_store_override_builds_new_gateway(store):
    first = await get_dataset_gateway(store)
    second = await get_dataset_gateway(store)

    assert isinstance(first, YearDatasetGateway)
    assert first is not second
    assert first.store is store


def test_reset_services():
    import brewledger.application.services as services_module

    services_module._dataset_gateway = object()
    reset_services()
    assert services_module._dataset_gateway is None
