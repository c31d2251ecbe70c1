"""Tests for eSIM provisioning."""

import httpx
import pytest

from travelfunnel.errors import ProvisioningError
from travelfunnel.flows.provisioning import AUTH_FAILED, PLAN_NOT_FOUND, EsimProvisioningFlow
from travelfunnel.integrations.contracts.esim_catalogue import BundleSelector, EsimBundle
from travelfunnel.integrations.contracts.interfaces import ProvisioningStatus

TARGET = "eSIM, 2GB, 15 Days, Global, V2"


class FakeEsimClient:
    def __init__(self, token="tok", bundles=None, list_error=None, cart_error=None, order=None):
        self.token = token
        self.bundles = bundles if bundles is not None else [EsimBundle("b-1", name=TARGET, description=TARGET)]
        self.list_error = list_error
        self.cart_error = cart_error
        self.order = order if order is not None else {"id": "so_1", "status": "completed"}
        self.calls = []

    async def get_token(self):
        self.calls.append(("token",))
        return self.token

    async def list_bundles(self, token):
        self.calls.append(("list", token))
        if self.list_error:
            raise self.list_error
        return self.bundles

    async def create_cart(self, token, bundle_id, reference):
        self.calls.append(("cart", bundle_id, reference))
        if self.cart_error:
            raise self.cart_error
        return [{"reference": reference}]

    async def create_sales_order(self, token, reference):
        self.calls.append(("order", reference))
        return self.order


def _flow(client):
    return EsimProvisioningFlow(client, BundleSelector(target_plan=TARGET))


@pytest.mark.asyncio
async def test_provision_issues_bundle_tagged_with_lead():
    client = FakeEsimClient()

    result = await _flow(client).provision("lead-1")

    assert result.status == ProvisioningStatus.ISSUED
    assert result.success
    assert result.payload == {"id": "so_1", "status": "completed"}
    assert ("cart", "b-1", "lead-1") in client.calls
    assert ("order", "lead-1") in client.calls


@pytest.mark.asyncio
async def test_missing_token_fails_authentication():
    client = FakeEsimClient(token=None)

    result = await _flow(client).provision("lead-1")

    assert result.status == ProvisioningStatus.ERROR
    assert result.error == AUTH_FAILED
    assert client.calls == [("token",)]


@pytest.mark.asyncio
async def test_keyword_fallback_when_exact_plan_missing():
    client = FakeEsimClient(bundles=[
        EsimBundle("b-eu", description="eSIM, 2GB, 7 Days, Europe"),
        EsimBundle("b-glb", description="eSIM 2GB Global 15d"),
    ])

    result = await _flow(client).provision("lead-1")

    assert result.success
    assert ("cart", "b-glb", "lead-1") in client.calls


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "client",
    [
        FakeEsimClient(bundles=[EsimBundle("b-eu", description="eSIM, 1GB, Europe")]),
        FakeEsimClient(list_error=httpx.ConnectError("down")),
        FakeEsimClient(bundles=[EsimBundle(None, name=TARGET, description=TARGET)]),
    ],
)
async def test_plan_not_found(client):
    result = await _flow(client).provision("lead-1")

    assert result.status == ProvisioningStatus.ERROR
    assert result.error == PLAN_NOT_FOUND
    assert not any(call[0] == "cart" for call in client.calls)


@pytest.mark.asyncio
async def test_cart_failure_is_captured_as_error():
    client = FakeEsimClient(cart_error=ProvisioningError("cart creation failed (HTTP 409)"))

    result = await _flow(client).provision("lead-1")

    assert result.status == ProvisioningStatus.ERROR
    assert result.error == "cart creation failed (HTTP 409)"
    assert not any(call[0] == "order" for call in client.calls)
    assert result.summary() == "eSIM: error. Details: Error: cart creation failed (HTTP 409)"


@pytest.mark.asyncio
async def test_list_payload_is_wrapped():
    client = FakeEsimClient(order=[{"id": "so_2"}])

    result = await _flow(client).provision("lead-1")

    assert result.payload == {"order": [{"id": "so_2"}]}
    assert result.summary() == 'eSIM: issued. Details: {"order":[{"id":"so_2"}]}'
