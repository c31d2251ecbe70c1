"""Tests for the quote aggregator."""

import itertools
from decimal import Decimal

import httpx
import pytest

from travelfunnel.errors import ServiceUnavailable
from travelfunnel.flows.quotation import QuotationFlow, plans_to_response
from travelfunnel.integrations.contracts.interfaces import QuoteRequest
from travelfunnel.integrations.policy.response_wrappers import IntegrationResponseError


def _request(**overrides):
    data = {"destination": "4", "days": 10, "ages": [30], "trip_type": "1", "origin": None}
    data.update(overrides)
    return QuoteRequest(**data)


@pytest.mark.asyncio
async def test_quote_sorts_by_total_price(make_plan, insurance_factory, rules):
    client = insurance_factory(
        plans=[make_plan("a", "CORIS 60"), make_plan("b", "CORIS 100"), make_plan("c", "CORIS 250")],
        prices={"a": "500", "b": "100", "c": "300"},
    )

    plans = await QuotationFlow(client, rules).quote(_request())

    assert [p.total_price for p in plans] == [Decimal("100"), Decimal("300"), Decimal("500")]
    assert [p.plan_id for p in plans] == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_quote_order_is_independent_of_listing_order(make_plan, insurance_factory, rules):
    prices = {"a": "500", "b": "100", "c": "300"}
    names = {"a": "CORIS 60", "b": "CORIS 100", "c": "CORIS 250"}
    for order in itertools.permutations("abc"):
        client = insurance_factory(plans=[make_plan(pid, names[pid]) for pid in order], prices=prices)
        plans = await QuotationFlow(client, rules).quote(_request())
        assert [p.plan_id for p in plans] == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_equal_prices_keep_listing_order(make_plan, insurance_factory, rules):
    client = insurance_factory(
        plans=[make_plan("x", "CORIS 60"), make_plan("y", "CORIS 100"), make_plan("z", "CORIS 30")],
        prices={"x": "200", "y": "200", "z": "50"},
    )

    plans = await QuotationFlow(client, rules).quote(_request())

    assert [p.plan_id for p in plans] == ["z", "x", "y"]


@pytest.mark.asyncio
async def test_priced_plan_carries_labels_and_trip_type(make_plan, insurance_factory, rules):
    client = insurance_factory(plans=[make_plan("a", "CORIS 100 MUNDO")], prices={"a": "321.50"})

    [priced] = await QuotationFlow(client, rules).quote(_request(trip_type="2"))

    assert priced.to_dict() == {
        "id": "a",
        "nome": "CORIS 100 MUNDO",
        "dmh": "USD 100.000",
        "bagagem": "USD 2.000",
        "coverageAmount": 100_000,
        "originalPriceTotalBRL": 321.5,
        "tripTypeId": "2",
    }


@pytest.mark.asyncio
async def test_failed_pricing_call_drops_only_that_plan(make_plan, insurance_factory, rules):
    client = insurance_factory(
        plans=[make_plan("a", "CORIS 60"), make_plan("b", "CORIS 100"), make_plan("c", "CORIS 250")],
        prices={
            "a": IntegrationResponseError("Pricing response has no buscaPrecos record."),
            "b": "100",
            "c": httpx.ConnectError("connection refused"),
        },
    )

    plans = await QuotationFlow(client, rules).quote(_request())

    assert [p.plan_id for p in plans] == ["b"]
    assert len(client.priced) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("down"), IntegrationResponseError("Malformed SOAP response")],
)
async def test_failed_listing_raises_service_unavailable(insurance_factory, rules, error):
    client = insurance_factory(list_error=error)

    with pytest.raises(ServiceUnavailable):
        await QuotationFlow(client, rules).quote(_request())


@pytest.mark.asyncio
async def test_origin_filter_limits_pricing_calls(make_plan, insurance_factory, rules):
    client = insurance_factory(
        plans=[make_plan("a", "CORIS 30"), make_plan("b", "CORIS 60"), make_plan("c", "CORIS 2.000.000")],
        prices={"a": "10", "b": "20", "c": "30"},
    )

    plans = await QuotationFlow(client, rules).quote(_request(origin="sempre_unico"))

    assert [p.plan_id for p in plans] == ["b"]
    assert [call[0] for call in client.priced] == ["b"]


@pytest.mark.asyncio
async def test_no_eligible_plans_returns_empty_list(make_plan, insurance_factory, rules):
    client = insurance_factory(plans=[make_plan("a", "CORIS 30")], prices={"a": "10"})

    assert await QuotationFlow(client, rules).quote(_request(origin="sempre_unico")) == []
    assert client.priced == []


@pytest.mark.asyncio
async def test_pricing_receives_age_bracket_tally(make_plan, insurance_factory, rules):
    client = insurance_factory(plans=[make_plan("a", "CORIS 60")], prices={"a": "10"})

    await QuotationFlow(client, rules).quote(_request(ages=[30, 70, 90], days=7))

    plan_id, days, tally = client.priced[0]
    assert (plan_id, days) == ("a", 7)
    assert tally.as_params() == {"pax065": 1, "pax070": 1, "pax075": 0, "pax080": 0, "pax085": 1}


@pytest.mark.asyncio
async def test_plans_to_response_uses_storefront_keys(make_plan, insurance_factory, rules):
    client = insurance_factory(plans=[make_plan("a", "CORIS 60")], prices={"a": "10"})
    body = plans_to_response(await QuotationFlow(client, rules).quote(_request()))
    assert set(body[0]) == {"id", "nome", "dmh", "bagagem", "coverageAmount", "originalPriceTotalBRL", "tripTypeId"}
