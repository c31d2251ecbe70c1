"""Pytest fixtures and fake collaborators for the funnel flows."""

from decimal import Decimal
from typing import Any, Dict, List

import pytest

from travelfunnel.database.postgres import LeadStore
from travelfunnel.integrations.contracts.interfaces import (
    Buyer,
    CheckoutRequest,
    PlanCandidate,
    TravelDates,
    Traveler,
)
from travelfunnel.integrations.policy.response_wrappers import PriceQuoteModel
from travelfunnel.utils.config_loader import FunnelRules


class FakeInsuranceClient:
    """Records every call; prices map plan id -> Decimal or an exception to raise."""

    def __init__(self, plans=None, prices=None, list_error=None, record_xml="", issue_xml=""):
        self.plans: List[PlanCandidate] = list(plans or [])
        self.prices: Dict[str, Any] = dict(prices or {})
        self.list_error = list_error
        self.record_xml = record_xml
        self.issue_xml = issue_xml
        self.priced: List[tuple] = []
        self.recorded: List[Dict[str, Any]] = []
        self.issued: List[str] = []

    async def list_plans(self, destination: str, days: int) -> List[PlanCandidate]:
        if self.list_error:
            raise self.list_error
        return list(self.plans)

    async def price_plan(self, plan_id, days, tally) -> PriceQuoteModel:
        self.priced.append((plan_id, days, tally))
        price = self.prices[plan_id]
        if isinstance(price, Exception):
            raise price
        return PriceQuoteModel(total=Decimal(price))

    async def record_order(self, params: Dict[str, Any]) -> str:
        self.recorded.append(params)
        return self.record_xml

    async def issue_order(self, order_id: str) -> str:
        self.issued.append(order_id)
        return self.issue_xml


def plan(plan_id: str, name: str, **attributes) -> PlanCandidate:
    return PlanCandidate(plan_id=plan_id, name=name, attributes={"id": plan_id, "nome": name, **attributes})


@pytest.fixture
def rules():
    return FunnelRules()


@pytest.fixture
def lead_store():
    """In-memory LeadStore with one known lead."""
    store = LeadStore()
    store.add_lead("lead-1")
    return store


@pytest.fixture
def checkout_request():
    return CheckoutRequest(
        payment_method_id="pm_card_visa",
        lead_id="lead-1",
        amount=Decimal("199.90"),
        plan_id="60",
        plan_name="CORIS 60",
        destination="4",
        buyer=Buyer(
            name="Ana Souza",
            email="ana@example.com",
            phone="(11) 99999-0000",
            address={"cep": "01000-000"},
            raw={"nome": "Ana Souza", "email": "ana@example.com"},
        ),
        travelers=[
            Traveler("Ana", "Souza", "12345678909", "31/12/1990", "F", raw={"nome": "Ana"}),
            Traveler("Bruno", "Lima", "98765432100", "1985-01-02", "M", raw={"nome": "Bruno"}),
        ],
        dates=TravelDates(departure="2026-12-01", return_date="2026-12-10"),
        contact_phone="+55 21 3333-4444",
    )


def soap_body(inner: str, method: str = "Operation") -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"><soap:Body>'
        f'<{method}Response xmlns="http://www.coris.com.br/WebService/"><{method}Result>{inner}</{method}Result>'
        f"</{method}Response></soap:Body></soap:Envelope>"
    )


@pytest.fixture
def make_soap():
    return soap_body


@pytest.fixture
def make_plan():
    return plan


def fake_insurance(**kwargs) -> FakeInsuranceClient:
    return FakeInsuranceClient(**kwargs)


@pytest.fixture
def insurance_factory():
    return fake_insurance
