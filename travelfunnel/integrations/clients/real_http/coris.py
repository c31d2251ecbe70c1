"""
Real insurance back-office SOAP client.

Purpose:
- Lists the plans sold for a destination/trip length
- Prices one plan for an age-bracket tally
- Records and issues policy orders after payment

Implementation notes:
- One httpx.AsyncClient per call, so concurrent pricing calls share nothing
- Transport failures and non-2xx statuses are raised to the caller; the flows
  decide which of them are fatal
- Credentials are sent inside the envelope and never logged
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from travelfunnel.integrations.contracts.interfaces import AgeBracketTally, PlanCandidate
from travelfunnel.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    PriceQuoteModel,
    normalize_plan_record,
    normalize_price_record,
)
from travelfunnel.integrations.soap import build_envelope, parse_records, soap_action
from travelfunnel.utils.config_loader import Settings

logger = logging.getLogger(__name__)

LIST_PLANS = "BuscarPlanosNovosV13"
PRICE_PLAN = "BuscarPrecosIndividualV13"
RECORD_ORDER = "GravarPedido"
ISSUE_ORDER = "EmitirPedido"


class CorisSoapClient:
    def __init__(
        self,
        url: str,
        login: str,
        password: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.login = login
        self.password = password
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "CorisSoapClient":
        return cls(
            url=settings.coris_url,
            login=settings.coris_login,
            password=settings.coris_password,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )

    async def call(self, method: str, params: Mapping[str, Any]) -> str:
        """POST one SOAP operation and return the raw response text."""
        envelope = build_envelope(method, {"login": self.login, "senha": self.password, **params})
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": soap_action(method),
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self.url, content=envelope.encode("utf-8"), headers=headers)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error calling {method}: {e.response.status_code}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error calling {method}: {e}")
            raise

    async def list_plans(self, destination: str, days: int) -> List[PlanCandidate]:
        text = await self.call(LIST_PLANS, {"destino": destination, "vigencia": days})
        plans: List[PlanCandidate] = []
        for record in parse_records(text, "buscaPlanos"):
            try:
                plans.append(normalize_plan_record(record))
            except IntegrationResponseError as e:
                logger.warning(f"Skipping unusable plan record from {LIST_PLANS}: {e}")
        return plans

    async def price_plan(self, plan_id: str, days: int, tally: AgeBracketTally) -> PriceQuoteModel:
        text = await self.call(PRICE_PLAN, {"idplano": plan_id, "dias": days, **tally.as_params()})
        records = parse_records(text, "buscaPrecos")
        return normalize_price_record(records[0] if records else None)

    async def record_order(self, params: Dict[str, Any]) -> str:
        return await self.call(RECORD_ORDER, params)

    async def issue_order(self, order_id: str) -> str:
        return await self.call(ISSUE_ORDER, {"idpedido": order_id})
