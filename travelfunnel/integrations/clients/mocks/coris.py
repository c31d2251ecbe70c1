"""
Insurance back-office - MOCK client.

⚠️  This is a mock implementation for development and testing.
    It never reaches the SOAP service: plans come from the seed list below and
    prices are derived from a per-plan daily rate, so quotes are stable
    between runs. Order recording and issuance answer with canned XML shaped
    like the vendor's responses, so the issuance flow parses them the same way.
"""

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Set

from travelfunnel.integrations.contracts.interfaces import AgeBracketTally, PlanCandidate
from travelfunnel.integrations.policy.response_wrappers import IntegrationResponseError, PriceQuoteModel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_PLANS: List[Dict[str, str]] = [
    {"id": "MOCK-30", "nome": "CORIS 30 MUNDO", "descricao": "DMH USD 30.000", "daily_rate": "9,80"},
    {"id": "MOCK-60", "nome": "CORIS 60 MUNDO", "descricao": "DMH USD 60.000", "daily_rate": "14,50"},
    {"id": "MOCK-100", "nome": "CORIS 100 MUNDO", "descricao": "DMH USD 100.000", "daily_rate": "19,90"},
    {"id": "MOCK-250", "nome": "CORIS 250 MUNDO", "descricao": "DMH USD 250.000", "daily_rate": "31,40"},
    {"id": "MOCK-1M", "nome": "CORIS 1.000.000 MUNDO", "descricao": "DMH USD 1.000.000", "daily_rate": "58,00"},
]

# Older travellers cost more; multipliers per vendor age bracket.
_BRACKET_LOADING: Dict[str, Decimal] = {
    "pax065": Decimal("1.0"),
    "pax070": Decimal("1.5"),
    "pax075": Decimal("2.0"),
    "pax080": Decimal("2.5"),
    "pax085": Decimal("3.0"),
}


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class MockCorisClient:
    """
    Mock insurance back-office client.

    Parameters
    ----------
    unpriced_plan_ids : set of str
        Plans whose pricing call fails, to exercise the drop-on-failure path.
    reject_orders : bool
        If True, order recording answers with a vendor error. Default False.
    """

    def __init__(self, unpriced_plan_ids: Set[str] = frozenset(), reject_orders: bool = False):
        self._unpriced = set(unpriced_plan_ids)
        self._reject_orders = reject_orders
        self._orders: Dict[str, Dict[str, Any]] = {}
        logger.info("[CORIS MOCK] Client initialised (%d plans)", len(_MOCK_PLANS))

    async def list_plans(self, destination: str, days: int) -> List[PlanCandidate]:
        logger.info("[CORIS MOCK] Listing plans destination=%s days=%s", destination, days)
        return [
            PlanCandidate(
                plan_id=plan["id"],
                name=plan["nome"],
                attributes={k: v for k, v in plan.items() if k != "daily_rate"},
            )
            for plan in _MOCK_PLANS
        ]

    async def price_plan(self, plan_id: str, days: int, tally: AgeBracketTally) -> PriceQuoteModel:
        plan = next((p for p in _MOCK_PLANS if p["id"] == plan_id), None)
        if plan is None or plan_id in self._unpriced:
            raise IntegrationResponseError(f"[CORIS MOCK] No price for plan {plan_id}")

        daily = Decimal(plan["daily_rate"].replace(",", "."))
        total = Decimal("0")
        for label, count in tally.as_params().items():
            total += daily * _BRACKET_LOADING[label] * days * count
        total = total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        per_person = (total / tally.total).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if tally.total else None

        return PriceQuoteModel(
            total=total,
            per_person=per_person,
            raw={"totalrs": _brl(total), "precoindividualrs": _brl(per_person) if per_person else ""},
        )

    async def record_order(self, params: Dict[str, Any]) -> str:
        if self._reject_orders:
            logger.info("[CORIS MOCK] Rejecting order for plan %s", params.get("idplano"))
            return _soap_result("GravarPedido", "<erro>1</erro><mensagem>Plano indisponivel (mock)</mensagem>")

        order_id = f"MOCK-{uuid.uuid4().hex[:8].upper()}"
        self._orders[order_id] = dict(params)
        logger.info("[CORIS MOCK] Recorded order %s for plan %s", order_id, params.get("idplano"))
        return _soap_result("GravarPedido", f"<erro>0</erro><idpedido>{order_id}</idpedido>")

    async def issue_order(self, order_id: str) -> str:
        if order_id not in self._orders:
            return _soap_result("EmitirPedido", "<erro>2</erro><mensagem>Pedido inexistente (mock)</mensagem>")

        passengers = str(self._orders[order_id].get("passageiros") or "").split("|")
        vouchers = "".join(f"<voucher>V{order_id[5:]}{i:02d}</voucher>" for i, _ in enumerate(passengers, start=1))
        link = f"https://mock.coris.local/bilhete/{order_id}.pdf"
        logger.info("[CORIS MOCK] Issued order %s", order_id)
        return _soap_result("EmitirPedido", f"<erro>0</erro>{vouchers}<linkbilhete>{link}</linkbilhete>")


def _brl(amount: Decimal) -> str:
    return f"{amount:.2f}".replace(".", ",")


def _soap_result(method: str, body: str) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">'
        f'<soap:Body><{method}Response xmlns="http://www.coris.com.br/WebService/">'
        f"<{method}Result>{body}</{method}Result>"
        f"</{method}Response></soap:Body></soap:Envelope>"
    )
