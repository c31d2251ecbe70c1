from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from .interfaces import CheckoutRequest

"""
Payment ingestion contract.

Defines the payload the payment-ingestion endpoint expects when a storefront
checkout is charged, plus the small helpers around it.

Used by both:
- clients/mocks/payments.py (deterministic confirmations, no network)
- clients/real_http/payments.py (real POST to the ingestion endpoint)
"""

INGESTION_TOPIC = "venda_stripe"
INGESTION_SOURCE = "api_backend"
DEFAULT_CONFIRMATION_ID = "ms_processed"


def amount_to_cents(amount: Decimal) -> int:
    """BRL amount -> integer cents, rounded half-up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_ingestion_payload(request: CheckoutRequest, *, tenant_id: str, origin_tag: str) -> Dict[str, Any]:
    buyer = request.buyer
    buyer_record: Dict[str, Any] = dict(buyer.raw) if buyer else {}
    addresses: List[Any] = [buyer.address] if buyer and buyer.address is not None else []

    return {
        "tenant_id": tenant_id,
        "tipo": "stripe",
        "cliente": buyer_record,
        "enderecos": addresses,
        "pagamento": {
            "amount_cents": amount_to_cents(request.amount),
            "currency": "brl",
            "descricao": f"Seguro Viagem Coris - {request.plan_name or ''}".rstrip(),
            "receipt_email": buyer.email if buyer else None,
            "metadata": {
                "lead_id_supabase": request.lead_id,
                "origem": origin_tag,
                "plano_id": request.plan_id,
            },
            "payment_method_id": request.payment_method_id,
        },
        "passageiros_extra": [t.raw for t in request.travelers],
    }


def ingestion_query_params(tenant_id: str) -> Dict[str, str]:
    return {"tenant_id": tenant_id, "topic": INGESTION_TOPIC, "source": INGESTION_SOURCE}


def confirmation_id_from(data: Dict[str, Any]) -> str:
    """Provider confirmation id from an ingestion response, or the generic marker."""
    stripe = data.get("stripe")
    if isinstance(stripe, dict) and stripe.get("id"):
        return str(stripe["id"])
    return DEFAULT_CONFIRMATION_ID
