"""
Issuance flow - record and issue the travel policy after payment

Two back-office calls: GravarPedido records the order and returns its id,
EmitirPedido issues it and returns the voucher codes and ticket link. Both
answer HTTP 200 with an embedded `erro` code; anything other than "0" is a
failure carrying the vendor `mensagem`.
"""

import logging
from typing import List

from travelfunnel.errors import IssuanceError
from travelfunnel.integrations.contracts.interfaces import CheckoutRequest, IssuanceResult, IssuanceStatus, Traveler
from travelfunnel.integrations.soap import extract_tag_value, extract_tag_values
from travelfunnel.validation import digits_only

logger = logging.getLogger(__name__)

CARD_PAYMENT = "CARTAO"
VOUCHER_SEPARATOR = ", "


def normalize_birth_date(value: str) -> str:
    """DD/MM/YYYY -> YYYY-MM-DD; anything else is returned unchanged."""
    s = (value or "").strip()
    if "/" in s:
        parts = s.split("/")
        if len(parts) == 3:
            day, month, year = parts
            return f"{year}-{month}-{day}"
    return s


def build_passenger_list(travelers: List[Traveler]) -> str:
    """nome:sobrenome:cpf:nascimento:sexo per traveller, joined with "|"."""
    return "|".join(
        ":".join([t.first_name, t.surname, t.national_id, normalize_birth_date(t.birth_date), t.sex])
        for t in travelers
    )


def _raise_on_vendor_error(xml_text: str, operation: str) -> None:
    code = extract_tag_value(xml_text, "erro")
    if code and code != "0":
        message = extract_tag_value(xml_text, "mensagem") or f"error code {code}"
        raise IssuanceError(f"{operation} failed: {message}")


class InsuranceIssuanceFlow:
    def __init__(self, insurance_client):
        self.insurance = insurance_client

    def _order_params(self, request: CheckoutRequest) -> dict:
        buyer = request.buyer
        dates = request.dates
        return {
            "idplano": request.plan_id or "",
            "saida": dates.departure if dates else "",
            "retorno": dates.return_date if dates else "",
            "destino": request.destination or "",
            "passageiros": build_passenger_list(request.travelers),
            "contato": buyer.name if buyer else "",
            "email": buyer.email if buyer else "",
            "telefone": digits_only((buyer.phone if buyer else None) or request.contact_phone),
            "pagamento": CARD_PAYMENT,
        }

    async def issue(self, request: CheckoutRequest) -> IssuanceResult:
        """Record then issue the order. Raises on any failure; the caller degrades."""
        logger.info("[ISSUANCE] Recording order lead=%s plan=%s", request.lead_id, request.plan_id)
        recorded = await self.insurance.record_order(self._order_params(request))
        _raise_on_vendor_error(recorded, "GravarPedido")

        order_id = extract_tag_value(recorded, "idpedido")
        if not order_id:
            raise IssuanceError("GravarPedido failed: no idpedido in response")

        logger.info("[ISSUANCE] Issuing order %s lead=%s", order_id, request.lead_id)
        issued = await self.insurance.issue_order(order_id)
        _raise_on_vendor_error(issued, "EmitirPedido")

        link = extract_tag_value(issued, "linkbilhete") or extract_tag_value(issued, "url") or ""
        vouchers = extract_tag_values(issued, "voucher")
        logger.info("[ISSUANCE] Order %s issued with %d voucher(s)", order_id, len(vouchers))

        return IssuanceResult(
            status=IssuanceStatus.ISSUED,
            voucher=VOUCHER_SEPARATOR.join(vouchers),
            download_link=link,
            order_id=order_id,
        )
