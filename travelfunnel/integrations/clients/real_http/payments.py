"""
Real payment-ingestion HTTP client.

Submits the card charge for a checkout to the payment-ingestion endpoint,
which forwards it to the card processor.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from travelfunnel.integrations.contracts.interfaces import CheckoutRequest, PaymentConfirmation
from travelfunnel.integrations.contracts.payments import build_ingestion_payload, ingestion_query_params
from travelfunnel.integrations.policy.response_wrappers import (
    PaymentDeclinedError,
    normalize_ingestion_response,
)
from travelfunnel.utils.config_loader import Settings

logger = logging.getLogger(__name__)


class PaymentIngestionClient:
    def __init__(
        self,
        ingest_url: str,
        tenant_id: str,
        origin_tag: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.ingest_url = ingest_url
        self.tenant_id = tenant_id
        self.origin_tag = origin_tag
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PaymentIngestionClient":
        return cls(
            ingest_url=settings.payment_ingest_url,
            tenant_id=settings.payment_tenant_id,
            origin_tag=settings.payment_origin_tag,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )

    async def submit_charge(self, request: CheckoutRequest) -> PaymentConfirmation:
        payload = build_ingestion_payload(request, tenant_id=self.tenant_id, origin_tag=self.origin_tag)
        params = ingestion_query_params(self.tenant_id)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self.ingest_url, params=params, json=payload)
        except httpx.RequestError as e:
            logger.error(f"Request error connecting to payment ingestion: {e}")
            raise PaymentDeclinedError(f"Payment service unreachable: {e}") from e

        body = response.text
        if not response.is_success:
            logger.warning("Payment ingestion refused lead %s: status=%s", request.lead_id, response.status_code)
            raise PaymentDeclinedError(
                f"Payment declined: {body}",
                payload={"status_code": response.status_code, "body": body[:500]},
            )

        normalized = normalize_ingestion_response(_decode_body(body))
        logger.info("Payment accepted for lead %s: confirmation=%s", request.lead_id, normalized.confirmation_id)
        return PaymentConfirmation(confirmation_id=normalized.confirmation_id, raw=normalized.raw)


def _decode_body(body: str) -> Dict[str, Any]:
    """Ingestion sometimes answers 2xx with plain text; keep it as a message."""
    try:
        data = json.loads(body) if body else {}
    except json.JSONDecodeError:
        return {"message": body}
    return data if isinstance(data, dict) else {"message": body, "data": data}
