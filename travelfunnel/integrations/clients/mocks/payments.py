"""
Payment ingestion - MOCK client.

⚠️  This is a mock implementation for development and testing.
    No card is charged. Any payment method id starting with "pm_fail" is
    declined, everything else is accepted with a fake confirmation id.
"""

import logging
import uuid
from typing import Dict, List

from travelfunnel.integrations.contracts.interfaces import CheckoutRequest, PaymentConfirmation
from travelfunnel.integrations.contracts.payments import amount_to_cents
from travelfunnel.integrations.policy.response_wrappers import PaymentDeclinedError

logger = logging.getLogger(__name__)

DECLINE_PREFIX = "pm_fail"


class MockPaymentsClient:
    def __init__(self) -> None:
        # In-memory ledger (reset on restart)
        self.charges: List[Dict[str, object]] = []
        logger.info("[PAYMENTS MOCK] Client initialised")

    async def submit_charge(self, request: CheckoutRequest) -> PaymentConfirmation:
        cents = amount_to_cents(request.amount)
        logger.info("[PAYMENTS MOCK] Charge lead=%s amount_cents=%s", request.lead_id, cents)

        if request.payment_method_id.startswith(DECLINE_PREFIX):
            raise PaymentDeclinedError(
                "Payment declined: {\"error\":\"card_declined\"}",
                payload={"status_code": 402},
            )

        confirmation_id = f"pi_mock_{uuid.uuid4().hex[:16]}"
        self.charges.append({"lead_id": request.lead_id, "amount_cents": cents, "confirmation_id": confirmation_id})
        return PaymentConfirmation(confirmation_id=confirmation_id, raw={"stripe": {"id": confirmation_id}})
