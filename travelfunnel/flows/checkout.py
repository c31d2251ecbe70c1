"""
Checkout flow - charge, issue the policy, provision the eSIM, update the lead

Steps run strictly in order and nothing is rolled back. Only the charge can
fail the request; issuance and provisioning failures are recorded on the lead
and reported as status fields in a successful response.
"""

import logging
from typing import Any, Dict

import httpx

from travelfunnel.errors import PaymentFailed
from travelfunnel.integrations.contracts.interfaces import (
    CheckoutReport,
    CheckoutRequest,
    IssuanceResult,
    LeadStatus,
    ProvisioningResult,
    ProvisioningStatus,
)
from travelfunnel.integrations.policy.response_wrappers import IntegrationResponseError

logger = logging.getLogger(__name__)

ERROR_MESSAGE_LIMIT = 255


class CheckoutFlow:
    def __init__(self, payments_client, issuance_flow, provisioning_flow, lead_store):
        self.payments = payments_client
        self.issuance = issuance_flow
        self.provisioning = provisioning_flow
        self.leads = lead_store

    async def checkout(self, request: CheckoutRequest) -> CheckoutReport:
        lead_id = request.lead_id
        logger.info("[CHECKOUT] Charging lead=%s amount=%s", lead_id, request.amount)

        try:
            payment = await self.payments.submit_charge(request)
        except (IntegrationResponseError, httpx.HTTPError) as e:
            logger.warning("[CHECKOUT] Payment failed lead=%s: %s", lead_id, e)
            self._record(lead_id, {
                "status": LeadStatus.PAYMENT_FAILED.value,
                "last_error_message": f"PROD_ERROR: {e}"[:ERROR_MESSAGE_LIMIT],
            })
            raise PaymentFailed(str(e)) from e

        try:
            issuance = await self.issuance.issue(request)
        except Exception as e:
            logger.exception("[CHECKOUT] Issuance failed after payment lead=%s", lead_id)
            issuance = IssuanceResult.degraded(str(e))
            self._record(lead_id, {
                "last_error_message": f"PAYMENT OK, ISSUANCE FAILED: {e}"[:ERROR_MESSAGE_LIMIT],
            })

        try:
            provisioning = await self.provisioning.provision(lead_id)
        except Exception as e:
            logger.exception("[CHECKOUT] eSIM provisioning crashed lead=%s", lead_id)
            provisioning = ProvisioningResult(status=ProvisioningStatus.ERROR, error=str(e))

        report = CheckoutReport(lead_id=lead_id, payment=payment, issuance=issuance, provisioning=provisioning)
        self._record(lead_id, final_lead_update(report))

        logger.info(
            "[CHECKOUT] Completed lead=%s voucher=%s esim=%s degraded=%s",
            lead_id, issuance.voucher, provisioning.status.value, report.degraded,
        )
        return report

    def _record(self, lead_id: str, updates: Dict[str, Any]) -> None:
        """Best-effort lead update; a datastore failure never changes the checkout outcome."""
        try:
            matched = self.leads.update_lead(lead_id, updates)
        except Exception:
            logger.exception("[CHECKOUT] Lead update failed lead=%s", lead_id)
            return
        if not matched:
            logger.warning("[CHECKOUT] No lead row for lead=%s", lead_id)


def final_lead_update(report: CheckoutReport) -> Dict[str, Any]:
    return {
        "status": LeadStatus.COMPLETED.value,
        "insurance_voucher": report.issuance.voucher,
        "insurance_order_id": report.issuance.order_id,
        "ticket_link": report.issuance.download_link,
        "payment_confirmation_id": report.payment.confirmation_id,
        "recovery_notes": report.provisioning.summary(),
    }
