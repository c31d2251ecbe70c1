import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from travelfunnel.api.dependencies import get_checkout_flow
from travelfunnel.api.endpoints._body import read_json_object
from travelfunnel.flows.checkout import CheckoutFlow
from travelfunnel.validation import parse_checkout_request

logger = logging.getLogger(__name__)

api = APIRouter()
checkout_api = api


@api.post("/checkout", tags=["Checkout"])
@api.post("/process-payment", tags=["Checkout"])
async def checkout(request: Request, flow: CheckoutFlow = Depends(get_checkout_flow)) -> Dict[str, Any]:
    """
    Charge the card, then issue the policy and the eSIM.

    Answers 400 only when the charge fails. Once paid, the response is a
    success even if issuance or provisioning degraded; their outcome is in
    voucherNumber/downloadLink/ezsimStatus.
    """
    payload = await read_json_object(request)
    checkout_request = parse_checkout_request(payload)
    report = await flow.checkout(checkout_request)
    if report.degraded:
        logger.warning("Checkout for lead %s completed degraded", report.lead_id)
    return report.to_response()
