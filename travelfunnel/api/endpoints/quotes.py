import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from travelfunnel.api.dependencies import get_quotation_flow
from travelfunnel.api.endpoints._body import read_json_object
from travelfunnel.flows.quotation import QuotationFlow, plans_to_response
from travelfunnel.validation import parse_quote_request

logger = logging.getLogger(__name__)

api = APIRouter()
quotes_api = api


@api.post("/quotes", tags=["Quotes"])
@api.post("/coris-proxy", tags=["Quotes"])
async def quote_plans(request: Request, flow: QuotationFlow = Depends(get_quotation_flow)) -> List[Dict[str, Any]]:
    """
    Priced travel-insurance plans for a trip, cheapest first.

    Body: {destination, days, ages[], tripType?, origin?}. An empty list means
    no plan is sold for the trip (or none survived the origin filter).
    """
    payload = await read_json_object(request)
    quote_request = parse_quote_request(payload)
    plans = await flow.quote(quote_request)
    return plans_to_response(plans)
