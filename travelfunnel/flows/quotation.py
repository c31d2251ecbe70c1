"""
Quotation flow - list, filter and price travel plans for the storefront
"""

import asyncio
import logging
from typing import List, Optional

import httpx

from travelfunnel.errors import ServiceUnavailable
from travelfunnel.flows.coverage import baggage_label, extract_coverage_value, filter_by_origin, format_usd
from travelfunnel.integrations.contracts.interfaces import AgeBracketTally, PlanCandidate, PricedPlan, QuoteRequest
from travelfunnel.integrations.policy.response_wrappers import IntegrationResponseError
from travelfunnel.utils.config_loader import FunnelRules

logger = logging.getLogger(__name__)


class QuotationFlow:
    def __init__(self, insurance_client, rules: FunnelRules):
        self.insurance = insurance_client
        self.rules = rules

    async def quote(self, request: QuoteRequest) -> List[PricedPlan]:
        """Priced plans for the request, cheapest first.

        A failed listing call raises ServiceUnavailable; a failed pricing call
        only drops that plan.
        """
        tally = AgeBracketTally.from_ages(request.ages)
        logger.info(
            "[Quotation] destination=%s days=%s travellers=%s origin=%s",
            request.destination, request.days, tally.total, request.origin,
        )

        try:
            candidates = await self.insurance.list_plans(request.destination, request.days)
        except (httpx.HTTPError, IntegrationResponseError) as e:
            logger.error("[Quotation] Plan listing failed: %s", e)
            raise ServiceUnavailable("Insurance plan listing is unavailable") from e

        with_coverage = [(plan, extract_coverage_value(plan.name, plan.description)) for plan in candidates]
        eligible = filter_by_origin(with_coverage, request.origin, self.rules.origin_tiers)
        logger.info("[Quotation] %d listed, %d eligible", len(candidates), len(eligible))
        if not eligible:
            return []

        priced = await asyncio.gather(
            *(self._price(plan, coverage, request, tally) for plan, coverage in eligible)
        )
        plans = [plan for plan in priced if plan is not None]
        # sorted() is stable, so equal prices keep listing order
        return sorted(plans, key=lambda p: p.total_price)

    async def _price(
        self,
        plan: PlanCandidate,
        coverage: int,
        request: QuoteRequest,
        tally: AgeBracketTally,
    ) -> Optional[PricedPlan]:
        try:
            price = await self.insurance.price_plan(plan.plan_id, request.days, tally)
        except (httpx.HTTPError, IntegrationResponseError) as e:
            logger.warning("[Quotation] Dropping plan %s: %s", plan.plan_id, e)
            return None

        return PricedPlan(
            plan_id=plan.plan_id,
            name=plan.name,
            coverage_amount=coverage,
            coverage_label=format_usd(coverage),
            baggage_label=baggage_label(coverage, self.rules.baggage_tiers),
            total_price=price.total,
            trip_type_id=request.trip_type,
            per_person_price=price.per_person,
        )


def plans_to_response(plans: List[PricedPlan]) -> List[dict]:
    return [plan.to_dict() for plan in plans]
