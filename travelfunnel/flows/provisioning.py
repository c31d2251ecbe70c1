"""
eSIM provisioning flow - one bundle per paid checkout

Never raises: every failure becomes a ProvisioningResult with status ERROR and
the reason, so the checkout can record it next to the sale.
"""

import logging

import httpx

from travelfunnel.errors import ProvisioningError
from travelfunnel.integrations.contracts.esim_catalogue import BundleSelector, select_bundle
from travelfunnel.integrations.contracts.interfaces import ProvisioningResult, ProvisioningStatus

logger = logging.getLogger(__name__)

AUTH_FAILED = "authentication failed"
PLAN_NOT_FOUND = "plan not found"


class EsimProvisioningFlow:
    def __init__(self, esim_client, selector: BundleSelector):
        self.esim = esim_client
        self.selector = selector

    async def provision(self, lead_id: str) -> ProvisioningResult:
        logger.info("[ESIM] Provisioning lead=%s", lead_id)

        token = await self.esim.get_token()
        if not token:
            logger.warning("[ESIM] Authentication failed lead=%s", lead_id)
            return ProvisioningResult(status=ProvisioningStatus.ERROR, error=AUTH_FAILED)

        try:
            bundles = await self.esim.list_bundles(token)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("[ESIM] Price list lookup failed: %s", e)
            bundles = []

        bundle = select_bundle(bundles, self.selector)
        if bundle is None:
            logger.warning("[ESIM] No bundle matches %r lead=%s", self.selector.target_plan, lead_id)
            return ProvisioningResult(status=ProvisioningStatus.ERROR, error=PLAN_NOT_FOUND)

        try:
            await self.esim.create_cart(token, bundle.bundle_id, lead_id)
            order = await self.esim.create_sales_order(token, lead_id)
        except (ProvisioningError, httpx.HTTPError, ValueError) as e:
            logger.warning("[ESIM] Order failed lead=%s: %s", lead_id, e)
            return ProvisioningResult(status=ProvisioningStatus.ERROR, error=str(e))

        logger.info("[ESIM] Issued bundle %s lead=%s", bundle.bundle_id, lead_id)
        return ProvisioningResult(
            status=ProvisioningStatus.ISSUED,
            payload=order if isinstance(order, dict) else {"order": order},
        )
