"""
eSIM provider - MOCK client.

⚠️  This is a mock implementation for development and testing.
    Serves a small local price list and accepts every cart and sales order.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from travelfunnel.integrations.contracts.esim_catalogue import EsimBundle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_PRICE_LIST: List[Dict[str, Any]] = [
    {"id": "bndl-eu-1gb", "name": "eSIM, 1GB, 7 Days, Europe", "description": "eSIM, 1GB, 7 Days, Europe"},
    {"id": "bndl-glb-2gb", "name": "eSIM, 2GB, 15 Days, Global, V2", "description": "eSIM, 2GB, 15 Days, Global, V2"},
    {"id": "bndl-glb-5gb", "name": "eSIM, 5GB, 30 Days, Global", "description": "eSIM, 5GB, 30 Days, Global"},
]


class MockEsimClient:
    def __init__(self, authenticate: bool = True) -> None:
        self._authenticate = authenticate
        self._carts: Dict[str, str] = {}
        logger.info("[ESIM MOCK] Client initialised")

    async def get_token(self) -> Optional[str]:
        if not self._authenticate:
            return None
        return f"mock-token-{uuid.uuid4().hex[:8]}"

    async def list_bundles(self, token: str) -> List[EsimBundle]:
        return [EsimBundle.from_raw(item) for item in _MOCK_PRICE_LIST]

    async def create_cart(self, token: str, bundle_id: str, reference: str) -> Any:
        self._carts[reference] = bundle_id
        logger.info("[ESIM MOCK] Cart %s -> %s", reference, bundle_id)
        return [{"reference": reference, "organization_bundle_id": bundle_id, "quantity": 1}]

    async def create_sales_order(self, token: str, reference: str) -> Any:
        bundle_id = self._carts.pop(reference, None)
        return [{
            "id": f"so_{uuid.uuid4().hex[:10]}",
            "reference": reference,
            "organization_bundle_id": bundle_id,
            "status": "completed",
        }]
