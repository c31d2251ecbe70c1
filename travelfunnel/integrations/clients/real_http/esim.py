"""
Real eSIM provider HTTP client.

Endpoints (all JSON, bearer-token protected except auth):
- POST /auth/v1/token?grant_type=password
- GET  /rest/v1/price_list?select=*
- POST /rest/v1/cart
- POST /rest/v1/sales_order
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from travelfunnel.errors import ProvisioningError
from travelfunnel.integrations.contracts.esim_catalogue import EsimBundle
from travelfunnel.utils.config_loader import Settings

logger = logging.getLogger(__name__)


class EsimClient:
    def __init__(
        self,
        base_url: str,
        user: str,
        password: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.password = password
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "EsimClient":
        return cls(
            base_url=settings.ezsim_api_url,
            user=settings.ezsim_user,
            password=settings.ezsim_password,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds, transport=self._transport)

    @staticmethod
    def _auth_headers(token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def get_token(self) -> Optional[str]:
        """Password-grant token, or None when the provider can't be reached or refuses."""
        try:
            async with self._client() as client:
                response = await client.post(
                    "/auth/v1/token",
                    params={"grant_type": "password"},
                    json={"email": self.user, "password": self.password},
                )
                data = response.json()
        except (httpx.RequestError, ValueError) as e:
            logger.warning(f"eSIM authentication request failed: {e}")
            return None
        token = data.get("access_token") if isinstance(data, dict) else None
        return token or None

    async def list_bundles(self, token: str) -> List[EsimBundle]:
        async with self._client() as client:
            response = await client.get("/rest/v1/price_list", params={"select": "*"}, headers=self._auth_headers(token))
            response.raise_for_status()
            data = response.json()
        if not isinstance(data, list):
            return []
        return [EsimBundle.from_raw(item) for item in data if isinstance(item, dict)]

    async def create_cart(self, token: str, bundle_id: str, reference: str) -> Any:
        return await self._post(
            "/rest/v1/cart",
            token,
            {"organization_bundle_id": bundle_id, "quantity": 1, "reference": reference},
            failure="cart creation failed",
        )

    async def create_sales_order(self, token: str, reference: str) -> Any:
        return await self._post("/rest/v1/sales_order", token, {"reference": reference}, failure="sales order failed")

    async def _post(self, path: str, token: str, payload: Dict[str, Any], *, failure: str) -> Any:
        async with self._client() as client:
            response = await client.post(path, json=payload, headers=self._auth_headers(token))
        if not response.is_success:
            logger.error("eSIM %s returned %s", path, response.status_code)
            raise ProvisioningError(f"{failure} (HTTP {response.status_code})")
        return response.json() if response.content else None
