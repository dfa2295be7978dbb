"""
Nutrient Lookup Client

Posts a product's fat, sugar and sodium values to the external nutrient API
and returns the derived `result`.
"""

import asyncio
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from nutrition_service.core.config import Config
from nutrition_service.core.errors import UpstreamError
from nutrition_service.core.logger import logger
from nutrition_service.core.resilience import CallPolicy
from nutrition_service.middleware.correlation_id import get_correlation_id

SERVICE = "nutrient_lookup"


class NutrientLookupResult(BaseModel):
    result: Any = None


class NutrientLookupClient:
    """HTTP client for the nutrient lookup API"""

    def __init__(
        self,
        url: Optional[str],
        http_client: httpx.AsyncClient,
        policy: CallPolicy = CallPolicy(),
        correlation_id_header: str = "X-Correlation-ID",
    ):
        self.url = url
        self.http_client = http_client
        self.policy = policy
        self.correlation_id_header = correlation_id_header

    @classmethod
    def from_config(cls, config: Config, http_client: httpx.AsyncClient) -> "NutrientLookupClient":
        return cls(
            url=config.nutrient_api_url,
            http_client=http_client,
            policy=CallPolicy.from_config(config),
            correlation_id_header=config.correlation_id_header,
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[self.correlation_id_header] = correlation_id
        return headers

    async def _post(self, payload: dict) -> httpx.Response:
        response = await self.http_client.post(self.url, json=payload, headers=self._headers())
        response.raise_for_status()
        return response

    async def lookup(self, fat: float, sugar: float, sodium: float) -> NutrientLookupResult:
        if not self.url:
            raise UpstreamError(SERVICE, detail="NUTRIENT_API_URL is not configured")

        payload = {"fat": fat, "sugar": sugar, "sodium": sodium}
        try:
            response = await self.policy.run(
                "nutrient_lookup.lookup",
                lambda: self._post(payload),
                retry_on=(httpx.TransportError,),
            )
            data = response.json()
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
            raise UpstreamError(SERVICE, detail=f"{type(e).__name__}: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamError(SERVICE, detail="response body is not a JSON object")

        logger.debug(
            "Nutrient lookup completed",
            metadata={"event": "nutrient_lookup", "status_code": response.status_code},
        )
        if "result" not in data:
            return NutrientLookupResult()
        return NutrientLookupResult(result=data["result"])
