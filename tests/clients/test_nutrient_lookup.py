"""Tests for the nutrient lookup client"""
import json

import httpx
import pytest

from nutrition_service.clients.nutrient_lookup import NutrientLookupClient
from nutrition_service.core.errors import UpstreamError
from nutrition_service.core.resilience import CallPolicy

URL = "http://nutrients.test/api/score"


def make_client(handler, url=URL):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NutrientLookupClient(url, http_client, CallPolicy(timeout=1.0, retries=1, wait=0))


class TestNutrientLookupClient:

    @pytest.mark.asyncio
    async def test_lookup_posts_values_and_returns_result(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"result": {"grade": "B"}, "extra": 1})

        client = make_client(handler)
        result = await client.lookup(3.8, 11.6, 0.07)

        assert result.result == {"grade": "B"}
        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert json.loads(requests[0].content) == {"fat": 3.8, "sugar": 11.6, "sodium": 0.07}

    @pytest.mark.asyncio
    async def test_missing_result_is_none(self):
        client = make_client(lambda request: httpx.Response(200, json={}))

        result = await client.lookup(1, 1, 1)

        assert result.result is None
        assert "result" not in result.model_fields_set

    @pytest.mark.asyncio
    async def test_null_result_is_kept(self):
        client = make_client(lambda request: httpx.Response(200, json={"result": None}))

        result = await client.lookup(1, 1, 1)

        assert "result" in result.model_fields_set

    @pytest.mark.asyncio
    async def test_error_status_is_upstream_error(self):
        client = make_client(lambda request: httpx.Response(503, text="down"))

        with pytest.raises(UpstreamError) as exc_info:
            await client.lookup(1, 1, 1)
        assert "503" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamError):
            await client.lookup(1, 1, 1)

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        client = make_client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(UpstreamError):
            await client.lookup(1, 1, 1)

    @pytest.mark.asyncio
    async def test_connection_error_is_retried_once(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamError):
            await client.lookup(1, 1, 1)
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_unconfigured_url(self):
        client = make_client(lambda request: httpx.Response(200, json={}), url=None)

        with pytest.raises(UpstreamError) as exc_info:
            await client.lookup(1, 1, 1)
        assert "NUTRIENT_API_URL" in exc_info.value.detail
