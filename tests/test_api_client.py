"""Tests for the shared aiohttp client's error mapping."""

import asyncio

import aiohttp
import pytest

from adoptd.shared.core.exceptions import APITimeoutError, ExternalAPIError
from adoptd.shared.infrastructure.external_apis.api_client import APIClient


class RefusingSession:
    closed = False

    def __init__(self, error: Exception):
        self.error = error
        self.calls = 0

    def request(self, method, url, params=None):
        self.calls += 1
        raise self.error


@pytest.fixture
def client():
    return APIClient(base_url="https://api.example.com/v1/", api_name="example", api_key="k", max_retries=1)


class TestAPIClientErrors:
    async def test_connection_error_becomes_external_api_error(self, client):
        client.session = RefusingSession(aiohttp.ClientConnectionError("refused"))

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.get("current.json", {"q": "Moscow"})

        assert exc_info.value.details["api_name"] == "example"
        assert client.session.calls == 1

    async def test_timeout_becomes_api_timeout(self, client):
        client.session = RefusingSession(asyncio.TimeoutError())

        with pytest.raises(APITimeoutError):
            await client.get("current.json")

    async def test_close_without_session_is_noop(self, client):
        await client.close()

        assert client.session is None
