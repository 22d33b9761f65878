# 📄 File: adoptd/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A reliable messenger for talking to outside services like the weather provider,
# which waits sensibly, tries again when the network hiccups, and reports clear errors.

# 🧪 Purpose (Technical Summary):
# Generic async HTTP client over aiohttp with tenacity retries for transient network
# failures, status-code to exception mapping, query-string API key injection and
# per-call timing logs.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - tenacity: Retry logic and backoff strategies
# - adoptd.shared.core.exceptions: ExternalAPIError, APITimeoutError

# 🔄 Connected Modules / Calls From:
# Used by: WeatherAPI.com client (care_advice module)

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from adoptd.shared.core.exceptions import APITimeoutError, ExternalAPIError
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)
retry_logger = logging.getLogger(__name__)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - Automatic retry with exponential backoff on connection errors and timeouts
    - API key passed as a query parameter
    - Status code to exception mapping
    - Per-call timing logs
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        api_key: Optional[str] = None,
        api_key_param: str = "key",
        timeout: int = 30,
        max_retries: int = 3,
    ):
        """Initialize API client with configuration."""
        self.base_url = base_url.rstrip('/')
        self.api_name = api_name
        self.api_key = api_key
        self.api_key_param = api_key_param
        self.timeout = timeout
        self.max_retries = max_retries

        self.session: Optional[ClientSession] = None

    async def initialize(self):
        """Initialize the client session."""
        if self.session and not self.session.closed:
            return
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            connector=aiohttp.TCPConnector(limit=10, limit_per_host=5, ttl_dns_cache=300),
            headers={
                'User-Agent': f'ADOPTD/1.0 ({self.api_name}-client)',
                'Accept': 'application/json',
            },
        )
        logger.info(f"API client initialized for {self.api_name}")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make GET request with retries."""
        return await self._make_request('GET', endpoint, params)

    async def _make_request(self, method: str, endpoint: str,
                            params: Optional[Dict[str, Any]] = None) -> Any:
        await self.initialize()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        query = dict(params or {})
        if self.api_key:
            query[self.api_key_param] = self.api_key

        start_time = time.monotonic()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=8),
                retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
                before_sleep=before_sleep_log(retry_logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    async with self.session.request(method, url, params=query) as response:
                        await self._handle_response_status(response)
                        data = await response.json(content_type=None)
        except Exception as e:
            error = self._transform_exception(e, method, endpoint)
            logger.log_external_api_call(
                api_name=self.api_name,
                endpoint=endpoint,
                status_code=getattr(error, 'details', {}).get('api_status_code') or 0,
                duration_ms=(time.monotonic() - start_time) * 1000,
                success=False,
            )
            raise error

        logger.log_external_api_call(
            api_name=self.api_name,
            endpoint=endpoint,
            status_code=200,
            duration_ms=(time.monotonic() - start_time) * 1000,
            success=True,
        )
        return data

    async def _handle_response_status(self, response: aiohttp.ClientResponse):
        """Handle HTTP response status codes."""
        if response.status == 200:
            return

        try:
            body = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            body = {'raw_response': await response.text()}

        if 400 <= response.status < 500:
            message = f"Client error for {self.api_name} ({response.status})"
        else:
            message = f"Server error for {self.api_name} ({response.status})"

        raise ExternalAPIError(
            message=message,
            api_name=self.api_name,
            api_status_code=response.status,
            api_response=body if isinstance(body, dict) else {'body': body},
        )

    def _transform_exception(self, exception: Exception, method: str, endpoint: str) -> Exception:
        """Transform exceptions to appropriate API exceptions."""
        if isinstance(exception, ExternalAPIError):
            return exception
        if isinstance(exception, asyncio.TimeoutError):
            return APITimeoutError(self.api_name, self.timeout)
        if isinstance(exception, aiohttp.ClientError):
            return ExternalAPIError(
                message=f"{method} {endpoint} failed for {self.api_name}: {exception}",
                api_name=self.api_name,
            )
        return exception
