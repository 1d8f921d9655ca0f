"""
HTTP client utilities for external API calls.
"""

import time
from typing import Any, Dict, Optional

import httpx

from marketplace.config.logging import get_logger
from marketplace.infrastructure.monitoring.metrics import record_external_api_call

logger = get_logger(__name__)


class HTTPClient:
    """HTTP client for external API calls."""

    def __init__(
        self,
        service: str,
        base_url: str = "",
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service = service
        self.base_url = base_url
        self.headers = headers or {}
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Make a request, logging and timing it."""
        start_time = time.time()

        try:
            response = await self.client.request(
                method.upper(), url, json=data, headers=headers
            )
        except httpx.HTTPError as e:
            elapsed = time.time() - start_time
            record_external_api_call(self.service, 0, elapsed)
            logger.error(
                "HTTP request failed",
                service=self.service,
                method=method.upper(),
                url=url,
                error=str(e),
                response_time_ms=elapsed * 1000,
            )
            raise

        elapsed = time.time() - start_time
        record_external_api_call(self.service, response.status_code, elapsed)
        logger.debug(
            "HTTP request completed",
            service=self.service,
            method=method.upper(),
            url=url,
            status_code=response.status_code,
            response_time_ms=elapsed * 1000,
        )
        return response

    async def get(
        self, url: str, headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """Make GET request."""
        return await self.request("GET", url, headers=headers)

    async def post(
        self,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Make POST request."""
        return await self.request("POST", url, data=data, headers=headers)
