"""
Async HTTP Client for device-faker-templates

This module provides the asynchronous GET used by template discovery, built
on aiohttp with session management, connection pooling and a concurrency
limit. Requests are unauthenticated and never retried here; retrying is left
to the discovery fallback.
"""

import asyncio
import importlib.metadata
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector

from device_faker_templates.constants import (
    APP_NAME,
    DEFAULT_CONNECTOR_LIMIT,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_REQUEST_TIMEOUT,
    HTTP_STATUS_ERROR_THRESHOLD,
)
from device_faker_templates.exceptions import FetchError
from device_faker_templates.log_utils import logger
from device_faker_templates.models import FetchResponse

_USER_AGENT_CACHE: Optional[str] = None


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `device-faker-templates/{version}`, where `{version}` is the
        installed package version or `unknown`.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        try:
            app_version = importlib.metadata.version(APP_NAME)
        except importlib.metadata.PackageNotFoundError:
            app_version = "unknown"

        _USER_AGENT_CACHE = f"{APP_NAME}/{app_version}"

    return _USER_AGENT_CACHE


class AsyncTemplateClient:
    """
    Asynchronous HTTP client using aiohttp.

    Example:
        async with AsyncTemplateClient() as client:
            response = await client.fetch("https://gitee.com/api/v5/...")
            if response.ok:
                ...
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        connector_limit: int = DEFAULT_CONNECTOR_LIMIT,
    ) -> None:
        """
        Initialize the client.

        Parameters:
            timeout (float): Total request timeout in seconds.
            max_concurrent (int): Maximum requests in flight (semaphore limit).
            connector_limit (int): Maximum total connections in the pool.
        """

        def _clamp_positive(name: str, value: Any, default: int) -> int:
            try:
                parsed = int(value)
            except (TypeError, ValueError):
                logger.warning(
                    "Invalid %s value %r; using default of %d", name, value, default
                )
                return default
            if parsed <= 0:
                logger.warning("%s must be >= 1; clamping %d to 1", name, parsed)
                return 1
            return parsed

        self.timeout = ClientTimeout(total=timeout)
        self.max_concurrent = _clamp_positive(
            "max_concurrent", max_concurrent, DEFAULT_MAX_CONCURRENT
        )
        self.connector_limit = _clamp_positive(
            "connector_limit", connector_limit, DEFAULT_CONNECTOR_LIMIT
        )
        self._session: Optional[ClientSession] = None
        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._closed: bool = False

    async def __aenter__(self) -> "AsyncTemplateClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> ClientSession:
        """
        Ensure a session exists, creating one if needed.

        Returns:
            ClientSession: The active aiohttp session.
        """
        if self._session is None or self._session.closed:
            connector = TCPConnector(
                limit=self.connector_limit,
                limit_per_host=self.max_concurrent,
                enable_cleanup_closed=True,
            )
            self._session = ClientSession(
                connector=connector,
                timeout=self.timeout,
                headers=self._get_default_headers(),
            )
        return self._session

    def _get_default_headers(self) -> Dict[str, str]:
        return {"User-Agent": get_user_agent()}

    async def close(self) -> None:
        """Close the client session and release resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._closed = True

    async def fetch(self, url: str) -> FetchResponse:
        """
        Perform a GET request and return the status and decoded body.

        Non-success statuses are reported through `FetchResponse.ok` rather
        than raised, so callers decide what a bad status means to them.

        Parameters:
            url (str): Fully qualified URL.

        Returns:
            FetchResponse: `ok` is True for statuses below 400.

        Raises:
            FetchError: On connection, timeout or body decoding failures.
        """
        session = await self._ensure_session()

        async with self._semaphore:
            try:
                async with session.get(url) as response:
                    body = await response.text()
                    status = response.status
            except asyncio.TimeoutError as e:
                logger.debug(f"Timed out fetching {url}")
                raise FetchError("Request timed out", url=url) from e
            except aiohttp.ClientError as e:
                logger.debug(f"Network error fetching {url}: {e}")
                raise FetchError(f"Network error: {e}", url=url) from e
            except UnicodeDecodeError as e:
                raise FetchError(
                    "Response body is not valid text", url=url, details=str(e)
                ) from e

        logger.debug(f"GET {url} -> {status}")
        return FetchResponse(
            ok=status < HTTP_STATUS_ERROR_THRESHOLD,
            status=status,
            body=body,
            url=url,
        )


@asynccontextmanager
async def create_async_client(
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
) -> AsyncIterator[AsyncTemplateClient]:
    """
    Provide a configured AsyncTemplateClient and ensure it is closed after use.
    """
    client = AsyncTemplateClient(timeout=timeout, max_concurrent=max_concurrent)
    try:
        yield client
    finally:
        await client.close()
