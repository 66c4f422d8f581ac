# Path: artifact_fetcher/engine/protocol_handlers.py
"""
Protocol Handlers

HTTP/HTTPS handler exposing response bodies as async chunk streams.
Handles headers, timeouts, and connection management.

Architecture:
- Async HTTP client with streaming (aiohttp)
- Transparent content-decoding disabled: bodies arrive byte-for-byte
- Shared session with connection pooling
- Optional timeouts (disabled by default)
- Every transport failure surfaces as NetworkError
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp

from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.core.errors import NetworkError
from artifact_fetcher.core.logger import get_logger
from artifact_fetcher.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_CONNECTIONS,
    HTTP_SUCCESS_MIN,
    HTTP_SUCCESS_MAX,
    LOG_INPUT,
    LOG_PROCESS,
)
from artifact_fetcher.engine.constants import (
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_ACCEPT_ENCODING,
    DEFAULT_ACCEPT_HEADER,
    IDENTITY_ENCODING,
    FORCE_CLOSE_CONNECTIONS,
)

logger = get_logger(__name__, 'engine')


class HTTPHandler:
    """
    HTTP/HTTPS streaming handler.

    Features:
    - Async HTTP with aiohttp
    - Streaming body access (memory-efficient)
    - Configurable timeouts, pool size and User-Agent

    Example:
        async with HTTPHandler() as handler:
            async with handler.stream(url) as body:
                async for chunk in body:
                    ...
    """

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize HTTP handler.

        Args:
            chunk_size: Maximum size of body chunks (from config if None)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = chunk_size if chunk_size is not None else \
            self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.timeout = self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.connect_timeout = self.config.get('connect_timeout', DEFAULT_CONNECT_TIMEOUT)
        self.max_connections = self.config.get('max_connections', DEFAULT_MAX_CONNECTIONS)
        self.user_agent = self.config.get('user_agent')

        self._session: Optional[aiohttp.ClientSession] = None

    @asynccontextmanager
    async def stream(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """
        Open a streaming GET request.

        The yielded iterator produces raw body chunks of at most
        chunk_size bytes. Transport errors raised while the body is
        being consumed inside the block are converted too.

        Args:
            url: Source URL
            headers: Optional custom headers

        Yields:
            Async iterator over body chunks

        Raises:
            NetworkError: On non-2xx status, connection failure or timeout
        """
        logger.info(f"{LOG_INPUT} Fetching: {url}")

        session = await self._get_session()

        try:
            async with session.get(url, headers=self._build_headers(headers)) as response:
                if not HTTP_SUCCESS_MIN <= response.status <= HTTP_SUCCESS_MAX:
                    raise NetworkError(
                        f"HTTP {response.status}: {response.reason}",
                        status_code=response.status,
                        reason=response.reason
                    )

                content_length = response.headers.get('Content-Length')
                if content_length:
                    logger.info(f"{LOG_PROCESS} Reading: {url} ({content_length} bytes)")
                else:
                    logger.info(f"{LOG_PROCESS} Reading: {url} (length unknown)")

                yield response.content.iter_chunked(self.chunk_size)

        except asyncio.TimeoutError as e:
            raise NetworkError(f"Timeout fetching {url}") from e

        except aiohttp.ClientError as e:
            raise NetworkError(f"HTTP error fetching {url}: {e}") from e

    def _build_headers(self, custom_headers: Optional[dict[str, str]] = None) -> dict[str, str]:
        """
        Build HTTP request headers.

        Args:
            custom_headers: Optional custom headers

        Returns:
            Dictionary of headers
        """
        headers = {
            HEADER_ACCEPT: DEFAULT_ACCEPT_HEADER,
            HEADER_ACCEPT_ENCODING: IDENTITY_ENCODING,
        }

        if self.user_agent:
            headers[HEADER_USER_AGENT] = self.user_agent

        if custom_headers:
            headers.update(custom_headers)

        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session.

        Returns:
            ClientSession instance
        """
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                force_close=FORCE_CLOSE_CONNECTIONS
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(
                    total=self.timeout or None,
                    connect=self.connect_timeout or None
                ),
                auto_decompress=False
            )

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


__all__ = ['HTTPHandler']
