"""HTTP access for crawler pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

import aiohttp
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

import config
from utils.errors import (
    CAUSE_HTTP_STATUS,
    CAUSE_TIMEOUT,
    CAUSE_TRANSPORT,
    NetworkError,
    RateLimitError,
)

LOGGER = logging.getLogger(__name__)


def build_client_timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(
        total=config.CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS,
        connect=config.CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS,
        sock_read=config.CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS,
    )


def create_session() -> aiohttp.ClientSession:
    connector = aiohttp.TCPConnector(limit=config.CRAWLER_HTTP_CONCURRENCY_LIMIT, ttl_dns_cache=300)
    return aiohttp.ClientSession(timeout=build_client_timeout(), connector=connector)


class HtmlFetcher:
    """Fetches page markup with a fixed header template. Never retries."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ):
        self.session = session
        self.headers = dict(headers if headers is not None else config.CRAWLER_HEADERS)
        self.timeout = timeout or build_client_timeout()

    async def fetch(self, url: str) -> str:
        try:
            async with self.session.get(url, headers=self.headers, timeout=self.timeout) as response:
                if response.status == 429:
                    raise RateLimitError(url, CAUSE_HTTP_STATUS, status=response.status)
                if not 200 <= response.status < 300:
                    raise NetworkError(url, CAUSE_HTTP_STATUS, status=response.status)
                # undecodable bytes become U+FFFD rather than failing the page
                return await response.text(errors="replace")
        except NetworkError:
            raise
        except asyncio.TimeoutError as exc:
            raise NetworkError(url, CAUSE_TIMEOUT, detail=str(exc)) from exc
        except aiohttp.ClientError as exc:
            raise NetworkError(url, CAUSE_TRANSPORT, detail=f"{type(exc).__name__}:{exc}") from exc


class RetryingHtmlFetcher:
    """Wraps a fetcher with exponential backoff on transient network errors."""

    def __init__(
        self,
        fetcher,
        attempts: int = config.CRAWLER_FETCH_RETRY_ATTEMPTS,
        min_wait: float = 1,
        max_wait: float = 10,
    ):
        self.fetcher = fetcher
        self.attempts = max(1, int(attempts))
        self.min_wait = min_wait
        self.max_wait = max_wait

    async def fetch(self, url: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception(lambda exc: isinstance(exc, NetworkError) and exc.is_transient),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    LOGGER.warning("Retrying %s (attempt %s/%s)", url, attempt.retry_state.attempt_number, self.attempts)
                return await self.fetcher.fetch(url)
