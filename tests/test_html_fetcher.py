import asyncio
import sys
from pathlib import Path

import aiohttp
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

import config
from services.html_fetcher import HtmlFetcher, RetryingHtmlFetcher, build_client_timeout
from utils.errors import (
    CAUSE_HTTP_STATUS,
    CAUSE_TIMEOUT,
    CAUSE_TRANSPORT,
    NetworkError,
    RateLimitError,
)


class FakeResponse:
    def __init__(self, status, body=""):
        self.status = status
        self._body = body

    async def text(self, encoding=None, errors="strict"):
        if isinstance(self._body, bytes):
            return self._body.decode(encoding or "utf-8", errors)
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def test_fetch_returns_body_and_sends_header_template():
    session = FakeSession([FakeResponse(200, "<html>ok</html>")])
    fetcher = HtmlFetcher(session)

    body = asyncio.run(fetcher.fetch("https://m.comic.naver.com/webtoon/weekday?week=mon"))

    assert body == "<html>ok</html>"
    call = session.calls[0]
    assert call["headers"] == dict(config.CRAWLER_HEADERS)
    assert call["timeout"].total == config.CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS


def test_undecodable_bytes_are_replaced_not_raised():
    session = FakeSession([FakeResponse(200, b"<html>\xff\xfe bad</html>")])
    fetcher = HtmlFetcher(session)

    body = asyncio.run(fetcher.fetch("https://example.test/broken"))

    assert body.startswith("<html>")
    assert "\ufffd" in body
    assert body.endswith(" bad</html>")


def test_non_2xx_status_is_network_error():
    fetcher = HtmlFetcher(FakeSession([FakeResponse(503)]))

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(fetcher.fetch("https://example.test/a"))

    assert exc_info.value.cause == CAUSE_HTTP_STATUS
    assert exc_info.value.status == 503
    assert exc_info.value.is_transient is True


def test_404_is_not_transient():
    fetcher = HtmlFetcher(FakeSession([FakeResponse(404)]))

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(fetcher.fetch("https://example.test/a"))

    assert exc_info.value.is_transient is False


def test_429_is_rate_limit_error():
    fetcher = HtmlFetcher(FakeSession([FakeResponse(429)]))

    with pytest.raises(RateLimitError) as exc_info:
        asyncio.run(fetcher.fetch("https://example.test/a"))

    assert isinstance(exc_info.value, NetworkError)
    assert exc_info.value.status == 429


def test_timeout_and_transport_failures_are_classified():
    timeout_fetcher = HtmlFetcher(FakeSession([asyncio.TimeoutError()]))
    transport_fetcher = HtmlFetcher(FakeSession([aiohttp.ClientConnectionError("reset")]))

    with pytest.raises(NetworkError) as timeout_info:
        asyncio.run(timeout_fetcher.fetch("https://example.test/a"))
    with pytest.raises(NetworkError) as transport_info:
        asyncio.run(transport_fetcher.fetch("https://example.test/b"))

    assert timeout_info.value.cause == CAUSE_TIMEOUT
    assert transport_info.value.cause == CAUSE_TRANSPORT
    assert transport_info.value.url == "https://example.test/b"


def test_custom_headers_and_timeout():
    session = FakeSession([FakeResponse(200, "x")])
    timeout = aiohttp.ClientTimeout(total=3)
    fetcher = HtmlFetcher(session, headers={"user-agent": "probe"}, timeout=timeout)

    asyncio.run(fetcher.fetch("https://example.test/a"))

    assert session.calls[0]["headers"] == {"user-agent": "probe"}
    assert session.calls[0]["timeout"] is timeout


def test_build_client_timeout_reads_config():
    timeout = build_client_timeout()

    assert timeout.connect == config.CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS
    assert timeout.sock_read == config.CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS


def test_retrying_fetcher_retries_transient_errors():
    session = FakeSession([FakeResponse(502), asyncio.TimeoutError(), FakeResponse(200, "done")])
    fetcher = RetryingHtmlFetcher(HtmlFetcher(session), attempts=3, min_wait=0, max_wait=0)

    assert asyncio.run(fetcher.fetch("https://example.test/a")) == "done"
    assert len(session.calls) == 3


def test_retrying_fetcher_gives_up_after_attempts():
    session = FakeSession([FakeResponse(500), FakeResponse(500)])
    fetcher = RetryingHtmlFetcher(HtmlFetcher(session), attempts=2, min_wait=0, max_wait=0)

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(fetcher.fetch("https://example.test/a"))

    assert exc_info.value.status == 500
    assert len(session.calls) == 2


def test_retrying_fetcher_does_not_retry_client_errors():
    session = FakeSession([FakeResponse(404), FakeResponse(200, "never")])
    fetcher = RetryingHtmlFetcher(HtmlFetcher(session), attempts=3, min_wait=0, max_wait=0)

    with pytest.raises(NetworkError):
        asyncio.run(fetcher.fetch("https://example.test/a"))

    assert len(session.calls) == 1
