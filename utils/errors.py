"""Exception types surfaced by the scraping pipeline."""

from typing import Optional

CAUSE_TIMEOUT = "timeout"
CAUSE_HTTP_STATUS = "http_status"
CAUSE_TRANSPORT = "transport"


class ScrapeError(Exception):
    """Base class for failures that abort a scrape run."""


class NetworkError(ScrapeError):
    def __init__(self, url: str, cause: str, status: Optional[int] = None, detail: str = ""):
        self.url = url
        self.cause = cause
        self.status = status
        self.detail = detail
        message = f"{cause} while fetching {url}"
        if status is not None:
            message += f" (HTTP {status})"
        if detail:
            message += f": {detail}"
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        """True when a later attempt has a fair chance of succeeding."""
        if self.cause in (CAUSE_TIMEOUT, CAUSE_TRANSPORT):
            return True
        return self.status is not None and (self.status == 429 or self.status >= 500)


class RateLimitError(NetworkError):
    """The remote site answered HTTP 429."""


class UnsupportedRoutingError(ScrapeError):
    def __init__(self, platform: str, update_day: str):
        self.platform = platform
        self.update_day = update_day
        super().__init__(f"Unsupported route: platform={platform!r} update_day={update_day!r}")
