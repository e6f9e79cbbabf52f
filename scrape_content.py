# scrape_content.py
"""
플랫폼/업데이트 요일 요청을 목록 → 상세(병렬) → 병합 순서로 실행합니다.

    result = asyncio.run(scrape_contents("naver", "mon"))

네트워크 오류와 라우팅 오류는 예외로 전달되고, 파싱 경고와 병합 누락은
``ScrapeResult.diagnostics`` 에 모입니다.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any, Dict, List, Optional

import config
from crawlers.naver_webtoon_crawler import NaverWebtoonCrawler
from services.html_fetcher import HtmlFetcher, create_session
from services.webtoon_merger import merge_records
from services.webtoon_records import STATUS_NOT_SUPPORTED_YET, STATUS_OK, ScrapeResult, SummaryRecord
from utils.concurrency import gather_bounded
from utils.errors import UnsupportedRoutingError
from utils.reporting import UNIMPLEMENTED_ROUTE, append_diagnostic, count_by_code

LOGGER = logging.getLogger(__name__)

PLATFORM_CRAWLERS = {
    NaverWebtoonCrawler.PLATFORM: NaverWebtoonCrawler,
}

WEEKLY = "weekly"

STATE_IDLE = "idle"
STATE_FETCHING_LISTING = "fetching_listing"
STATE_FETCHING_DETAILS = "fetching_details"
STATE_MERGING = "merging"
STATE_DONE = "done"
STATE_FAILED = "failed"


def resolve_crawler(platform):
    crawler_class = PLATFORM_CRAWLERS.get(platform)
    if crawler_class is None:
        return None
    return crawler_class()


@asynccontextmanager
async def _open_fetcher(fetcher, crawler):
    if fetcher is not None:
        yield fetcher
        return
    async with create_session() as session:
        yield HtmlFetcher(session, headers=crawler.headers)


def union_weekday_summaries(listings: List[List[SummaryRecord]]) -> List[SummaryRecord]:
    """Collapse items listed on several weekdays into one record.

    Items are matched by content id (detail links differ per weekday), or by
    URL when the id is unknown. First-appearance order and URL are kept and
    ``update_days`` gathers every day the item was listed on, in listing order.
    """
    by_key: Dict[str, SummaryRecord] = {}
    for summaries in listings:
        for summary in summaries:
            key = summary.content_id or summary.url
            existing = by_key.get(key)
            if existing is None:
                by_key[key] = summary
                continue
            days = list(existing.update_days)
            days.extend(day for day in summary.update_days if day not in days)
            by_key[key] = replace(existing, update_days=days)
    return list(by_key.values())


class ScrapeJob:
    """
    단일 스크래핑 실행.
    Idle → FetchingListing → FetchingDetails → Merging → Done, 실패 시 Failed.
    """

    def __init__(self, platform, update_day, fetcher=None, weekly=False):
        self.platform = platform
        self.update_day = update_day
        self.fetcher = fetcher
        self.weekly = weekly
        self.state = STATE_IDLE
        self.history = [STATE_IDLE]
        self.crawler = resolve_crawler(platform)

    def _transition(self, state):
        LOGGER.info("[%s/%s] %s -> %s", self.platform, self.update_day, self.state, state)
        self.state = state
        self.history.append(state)

    def _check_route(self):
        if self.crawler is None:
            raise UnsupportedRoutingError(self.platform, self.update_day)
        if self.weekly:
            return
        if self.update_day not in config.UPDATE_DAY_CODES:
            raise UnsupportedRoutingError(self.platform, self.update_day)

    async def run(self) -> ScrapeResult:
        try:
            self._check_route()
        except UnsupportedRoutingError:
            self._transition(STATE_FAILED)
            raise

        if self.update_day == config.FINISHED_CODE:
            result = ScrapeResult(status=STATUS_NOT_SUPPORTED_YET, platform=self.platform, update_day=self.update_day)
            append_diagnostic(
                result.diagnostics,
                UNIMPLEMENTED_ROUTE,
                "finished listing is not supported yet",
                {"platform": self.platform, "update_day": self.update_day},
            )
            LOGGER.warning("[%s] finished listing is not supported yet; returning empty result", self.platform)
            self._transition(STATE_DONE)
            return result

        try:
            async with _open_fetcher(self.fetcher, self.crawler) as fetcher:
                return await self._run_pipeline(fetcher)
        except Exception:
            LOGGER.error("[%s/%s] scrape failed in state %s", self.platform, self.update_day, self.state, exc_info=True)
            self._transition(STATE_FAILED)
            raise

    async def _fetch_summaries(self, fetcher, diagnostics):
        if not self.weekly:
            summaries, listing_diagnostics = await self.crawler.fetch_listing(fetcher, self.update_day)
            diagnostics.extend(listing_diagnostics)
            return summaries

        async def _fetch_day(day):
            return await self.crawler.fetch_listing(fetcher, day)

        results = await gather_bounded(config.WEEKDAY_CODES, _fetch_day, config.CRAWLER_LISTING_CONCURRENCY)
        for _, day_diagnostics in results:
            diagnostics.extend(day_diagnostics)
        return union_weekday_summaries([summaries for summaries, _ in results])

    async def _run_pipeline(self, fetcher) -> ScrapeResult:
        diagnostics: List[Dict[str, Any]] = []

        self._transition(STATE_FETCHING_LISTING)
        summaries = await self._fetch_summaries(fetcher, diagnostics)

        self._transition(STATE_FETCHING_DETAILS)
        details, detail_diagnostics = await self.crawler.fetch_details(fetcher, summaries)
        diagnostics.extend(detail_diagnostics)

        self._transition(STATE_MERGING)
        records = merge_records(summaries, details, diagnostics)

        self._transition(STATE_DONE)
        LOGGER.info(
            "[%s/%s] %s records, diagnostics=%s",
            self.platform,
            self.update_day,
            len(records),
            count_by_code(diagnostics),
        )
        return ScrapeResult(
            status=STATUS_OK,
            platform=self.platform,
            update_day=self.update_day,
            records=records,
            diagnostics=diagnostics,
        )


async def scrape_contents(platform, update_day, fetcher=None) -> ScrapeResult:
    return await ScrapeJob(platform, update_day, fetcher=fetcher).run()


async def scrape_weekly_contents(platform, fetcher=None) -> ScrapeResult:
    return await ScrapeJob(platform, WEEKLY, fetcher=fetcher, weekly=True).run()


def supported_platforms() -> List[str]:
    return sorted(PLATFORM_CRAWLERS)


def describe_route(platform, update_day) -> Optional[str]:
    """Listing URL a request would fetch, or None for the finished route."""
    crawler = resolve_crawler(platform)
    if crawler is None:
        raise UnsupportedRoutingError(platform, update_day)
    if update_day == config.FINISHED_CODE:
        return None
    return crawler.build_listing_url(update_day)
