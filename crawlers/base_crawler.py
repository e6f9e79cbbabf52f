#crawlers/base_crawler.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Tuple

import config
from services.html_document import Document, parse_html
from services.webtoon_records import DetailRecord, EpisodeRecord, SummaryRecord
from utils.concurrency import gather_bounded

LOGGER = logging.getLogger(__name__)


class ContentCrawler(ABC):
    """
    플랫폼별 웹툰 크롤러의 추상 기본 클래스입니다.

    하위 클래스는 목록 URL 라우팅과 페이지 파싱만 구현하고,
    상세 페이지 수집과 회차 페이지네이션은 이 클래스가 담당합니다.
    ``fetcher`` 는 ``async fetch(url) -> str`` 를 제공하는 객체입니다.
    각 수집 작업은 자신의 진단 목록을 반환하며, 호출자가 입력 순서대로 합칩니다.
    """

    def __init__(self, source_name):
        self.source_name = source_name

    @property
    def headers(self) -> Mapping[str, str]:
        return config.CRAWLER_HEADERS

    @abstractmethod
    def build_listing_url(self, update_day: str) -> str:
        """
        업데이트 요일 코드에 해당하는 목록 페이지 URL을 반환합니다.
        지원하지 않는 코드는 UnsupportedRoutingError 를 발생시킵니다.
        """
        raise NotImplementedError

    @abstractmethod
    def parse_listing(self, document: Document, update_day: str, diagnostics: List[Dict[str, Any]]) -> List[SummaryRecord]:
        raise NotImplementedError

    @abstractmethod
    def parse_detail(self, document: Document, url: str, diagnostics: List[Dict[str, Any]]) -> DetailRecord:
        raise NotImplementedError

    @abstractmethod
    def parse_episodes(self, document: Document, url: str, diagnostics: List[Dict[str, Any]]) -> List[EpisodeRecord]:
        raise NotImplementedError

    @abstractmethod
    def build_page_url(self, detail_url: str, page: int) -> str:
        raise NotImplementedError

    async def fetch_document(self, fetcher, url: str) -> Document:
        html = await fetcher.fetch(url)
        return parse_html(html)

    async def fetch_listing(self, fetcher, update_day: str) -> Tuple[List[SummaryRecord], List[Dict[str, Any]]]:
        diagnostics: List[Dict[str, Any]] = []
        url = self.build_listing_url(update_day)
        document = await self.fetch_document(fetcher, url)
        summaries = self.parse_listing(document, update_day, diagnostics)
        LOGGER.info("[%s] %s listing: %s items (%s)", self.source_name, update_day, len(summaries), url)
        return summaries, diagnostics

    async def paginate_episodes(
        self,
        fetcher,
        detail_url: str,
        page_count: int,
    ) -> Tuple[List[EpisodeRecord], List[Dict[str, Any]]]:
        """
        2..page_count 회차 페이지를 병렬로 수집합니다.
        결과는 완료 순서와 무관하게 페이지 번호 순서로 이어 붙입니다.
        """
        pages = list(range(2, page_count + 1))
        if not pages:
            return [], []

        async def _fetch_page(page: int):
            page_diagnostics: List[Dict[str, Any]] = []
            page_url = self.build_page_url(detail_url, page)
            document = await self.fetch_document(fetcher, page_url)
            return self.parse_episodes(document, page_url, page_diagnostics), page_diagnostics

        results = await gather_bounded(pages, _fetch_page, config.CRAWLER_EPISODE_PAGE_CONCURRENCY)
        episodes: List[EpisodeRecord] = []
        diagnostics: List[Dict[str, Any]] = []
        for page_episodes, page_diagnostics in results:
            episodes.extend(page_episodes)
            diagnostics.extend(page_diagnostics)
        return episodes, diagnostics

    async def fetch_detail(self, fetcher, detail_url: str) -> Tuple[DetailRecord, List[Dict[str, Any]]]:
        diagnostics: List[Dict[str, Any]] = []
        document = await self.fetch_document(fetcher, detail_url)
        detail = self.parse_detail(document, detail_url, diagnostics)
        more_episodes, page_diagnostics = await self.paginate_episodes(fetcher, detail_url, detail.page_count)
        diagnostics.extend(page_diagnostics)
        return detail.with_more_episodes(more_episodes), diagnostics

    async def fetch_details(
        self,
        fetcher,
        summaries: List[SummaryRecord],
    ) -> Tuple[List[DetailRecord], List[Dict[str, Any]]]:
        async def _fetch(summary: SummaryRecord):
            return await self.fetch_detail(fetcher, summary.url)

        results = await gather_bounded(summaries, _fetch, config.CRAWLER_DETAIL_CONCURRENCY)
        details: List[DetailRecord] = []
        diagnostics: List[Dict[str, Any]] = []
        for detail, detail_diagnostics in results:
            details.append(detail)
            diagnostics.extend(detail_diagnostics)
        LOGGER.info("[%s] collected %s detail records", self.source_name, len(details))
        return details, diagnostics
