import config
from services import naver_webtoon_parser
from utils.errors import UnsupportedRoutingError
from utils.text import append_query
from .base_crawler import ContentCrawler


class NaverWebtoonCrawler(ContentCrawler):
    """네이버 웹툰 (모바일 웹) 크롤러"""

    DISPLAY_NAME = "Naver Webtoon"
    PLATFORM = naver_webtoon_parser.PLATFORM_NAVER

    def __init__(self, markers=naver_webtoon_parser.DEFAULT_MARKERS, selectors=config.NAVER_SELECTORS):
        super().__init__("naver_webtoon")
        self.markers = markers
        self.selectors = selectors
        self.base_url = config.NAVER_WEBTOON_BASE_URL
        self.listing_root = config.NAVER_WEBTOON_URL

    def build_listing_url(self, update_day):
        if update_day == config.DAILY_CODE:
            return f"{self.listing_root}{config.NAVER_DAILY_LISTING_PATH}"
        if update_day in config.WEEKDAY_CODES:
            return f"{self.listing_root}{config.NAVER_WEEKDAY_LISTING_PATH.format(day=update_day)}"
        raise UnsupportedRoutingError(self.PLATFORM, update_day)

    def build_page_url(self, detail_url, page):
        return append_query(detail_url, config.NAVER_PAGE_PARAM.format(page=page))

    def parse_listing(self, document, update_day, diagnostics):
        return naver_webtoon_parser.extract_listing(
            document,
            update_day=update_day,
            diagnostics=diagnostics,
            selectors=self.selectors,
            markers=self.markers,
            base_url=self.base_url,
        )

    def parse_detail(self, document, url, diagnostics):
        return naver_webtoon_parser.extract_detail(
            document,
            url,
            diagnostics=diagnostics,
            selectors=self.selectors,
            markers=self.markers,
            base_url=self.base_url,
        )

    def parse_episodes(self, document, url, diagnostics):
        return naver_webtoon_parser.extract_episodes(
            document,
            diagnostics=diagnostics,
            source_url=url,
            selectors=self.selectors,
            markers=self.markers,
            base_url=self.base_url,
        )
