# config.py
import os
from types import MappingProxyType

# --- Crawler ---
CRAWLER_HEADERS = MappingProxyType({
    'authority': 'm.comic.naver.com',
    'scheme': 'https',
    'accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.9',
    'accept-encoding': 'gzip, deflate, br',
    'accept-language': 'ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7',
    'cache-control': 'no-cache',
    'sec-fetch-dest': 'document',
    'sec-fetch-mode': 'navigate',
    'sec-fetch-site': 'same-origin',
    'user-agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36',
    'connection': 'keep-alive',
})

# --- HTTP Client Defaults ---
CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS', 30))
CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS', 10))
CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS', 20))
CRAWLER_HTTP_CONCURRENCY_LIMIT = int(os.getenv('CRAWLER_HTTP_CONCURRENCY_LIMIT', 20))

# --- Fan-out Bounds ---
CRAWLER_DETAIL_CONCURRENCY = int(os.getenv('CRAWLER_DETAIL_CONCURRENCY', 8))
CRAWLER_EPISODE_PAGE_CONCURRENCY = int(os.getenv('CRAWLER_EPISODE_PAGE_CONCURRENCY', 4))
CRAWLER_LISTING_CONCURRENCY = int(os.getenv('CRAWLER_LISTING_CONCURRENCY', 7))

# 1 means a single attempt (no retry)
CRAWLER_FETCH_RETRY_ATTEMPTS = int(os.getenv('CRAWLER_FETCH_RETRY_ATTEMPTS', 1))

# --- Update Day Codes ---
WEEKDAY_CODES = ('mon', 'tue', 'wed', 'thu', 'fri', 'sat', 'sun')
DAILY_CODE = 'daily'
FINISHED_CODE = 'finished'
UPDATE_DAY_CODES = WEEKDAY_CODES + (DAILY_CODE, FINISHED_CODE)

# --- Naver Webtoon (mobile web) ---
NAVER_WEBTOON_BASE_URL = os.getenv('NAVER_WEBTOON_BASE_URL', 'https://m.comic.naver.com')
NAVER_WEBTOON_URL = f"{NAVER_WEBTOON_BASE_URL}/webtoon"
NAVER_DAILY_LISTING_PATH = '/weekday?week=dailyPlus'
NAVER_WEEKDAY_LISTING_PATH = '/weekday?week={day}'
NAVER_SORT_ORDER_PARAM = 'sortOrder=ASC'
NAVER_PAGE_PARAM = 'page={page}'

# --- Naver Webtoon Marker Tokens ---
NAVER_NEW_MARKER = os.getenv('NAVER_NEW_MARKER', '신작')
NAVER_ADULT_MARKER = os.getenv('NAVER_ADULT_MARKER', '청유물')
NAVER_PAUSED_MARKER = os.getenv('NAVER_PAUSED_MARKER', '휴재')
NAVER_UPDATED_MARKER = os.getenv('NAVER_UPDATED_MARKER', '업데이트')
NAVER_PAID_MARKER = os.getenv('NAVER_PAID_MARKER', '유료만화')
NAVER_AUTHOR_DELIMITER = os.getenv('NAVER_AUTHOR_DELIMITER', '/')

# --- Naver Webtoon Selectors ---
NAVER_SELECTORS = MappingProxyType({
    'listing_item': '#ct > .section_list_toon > ul.list_toon > li.item > a',
    'listing_title': 'div.info > div > strong > span',
    'listing_thumbnail': '.thumbnail img',
    'listing_author': 'div.info > span.author',
    'listing_badge_area': 'span.area_badge',
    'listing_title_box': 'div.title_box',
    'detail_summary': '.section_toon_info .info_front .summary',
    'detail_description': '.section_toon_info .info_back > .summary > p',
    'detail_main_genre': '.section_toon_info .info_back .detail .genre dd span.length',
    'detail_sub_genre': '.section_toon_info .info_back .detail .genre dd ul.list_detail li',
    'detail_page_count': '#ct > div.paging_type2 > em > span',
    'episode_item': '#ct > ul.section_episode_list li.item',
    'episode_name': 'div.info .name strong',
    'episode_link': 'a',
    'episode_thumbnail': 'div.thumbnail img',
    'episode_date': 'div.info div.detail .date',
    'episode_price_badge': 'div.thumbnail > span > span',
})
