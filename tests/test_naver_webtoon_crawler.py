import asyncio
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

import config
from crawlers.naver_webtoon_crawler import NaverWebtoonCrawler
from utils.errors import CAUSE_TIMEOUT, NetworkError, UnsupportedRoutingError
from webtoon_fakes import DETAIL_A_URL, DETAIL_B_URL, FakeFetcher, default_pages


def _episode_page(*names):
    items = "".join(
        f'<li class="item"><a href="/webtoon/detail?no={name}"><div class="info">'
        f'<div class="name"><strong>{name}</strong></div></div></a></li>'
        for name in names
    )
    return f'<div id="ct"><ul class="section_episode_list">{items}</ul></div>'


def test_listing_urls_per_update_day():
    crawler = NaverWebtoonCrawler()

    assert crawler.build_listing_url("daily") == "https://m.comic.naver.com/webtoon/weekday?week=dailyPlus"
    assert crawler.build_listing_url("mon") == "https://m.comic.naver.com/webtoon/weekday?week=mon"
    assert crawler.build_listing_url("sun") == "https://m.comic.naver.com/webtoon/weekday?week=sun"


@pytest.mark.parametrize("update_day", ["finished", "bogus", ""])
def test_listing_url_rejects_other_codes(update_day):
    crawler = NaverWebtoonCrawler()

    with pytest.raises(UnsupportedRoutingError) as exc_info:
        crawler.build_listing_url(update_day)

    assert exc_info.value.platform == "naver"
    assert exc_info.value.update_day == update_day


def test_headers_are_the_shared_browser_template():
    crawler = NaverWebtoonCrawler()

    assert crawler.headers is config.CRAWLER_HEADERS
    assert crawler.headers["authority"] == "m.comic.naver.com"
    assert "user-agent" in crawler.headers


def test_page_url_appends_page_index():
    crawler = NaverWebtoonCrawler()

    assert crawler.build_page_url(DETAIL_A_URL, 2) == f"{DETAIL_A_URL}&page=2"


def test_paginate_fetches_pages_two_through_declared_count():
    crawler = NaverWebtoonCrawler()
    pages = {f"{DETAIL_A_URL}&page={page}": _episode_page(f"p{page}") for page in range(2, 6)}
    fetcher = FakeFetcher(pages)

    episodes, diagnostics = asyncio.run(crawler.paginate_episodes(fetcher, DETAIL_A_URL, 5))

    assert sorted(fetcher.requested) == sorted(pages)
    assert [episode.name for episode in episodes] == ["p2", "p3", "p4", "p5"]


@pytest.mark.parametrize("page_count", [0, 1])
def test_paginate_is_noop_for_single_page(page_count):
    crawler = NaverWebtoonCrawler()
    fetcher = FakeFetcher({})

    episodes, diagnostics = asyncio.run(crawler.paginate_episodes(fetcher, DETAIL_A_URL, page_count))

    assert episodes == []
    assert diagnostics == []
    assert fetcher.requested == []


def test_paginate_keeps_page_order_under_reversed_latency(monkeypatch):
    monkeypatch.setattr(config, "CRAWLER_EPISODE_PAGE_CONCURRENCY", 4)
    crawler = NaverWebtoonCrawler()
    pages = {
        f"{DETAIL_A_URL}&page=2": _episode_page("2-a", "2-b"),
        f"{DETAIL_A_URL}&page=3": _episode_page("3-a"),
        f"{DETAIL_A_URL}&page=4": _episode_page("4-a", "4-b"),
    }
    delays = {
        f"{DETAIL_A_URL}&page=2": 0.06,
        f"{DETAIL_A_URL}&page=3": 0.03,
        f"{DETAIL_A_URL}&page=4": 0,
    }
    fetcher = FakeFetcher(pages, delays=delays)

    episodes, _ = asyncio.run(crawler.paginate_episodes(fetcher, DETAIL_A_URL, 4))

    assert fetcher.completed == [f"{DETAIL_A_URL}&page={page}" for page in (4, 3, 2)]
    assert [episode.name for episode in episodes] == ["2-a", "2-b", "3-a", "4-a", "4-b"]


def test_fetch_detail_appends_later_pages_after_first():
    crawler = NaverWebtoonCrawler()
    fetcher = FakeFetcher(default_pages())

    detail, diagnostics = asyncio.run(crawler.fetch_detail(fetcher, DETAIL_A_URL))

    assert [episode.name for episode in detail.episodes] == ["1화 출정", "2화 맹세", "3화", "4화"]
    assert [episode.is_free for episode in detail.episodes] == [True, True, False, False]
    assert diagnostics == []


def test_page_failure_fails_the_detail():
    crawler = NaverWebtoonCrawler()
    failure = NetworkError(f"{DETAIL_A_URL}&page=3", CAUSE_TIMEOUT)
    fetcher = FakeFetcher(default_pages(), failures={f"{DETAIL_A_URL}&page=3": failure})

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(crawler.fetch_detail(fetcher, DETAIL_A_URL))

    assert exc_info.value is failure


def test_fetch_details_keeps_summary_order(monkeypatch):
    monkeypatch.setattr(config, "CRAWLER_DETAIL_CONCURRENCY", 2)
    crawler = NaverWebtoonCrawler()
    fetcher = FakeFetcher(default_pages(), delays={DETAIL_A_URL: 0.05})
    summaries, _ = asyncio.run(crawler.fetch_listing(fetcher, "mon"))

    details, diagnostics = asyncio.run(crawler.fetch_details(fetcher, summaries))

    assert [detail.url for detail in details] == [DETAIL_A_URL, DETAIL_B_URL]
    assert diagnostics == []
