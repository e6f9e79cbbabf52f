"""HTML parsing helpers for Naver Webtoon mobile listing and detail pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional
from urllib.parse import urljoin

import config
from services.html_document import Document, Element
from services.webtoon_records import ContentFlags, DetailRecord, EpisodeRecord, SummaryRecord
from utils.reporting import EXTRACTION_DROPPED, append_diagnostic, parse_warning
from utils.text import append_query, clean_text, parse_page_count, query_value, split_authors

PLATFORM_NAVER = "naver"

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerTokens:
    new: str = config.NAVER_NEW_MARKER
    adult: str = config.NAVER_ADULT_MARKER
    paused: str = config.NAVER_PAUSED_MARKER
    updated: str = config.NAVER_UPDATED_MARKER
    paid: str = config.NAVER_PAID_MARKER
    author_delimiter: str = config.NAVER_AUTHOR_DELIMITER


DEFAULT_MARKERS = MarkerTokens()


def detect_flags(badge_text: str, title_box_text: str, markers: MarkerTokens = DEFAULT_MARKERS) -> ContentFlags:
    """Derive status flags by literal token containment."""
    return ContentFlags(
        is_new=bool(markers.new) and markers.new in badge_text,
        is_adult=bool(markers.adult) and markers.adult in badge_text,
        is_paused=bool(markers.paused) and markers.paused in title_box_text,
        is_updated=bool(markers.updated) and markers.updated in title_box_text,
    )


def build_detail_url(href: str, base_url: str = config.NAVER_WEBTOON_BASE_URL) -> str:
    return append_query(urljoin(base_url, href), config.NAVER_SORT_ORDER_PARAM)


def _required_text(
    node: Element,
    selector: str,
    field: str,
    diagnostics: List[Dict[str, Any]],
    url: Optional[str],
) -> str:
    value = node.text_of(selector)
    if value is None:
        parse_warning(diagnostics, field, "missing", url)
        return ""
    if not value:
        parse_warning(diagnostics, field, "empty", url)
    return value


def _required_attr(
    node: Element,
    selector: str,
    name: str,
    field: str,
    diagnostics: List[Dict[str, Any]],
    url: Optional[str],
) -> str:
    value = node.attr_of(selector, name)
    if value is None:
        parse_warning(diagnostics, field, "missing", url)
        return ""
    return value


def _parse_listing_item(
    item: Element,
    *,
    update_day: str,
    diagnostics: List[Dict[str, Any]],
    selectors: Mapping[str, str],
    markers: MarkerTokens,
    base_url: str,
) -> Optional[SummaryRecord]:
    title = item.text_of(selectors["listing_title"])
    href = item.attr("href")
    if not href:
        LOGGER.warning("Dropping listing item without link target (title=%r)", title)
        append_diagnostic(
            diagnostics,
            EXTRACTION_DROPPED,
            "listing item has no link target",
            {"title": title or ""},
        )
        return None

    url = build_detail_url(href, base_url)
    if not title:
        parse_warning(diagnostics, "title", "missing" if title is None else "empty", url)
        title = title or ""

    content_id = query_value(href, "titleId")
    if content_id is None:
        parse_warning(diagnostics, "content_id", "no titleId in link target", url)

    raw_authors = item.text_of(selectors["listing_author"])
    authors = split_authors(raw_authors, markers.author_delimiter)
    if not authors:
        parse_warning(diagnostics, "authors", "missing" if raw_authors is None else "empty", url)

    flags = detect_flags(
        item.text_of(selectors["listing_badge_area"]) or "",
        item.text_of(selectors["listing_title_box"]) or "",
        markers,
    )

    return SummaryRecord(
        url=url,
        content_id=content_id or "",
        title=title,
        authors=authors,
        thumbnail_path=_required_attr(item, selectors["listing_thumbnail"], "src", "thumbnail_path", diagnostics, url),
        platform=PLATFORM_NAVER,
        update_days=[update_day],
        flags=flags,
    )


def iter_listing(
    document: Document,
    *,
    update_day: str,
    diagnostics: List[Dict[str, Any]],
    selectors: Mapping[str, str] = config.NAVER_SELECTORS,
    markers: MarkerTokens = DEFAULT_MARKERS,
    base_url: str = config.NAVER_WEBTOON_BASE_URL,
) -> Iterator[SummaryRecord]:
    seen_urls = set()
    for item in document.select(selectors["listing_item"]):
        record = _parse_listing_item(
            item,
            update_day=update_day,
            diagnostics=diagnostics,
            selectors=selectors,
            markers=markers,
            base_url=base_url,
        )
        if record is None:
            continue
        # one record per detail URL within a listing; first occurrence wins
        if record.url in seen_urls:
            LOGGER.warning("Dropping repeated listing item %s", record.url)
            append_diagnostic(
                diagnostics,
                EXTRACTION_DROPPED,
                "listing item repeats an earlier link target",
                {"key": record.url},
            )
            continue
        seen_urls.add(record.url)
        yield record


def extract_listing(
    document: Document,
    *,
    update_day: str,
    diagnostics: List[Dict[str, Any]],
    selectors: Mapping[str, str] = config.NAVER_SELECTORS,
    markers: MarkerTokens = DEFAULT_MARKERS,
    base_url: str = config.NAVER_WEBTOON_BASE_URL,
) -> List[SummaryRecord]:
    """Parse a listing page into summary records, in document order."""
    return list(
        iter_listing(
            document,
            update_day=update_day,
            diagnostics=diagnostics,
            selectors=selectors,
            markers=markers,
            base_url=base_url,
        )
    )


def _parse_episode(
    item: Element,
    *,
    diagnostics: List[Dict[str, Any]],
    selectors: Mapping[str, str],
    markers: MarkerTokens,
    base_url: str,
    source_url: Optional[str],
) -> EpisodeRecord:
    href = _required_attr(item, selectors["episode_link"], "href", "episode.url", diagnostics, source_url)
    price_badge = item.text_of(selectors["episode_price_badge"]) or ""
    return EpisodeRecord(
        name=_required_text(item, selectors["episode_name"], "episode.name", diagnostics, source_url),
        url=urljoin(base_url, href) if href else "",
        thumbnail_path=_required_attr(
            item, selectors["episode_thumbnail"], "src", "episode.thumbnail_path", diagnostics, source_url
        ),
        create_date=_required_text(item, selectors["episode_date"], "episode.create_date", diagnostics, source_url),
        is_free=price_badge != markers.paid,
    )


def extract_episodes(
    document: Document,
    *,
    diagnostics: List[Dict[str, Any]],
    source_url: Optional[str] = None,
    selectors: Mapping[str, str] = config.NAVER_SELECTORS,
    markers: MarkerTokens = DEFAULT_MARKERS,
    base_url: str = config.NAVER_WEBTOON_BASE_URL,
) -> List[EpisodeRecord]:
    """Episodes of one page, in the order they are listed."""
    return [
        _parse_episode(
            item,
            diagnostics=diagnostics,
            selectors=selectors,
            markers=markers,
            base_url=base_url,
            source_url=source_url,
        )
        for item in document.select(selectors["episode_item"])
    ]


def extract_page_count(
    document: Document,
    *,
    diagnostics: List[Dict[str, Any]],
    source_url: Optional[str] = None,
    selectors: Mapping[str, str] = config.NAVER_SELECTORS,
) -> int:
    label = document.text_of(selectors["detail_page_count"])
    page_count = parse_page_count(label)
    # no paging block at all is a normal single-page title
    if label is not None and not clean_text(label).isdigit():
        parse_warning(diagnostics, "page_count", f"unparseable label {label!r}", source_url)
    return page_count


def extract_detail(
    document: Document,
    source_url: str,
    *,
    diagnostics: List[Dict[str, Any]],
    selectors: Mapping[str, str] = config.NAVER_SELECTORS,
    markers: MarkerTokens = DEFAULT_MARKERS,
    base_url: str = config.NAVER_WEBTOON_BASE_URL,
) -> DetailRecord:
    """Parse a detail page; ``episodes`` only covers the first page."""
    return DetailRecord(
        url=source_url,
        summary=_required_text(document, selectors["detail_summary"], "summary", diagnostics, source_url),
        description=_required_text(document, selectors["detail_description"], "description", diagnostics, source_url),
        main_genre=_required_text(document, selectors["detail_main_genre"], "main_genre", diagnostics, source_url),
        sub_genres=document.texts_of(selectors["detail_sub_genre"]),
        episodes=extract_episodes(
            document,
            diagnostics=diagnostics,
            source_url=source_url,
            selectors=selectors,
            markers=markers,
            base_url=base_url,
        ),
        page_count=extract_page_count(document, diagnostics=diagnostics, source_url=source_url, selectors=selectors),
    )
