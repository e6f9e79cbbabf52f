import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from utils.text import append_query, clean_text, parse_page_count, query_value, split_authors


def test_split_authors_drops_layout_whitespace_and_blanks():
    raw = "\n\t\t김작가 / 이그림 /   \n"

    assert split_authors(raw, "/") == ["김작가", "이그림"]


def test_split_authors_handles_missing_value():
    assert split_authors(None, "/") == []
    assert split_authors("   ", "/") == []


def test_parse_page_count_defaults_to_one():
    assert parse_page_count("5") == 5
    assert parse_page_count(" 12 ") == 12
    assert parse_page_count("") == 1
    assert parse_page_count(None) == 1
    assert parse_page_count("다음") == 1
    assert parse_page_count("0") == 1


def test_query_value_and_append_query():
    href = "/webtoon/list?titleId=1001&week=mon"

    assert query_value(href, "titleId") == "1001"
    assert query_value(href, "missing") is None
    assert query_value(None, "titleId") is None
    assert append_query("https://x.test/list?a=1", "page=2") == "https://x.test/list?a=1&page=2"
    assert append_query("https://x.test/list", "page=2") == "https://x.test/list?page=2"


def test_clean_text_collapses_whitespace():
    assert clean_text("  a \n b\t c ") == "a b c"
    assert clean_text(None) == ""
