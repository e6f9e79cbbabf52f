import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from services.html_document import Document, Element, parse_html


HTML = """
<div id="root">
  <ul class="items">
    <li class="item"><a href="/a?x=1">  First  </a></li>
    <li class="item"><a href="/b">Second</a><span class="empty"></span></li>
  </ul>
</div>
"""


def test_select_yields_elements_in_document_order():
    document = parse_html(HTML)

    assert isinstance(document, Document)
    items = list(document.select("#root > ul.items > li.item"))
    assert len(items) == 2
    assert all(isinstance(item, Element) for item in items)
    assert [item.text() for item in items] == ["First", "Second"]


def test_select_is_lazy():
    document = parse_html(HTML)

    matches = document.select("li.item")

    assert not isinstance(matches, list)
    assert next(matches).attr_of("a", "href") == "/a?x=1"


def test_missing_path_is_empty_not_error():
    document = parse_html(HTML)

    assert list(document.select("div.nothing > span")) == []
    assert document.select_one("div.nothing") is None
    assert document.text_of("div.nothing") is None
    assert document.attr_of("div.nothing", "href") is None
    assert document.texts_of("div.nothing li") == []


def test_text_of_distinguishes_empty_from_missing():
    document = parse_html(HTML)

    assert document.text_of("span.empty") == ""
    assert document.text_of("span.missing") is None


def test_nested_selection_and_attributes():
    document = parse_html(HTML)
    second = list(document.select("li.item"))[1]

    link = second.select_one("a")
    assert link is not None
    assert link.attr("href") == "/b"
    assert link.attr("title") is None


def test_parse_html_accepts_empty_input():
    document = parse_html(None)

    assert list(document.select("a")) == []
