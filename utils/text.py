"""Text normalization utilities for scraped markup."""

import re
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

_WS_RE = re.compile(r"\s+", re.UNICODE)
_LAYOUT_WS_RE = re.compile(r"[\n\t]")


def clean_text(value):
    """Collapse runs of whitespace and trim; non-strings become ""."""
    if not isinstance(value, str):
        return ""
    return _WS_RE.sub(" ", value).strip()


def split_authors(raw_value: Optional[str], delimiter: str) -> List[str]:
    """Split a raw author line such as "글 / 그림" into names.

    Line breaks and tabs inside the markup are dropped before splitting, and
    empty or whitespace-only names are discarded.
    """
    if not raw_value:
        return []
    flattened = _LAYOUT_WS_RE.sub("", raw_value)
    authors = []
    for part in flattened.split(delimiter):
        name = clean_text(part)
        if name:
            authors.append(name)
    return authors


def parse_page_count(label: Optional[str]) -> int:
    """Parse a declared page-count label; anything unusable means one page."""
    text = clean_text(label)
    if not text.isdigit():
        return 1
    return max(int(text), 1)


def query_value(url: Optional[str], name: str) -> Optional[str]:
    if not url:
        return None
    values = parse_qs(urlparse(url).query).get(name)
    if not values:
        return None
    candidate = clean_text(values[0])
    return candidate or None


def append_query(url: str, param: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{param}"
