"""Queryable HTML documents.

Extractors only talk to :class:`Document` and :class:`Element`; the
BeautifulSoup/lxml backed implementation lives behind ``parse_html``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

from utils.text import clean_text


class Element(ABC):
    @abstractmethod
    def select(self, selector: str) -> Iterator["Element"]:
        """Lazily yield descendants matching ``selector``; none is not an error."""
        raise NotImplementedError

    @abstractmethod
    def text(self) -> str:
        """Trimmed text content."""
        raise NotImplementedError

    @abstractmethod
    def attr(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def select_one(self, selector: str) -> Optional["Element"]:
        return next(iter(self.select(selector)), None)

    def text_of(self, selector: str) -> Optional[str]:
        """Joined, trimmed text of every match, or None when nothing matches.

        An empty string means the node exists but has no text.
        """
        matches = list(self.select(selector))
        if not matches:
            return None
        return "".join(match.raw_text() for match in matches).strip()

    def texts_of(self, selector: str) -> List[str]:
        return [text for text in (match.text() for match in self.select(selector)) if text]

    def attr_of(self, selector: str, name: str) -> Optional[str]:
        match = self.select_one(selector)
        if match is None:
            return None
        return match.attr(name)

    def raw_text(self) -> str:
        return self.text()


class Document(Element):
    """Root of a parsed page."""


class SoupElement(Element):
    def __init__(self, tag: Tag):
        self._tag = tag

    def select(self, selector: str) -> Iterator[Element]:
        for tag in self._tag.css.iselect(selector):
            yield SoupElement(tag)

    def text(self) -> str:
        return self._tag.get_text().strip()

    def raw_text(self) -> str:
        return self._tag.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        if value is None:
            return None
        value = clean_text(value)
        return value or None


class SoupDocument(SoupElement, Document):
    pass


def parse_html(html: Optional[str]) -> Document:
    return SoupDocument(BeautifulSoup(html or "", "lxml"))
