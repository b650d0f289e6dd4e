"""Extract image references from content documents."""

import warnings
from collections.abc import Iterator
from pathlib import Path

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import Tag

from epub2cbz.models.pages import ImageReference

# Suppress XML parsing warnings - content documents are usually XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


class MarkupScanner:
    """Tolerant scanner yielding attributes of named elements in document order.

    This is not a markup parser for general use: it only answers "which of
    these elements appear, in what order, with which attributes".
    """

    def __init__(self, markup: str | bytes):
        self.markup = markup
        self._soup: BeautifulSoup | None = None

    def _get_soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.markup, "lxml")
        return self._soup

    def elements(self, names: list[str]) -> Iterator[tuple[str, dict[str, str]]]:
        """Yield (element name, attributes) for every matching element."""
        for tag in self._get_soup().find_all(names):
            if isinstance(tag, Tag):
                attrs = {k: v for k, v in tag.attrs.items() if isinstance(v, str)}
                yield tag.name.lower(), attrs


def _href_attribute(attrs: dict[str, str]) -> str | None:
    """The href of an SVG image, whatever prefix the xlink namespace uses."""
    for key, value in attrs.items():
        if key.lower() == "href" or key.lower().endswith(":href"):
            return value
    return None


class ImageReferences:
    """Image references of one content document, in document order.

    Iterating scans the markup left to right across both <img src> and SVG
    <image xlink:href> elements. A URL that appears more than once is only
    yielded the first time. The sequence can be iterated again.
    """

    ELEMENT_NAMES = ["img", "image"]

    def __init__(self, markup: str | bytes):
        self.scanner = MarkupScanner(markup)

    def __iter__(self) -> Iterator[ImageReference]:
        seen: set[str] = set()
        for name, attrs in self.scanner.elements(self.ELEMENT_NAMES):
            if name == "img":
                url = attrs.get("src")
            else:
                url = _href_attribute(attrs)
            if not url or not url.strip():
                continue
            url = url.strip()
            if url in seen:
                continue
            seen.add(url)
            yield ImageReference(url=url)


def extract_image_references(markup: str | bytes) -> ImageReferences:
    """Lazy, restartable sequence of image references in markup."""
    return ImageReferences(markup)


def read_image_references(page_path: Path) -> ImageReferences:
    """Image references of a content document on disk."""
    return ImageReferences(page_path.read_bytes())
