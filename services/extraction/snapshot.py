# services/extraction/snapshot.py
"""
Read-only view over one rendered post page.

The snapshot wraps a BeautifulSoup document, so structural queries go through
soupsieve CSS selectors and ancestor traversal follows ``Tag.parent``.  Signals
that only exist in a live browser (natural image size, computed style size) are
expected as ``data-*`` attributes stamped by the page provider before the HTML
was captured; see ``services.scraper.page_provider``.
"""

from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag
from loguru import logger

COMMENT_MARKER = "comment"
MAIN_POST_MARKER = "main-post"
FIGURE_MARKER = "figure"


class PageSnapshot:
    """A queryable, never-mutated DOM tree for a single post page."""

    def __init__(self, soup: BeautifulSoup, url: Optional[str] = None):
        self._soup = soup
        self.url = url

    @classmethod
    def from_html(cls, html: str, url: Optional[str] = None) -> "PageSnapshot":
        return cls(BeautifulSoup(html, "html.parser"), url=url)

    @property
    def document(self) -> BeautifulSoup:
        return self._soup

    def select(self, selector: str, scope: Optional[Tag] = None) -> List[Tag]:
        """
        Run a CSS selector against ``scope`` (or the whole page).

        A selector the parser rejects yields an empty list instead of an error:
        callers treat "nothing matched" and "could not match" the same way.
        """
        root = scope if scope is not None else self._soup
        try:
            return root.select(selector)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug(f"Selector {selector!r} failed: {exc}")
            return []

    def container(self, selectors: Sequence[str]) -> Optional[Tag]:
        """Return the first article-like element, trying ``selectors`` in order."""
        for selector in selectors:
            found = self.select(selector)
            if found:
                return found[0]
        return None


# ----------------------------------------------------------------------
# Element helpers
# ----------------------------------------------------------------------
def element_text(element: Tag) -> str:
    return element.get_text().strip()


def attribute(element: Tag, name: str) -> str:
    """Attribute value as a stripped string ('' when absent)."""
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = " ".join(value)
    return str(value).strip()


def class_and_id(element: Tag) -> str:
    """Class list and id flattened into one lowercase string for token matching."""
    return f"{attribute(element, 'class')} {attribute(element, 'id')}".strip().lower()


def iter_ancestors(element: Tag, max_depth: int) -> Iterator[Tag]:
    """Yield up to ``max_depth`` ancestors, nearest first, stopping at the document."""
    current = element.parent
    depth = 0
    while current is not None and depth < max_depth:
        if isinstance(current, BeautifulSoup):
            return
        yield current
        current = current.parent
        depth += 1


def _matches_any(haystack: str, tokens: Iterable[str]) -> bool:
    return any(token.lower() in haystack for token in tokens if token)


def ancestry_markers(
    element: Tag,
    comment_tokens: Sequence[str],
    main_post_tokens: Sequence[str],
    max_depth: int,
    figure_tags: Sequence[str] = (FIGURE_MARKER,),
) -> FrozenSet[str]:
    """
    Walk the ancestor chain and collect structural markers.

    Each level contributes at most one marker, checked in the order comment,
    main-post, figure.  The walk never stops early and a marker, once recorded,
    stays recorded.
    """
    markers = set()
    for ancestor in iter_ancestors(element, max_depth):
        haystack = class_and_id(ancestor)
        if _matches_any(haystack, comment_tokens):
            markers.add(COMMENT_MARKER)
        elif _matches_any(haystack, main_post_tokens):
            markers.add(MAIN_POST_MARKER)
        elif ancestor.name in figure_tags:
            markers.add(FIGURE_MARKER)
    return frozenset(markers)


def closest(element: Tag, selector: str) -> Optional[Tag]:
    """Nearest element (the element itself included) matching ``selector``."""
    try:
        return element.css.closest(selector)
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug(f"closest({selector!r}) failed: {exc}")
        return None


def unique(values: Iterable[Optional[str]]) -> List[str]:
    """Drop empty values and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(v for v in values if v))
