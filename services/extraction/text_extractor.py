# services/extraction/text_extractor.py
"""
Locate the primary post's text among many look-alike text blocks (comments,
reshares, chrome).

The extraction is an ordered list of named strategies.  Each strategy is a pure
function ``(snapshot) -> Optional[str]`` and carries its own acceptance
predicate; ``first_success`` returns the first accepted result.

* The selector chain walks from the most specific content marker to broader
  matches inside the article container.  A result at or above ``max_chars`` is
  assumed to be contaminated by comments and rejected.
* The fallbacks only run when no chain step was accepted: first the page-wide
  content paragraphs minus anything under a comment section, then the first
  paragraphs of the container regardless of ancestry.  Any chain match is a
  container paragraph, so an oversized chain result always leaves the second
  fallback something to return.

Whatever text wins is truncated to ``max_sentences`` sentences when it is still
over ``max_chars``.  The sentence split is naive: abbreviations, decimals and
quoted punctuation are all treated as sentence ends.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from loguru import logger

from .config_loader import ExtractionProfile, TextRules
from .snapshot import PageSnapshot, closest, element_text

PARAGRAPH_SEPARATOR = "\n\n"
_SENTENCE_END = re.compile(r"[.!?]+")
_TERMINAL_PUNCTUATION = (".", "!", "?")

Strategy = Callable[[PageSnapshot], Optional[str]]
Acceptance = Callable[[str], bool]


@dataclass(frozen=True)
class TextStrategy:
    name: str
    run: Strategy
    accept: Acceptance


# ----------------------------------------------------------------------
# Acceptance predicates
# ----------------------------------------------------------------------
def is_non_empty(text: str) -> bool:
    return bool(text)


def within_limit(max_chars: int) -> Acceptance:
    """Accept non-empty text strictly shorter than ``max_chars``."""
    def accept(text: str) -> bool:
        return bool(text) and len(text) < max_chars
    return accept


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def join_paragraphs(texts: Iterable[str], limit: Optional[int] = None) -> str:
    parts = [t.strip() for t in texts]
    parts = [t for t in parts if t]
    if limit is not None:
        parts = parts[:limit]
    return PARAGRAPH_SEPARATOR.join(parts)


def truncate_sentences(text: str, max_sentences: int = 5) -> str:
    """
    Keep the first ``max_sentences`` sentences, rejoined with ``". "``.

    A terminal period is appended unless the result already ends in ``.``,
    ``!`` or ``?``.
    """
    sentences = [s.strip() for s in _SENTENCE_END.split(text)]
    sentences = [s for s in sentences if s]
    truncated = ". ".join(sentences[:max_sentences]).strip()
    if truncated and not truncated.endswith(_TERMINAL_PUNCTUATION):
        truncated += "."
    return truncated


# ----------------------------------------------------------------------
# Strategy factories
# ----------------------------------------------------------------------
def selector_strategy(selector: str, container_selectors: Sequence[str]) -> Strategy:
    """All matches of ``selector`` under the article container, joined."""
    def run(snapshot: PageSnapshot) -> Optional[str]:
        container = snapshot.container(container_selectors)
        if container is None:
            return None
        elements = snapshot.select(selector, scope=container)
        if not elements:
            return None
        text = join_paragraphs(element_text(el) for el in elements)
        logger.debug(
            f"Selector {selector!r}: {len(elements)} parts, {len(text)} chars"
        )
        return text or None
    return run


def comment_excluded_strategy(rules: TextRules) -> Strategy:
    """Page-wide content paragraphs that do not sit inside a comment section."""
    def run(snapshot: PageSnapshot) -> Optional[str]:
        elements = snapshot.select(rules.content_paragraph_selector)
        main_post = [
            el for el in elements
            if closest(el, rules.comment_section_selector) is None
        ]
        logger.debug(
            f"Comment exclusion kept {len(main_post)} of {len(elements)} paragraphs"
        )
        text = join_paragraphs(
            (element_text(el) for el in main_post), limit=rules.fallback_paragraphs
        )
        return text or None
    return run


def container_paragraphs_strategy(
    rules: TextRules, container_selectors: Sequence[str]
) -> Strategy:
    """First paragraphs of the article container, ancestry ignored."""
    def run(snapshot: PageSnapshot) -> Optional[str]:
        container = snapshot.container(container_selectors)
        if container is None:
            return None
        text = join_paragraphs(
            (element_text(el) for el in snapshot.select("p", scope=container)),
            limit=rules.container_paragraphs,
        )
        return text or None
    return run


def build_selector_chain(profile: ExtractionProfile) -> List[TextStrategy]:
    accept = within_limit(profile.text.max_chars)
    return [
        TextStrategy(f"selector:{sel}", selector_strategy(sel, profile.container_selectors), accept)
        for sel in profile.text.selectors
    ]


def build_fallbacks(profile: ExtractionProfile) -> List[TextStrategy]:
    return [
        TextStrategy(
            "comment-excluded-paragraphs",
            comment_excluded_strategy(profile.text),
            is_non_empty,
        ),
        TextStrategy(
            "container-paragraphs",
            container_paragraphs_strategy(profile.text, profile.container_selectors),
            is_non_empty,
        ),
    ]


# ----------------------------------------------------------------------
# Combinator
# ----------------------------------------------------------------------
def first_success(strategies: Iterable[TextStrategy], snapshot: PageSnapshot) -> Optional[str]:
    """
    Run ``strategies`` in order and return the first accepted text.

    A strategy that raises counts as having found nothing.
    """
    for strategy in strategies:
        try:
            text = strategy.run(snapshot)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug(f"Text strategy {strategy.name} failed: {exc}")
            continue
        if not text:
            continue
        if strategy.accept(text):
            logger.debug(f"Using text strategy {strategy.name} ({len(text)} chars)")
            return text
        logger.debug(
            f"Text strategy {strategy.name} rejected ({len(text)} chars), trying next"
        )
    return None


# ----------------------------------------------------------------------
# Public entry point
# ----------------------------------------------------------------------
def extract_text(snapshot: PageSnapshot, profile: ExtractionProfile) -> Optional[str]:
    """Return the primary post text, or ``None`` when every strategy came up empty."""
    rules = profile.text
    text = first_success(build_selector_chain(profile), snapshot)

    if text is None:
        logger.debug("Selector chain accepted nothing, trying fallbacks")
        text = first_success(build_fallbacks(profile), snapshot)

    if not text:
        return None

    if len(text) > rules.max_chars:
        logger.debug(f"Text still {len(text)} chars, truncating to {rules.max_sentences} sentences")
        text = truncate_sentences(text, rules.max_sentences)

    return text or None
