# services/extraction/image_classifier.py
"""
Decide which ``<img>`` elements are primary-post content.

Avatars and icons are reliably small and hosted under well-known path prefixes,
so those are cut first.  What survives must then show *any* strong content
signal: markup versions disagree on which single signal is reliable, so
agreement on one is enough.

Evaluation order per candidate:

1. inside a comment thread (ancestry marker)       -> rejected
2. no source, or not on the media host             -> rejected
3. profile photo / background / icon sprite path   -> rejected
4. avatar or profile class on the image or parent  -> rejected
5. small comment image without a share marker      -> rejected
6. wide enough, OR main-post ancestry, OR content indicator, OR clearly large
                                                    -> included
"""

from typing import Iterator, List, Optional

from bs4 import Tag
from loguru import logger

from models.extraction import MediaCandidate
from .config_loader import ExtractionProfile, ImageRules
from .dimension_resolver import resolve_dimensions
from .snapshot import (
    FIGURE_MARKER,
    MAIN_POST_MARKER,
    COMMENT_MARKER,
    PageSnapshot,
    ancestry_markers,
    attribute,
    unique,
)
from .source_resolver import raw_sources


# ----------------------------------------------------------------------
# Candidate construction
# ----------------------------------------------------------------------
def build_candidate(element: Tag, rules: ImageRules) -> MediaCandidate:
    """Materialize everything the predicates need from one image element."""
    sources = raw_sources(element, rules.source_attributes, rules.srcset_attribute)
    resolved = next((s for s in sources if s), None)
    size = resolve_dimensions(element)
    parent = element.parent
    return MediaCandidate(
        raw_sources=tuple(sources),
        resolved_source=resolved,
        width=size.width,
        height=size.height,
        ancestry_tags=ancestry_markers(
            element,
            rules.comment_tokens,
            rules.main_post_tokens,
            rules.ancestry_depth,
            figure_tags=rules.indicator_tags,
        ),
        css_classes=attribute(element, "class").lower(),
        parent_classes=attribute(parent, "class").lower() if isinstance(parent, Tag) else "",
        alt=attribute(element, "alt").lower(),
    )


# ----------------------------------------------------------------------
# Predicates
# ----------------------------------------------------------------------
def is_on_media_host(source: str, rules: ImageRules) -> bool:
    return rules.media_host in source and any(m in source for m in rules.media_markers)


def is_excluded_path(source: str, rules: ImageRules) -> bool:
    return any(pattern in source for pattern in rules.excluded_path_patterns)


def has_avatar_class(candidate: MediaCandidate, rules: ImageRules) -> bool:
    """Profile picture or logo styling on the image or its direct parent."""
    return any(
        token in candidate.css_classes or token in candidate.parent_classes
        for token in rules.avatar_class_tokens
    )


def is_small_comment_image(candidate: MediaCandidate, rules: ImageRules) -> bool:
    source = candidate.resolved_source or ""
    return (
        rules.comment_image_marker in source
        and candidate.height < rules.small_comment_max_height
        and rules.content_share_marker not in source
    )


def has_content_indicator(candidate: MediaCandidate, rules: ImageRules) -> bool:
    """Layout utility classes, content wrappers, figure ancestry or telling alt text."""
    if any(cls in candidate.css_classes for cls in rules.indicator_classes):
        return True
    if any(token in candidate.parent_classes for token in rules.indicator_parent_tokens):
        return True
    if FIGURE_MARKER in candidate.ancestry_tags:
        return True
    return any(keyword.lower() in candidate.alt for keyword in rules.indicator_alt_keywords)


def is_clearly_large(candidate: MediaCandidate, rules: ImageRules) -> bool:
    return max(candidate.width, candidate.height) > rules.clearly_large_size


def rejection_reason(candidate: MediaCandidate, rules: ImageRules) -> Optional[str]:
    """Why ``candidate`` is not post content, or ``None`` if it is."""
    if COMMENT_MARKER in candidate.ancestry_tags:
        return "inside comment thread"

    source = candidate.resolved_source
    if not source:
        return "no source"
    if not is_on_media_host(source, rules):
        return "not on media host"
    if is_excluded_path(source, rules):
        return "profile/background/icon path"
    if has_avatar_class(candidate, rules):
        return "avatar/profile styling"
    if is_small_comment_image(candidate, rules):
        return f"small comment image ({candidate.height}px high)"

    if candidate.width > rules.min_content_width:
        return None
    if MAIN_POST_MARKER in candidate.ancestry_tags:
        return None
    if has_content_indicator(candidate, rules):
        return None
    if is_clearly_large(candidate, rules):
        return None
    return f"too small ({candidate.width}x{candidate.height}) with no content signal"


# ----------------------------------------------------------------------
# Public entry point
# ----------------------------------------------------------------------
def iter_image_elements(snapshot: PageSnapshot, rules: ImageRules) -> Iterator[Tag]:
    """Images matched by any candidate selector, each element once, in document order."""
    yield from snapshot.select(", ".join(rules.candidate_selectors))


def classify_images(snapshot: PageSnapshot, profile: ExtractionProfile) -> List[str]:
    """Unique, first-seen-ordered URLs of the images that belong to the post."""
    rules = profile.images
    accepted: List[str] = []
    for idx, element in enumerate(iter_image_elements(snapshot, rules), start=1):
        candidate = build_candidate(element, rules)
        reason = rejection_reason(candidate, rules)
        if reason is None:
            accepted.append(candidate.resolved_source)
            logger.debug(
                f"Image #{idx} added: {candidate.resolved_source} "
                f"({candidate.width}x{candidate.height})"
            )
        elif candidate.resolved_source and rules.media_host in candidate.resolved_source:
            logger.debug(f"Image #{idx} filtered ({reason}): {candidate.resolved_source}")
    return unique(accepted)
