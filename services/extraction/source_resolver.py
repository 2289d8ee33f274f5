# services/extraction/source_resolver.py
"""Pick the single best media URL out of an element's competing attributes."""

from typing import List, Optional, Sequence

from bs4 import Tag

from .snapshot import attribute

DEFAULT_SOURCE_ATTRIBUTES = ("src", "data-src", "data-lazy-src")


def first_srcset_entry(srcset: str) -> Optional[str]:
    """URL of the first ``srcset`` candidate (text before its width/density descriptor)."""
    if not srcset:
        return None
    first = srcset.split(",")[0].strip()
    if not first:
        return None
    return first.split()[0] or None


def raw_sources(
    element: Tag,
    attributes: Sequence[str] = DEFAULT_SOURCE_ATTRIBUTES,
    srcset_attribute: str = "srcset",
) -> List[Optional[str]]:
    """Every candidate source in priority order, ``None`` where the attribute is empty."""
    values: List[Optional[str]] = [attribute(element, name) or None for name in attributes]
    values.append(first_srcset_entry(attribute(element, srcset_attribute)))
    return values


def resolve_source(
    element: Tag,
    attributes: Sequence[str] = DEFAULT_SOURCE_ATTRIBUTES,
    srcset_attribute: str = "srcset",
) -> Optional[str]:
    """
    Resolve the element's media URL.

    Direct, lazy and alternate-lazy attributes are tried in that order; the
    first ``srcset`` entry is the last resort.  Purely syntactic: the URL is
    neither fetched nor validated.
    """
    for candidate in raw_sources(element, attributes, srcset_attribute):
        if candidate:
            return candidate
    return None
