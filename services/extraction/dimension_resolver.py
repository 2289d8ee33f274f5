# services/extraction/dimension_resolver.py
"""
Effective width/height of an image element.

Per axis the first non-zero signal wins:

1. the authored ``width`` / ``height`` attribute,
2. the natural (decoded) size stamped by the page provider as
   ``data-natural-width`` / ``data-natural-height``,
3. the computed style size, stamped as ``data-computed-width`` /
   ``data-computed-height`` or, failing that, read from an inline ``style``.

Computed style can reflect CSS scaling, so callers get a size hint, not an
exact media dimension.
"""

import re
from typing import Optional

from bs4 import Tag

from models.extraction import Dimensions
from .snapshot import attribute

_LEADING_INT = re.compile(r"^\s*(\d+)")
_STYLE_DECLARATION = r"(?:^|;)\s*{axis}\s*:\s*(\d+)"


def parse_int(value: Optional[str]) -> int:
    """Leading integer of ``value`` ("300", "300px", "300.5") or 0."""
    if not value:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _inline_style_size(element: Tag, axis: str) -> int:
    style = attribute(element, "style")
    if not style:
        return 0
    pattern = re.compile(_STYLE_DECLARATION.format(axis=axis), re.I)
    match = pattern.search(style)
    return int(match.group(1)) if match else 0


def _resolve_axis(element: Tag, axis: str) -> int:
    signals = (
        lambda: parse_int(attribute(element, axis)),
        lambda: parse_int(attribute(element, f"data-natural-{axis}")),
        lambda: parse_int(attribute(element, f"data-computed-{axis}")),
        lambda: _inline_style_size(element, axis),
    )
    for signal in signals:
        value = signal()
        if value > 0:
            return value
    return 0


def resolve_dimensions(element: Tag) -> Dimensions:
    return Dimensions(
        width=_resolve_axis(element, "width"),
        height=_resolve_axis(element, "height"),
    )
