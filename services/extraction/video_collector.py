# services/extraction/video_collector.py
"""
Recover video URLs from the two encodings the post markup uses.

Both passes only look inside the post container.

1. Every ``<video>``: its JSON ``data-sources`` attribute (an array of
   ``{"src": ...}`` objects) followed by its nested ``<source src>`` tags.
2. Every element that carries ``data-sources`` itself; some markup versions put
   it on a wrapper instead of the video.

Pass 1 results come first, then pass 2, both in document order; the merged list
is deduplicated by exact string.
"""

import json
from typing import List, Optional

from bs4 import Tag
from loguru import logger

from .config_loader import ExtractionProfile, VideoRules
from .snapshot import PageSnapshot, attribute, unique


def parse_sources_attribute(raw: Optional[str]) -> List[str]:
    """
    ``src`` values of a JSON-encoded sources descriptor.

    Malformed JSON, a non-array payload or entries without ``src`` contribute
    nothing; the problem is logged at DEBUG and never raised.
    """
    if not raw:
        return []
    try:
        entries = json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.debug(f"Ignoring malformed sources descriptor: {exc}")
        return []
    if not isinstance(entries, list):
        logger.debug(f"Ignoring sources descriptor of type {type(entries).__name__}")
        return []
    return [
        entry["src"]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("src"), str) and entry["src"]
    ]


def _video_element_sources(video: Tag, rules: VideoRules) -> List[str]:
    urls = parse_sources_attribute(attribute(video, rules.sources_attribute))
    for source in video.select(rules.nested_source_selector):
        src = attribute(source, "src")
        if src:
            urls.append(src)
    return urls


def collect_videos(snapshot: PageSnapshot, profile: ExtractionProfile) -> List[str]:
    rules = profile.videos
    container = snapshot.container(profile.container_selectors)
    if container is None:
        return []

    from_videos: List[str] = []
    for video in snapshot.select(rules.video_selector, scope=container):
        from_videos.extend(_video_element_sources(video, rules))

    from_wrappers: List[str] = []
    for node in snapshot.select(f"[{rules.sources_attribute}]", scope=container):
        from_wrappers.extend(parse_sources_attribute(attribute(node, rules.sources_attribute)))

    logger.debug(
        f"Video sources: {len(from_videos)} from video elements, "
        f"{len(from_wrappers)} from wrappers"
    )
    return unique(from_videos + from_wrappers)
