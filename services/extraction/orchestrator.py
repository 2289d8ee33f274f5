# services/extraction/orchestrator.py
"""
Runs the text, image and video extractors against one snapshot and assembles
the ``ExtractionResult``.

The three extractors share no state and may run in any order.  A failure inside
one of them costs only its own contribution (``None`` or ``[]``); nothing here
retries or times out.
"""

from typing import Callable, Optional, TypeVar

from loguru import logger

from models.extraction import ExtractionResult
from .config_loader import ExtractionProfile, get_extraction_profile
from .image_classifier import classify_images
from .snapshot import PageSnapshot
from .text_extractor import extract_text
from .video_collector import collect_videos

T = TypeVar("T")


def _guarded(name: str, fn: Callable[[], T], default: T) -> T:
    try:
        return fn()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"{name} extraction failed, degrading to empty: {exc}")
        return default


def extract(
    snapshot: PageSnapshot, profile: Optional[ExtractionProfile] = None
) -> ExtractionResult:
    """Extract the post's text, images and videos from ``snapshot``."""
    if profile is None:
        profile = get_extraction_profile()

    text = _guarded("Text", lambda: extract_text(snapshot, profile), None)
    images = _guarded("Image", lambda: classify_images(snapshot, profile), [])
    videos = _guarded("Video", lambda: collect_videos(snapshot, profile), [])

    result = ExtractionResult(text=text, images=images, videos=videos)
    logger.info(
        f"Extracted {len(result.text or '')} chars, {len(result.images)} images, "
        f"{len(result.videos)} videos"
        + (f" from {snapshot.url}" if snapshot.url else "")
    )
    return result
