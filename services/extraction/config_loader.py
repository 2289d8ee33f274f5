# services/extraction/config_loader.py
"""
Loads the extraction profiles from ``configs/extraction.yaml`` and validates them
with Pydantic models.  The file can contain a top‑level ``profiles`` key or
just the mapping of profile names → profile dictionaries.

Public API:
* ``get_extraction_profile(name)`` – returns a validated ``ExtractionProfile`` or
  raises ``ProfileNotFoundError``.
* ``list_available_profiles()`` – convenience helper for UI/CLI.

Every model carries the LinkedIn defaults, so ``ExtractionProfile()`` is a usable
profile even without the YAML file (handy in tests).
"""

import yaml
from pathlib import Path
from typing import List, Dict

from pydantic import BaseModel, Field


# ----------------------------------------------------------------------
# Pydantic schemas
# ----------------------------------------------------------------------
class TextRules(BaseModel):
    """Selector chain and thresholds for the primary post text."""
    selectors: List[str] = Field(
        default_factory=lambda: [
            'p[data-test-id="main-feed-activity-card__commentary"]',
            "div.main-feed-activity-card p.attributed-text-segment-list__content",
            'p.attributed-text-segment-list__content:not([class*="comment"])',
            "p.attributed-text-segment-list__content:first-of-type",
        ]
    )
    content_paragraph_selector: str = "article p.attributed-text-segment-list__content"
    comment_section_selector: str = 'section.comment, .comment__body, [class*="comment"]'
    max_chars: int = Field(default=2000, ge=1)
    fallback_paragraphs: int = Field(default=3, ge=1)
    container_paragraphs: int = Field(default=2, ge=1)
    max_sentences: int = Field(default=5, ge=1)


class ImageRules(BaseModel):
    """Inclusion / exclusion predicates for candidate images."""
    candidate_selectors: List[str] = Field(default_factory=lambda: ["main img", "article img"])
    source_attributes: List[str] = Field(default_factory=lambda: ["src", "data-src", "data-lazy-src"])
    srcset_attribute: str = "srcset"
    media_host: str = "licdn.com"
    media_markers: List[str] = Field(default_factory=lambda: ["media.licdn.com", "feedshare"])
    excluded_path_patterns: List[str] = Field(
        default_factory=lambda: [
            "profile-displayphoto",
            "displaybackgroundimage",
            "/sc/h/",
            "/aero-v1/sc/h/",
        ]
    )
    avatar_class_tokens: List[str] = Field(default_factory=lambda: ["profile", "avatar"])
    comment_image_marker: str = "comment-image"
    content_share_marker: str = "feedshare"
    small_comment_max_height: int = Field(default=300, ge=0)
    min_content_width: int = Field(default=200, ge=0)
    clearly_large_size: int = Field(default=400, ge=0)
    ancestry_depth: int = Field(default=10, ge=1)
    comment_tokens: List[str] = Field(default_factory=lambda: ["comment"])
    main_post_tokens: List[str] = Field(
        default_factory=lambda: ["main-feed-activity-card", "feed-shared-update-v2"]
    )
    indicator_classes: List[str] = Field(default_factory=lambda: ["w-full", "object-cover"])
    indicator_parent_tokens: List[str] = Field(default_factory=lambda: ["feed-images", "media"])
    indicator_tags: List[str] = Field(default_factory=lambda: ["figure"])
    indicator_alt_keywords: List[str] = Field(
        default_factory=lambda: ["graphical", "application", "powerpoint", "image", "screenshot"]
    )


class VideoRules(BaseModel):
    """Where video source lists live in the markup."""
    video_selector: str = "video"
    nested_source_selector: str = "source[src]"
    sources_attribute: str = "data-sources"


class ExtractionProfile(BaseModel):
    """Complete configuration for one platform's post pages."""
    container_selectors: List[str] = Field(
        default_factory=lambda: ["article", "div.main-feed-activity-card"]
    )
    text: TextRules = Field(default_factory=TextRules)
    images: ImageRules = Field(default_factory=ImageRules)
    videos: VideoRules = Field(default_factory=VideoRules)


class AllProfiles(BaseModel):
    """Profile name → profile."""
    profiles: Dict[str, ExtractionProfile]


# ----------------------------------------------------------------------
# Internal helpers & caching
# ----------------------------------------------------------------------
# Resolve the path relative to this file (two levels up → project root)
CONFIG_PATH = (
    Path(__file__).resolve().parents[2] / "configs" / "extraction.yaml"
)

DEFAULT_PROFILE = "linkedin"

# Simple in‑process cache so the YAML is read/validated only once per process
_cached_all: AllProfiles | None = None


def _load_yaml() -> dict:
    """Read the YAML file and return the inner ``profiles`` mapping."""
    with CONFIG_PATH.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
        return raw.get("profiles", raw)


def _load_all() -> AllProfiles:
    """
    Parse the entire YAML, validate it against ``AllProfiles`` and cache the
    result.  Any validation problem raises ``pydantic.ValidationError`` with a
    clear description of the offending field.
    """
    global _cached_all
    if _cached_all is None:
        _cached_all = AllProfiles(profiles=_load_yaml())
    return _cached_all


def reset_cache() -> None:
    """Forget the cached profiles (the next lookup re-reads the YAML)."""
    global _cached_all
    _cached_all = None


# ----------------------------------------------------------------------
# Custom exception for a missing profile
# ----------------------------------------------------------------------
class ProfileNotFoundError(KeyError):
    """Raised when a requested profile does not exist in extraction.yaml."""

    def __init__(self, profile_name: str):
        super().__init__(f"Extraction profile '{profile_name}' not found.")
        self.profile_name = profile_name


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def get_extraction_profile(profile_name: str = DEFAULT_PROFILE) -> ExtractionProfile:
    """
    Return a **validated** ``ExtractionProfile`` for the requested profile.

    Raises
    ------
    ProfileNotFoundError
        If the profile name is not present in the YAML.
    ValidationError
        If the YAML exists but does not conform to the Pydantic schema.
    """
    all_cfg = _load_all()
    try:
        return all_cfg.profiles[profile_name]
    except KeyError as exc:
        raise ProfileNotFoundError(profile_name) from exc


def list_available_profiles() -> List[str]:
    """Names of every profile in the YAML (used by the CLI)."""
    return list(_load_all().profiles.keys())
