# models/extraction.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


@dataclass(frozen=True)
class Dimensions:
    """Effective size hint of an image element (0 when unknown)."""

    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class MediaCandidate:
    """One image element as seen by the classifier; never persisted."""

    raw_sources: Tuple[Optional[str], ...]
    resolved_source: Optional[str]
    width: int = 0
    height: int = 0
    ancestry_tags: FrozenSet[str] = field(default_factory=frozenset)
    css_classes: str = ""
    parent_classes: str = ""
    alt: str = ""


class ExtractionResult(BaseModel):
    """
    The engine's only output.

    ``images`` and ``videos`` never contain duplicates or empty entries; the
    validators below enforce it no matter what the collectors hand over.
    ``text`` is ``None`` when nothing passed any selector or fallback.
    """

    text: Optional[str] = None
    images: List[str] = []
    videos: List[str] = []

    model_config = ConfigDict(frozen=True)

    @field_validator("text", mode="before")
    @classmethod
    def _nullify_blank_text(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("images", "videos", mode="before")
    @classmethod
    def _dedupe(cls, v: Optional[List[Optional[str]]]) -> List[str]:
        """Drop empty entries and duplicates, keeping first-seen order."""
        if v is None:
            return []
        return list(dict.fromkeys(item for item in v if item))
