# models/scrape_request.py
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .extraction import ExtractionResult

POST_URL_MARKER = "linkedin.com/posts/"


def is_post_url(url: Optional[str]) -> bool:
    """True when ``url`` points at a single post page."""
    return bool(url) and POST_URL_MARKER in url


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ----------------------------------------------------------------------
#  Requests
# ----------------------------------------------------------------------
class ScrapeRequest(BaseModel):
    """
    Single-post request.

    ``url`` is optional at the schema level so that a missing URL gets the
    same 400 body as a malformed one instead of a generic 422.
    """

    url: Optional[str] = Field(default=None, description="Post URL to extract")
    li_at: Optional[str] = Field(
        default=None, description="Session cookie value, passed through to the page provider"
    )

    @field_validator("url", "li_at", mode="before")
    @classmethod
    def _strip_and_nullify(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    model_config = {
        "json_schema_extra": {
            "example": {"url": "https://www.linkedin.com/posts/someone_activity-123"}
        }
    }


class BatchScrapeRequest(BaseModel):
    urls: Optional[List[str]] = Field(default=None, description="Post URLs, processed in order")
    li_at: Optional[str] = Field(
        default=None, description="Session cookie shared by every target"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "urls": [
                    "https://www.linkedin.com/posts/someone_activity-123",
                    "https://www.linkedin.com/posts/someone_activity-456",
                ]
            }
        }
    }


# ----------------------------------------------------------------------
#  Responses
# ----------------------------------------------------------------------
class TargetResult(BaseModel):
    """Outcome for one target of a batch; ``data`` xor ``error`` is set."""

    url: str
    success: bool
    data: Optional[ExtractionResult] = None
    error: Optional[str] = None


class ScrapeResponse(BaseModel):
    success: bool = True
    data: ExtractionResult
    scraped_at: datetime = Field(default_factory=utcnow)
    url: str


class BatchScrapeResponse(BaseModel):
    success: bool = True
    results: List[TargetResult]
    scraped_at: datetime = Field(default_factory=utcnow)
    total_urls: int
    successful: int
    failed: int

    @classmethod
    def from_results(cls, results: List[TargetResult]) -> "BatchScrapeResponse":
        successful = sum(1 for r in results if r.success)
        return cls(
            results=results,
            total_urls=len(results),
            successful=successful,
            failed=len(results) - successful,
        )
