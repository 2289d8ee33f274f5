# tests/conftest.py
import pytest

from services.extraction.config_loader import ExtractionProfile
from services.extraction.snapshot import PageSnapshot


@pytest.fixture
def profile() -> ExtractionProfile:
    return ExtractionProfile()


@pytest.fixture
def make_snapshot():
    """Build a snapshot from an HTML body fragment."""
    def _make(body: str, url: str = "https://www.linkedin.com/posts/someone_activity-1") -> PageSnapshot:
        return PageSnapshot.from_html(f"<html><body>{body}</body></html>", url=url)
    return _make
