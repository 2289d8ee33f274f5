# tests/fakes.py
import asyncio
from typing import Dict, List, Optional

from core.exceptions import PageAcquisitionError
from services.extraction.snapshot import PageSnapshot

URLS = [
    "https://www.linkedin.com/posts/alice_activity-1",
    "https://www.linkedin.com/posts/bob_activity-2",
    "https://www.linkedin.com/posts/carol_activity-3",
]
IMAGE = "https://media.licdn.com/dms/image/feedshare/x.jpg"


def post_page(text: str) -> str:
    return (
        "<article>"
        f'<p data-test-id="main-feed-activity-card__commentary">{text}</p>'
        f'<img src="{IMAGE}" width="800">'
        "</article>"
    )


def numbered_pages() -> Dict[str, str]:
    return {url: post_page(f"Post number {i}") for i, url in enumerate(URLS, start=1)}


class FakeProvider:
    """Serves canned HTML per URL; URLs in ``failing`` raise, ``slow`` ones hang."""

    def __init__(self, pages: Dict[str, str], failing=(), slow=()):
        self.pages = pages
        self.failing = set(failing)
        self.slow = set(slow)
        self.calls: List[str] = []
        self.cookies: List[Optional[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def acquire(self, url: str, li_at: Optional[str] = None) -> PageSnapshot:
        self.calls.append(url)
        self.cookies.append(li_at)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            if url in self.slow:
                await asyncio.sleep(10)
            if url in self.failing:
                raise PageAcquisitionError("Failed to load page: net::ERR_TIMED_OUT")
            return PageSnapshot.from_html(self.pages[url], url=url)
        finally:
            self.in_flight -= 1
