# services/scraper/page_provider.py
"""
Playwright-backed page provider.

Turns a post URL into a ``PageSnapshot``: launches a headless Chromium, loads
the page, gives the post a chance to reveal its truncated text and lazy media,
stamps rendering-only image signals onto the DOM and hands back the captured
HTML.  Every acquisition owns its own browser, which is always closed.
"""

import time
from typing import Optional, Protocol

from loguru import logger
from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    async_playwright,
)
from prometheus_client import Counter, Histogram
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from core.config import Settings, get_settings
from core.exceptions import PageAcquisitionError
from services.extraction.snapshot import PageSnapshot

PAGE_LOAD_DURATION = Histogram('page_load_duration_seconds', 'Time taken to acquire a post page')
PAGE_LOAD_FAILURES = Counter('page_load_failures_total', 'Post pages that could not be acquired')

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

SEE_MORE_SELECTORS = [
    'button[data-feed-action="see-more-post"]',
    'button[data-feed-action="expandCommentaryText"]',
    'button:has-text("…more")',
    'button:has-text("See more")',
]

# Fractions of the page height to scroll through so lazy media starts loading.
SCROLL_STEPS = [(0.0, 1000), (1 / 3, 1000), (1 / 2, 2000)]

# Natural and computed sizes only exist in the live page; copy them onto the
# elements so the snapshot can see them after serialization.
STAMP_RENDERED_SIZES = """
() => {
    for (const img of document.querySelectorAll('img')) {
        if (img.naturalWidth) img.setAttribute('data-natural-width', String(img.naturalWidth));
        if (img.naturalHeight) img.setAttribute('data-natural-height', String(img.naturalHeight));
        const style = window.getComputedStyle(img);
        const w = parseInt(style.width, 10);
        const h = parseInt(style.height, 10);
        if (w > 0) img.setAttribute('data-computed-width', String(w));
        if (h > 0) img.setAttribute('data-computed-height', String(h));
    }
}
"""


class PageProvider(Protocol):
    """Anything that can turn a post URL into a snapshot."""

    async def acquire(self, url: str, li_at: Optional[str] = None) -> PageSnapshot:
        ...


def session_cookie(li_at: str) -> dict:
    return {
        "name": "li_at",
        "value": li_at,
        "domain": ".linkedin.com",
        "path": "/",
        "httpOnly": True,
        "secure": True,
        "sameSite": "Lax",
    }


class PlaywrightPageProvider:
    """Renders post pages with a fresh headless Chromium per acquisition."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        # (wait_until, timeout seconds) per navigation attempt
        self.navigation_plan = [
            ("domcontentloaded", self.settings.NAVIGATION_TIMEOUT),
            ("load", self.settings.FALLBACK_NAVIGATION_TIMEOUT),
        ]

    async def acquire(self, url: str, li_at: Optional[str] = None) -> PageSnapshot:
        start = time.perf_counter()
        logger.info(f"Acquiring {url}")
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    context = await browser.new_context(user_agent=self.settings.DEFAULT_USER_AGENT)
                    if li_at:
                        await context.add_cookies([session_cookie(li_at)])
                    page = await context.new_page()

                    await self._navigate(page, url)
                    await self._settle(page)
                    await self._expand_text(page)
                    await self._reveal_lazy_media(page)

                    await page.evaluate(STAMP_RENDERED_SIZES)
                    html = await page.content()
                    final_url = page.url
                finally:
                    await browser.close()
        except PageAcquisitionError:
            PAGE_LOAD_FAILURES.inc()
            raise
        except PlaywrightError as exc:
            PAGE_LOAD_FAILURES.inc()
            raise PageAcquisitionError(f"Failed to load page: {exc}") from exc

        elapsed = time.perf_counter() - start
        PAGE_LOAD_DURATION.observe(elapsed)
        logger.info(f"Acquired {final_url} in {elapsed:.2f}s ({len(html)} bytes)")
        return PageSnapshot.from_html(html, url=final_url)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    async def _navigate(self, page: Page, url: str) -> None:
        """Try each navigation plan entry in turn; the last failure is fatal."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(len(self.navigation_plan)),
                retry=retry_if_exception_type(PlaywrightError),
                reraise=True,
            ):
                with attempt:
                    n = attempt.retry_state.attempt_number
                    wait_until, timeout = self.navigation_plan[n - 1]
                    if n > 1:
                        logger.warning(f"Retrying {url} with wait_until={wait_until}")
                    await page.goto(url, wait_until=wait_until, timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise PageAcquisitionError(f"Failed to load page: {exc}") from exc

    async def _settle(self, page: Page) -> None:
        """Let the page hydrate and wait (best effort) for the post container."""
        await page.wait_for_timeout(self.settings.HYDRATION_WAIT * 1000)
        try:
            await page.wait_for_selector(
                "article", timeout=self.settings.CONTENT_WAIT_TIMEOUT * 1000
            )
        except PlaywrightError:
            logger.warning("No article found; the post might require authentication")

    async def _expand_text(self, page: Page) -> None:
        """Click the first visible "see more" control, if any."""
        for selector in SEE_MORE_SELECTORS:
            button = page.locator(selector).first
            try:
                if not await button.is_visible():
                    continue
                await button.click(timeout=2000)
                logger.debug(f"Expanded post text via {selector!r}")
            except PlaywrightError as exc:
                logger.debug(f"Expand control {selector!r} not usable: {exc}")
                continue
            break

    async def _reveal_lazy_media(self, page: Page) -> None:
        for fraction, pause_ms in SCROLL_STEPS:
            await page.evaluate(
                "(f) => window.scrollTo(0, document.body.scrollHeight * f)", fraction
            )
            await page.wait_for_timeout(pause_ms)
        try:
            await page.wait_for_load_state("networkidle", timeout=5000)
        except PlaywrightError:
            logger.debug("Network did not go idle, continuing")
