# services/scraper/batch_runner.py
"""
Runs targets through acquire → extract, one ``TargetResult`` per target.

With the default concurrency of 1 each target's whole pipeline finishes before
the next one starts, so at most one browser is alive at a time.  A higher
ceiling runs targets through a bounded semaphore.  Either way a target's
failure (invalid URL, acquisition error, timeout, anything else) becomes one
failed entry and never touches the others; results keep input order.
"""

import asyncio
from typing import Callable, List, Optional

from loguru import logger
from prometheus_client import Counter, Histogram

from core.exceptions import InvalidTargetError, PageAcquisitionError
from models.extraction import ExtractionResult
from models.scrape_request import TargetResult, is_post_url
from services.extraction.config_loader import ExtractionProfile, get_extraction_profile
from services.extraction.orchestrator import extract
from services.extraction.snapshot import PageSnapshot
from .page_provider import PageProvider

SCRAPE_REQUESTS = Counter('scraper_requests_total', 'Total number of post extraction requests')
SCRAPE_ERRORS = Counter('scraper_errors_total', 'Total number of failed post extractions')
SCRAPE_DURATION = Histogram('scraper_duration_seconds', 'Time spent acquiring and extracting a post')

Extractor = Callable[[PageSnapshot, Optional[ExtractionProfile]], ExtractionResult]


class BatchRunner:
    """
    Parameters
    ----------
    provider: PageProvider
        Produces snapshots; the only component that touches the network.
    extractor: callable
        ``(snapshot, profile) -> ExtractionResult``; defaults to the engine.
    concurrency: int
        Maximum number of targets in flight.
    target_timeout: float | None
        Seconds allowed for one target; on expiry the in-flight acquisition is
        cancelled and the target is reported as failed.
    """

    def __init__(
        self,
        provider: PageProvider,
        extractor: Extractor = extract,
        profile: Optional[ExtractionProfile] = None,
        concurrency: int = 1,
        target_timeout: Optional[float] = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.provider = provider
        self.extractor = extractor
        self.profile = profile
        self.concurrency = concurrency
        self.target_timeout = target_timeout

    def _profile(self) -> ExtractionProfile:
        if self.profile is None:
            self.profile = get_extraction_profile()
        return self.profile

    async def scrape_one(self, url: str, li_at: Optional[str] = None) -> ExtractionResult:
        """
        Acquire and extract a single post.

        Raises
        ------
        InvalidTargetError
            ``url`` is not a post URL.
        PageAcquisitionError
            The provider failed or the target timed out.
        """
        if not is_post_url(url):
            raise InvalidTargetError("Invalid LinkedIn post URL")

        SCRAPE_REQUESTS.inc()
        with SCRAPE_DURATION.time():
            try:
                snapshot = await asyncio.wait_for(
                    self.provider.acquire(url, li_at), timeout=self.target_timeout
                )
            except asyncio.TimeoutError as exc:
                SCRAPE_ERRORS.inc()
                raise PageAcquisitionError(
                    f"Timed out after {self.target_timeout}s acquiring {url}"
                ) from exc
            except Exception:
                SCRAPE_ERRORS.inc()
                raise
            return self.extractor(snapshot, self._profile())

    async def _run_target(
        self, url: str, li_at: Optional[str], semaphore: asyncio.Semaphore
    ) -> TargetResult:
        async with semaphore:
            try:
                data = await self.scrape_one(url, li_at)
            except InvalidTargetError as exc:
                logger.warning(f"Skipping {url}: {exc.message}")
                return TargetResult(url=url, success=False, error=exc.message)
            except Exception as exc:  # pylint: disable=broad-except
                logger.error(f"Extraction failed for {url}: {exc}")
                return TargetResult(url=url, success=False, error=str(exc))
            return TargetResult(url=url, success=True, data=data)

    async def run(self, urls: List[str], li_at: Optional[str] = None) -> List[TargetResult]:
        """One result per URL, in input order."""
        semaphore = asyncio.Semaphore(self.concurrency)
        logger.info(f"Running batch of {len(urls)} targets (concurrency={self.concurrency})")
        results = await asyncio.gather(
            *(self._run_target(url, li_at, semaphore) for url in urls)
        )
        failed = sum(1 for r in results if not r.success)
        logger.info(f"Batch finished: {len(results) - failed} succeeded, {failed} failed")
        return list(results)
