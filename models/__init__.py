from .extraction import Dimensions, ExtractionResult, MediaCandidate
from .scrape_request import (
    BatchScrapeRequest,
    BatchScrapeResponse,
    ScrapeRequest,
    ScrapeResponse,
    TargetResult,
    is_post_url,
)

__all__ = [
    'Dimensions', 'ExtractionResult', 'MediaCandidate',
    'BatchScrapeRequest', 'BatchScrapeResponse', 'ScrapeRequest',
    'ScrapeResponse', 'TargetResult', 'is_post_url',
]
