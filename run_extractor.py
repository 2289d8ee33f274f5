# run_extractor.py
"""
Command-line entry point.

    python run_extractor.py "https://www.linkedin.com/posts/..."
    LI_AT=<cookie> python run_extractor.py "https://www.linkedin.com/posts/..."
    python run_extractor.py --html saved-post.html

Prints the extraction result as JSON on stdout; logs go to stderr.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from core.config import get_settings
from core.exceptions import ScraperException
from models.extraction import ExtractionResult
from services.extraction.config_loader import (
    ExtractionProfile,
    ProfileNotFoundError,
    get_extraction_profile,
    list_available_profiles,
)
from services.extraction.orchestrator import extract
from services.extraction.snapshot import PageSnapshot
from services.scraper.batch_runner import BatchRunner
from services.scraper.page_provider import PlaywrightPageProvider


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract text, images and videos from a post page")
    parser.add_argument("url", nargs="?", help="Post URL to render and extract")
    parser.add_argument("--html", type=Path, help="Extract from a saved HTML file instead of rendering")
    parser.add_argument("--li-at", default=os.environ.get("LI_AT"), help="Session cookie (default: $LI_AT)")
    parser.add_argument("--profile", default=None, help="Extraction profile name")
    parser.add_argument("--list-profiles", action="store_true", help="Print the available profiles and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


async def run(url: str, li_at: Optional[str], profile: ExtractionProfile) -> ExtractionResult:
    settings = get_settings()
    runner = BatchRunner(
        provider=PlaywrightPageProvider(settings),
        profile=profile,
        target_timeout=settings.TARGET_TIMEOUT,
    )
    return await runner.scrape_one(url, li_at)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    if args.list_profiles:
        print("\n".join(list_available_profiles()))
        return 0

    profile_name = args.profile or get_settings().EXTRACTION_PROFILE
    try:
        profile = get_extraction_profile(profile_name)
    except ProfileNotFoundError as exc:
        logger.error(f"{exc.args[0]} Available: {', '.join(list_available_profiles())}")
        return 1

    if args.html:
        snapshot = PageSnapshot.from_html(args.html.read_text(encoding="utf-8"), url=args.url)
        result = extract(snapshot, profile)
    elif args.url:
        try:
            result = asyncio.run(run(args.url, args.li_at, profile))
        except ScraperException as exc:
            logger.error(exc.message)
            return 1
    else:
        parser.error(
            'Provide a LinkedIn post URL.\n'
            'Example: python run_extractor.py "https://www.linkedin.com/posts/..."'
        )

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
