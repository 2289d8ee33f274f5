import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from loguru import logger

from core.config import settings
from core.exceptions import BatchLimitError, InvalidTargetError, ScraperException, ValidationError
from models.scrape_request import (
    BatchScrapeRequest,
    BatchScrapeResponse,
    ScrapeRequest,
    ScrapeResponse,
    is_post_url,
)
from services.extraction.config_loader import get_extraction_profile
from services.scraper.batch_runner import BatchRunner
from services.scraper.page_provider import PlaywrightPageProvider

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())

# Prometheus metrics endpoint
metrics_app = make_asgi_app()

POST_URL_EXAMPLE = "https://www.linkedin.com/posts/..."


# ------------------------------------------------------------------
# App lifecycle
# ------------------------------------------------------------------
def build_runner() -> BatchRunner:
    return BatchRunner(
        provider=PlaywrightPageProvider(settings),
        profile=get_extraction_profile(settings.EXTRACTION_PROFILE),
        concurrency=settings.BATCH_CONCURRENCY,
        target_timeout=settings.TARGET_TIMEOUT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing application...")
    if not hasattr(app.state, "runner"):
        app.state.runner = build_runner()
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Extracts text, images and videos from a single post page",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)


@app.middleware("http")
async def add_timing_header(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ValidationError(errors=exc.errors()).to_dict(),
    )


@app.exception_handler(ScraperException)
async def scraper_exception_handler(request: Request, exc: ScraperException):
    body = exc.to_dict()
    body["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": str(exc),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


app.mount("/metrics", metrics_app)


# ------------------------------------------------------------------
# Routes
# ------------------------------------------------------------------
def _validate_target(url: Optional[str]) -> str:
    if not url:
        raise InvalidTargetError(
            "Missing required parameter: url",
            details={"example": {"url": POST_URL_EXAMPLE}},
        )
    if not is_post_url(url):
        raise InvalidTargetError(
            "Invalid LinkedIn post URL",
            details={"expected": 'URL should contain "linkedin.com/posts/"'},
        )
    return url


async def _scrape(req: Request, body: ScrapeRequest) -> ScrapeResponse:
    url = _validate_target(body.url)
    logger.info(f"Processing scrape request for URL: {url}")
    data = await req.app.state.runner.scrape_one(url, body.li_at or settings.LI_AT)
    return ScrapeResponse(data=data, url=url)


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/scrape", response_model=ScrapeResponse)
async def scrape_post(body: ScrapeRequest, req: Request):
    return await _scrape(req, body)


@app.get("/scrape", response_model=ScrapeResponse)
async def scrape_get(req: Request, url: Optional[str] = None, li_at: Optional[str] = None):
    return await _scrape(req, ScrapeRequest(url=url, li_at=li_at))


@app.post("/scrape/batch", response_model=BatchScrapeResponse)
async def scrape_batch(body: BatchScrapeRequest, req: Request):
    if body.urls is None:
        raise InvalidTargetError(
            "Missing required parameter: urls (array)",
            details={"example": {"urls": [POST_URL_EXAMPLE, POST_URL_EXAMPLE]}},
        )
    if len(body.urls) > settings.MAX_BATCH_SIZE:
        raise BatchLimitError(
            f"Too many URLs. Maximum {settings.MAX_BATCH_SIZE} URLs per batch request."
        )
    logger.info(f"Processing batch request for {len(body.urls)} URLs")
    results = await req.app.state.runner.run(body.urls, body.li_at or settings.LI_AT)
    return BatchScrapeResponse.from_results(results)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=settings.WORKERS,
        log_level=settings.LOG_LEVEL.lower(),
    )
