# core/exceptions.py
from typing import Any, Dict, List, Optional


class ScraperException(Exception):
    """Base error rendered as a structured JSON body by the API."""

    status_code: int = 500
    code: str = "SCRAPER_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        body.update(self.details)
        return body


class PageAcquisitionError(ScraperException):
    """The page provider could not produce a usable snapshot."""

    status_code = 502
    code = "PAGE_ACQUISITION_FAILED"


class InvalidTargetError(ScraperException):
    """The target is not a post URL this service can extract."""

    status_code = 400
    code = "INVALID_TARGET"


class BatchLimitError(ScraperException):
    status_code = 400
    code = "BATCH_LIMIT_EXCEEDED"


class ValidationError:
    """Request-validation failure, shaped like the other error bodies."""

    def __init__(self, errors: List[Dict[str, Any]]):
        # ``ctx`` may hold exception instances, which are not JSON-serializable
        self.errors = [{k: v for k, v in err.items() if k != "ctx"} for err in errors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": "Request validation failed",
            "code": "VALIDATION_ERROR",
            "details": self.errors,
        }
