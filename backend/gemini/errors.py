"""
Error taxonomy for the tutor core.

ConfigurationError and ValidationError are user-correctable and surfaced
verbatim. TransientAPIError means every usable model failed (or the failure
was not one that switching models can fix).

RemoteCallError is what the transport raises: the SDK exception already
classified into an ErrorKind, so nothing above the transport has to look at
error strings.
"""

import enum
from typing import Optional

from google.genai import errors as genai_errors


class ConfigurationError(Exception):
    """No API key configured."""


class ValidationError(ValueError):
    """Rejected settings or request input."""


class TransientAPIError(Exception):
    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.model = model


class ErrorKind(str, enum.Enum):
    CAPACITY_EXHAUSTED = "capacity_exhausted"
    MODEL_UNAVAILABLE = "model_unavailable"
    OTHER = "other"

    @property
    def retryable(self) -> bool:
        return self is not ErrorKind.OTHER


class RemoteCallError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


_CAPACITY_MARKERS = ("429", "resource_exhausted", "quota", "rate limit", "rate-limit")
_UNAVAILABLE_MARKERS = ("404", "not found", "not_found", "unavailable", "503")


def classify_error(exc: BaseException) -> ErrorKind:
    """
    Map a raw SDK / network exception onto an ErrorKind.

    Structured API errors are classified by HTTP code and status first;
    anything else falls back to matching the message text.
    """
    if isinstance(exc, genai_errors.APIError):
        status = (exc.status or "").upper()
        if exc.code == 429 or status == "RESOURCE_EXHAUSTED":
            return ErrorKind.CAPACITY_EXHAUSTED
        if exc.code in (404, 503) or status in ("NOT_FOUND", "UNAVAILABLE"):
            return ErrorKind.MODEL_UNAVAILABLE

    err = str(exc).lower()
    if any(marker in err for marker in _CAPACITY_MARKERS):
        return ErrorKind.CAPACITY_EXHAUSTED
    if any(marker in err for marker in _UNAVAILABLE_MARKERS):
        return ErrorKind.MODEL_UNAVAILABLE
    return ErrorKind.OTHER
