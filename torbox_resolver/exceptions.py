"""
TorBox error taxonomy

Every remote call funnels its HTTP failures through ``rethrow_auth`` so that
credential and plan problems look the same whichever endpoint reported them.
"""
from enum import Enum
from typing import NoReturn, Optional, Type

import httpx


class TorboxError(Exception):
    """Base exception for TorBox resolution errors"""
    pass


class BadTokenError(TorboxError):
    """The API key was rejected (401/403)"""
    pass


class AccessDeniedError(TorboxError):
    """The account's plan does not allow the operation (402)"""
    pass


class NotFoundError(TorboxError):
    """A lookup failed locally: torrent, file index or download link"""
    pass


class FailureKind(str, Enum):
    BAD_TOKEN = "bad_token"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


def classify_status(status_code: Optional[int]) -> Optional[Type[TorboxError]]:
    """
    Map an HTTP status to the error class it stands for.
    Returns None when the status carries no special meaning.
    """
    if status_code in (401, 403):
        return BadTokenError
    if status_code == 402:
        return AccessDeniedError
    return None


def rethrow_auth(error: Exception) -> NoReturn:
    """Raise the classified error for ``error``, or re-raise it unchanged."""
    status_code = None
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
    
    error_class = classify_status(status_code)
    if error_class is not None:
        raise error_class(f"TorBox rejected request with status {status_code}") from error
    raise error


def failure_kind(error: BaseException) -> FailureKind:
    if isinstance(error, BadTokenError):
        return FailureKind.BAD_TOKEN
    if isinstance(error, AccessDeniedError):
        return FailureKind.ACCESS_DENIED
    if isinstance(error, NotFoundError):
        return FailureKind.NOT_FOUND
    return FailureKind.UNEXPECTED
