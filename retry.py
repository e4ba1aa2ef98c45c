"""
Retry decorator with exponential backoff.

Used by the Drive adapter to ride out transient API failures (connection
drops, 429, 5xx). Anything else fails on the first attempt. On final failure
the exception is converted to a FolderTalkError so callers see one error type.

The chat endpoint is not wrapped: a failed turn becomes the fallback reply.
"""

import time
from functools import wraps
from typing import TypeVar, Callable, ParamSpec

from logging_config import logger, log_retry
from models import FolderTalkError, ErrorKind

T = TypeVar("T")
P = ParamSpec("P")


RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
)

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# Exact statuses with a dedicated kind; other 5xx fall through to NETWORK_ERROR
_STATUS_KINDS: dict[int, ErrorKind] = {
    401: ErrorKind.AUTH_EXPIRED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}


def _get_http_status(exception: Exception) -> int | None:
    """
    HTTP status carried by an exception, if any.

    Checked in order: googleapiclient HttpError (resp.status),
    httpx.HTTPStatusError (response.status_code), then a plain
    status_code attribute.
    """
    candidates = (
        getattr(getattr(exception, "resp", None), "status", None),
        getattr(getattr(exception, "response", None), "status_code", None),
        getattr(exception, "status_code", None),
    )
    for status in candidates:
        if isinstance(status, int):
            return status
    return None


def _should_retry(exception: Exception) -> bool:
    if isinstance(exception, FolderTalkError):
        return exception.retryable
    if isinstance(exception, RETRYABLE_EXCEPTIONS):
        return True
    return _get_http_status(exception) in RETRYABLE_STATUS_CODES


def _kind_for_status(status: int) -> ErrorKind | None:
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]
    if status >= 500:
        return ErrorKind.NETWORK_ERROR
    return None


def _convert_error(exception: Exception) -> FolderTalkError:
    """Wrap any exception as a FolderTalkError; FolderTalkErrors pass through."""
    if isinstance(exception, FolderTalkError):
        return exception

    message = str(exception)
    status = _get_http_status(exception)
    kind = _kind_for_status(status) if status is not None else None
    if kind is not None:
        return FolderTalkError(
            kind,
            message,
            {"status": status},
            retryable=status in RETRYABLE_STATUS_CODES,
        )

    if isinstance(exception, TimeoutError):
        return FolderTalkError(ErrorKind.TIMEOUT, message, retryable=True)
    if isinstance(exception, ConnectionError):
        return FolderTalkError(ErrorKind.NETWORK_ERROR, message, retryable=True)

    return FolderTalkError(ErrorKind.UNKNOWN, message)


def _calculate_wait(attempt: int, delay_ms: int, backoff_multiplier: float) -> int:
    """Milliseconds to wait after 0-based attempt number `attempt` fails."""
    return int(delay_ms * (backoff_multiplier ** attempt))


def with_retry(
    max_attempts: int = 3,
    delay_ms: int = 1000,
    backoff_multiplier: float = 2.0,
    convert_errors: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (first call included)
        delay_ms: Initial delay in milliseconds
        backoff_multiplier: Multiplier for exponential backoff
        convert_errors: Convert exceptions to FolderTalkError on final failure

    Example:
        @with_retry(max_attempts=3, delay_ms=1000)
        def get_file_metadata(file_id: str, token: str) -> dict:
            return build_drive_service(token).files().get(fileId=file_id).execute()
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    attempt += 1
                    if attempt >= max_attempts or not _should_retry(e):
                        logger.error(f"{func.__name__} failed after {attempt} attempt(s): {e}")
                        if convert_errors:
                            raise _convert_error(e) from e
                        raise

                    wait_ms = _calculate_wait(attempt - 1, delay_ms, backoff_multiplier)
                    log_retry(attempt, max_attempts, wait_ms, str(e))
                    time.sleep(wait_ms / 1000)

        return wrapper

    return decorator
