"""
Logging configuration for foldertalk.

Adapters and tools log through the package logger. Extractors don't log.

Failures that the pipeline recovers from (aggregation falling back to an
empty collection, a chat call turning into a fallback reply) still leave a
line here, so a quiet empty answer can be traced back to its cause.
"""

import logging
import os
import sys

logger = logging.getLogger("foldertalk")

DEFAULT_LOG_LEVEL = os.environ.get("FOLDERTALK_LOG_LEVEL", "WARNING")


def configure_logging(level: str | None = None) -> None:
    """
    Attach a stderr handler to the foldertalk logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Defaults to FOLDERTALK_LOG_LEVEL.
    """
    logger.setLevel(getattr(logging, (level or DEFAULT_LOG_LEVEL).upper()))

    # Idempotent: cli and server may both call this in one process
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)


def log_api_call(service: str, method: str, **params: object) -> None:
    """Log an outbound call with its non-None parameters."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.debug(f"API: {service}.{method}({param_str})")


def log_api_result(service: str, method: str, result_count: int | None = None) -> None:
    if result_count is not None:
        logger.debug(f"API: {service}.{method} returned {result_count} results")
    else:
        logger.debug(f"API: {service}.{method} completed")


def log_retry(attempt: int, max_attempts: int, delay_ms: int, reason: str) -> None:
    logger.warning(f"Retry {attempt}/{max_attempts} in {delay_ms}ms: {reason}")


def log_recovered(boundary: str, error: BaseException, level: int = logging.WARNING) -> None:
    """
    Record a failure that was converted into a fallback value.

    Args:
        boundary: Where the failure was absorbed (e.g. "aggregate", "chat")
        error: The exception that was absorbed
        level: Log level (WARNING unless the user sees the failure)
    """
    kind = getattr(getattr(error, "kind", None), "value", type(error).__name__)
    logger.log(level, f"{boundary}: recovered from {kind}: {error}")
