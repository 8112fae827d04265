"""
Infrastructure-specific decorators, providing cross-cutting concerns like
retry logic for network operations.
"""

import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# --- Constants for Retry Logic ---
_RETRY_ATTEMPTS = 3
_RETRY_MIN_WAIT_SECONDS = 1
_RETRY_MAX_WAIT_SECONDS = 10

_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def _is_transient(exception: BaseException) -> bool:
    """Connection problems, timeouts, throttling and 5xx are worth retrying."""
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(
        exception, (httpx.ConnectError, httpx.ReadError, httpx.TimeoutException)
    )


def _describe_failure(exception: BaseException) -> str:
    if isinstance(exception, httpx.HTTPStatusError):
        return f"HTTP {exception.response.status_code}"
    return type(exception).__name__


def _log_before_retry(retry_state):
    """Warns which URL failed, how, and how long until the next attempt."""
    url = retry_state.args[-1] if retry_state.args else "?"
    logger.warning(
        f"GET {url} failed with "
        f"{_describe_failure(retry_state.outcome.exception())}, "
        f"attempt {retry_state.attempt_number}/{_RETRY_ATTEMPTS}; "
        f"retrying in {retry_state.next_action.sleep:.2f}s"
    )


# Retries transient failures of a GET, then re-raises the last httpx error
retry_on_network_error = retry(
    stop=stop_after_attempt(_RETRY_ATTEMPTS),
    wait=wait_exponential(
        multiplier=1,
        min=_RETRY_MIN_WAIT_SECONDS,
        max=_RETRY_MAX_WAIT_SECONDS,
    ),
    retry=retry_if_exception(_is_transient),
    before_sleep=_log_before_retry,
    reraise=True,
)
