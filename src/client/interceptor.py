"""
Dofus Retro Tracker - Retry / error-classification interceptor

Wraps every call the API client makes:

    Pending --success--------------------------------> Done
    Pending --status 0 or >=500, retries < 2--> Backoff --> Pending
    Pending --status 0 or >=500, retries == 2-> Failed
    Pending --4xx or client-side failure------> Failed
    Failed  --notify user once--> re-raise the original exception

Backoff before retry n is 2^(n-1) * base delay (1s, then 2s), no jitter.
The interceptor only observes: it never swallows or replaces an exception.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import httpx
import structlog

from src.config import ErrorCategory, settings
from src.client.notifier import LogNotifier, Notifier

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Status used for failures where no HTTP response was received
NETWORK_FAILURE_STATUS = 0

_FIXED_MESSAGES = {
    ErrorCategory.NETWORK_UNREACHABLE: "Unable to connect to server. Please check your connection.",
    ErrorCategory.BAD_REQUEST: "Bad request. Please check your input.",
    ErrorCategory.NOT_FOUND: "Resource not found.",
    ErrorCategory.SERVER_ERROR: "Internal server error. Please try again later.",
}


@dataclass(frozen=True)
class ClassifiedError:
    """User-facing view of a terminal failure."""

    category: ErrorCategory
    status: int | None  # None for client-side failures
    message: str


def failure_status(exc: BaseException) -> int | None:
    """
    HTTP status of a failure: the response code, 0 when no response was
    received, or None for a failure that is not an HTTP failure at all.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    if isinstance(exc, httpx.TransportError):
        return NETWORK_FAILURE_STATUS
    return None


def is_retryable(status: int | None) -> bool:
    """Only connection failures and 5xx are transient."""
    if status is None:
        return False
    return status == NETWORK_FAILURE_STATUS or status >= 500


def backoff_delay_ms(retry_number: int, base_delay_ms: int | None = None) -> int:
    """Delay before the given retry (1-based): base, 2*base, 4*base..."""
    base = base_delay_ms if base_delay_ms is not None else settings.RETRY_BASE_DELAY_MS
    return (2 ** (retry_number - 1)) * base


def classify_failure(exc: BaseException) -> ClassifiedError:
    """Map a terminal failure to exactly one ErrorCategory and its message."""
    status = failure_status(exc)

    if status is None:
        return ClassifiedError(ErrorCategory.CLIENT_ERROR, None, f"Client Error: {exc}")

    if status == NETWORK_FAILURE_STATUS:
        category = ErrorCategory.NETWORK_UNREACHABLE
    elif status == 400:
        category = ErrorCategory.BAD_REQUEST
    elif status == 404:
        category = ErrorCategory.NOT_FOUND
    elif status == 500:
        category = ErrorCategory.SERVER_ERROR
    else:
        reason = exc.response.reason_phrase if isinstance(exc, httpx.HTTPStatusError) else ""
        return ClassifiedError(
            ErrorCategory.GENERIC, status, f"Server Error: {status} - {reason or exc}"
        )

    return ClassifiedError(category, status, _FIXED_MESSAGES[category])


class RetryInterceptor:
    """
    Retries transient failures and reports terminal ones to the user.

    Usage:
        interceptor = RetryInterceptor(notifier=InMemoryNotifier())
        result = await interceptor.intercept(request, send)
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        max_retries: int | None = None,
        base_delay_ms: int | None = None,
        notification_duration_ms: int | None = None,
    ):
        self._notifier = notifier or LogNotifier()
        self._max_retries = (
            max_retries if max_retries is not None else settings.RETRY_MAX_ATTEMPTS
        )
        self._base_delay_ms = (
            base_delay_ms if base_delay_ms is not None else settings.RETRY_BASE_DELAY_MS
        )
        self._notification_duration_ms = (
            notification_duration_ms
            if notification_duration_ms is not None
            else settings.NOTIFICATION_DURATION_MS
        )

    async def intercept(
        self,
        request: httpx.Request,
        handler: Callable[[httpx.Request], Awaitable[T]],
    ) -> T:
        """
        Run ``handler(request)`` under the retry policy.

        Args:
            request: The outgoing request; reused unchanged for every attempt.
            handler: Performs the call. Must raise httpx.HTTPStatusError for
                non-2xx responses.

        Returns:
            Whatever the handler returns on its first successful attempt.

        Raises:
            The handler's exception from the last attempt, after the user
            has been notified. It carries a ``classified_error`` attribute.
        """
        retries = 0
        while True:
            try:
                return await handler(request)
            except Exception as exc:
                status = failure_status(exc)
                if is_retryable(status) and retries < self._max_retries:
                    retries += 1
                    delay_ms = backoff_delay_ms(retries, self._base_delay_ms)
                    logger.warning(
                        "http_request_retry",
                        method=request.method,
                        url=str(request.url),
                        status=status,
                        retry=retries,
                        delay_ms=delay_ms,
                    )
                    await asyncio.sleep(delay_ms / 1000)
                    continue

                self._report(request, exc, retries)
                raise

    def _report(self, request: httpx.Request, exc: Exception, retries: int) -> None:
        classified = classify_failure(exc)
        exc.classified_error = classified  # type: ignore[attr-defined]

        logger.error(
            "http_request_failed",
            method=request.method,
            url=str(request.url),
            status=classified.status,
            category=classified.category.value,
            retries=retries,
            error=str(exc),
            error_type=type(exc).__name__,
        )

        try:
            self._notifier.notify(classified.message, self._notification_duration_ms)
        except Exception as notify_exc:
            # A broken notifier must not mask the request failure
            logger.error(
                "user_notification_failed",
                error=str(notify_exc),
                error_type=type(notify_exc).__name__,
            )
