from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ceo_board.errors import WorkerInvocationError
from ceo_board.observability.logging import get_logger

T = TypeVar("T")

TRANSIENT_MARKERS: tuple[str, ...] = (
    "503",
    "502",
    "429",
    "service unavailable",
    "overloaded",
    "rate limit",
    "connection",
    "timeout",
    "timed out",
    "temporarily",
)


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True
    # reason only: model identifiers can contain marker digits
    text = exc.reason if isinstance(exc, WorkerInvocationError) else str(exc)
    message = text.lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def describe_error(exc: BaseException, timeout_seconds: float | None = None) -> str:
    if isinstance(exc, TimeoutError) and not str(exc):
        if timeout_seconds is not None:
            return f"timed out after {timeout_seconds:g}s"
        return "timed out"
    return str(exc) or type(exc).__name__


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    max_retries: int = 2
    base_delay_seconds: float = 2.0
    timeout_seconds: float | None = 120.0

    @property
    def max_attempts(self) -> int:
        return max(0, self.max_retries) + 1

    def delay_for(self, attempt: int) -> float:
        return self.base_delay_seconds * (2**attempt)


class AttemptsExhausted(Exception):
    def __init__(self, label: str, attempts: int, last_error: Exception, reason: str) -> None:
        super().__init__(f"{label}: {reason} (after {attempts} attempt(s))")
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        self.reason = reason


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    label: str,
    reason_for: Callable[[Exception], str] | None = None,
) -> tuple[T, int]:
    """Run ``operation`` with a per-attempt timeout and exponential backoff.

    Only transient errors (timeouts, connection drops, 429/5xx style messages)
    are retried. Returns the value together with the number of attempts used;
    raises ``AttemptsExhausted`` once the policy gives up. Cancellation is
    never absorbed.
    """
    logger = get_logger("retry")
    for attempt in range(policy.max_attempts):
        try:
            value = await asyncio.wait_for(operation(), timeout=policy.timeout_seconds)
            return value, attempt + 1
        except Exception as exc:
            reason = reason_for(exc) if reason_for else describe_error(exc, policy.timeout_seconds)
            final = attempt + 1 >= policy.max_attempts or not is_transient(exc)
            if final:
                raise AttemptsExhausted(label, attempt + 1, exc, reason) from exc

            delay = policy.delay_for(attempt)
            logger.warning(
                "transient_error_retrying",
                label=label,
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
                delay_seconds=delay,
                error=reason,
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable: retry loop always returns or raises")
