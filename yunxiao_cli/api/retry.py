"""
Retry Policy.

Only idempotent reads are retried; mutating verbs are never retried
automatically. Retryable outcomes are 5xx HttpError and NetworkFailure.
BusinessError, 4xx HttpError, and GatewayMismatch are permanent here
(the fallback executor handles the latter).

Backoff is exponential and computed from the attempt index only:
    attempt 1 -> 250ms, attempt 2 -> 500ms, ... capped at 1500ms
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

from yunxiao_cli.api.models import READ_METHODS, ClassifiedOutcome, HttpError, NetworkFailure
from yunxiao_cli.core.resilience import log_retry

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_ms: int = 250
    max_delay_ms: int = 1500
    read_methods: frozenset[str] = READ_METHODS

    def is_read(self, method: str) -> bool:
        return method.upper() in self.read_methods

    def max_attempts_for(self, method: str) -> int:
        return self.max_attempts if self.is_read(method) else 1

    def is_retryable(self, outcome: ClassifiedOutcome) -> bool:
        if isinstance(outcome, NetworkFailure):
            return True
        return isinstance(outcome, HttpError) and outcome.server_error

    def should_retry(self, outcome: ClassifiedOutcome, attempt: int, method: str) -> bool:
        """Whether another attempt should follow attempt number `attempt` (1-based)."""
        return attempt < self.max_attempts_for(method) and self.is_retryable(outcome)

    def delay_for(self, attempt: int) -> int:
        """Delay in milliseconds before the attempt following `attempt`."""
        return min(self.max_delay_ms, self.base_delay_ms * 2 ** (attempt - 1))


async def run_with_retry(
    call: Callable[[], Awaitable[ClassifiedOutcome]],
    method: str,
    policy: RetryPolicy | None = None,
    sleep: Sleep = asyncio.sleep,
) -> ClassifiedOutcome:
    """
    Run `call` until it yields a non-retryable outcome or attempts run out.

    Returns:
        The last classified outcome (success or the final failure).
    """
    policy = policy or RetryPolicy()

    def _should_retry(retry_state: RetryCallState) -> bool:
        outcome = retry_state.outcome
        if outcome is None or outcome.failed:
            return False
        return policy.should_retry(outcome.result(), retry_state.attempt_number, method)

    def _wait(retry_state: RetryCallState) -> float:
        return policy.delay_for(retry_state.attempt_number) / 1000

    def _last_outcome(retry_state: RetryCallState) -> ClassifiedOutcome:
        return retry_state.outcome.result()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts_for(method)),
        wait=_wait,
        retry=_should_retry,
        before_sleep=log_retry,
        retry_error_callback=_last_outcome,
        sleep=sleep,
    )
    return await retrying(call)
