"""
Endpoint Fallback Executor.

Tries an ordered list of candidate request shapes for the same logical
operation, strictly sequentially, and stops at the first success or the
first definitive error.

Decision per classified outcome (after per-candidate retries):
    Success                          -> return value
    BusinessError                    -> raise, no fallback
    HttpError 4xx (except 404/405)   -> raise, no fallback
    HttpError 404/405                -> next candidate
    HttpError 5xx                    -> next candidate (reads), raise (writes)
    GatewayMismatch                  -> next candidate
    NetworkFailure                   -> next candidate (reads), raise (writes)

A write that failed with a 5xx or a network error is never resent under
another candidate shape.

When every candidate is exhausted:
    "Failed to <operation>. Last error: <last remembered failure>"
"""

import asyncio
import enum
from collections.abc import Sequence
from typing import Any

from yunxiao_cli.api.classifier import classify
from yunxiao_cli.api.models import (
    CandidateList,
    ClassifiedOutcome,
    Failure,
    GatewayMismatch,
    HttpError,
    NetworkFailure,
    RequestContext,
    RequestSpec,
    Success,
)
from yunxiao_cli.api.retry import RetryPolicy, Sleep, run_with_retry
from yunxiao_cli.api.transport import Transport
from yunxiao_cli.core.exceptions import FallbackExhaustedError
from yunxiao_cli.core.logging import get_logger, log_with_source
from yunxiao_cli.core.resilience import log_fallback

logger = get_logger(__name__)

DEFAULT_CANDIDATE = RequestSpec("GET", "/")


class Decision(enum.Enum):
    RETURN = "return"
    RAISE = "raise"
    ADVANCE = "advance"


def decide(outcome: ClassifiedOutcome, is_read: bool = True) -> Decision:
    if isinstance(outcome, Success):
        return Decision.RETURN
    if isinstance(outcome, GatewayMismatch):
        return Decision.ADVANCE
    if isinstance(outcome, HttpError) and outcome.endpoint_unavailable:
        return Decision.ADVANCE
    if isinstance(outcome, NetworkFailure) or (isinstance(outcome, HttpError) and outcome.server_error):
        return Decision.ADVANCE if is_read else Decision.RAISE
    return Decision.RAISE


def normalize_candidates(candidates: Sequence[RequestSpec] | None) -> CandidateList:
    """Freeze the candidate order; an empty list becomes the single default candidate."""
    if not candidates:
        logger.warning(
            "Empty candidate list, using default candidate",
            extra={"candidate": str(DEFAULT_CANDIDATE)},
        )
        return (DEFAULT_CANDIDATE,)
    return tuple(candidates)


class FallbackExecutor:
    """
    Runs candidate lists through transport, classifier, and retry policy.

    Usage:
        executor = FallbackExecutor(transport, context)
        value = await executor.run(
            [RequestSpec("DELETE", path), RequestSpec("POST", f"{path}/delete")],
            operation="delete milestone 42",
        )
    """

    def __init__(
        self,
        transport: Transport,
        context: RequestContext,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.context = context
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def attempt(self, spec: RequestSpec) -> ClassifiedOutcome:
        """Run one candidate: transport + classify, retried per policy."""

        async def send() -> ClassifiedOutcome:
            raw = await self.transport.execute(spec, self.context)
            if isinstance(raw, NetworkFailure):
                return raw
            return classify(raw)

        return await run_with_retry(send, spec.method, self.policy, sleep=self._sleep)

    async def run(
        self,
        candidates: Sequence[RequestSpec] | None,
        operation: str = "complete request",
    ) -> Any:
        """
        Execute the candidate list and return the first successful value.

        Raises:
            ApiRequestError: On a definitive error, including a failed write
            FallbackExhaustedError: When every candidate was unavailable
        """
        ordered = normalize_candidates(candidates)
        last_failure: Failure | None = None

        for index, spec in enumerate(ordered):
            outcome = await self.attempt(spec)
            decision = decide(outcome, spec.is_read)

            if decision is Decision.RETURN:
                log_with_source(
                    logger, "api", "info", "Candidate served request",
                    operation=operation, candidate_index=index, candidate=str(spec),
                )
                return outcome.value

            if decision is Decision.RAISE:
                raise outcome.to_error()

            last_failure = outcome
            if index + 1 < len(ordered):
                log_fallback(operation, index, spec, outcome.describe())

        last_error = last_failure.to_error()
        raise FallbackExhaustedError(
            f"Failed to {operation}. Last error: {last_error.message}",
            last_error=last_error,
        )
