"""
Resilience Logging.

Structured log events for retries and endpoint fallback, so resilience
behaviour can be filtered out of the stderr log stream:

    yx --debug api get /oapi/v1/platform/user 2>&1 | grep resilience_event

Usage:
    from yunxiao_cli.core.resilience import log_fallback, log_retry

    AsyncRetrying(..., before_sleep=log_retry)
"""

from typing import Any

from yunxiao_cli.core.logging import get_logger

logger = get_logger(__name__)


def _describe_outcome(retry_state: Any) -> str | None:
    outcome = retry_state.outcome
    if outcome is None:
        return None
    if outcome.failed:
        return str(outcome.exception())
    result = outcome.result()
    describe = getattr(result, "describe", None)
    return describe() if callable(describe) else None


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    delay_ms = None
    if retry_state.next_action is not None:
        delay_ms = round(retry_state.next_action.sleep * 1000)

    fn_name = getattr(retry_state.fn, "__name__", "unknown")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "delay_ms": delay_ms,
            "error": _describe_outcome(retry_state),
        },
    )


def log_fallback(operation: str, index: int, candidate: Any, error: str) -> None:
    """Emit a structured event when a candidate endpoint is skipped."""
    logger.info(
        f"Endpoint unavailable for {operation}, trying next candidate",
        extra={
            "resilience_event": "endpoint_fallback",
            "operation": operation,
            "candidate_index": index,
            "candidate": str(candidate),
            "error": error,
        },
    )
