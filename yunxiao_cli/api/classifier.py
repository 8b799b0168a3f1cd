"""
Response Classifier.

Gateways in front of the OpenAPI are inconsistent: some return HTML error
pages with 200/404 status, some wrap business failures inside 200
responses. Classification therefore inspects content before trusting the
HTTP status line.

Order of checks:
    1. HTML document body          -> GatewayMismatch (any status)
    2. Undecodable JSON body       -> GatewayMismatch
    3. Non-2xx status              -> HttpError
    4. 2xx failure envelope        -> BusinessError
    5. Anything else               -> Success
"""

import json
import re
from collections.abc import Mapping
from typing import Any

from yunxiao_cli.api.models import (
    BusinessError,
    ClassifiedOutcome,
    GatewayMismatch,
    HttpError,
    RawResponse,
    Success,
)

MESSAGE_FIELDS = ("message", "errorMessage", "error", "msg")
"""Field probes for error text, in order of preference."""

HTML_PREFIXES = ("<!doctype html", "<html")

MAX_MESSAGE_LENGTH = 240

_WHITESPACE = re.compile(r"\s+")


class _UndecodableBody(ValueError):
    pass


def looks_like_html(text: str) -> bool:
    return text.lstrip().lower().startswith(HTML_PREFIXES)


def truncate_one_line(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Collapse whitespace to single spaces and cap the length."""
    one_line = _WHITESPACE.sub(" ", text).strip()
    if not one_line:
        return "Request failed"
    if len(one_line) <= max_length:
        return one_line
    return f"{one_line[:max_length]}..."


def extract_message(body: Any) -> str | None:
    """Return the first non-blank message field, or the body itself if it is text."""
    if isinstance(body, str):
        return body
    if not isinstance(body, Mapping):
        return None
    for key in MESSAGE_FIELDS:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _decode_body(raw: RawResponse) -> Any:
    if "json" not in raw.content_type.lower():
        return raw.text
    if not raw.text.strip():
        return None
    try:
        return json.loads(raw.text)
    except ValueError as e:
        raise _UndecodableBody(str(e)) from e


def _business_failure(body: Any) -> BusinessError | None:
    if not isinstance(body, Mapping):
        return None

    http_status_code = body.get("httpStatusCode")
    has_failure_flag = body.get("success") is False or body.get("status") is False
    has_http_failure = (
        isinstance(http_status_code, int)
        and not isinstance(http_status_code, bool)
        and http_status_code >= 400
    )
    if not has_failure_flag and not has_http_failure:
        return None

    error_code = body.get("errorCode")
    code = error_code.strip() if isinstance(error_code, str) and error_code.strip() else None
    message = extract_message(body)
    if message is None and code is None:
        message = "Unknown business failure"
    return BusinessError(code=code, message=message or "")


def classify(raw: RawResponse) -> ClassifiedOutcome:
    """Categorize a raw response into a single outcome variant."""
    if looks_like_html(raw.text):
        return GatewayMismatch(raw.status)

    try:
        body = _decode_body(raw)
    except _UndecodableBody:
        return GatewayMismatch(raw.status)

    if not raw.ok:
        message = extract_message(body) or raw.reason or "Request failed"
        return HttpError(raw.status, truncate_one_line(message))

    business_error = _business_failure(body)
    if business_error is not None:
        return business_error

    return Success(body)
