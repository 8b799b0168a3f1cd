"""
Request Execution Models.

Immutable request shapes, raw responses, and the classified outcome
variants that flow between transport, classifier, retry policy, and
fallback executor.

Outcome variants:
    Success          - decoded JSON (or text) body
    BusinessError    - 2xx response whose envelope signals failure
    HttpError        - non-2xx status
    GatewayMismatch  - HTML page or undecodable body where JSON was expected
    NetworkFailure   - timeout or transport failure (no response)
"""

import abc
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Union

from yunxiao_cli.core.exceptions import ApiRequestError

BodyEncoding = Literal["json", "form"]
NetworkFailureKind = Literal["timeout", "transport"]

READ_METHODS = frozenset({"GET"})


@dataclass(frozen=True)
class RequestContext:
    """Process-wide request settings, passed explicitly into the executor."""

    base_url: str
    token: str
    timeout_ms: int


@dataclass(frozen=True)
class RequestSpec:
    """One concrete request shape (a fallback candidate)."""

    method: str = "GET"
    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    body_encoding: BodyEncoding = "json"

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "query", MappingProxyType(dict(self.query or {})))

    @property
    def is_read(self) -> bool:
        return self.method in READ_METHODS

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


CandidateList = tuple[RequestSpec, ...]


@dataclass(frozen=True)
class RawResponse:
    status: int
    reason: str = ""
    content_type: str = ""
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def status_hint(status: int) -> str:
    """Actionable hint appended to HTTP error messages, keyed by status class."""
    if status == 400:
        return " Check request parameters/body."
    if status in (401, 403):
        return " Check token validity and resource permissions."
    if status in (404, 405):
        return " Endpoint may be unavailable in current gateway/tenant."
    if status >= 500:
        return " Server-side error; retry later."
    return ""


class _Failure(abc.ABC):
    """Shared behaviour for failure variants."""

    @abc.abstractmethod
    def describe(self) -> str:
        ...

    def to_error(self) -> ApiRequestError:
        return ApiRequestError(self.describe(), outcome=self)


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class BusinessError(_Failure):
    code: str | None
    message: str

    def describe(self) -> str:
        detail = ": ".join(part for part in (self.code, self.message) if part)
        return f"Yunxiao API business error: {detail}"


@dataclass(frozen=True)
class HttpError(_Failure):
    status: int
    message: str

    @property
    def endpoint_unavailable(self) -> bool:
        return self.status in (404, 405)

    @property
    def server_error(self) -> bool:
        return self.status >= 500

    def describe(self) -> str:
        return f"Yunxiao API {self.status}: {self.message}{status_hint(self.status)}"


@dataclass(frozen=True)
class GatewayMismatch(_Failure):
    status: int | None = None

    def describe(self) -> str:
        prefix = f"Yunxiao API {self.status}: " if self.status is not None else ""
        return (
            f"{prefix}Yunxiao API returned HTML document unexpectedly. "
            "Check endpoint/path compatibility."
        )


@dataclass(frozen=True)
class NetworkFailure(_Failure):
    kind: NetworkFailureKind
    detail: str = ""
    timeout_ms: int | None = None

    def describe(self) -> str:
        if self.kind == "timeout":
            return f"Request timeout after {self.timeout_ms}ms"
        return f"Request failed: {self.detail}"


ClassifiedOutcome = Union[Success, BusinessError, HttpError, GatewayMismatch, NetworkFailure]
Failure = Union[BusinessError, HttpError, GatewayMismatch, NetworkFailure]
