"""
HTTP Transport.

Performs exactly one HTTP exchange per call. No retries at this layer.

Every request carries:
    Accept: application/json
    Content-Type: application/json | application/x-www-form-urlencoded
    x-yunxiao-token: <token>
    User-Agent: yx-cli/<version>

The wall-clock timeout wraps the whole exchange (connect, send, read).
On expiry the in-flight request is cancelled, which closes its connection.
"""

import asyncio
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from yunxiao_cli import __version__
from yunxiao_cli.api.models import NetworkFailure, RawResponse, RequestContext, RequestSpec
from yunxiao_cli.core.exceptions import CliError
from yunxiao_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

USER_AGENT = f"yx-cli/{__version__}"
CONTENT_TYPES = {
    "json": "application/json",
    "form": "application/x-www-form-urlencoded",
}


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def build_url(base_url: str, path: str, query: Mapping[str, Any] | None = None) -> str:
    """
    Build an absolute URL from base URL, path, and query.

    Query parameters whose value is None or "" are omitted entirely.
    """
    normalized_base = base_url.rstrip("/")
    normalized_path = path if path.startswith("/") else f"/{path}"
    params = [
        (key, _stringify(value))
        for key, value in (query or {}).items()
        if not _is_blank(value)
    ]
    url = httpx.URL(f"{normalized_base}{normalized_path}")
    if params:
        url = url.copy_merge_params(params)
    return str(url)


def encode_body(spec: RequestSpec) -> bytes | None:
    """Serialize the body as compact JSON or as a form-encoded string."""
    if spec.body is None:
        return None
    if spec.body_encoding == "form":
        if not isinstance(spec.body, Mapping):
            raise CliError("Form body must be an object.")
        pairs = [
            (key, _stringify(value))
            for key, value in spec.body.items()
            if not _is_blank(value)
        ]
        return urlencode(pairs).encode("utf-8")
    return json.dumps(spec.body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def build_headers(spec: RequestSpec, token: str) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "Content-Type": CONTENT_TYPES[spec.body_encoding],
        "x-yunxiao-token": token,
        "User-Agent": USER_AGENT,
    }


class Transport:
    """
    Single-exchange HTTP transport over httpx.

    Usage:
        async with Transport() as transport:
            raw = await transport.execute(RequestSpec("GET", "/oapi/v1/platform/user"), context)
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize the transport.

        Args:
            client: Pre-built httpx client (e.g. one using httpx.MockTransport).
                If None, a client is created lazily and owned by this transport.
        """
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(follow_redirects=True)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if not self._owns_client or self._client is None:
            return
        if not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def execute(
        self,
        spec: RequestSpec,
        context: RequestContext,
    ) -> RawResponse | NetworkFailure:
        """
        Perform one HTTP exchange.

        Returns:
            RawResponse for any HTTP response (whatever the status),
            NetworkFailure when no response was received.
        """
        url = build_url(context.base_url, spec.path, spec.query)
        content = encode_body(spec)
        headers = build_headers(spec, context.token)
        timeout_seconds = context.timeout_ms / 1000
        client = await self._get_client()

        log_with_source(logger, "api", "debug", "API request", method=spec.method, url=url)

        try:
            async with asyncio.timeout(timeout_seconds):
                response = await client.request(
                    spec.method,
                    url,
                    content=content,
                    headers=headers,
                    timeout=timeout_seconds,
                )
        except (TimeoutError, httpx.TimeoutException):
            log_with_source(
                logger, "api", "debug", "API request timed out",
                method=spec.method, url=url, timeout_ms=context.timeout_ms,
            )
            return NetworkFailure("timeout", timeout_ms=context.timeout_ms)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log_with_source(
                logger, "api", "debug", "API request failed",
                method=spec.method, url=url, error=str(e),
            )
            return NetworkFailure("transport", detail=str(e) or type(e).__name__)

        log_with_source(
            logger, "api", "debug", "API response",
            method=spec.method, url=url, status_code=response.status_code,
        )

        return RawResponse(
            status=response.status_code,
            reason=response.reason_phrase,
            content_type=response.headers.get("content-type", ""),
            text=response.text,
        )
