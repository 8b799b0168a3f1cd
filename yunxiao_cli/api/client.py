"""
Yunxiao API Client.

Facade over the fallback executor for the command layer. Single-request
calls surface the outcome's own error; candidate lists surface the
aggregated "Failed to ..." error when every candidate is unavailable.
"""

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

import httpx

from yunxiao_cli.api.fallback import FallbackExecutor
from yunxiao_cli.api.models import BodyEncoding, RequestContext, RequestSpec, Success
from yunxiao_cli.api.retry import RetryPolicy, Sleep
from yunxiao_cli.api.transport import Transport
from yunxiao_cli.core.config import Settings, get_config, get_settings, resolve_token
from yunxiao_cli.core.config_schema import ConfigSchema
from yunxiao_cli.core.exceptions import MissingTokenError

_URI_COMPONENT_SAFE = "!'()*"


def build_request_context(
    config: ConfigSchema | None = None,
    settings: Settings | None = None,
) -> RequestContext:
    """
    Build the request context from configuration.

    Raises:
        MissingTokenError: If no token is set in config or YUNXIAO_ACCESS_TOKEN
    """
    config = config or get_config()
    settings = settings or get_settings()
    token, _ = resolve_token(config, settings)
    if not token:
        raise MissingTokenError()
    return RequestContext(
        base_url=config.api.base_url,
        token=token,
        timeout_ms=config.api.timeout_ms,
    )


def encode_repository_id(repository_id: str) -> str:
    """Encode 'group/sub/repo' as 'group%2Fsub%2Frepo'; plain IDs pass through."""
    if "/" not in repository_id:
        return repository_id
    group, _, repo_name = repository_id.partition("/")
    if not group or not repo_name:
        return repository_id
    return f"{group}%2F{quote(repo_name, safe=_URI_COMPONENT_SAFE)}"


class YunxiaoApiClient:
    """
    HTTP client for the Yunxiao OpenAPI.

    Usage:
        async with YunxiaoApiClient(build_request_context()) as client:
            user = await client.get("/oapi/v1/platform/user")
    """

    def __init__(
        self,
        context: RequestContext,
        http_client: httpx.AsyncClient | None = None,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.context = context
        self.transport = Transport(http_client)
        self.executor = FallbackExecutor(self.transport, context, policy=policy, sleep=sleep)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "YunxiaoApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(self, spec: RequestSpec) -> Any:
        """Run a single request and return the decoded body."""
        outcome = await self.executor.attempt(spec)
        if isinstance(outcome, Success):
            return outcome.value
        raise outcome.to_error()

    async def get(self, path: str, query: Mapping[str, Any] | None = None) -> Any:
        return await self.request(RequestSpec("GET", path, query or {}))

    async def post(
        self,
        path: str,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
        body_encoding: BodyEncoding = "json",
    ) -> Any:
        return await self.request(RequestSpec("POST", path, query or {}, body, body_encoding))

    async def request_with_fallback(
        self,
        candidates: Sequence[RequestSpec],
        operation: str,
    ) -> Any:
        """Run a candidate list; see FallbackExecutor.run."""
        return await self.executor.run(candidates, operation)
