"""
Request Execution Layer.

Issues requests against the Yunxiao OpenAPI gateway, classifies the
responses, retries transient read failures, and falls back across
alternate endpoint shapes for the same logical operation.

Usage:
    from yunxiao_cli.api import RequestSpec, YunxiaoApiClient

    async with YunxiaoApiClient(context) as client:
        user = await client.get("/oapi/v1/platform/user")
        result = await client.request_with_fallback(
            [
                RequestSpec("DELETE", path),
                RequestSpec("POST", f"{path}/delete"),
            ],
            operation=f"delete milestone {milestone_id}",
        )
"""

from yunxiao_cli.api.client import YunxiaoApiClient, build_request_context, encode_repository_id
from yunxiao_cli.api.models import RequestContext, RequestSpec

__all__ = [
    "RequestContext",
    "RequestSpec",
    "YunxiaoApiClient",
    "build_request_context",
    "encode_repository_id",
]
