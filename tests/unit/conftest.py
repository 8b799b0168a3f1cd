"""
Unit Test Fixtures.

Unit tests never touch the network; every client is built on
httpx.MockTransport.
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from tests.helpers import RecordingSleep
from yunxiao_cli.api.client import YunxiaoApiClient
from yunxiao_cli.api.models import RequestContext


@pytest.fixture
def make_client(
    request_context: RequestContext,
    recording_sleep: RecordingSleep,
    mock_http: Callable[[Callable[[httpx.Request], Any]], httpx.AsyncClient],
) -> Callable[..., YunxiaoApiClient]:
    """
    Build a YunxiaoApiClient answering through a handler.

    Usage:
        async def test_x(make_client):
            client = make_client(lambda request: httpx.Response(200, json={}))
    """

    def _build(handler: Callable[[httpx.Request], Any], **overrides: Any) -> YunxiaoApiClient:
        context = overrides.pop("context", request_context)
        return YunxiaoApiClient(
            context,
            http_client=mock_http(handler),
            sleep=recording_sleep,
            **overrides,
        )

    return _build
