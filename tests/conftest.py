"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

HTTP is never real: tests build an httpx.AsyncClient on top of
httpx.MockTransport and inject it into the transport. Retry sleeps are
replaced by a recorder so tests run instantly.
"""

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from tests.helpers import RecordingSleep
from yunxiao_cli.api.models import RequestContext
from yunxiao_cli.core.config import get_config, get_settings


# =============================================================================
# Config Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point YX_CONFIG at an empty temp location and clear cached config."""
    monkeypatch.setenv("YX_CONFIG", str(tmp_path / "config.yaml"))
    for name in ("YUNXIAO_ACCESS_TOKEN", "YX_BASE_URL", "YX_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_config.cache_clear()


# =============================================================================
# Request Fixtures
# =============================================================================


@pytest.fixture
def request_context() -> RequestContext:
    """Request context pointing at a fake gateway."""
    return RequestContext(
        base_url="https://openapi.test",
        token="pt-test-token",
        timeout_ms=30000,
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], Any]], httpx.AsyncClient]:
    """
    Build an httpx.AsyncClient whose requests are answered by a handler.

    Usage:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": True})

        http_client = mock_http(handler)
    """

    def _build(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build
