"""Unit tests for CLI commands."""

import json
import logging
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from cli import app
from tests.helpers import RecordingSleep, RouteRecorder, json_response
from yunxiao_cli import __version__
from yunxiao_cli.api.client import YunxiaoApiClient
from yunxiao_cli.core.config import get_config, get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def with_token(monkeypatch):
    monkeypatch.setenv("YUNXIAO_ACCESS_TOKEN", "pt-cli-token")
    get_settings.cache_clear()
    get_config.cache_clear()


def client_factory(handler):
    """Replacement for YunxiaoApiClient that answers through a handler."""

    def _build(context):
        return YunxiaoApiClient(
            context,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            sleep=RecordingSleep(),
        )

    return _build


class TestMainApp:
    """Tests for main app options."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "api" in result.stdout
        assert "doctor" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"yx {__version__}"

    def test_invalid_config_file(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("api:\n  timeoutMs: -5\n")
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 1
        assert "Invalid config format" in result.output


class TestApiCommands:
    """Tests for raw API commands."""

    def test_get_help(self) -> None:
        result = runner.invoke(app, ["api", "get", "--help"])
        assert result.exit_code == 0
        assert "GET request" in result.stdout

    @pytest.mark.usefixtures("with_token")
    def test_get_prints_json(self) -> None:
        recorder = RouteRecorder({
            ("GET", "/oapi/v1/platform/user"): json_response(200, {"id": "u-1", "name": "Ada"}),
        })
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(app, ["api", "get", "/oapi/v1/platform/user", "-q", "page=2"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"id": "u-1", "name": "Ada"}
        request = recorder.requests[0]
        assert request.url.params["page"] == "2"
        assert request.headers["x-yunxiao-token"] == "pt-cli-token"

    def test_get_without_token(self) -> None:
        result = runner.invoke(app, ["api", "get", "/oapi/v1/platform/user"])
        assert result.exit_code == 1
        assert "Missing token" in result.output

    def test_get_with_malformed_query(self) -> None:
        result = runner.invoke(app, ["api", "get", "/x", "--query", "nope"])
        assert result.exit_code == 1
        assert "Invalid --query value: nope" in result.output

    @pytest.mark.usefixtures("with_token")
    def test_patch_falls_back_to_put(self) -> None:
        recorder = RouteRecorder({
            ("PATCH", "/oapi/v1/items/1"): json_response(405, {"message": "Method Not Allowed"}),
            ("PUT", "/oapi/v1/items/1"): json_response(200, {"updated": True}),
        })
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(
                app, ["api", "patch", "/oapi/v1/items/1", "--body", '{"name": "x"}'],
            )

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"updated": True}
        assert recorder.calls() == [("PATCH", "/oapi/v1/items/1"), ("PUT", "/oapi/v1/items/1")]
        assert json.loads(recorder.requests[1].content) == {"name": "x"}

    @pytest.mark.usefixtures("with_token")
    def test_patch_server_error_is_not_resent(self) -> None:
        recorder = RouteRecorder({
            ("PATCH", "/oapi/v1/items/1"): json_response(503, {"message": "unavailable"}),
            ("PUT", "/oapi/v1/items/1"): json_response(200, {"updated": True}),
        })
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(
                app, ["api", "patch", "/oapi/v1/items/1", "--body", '{"name": "x"}'],
            )

        assert result.exit_code == 1
        assert "Yunxiao API 503" in result.output
        assert recorder.calls() == [("PATCH", "/oapi/v1/items/1")]

    @pytest.mark.usefixtures("with_token")
    def test_post_sends_empty_object_by_default(self) -> None:
        recorder = RouteRecorder({("POST", "/oapi/v1/items"): json_response(200, {"id": 7})})
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(app, ["api", "post", "/oapi/v1/items"])

        assert result.exit_code == 0
        assert recorder.requests[0].content == b"{}"

    @pytest.mark.usefixtures("with_token")
    def test_post_form_body(self) -> None:
        recorder = RouteRecorder({("POST", "/oapi/v1/items"): json_response(200, {"id": 7})})
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(
                app, ["api", "post", "/oapi/v1/items", "--form", "--body", '{"a": "1", "b": "x y"}'],
            )

        assert result.exit_code == 0
        request = recorder.requests[0]
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.content == b"a=1&b=x+y"

    @pytest.mark.usefixtures("with_token")
    def test_post_conflict_is_an_error(self) -> None:
        recorder = RouteRecorder({
            ("POST", "/oapi/v1/items"): json_response(409, {"errorMessage": "already exists"}),
        })
        with patch("yunxiao_cli.cli.commands.api.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(app, ["api", "post", "/oapi/v1/items", "--body", "{}"])

        assert result.exit_code == 1
        assert "Yunxiao API 409" in result.output
        assert len(recorder.requests) == 1


class TestDoctorCommand:
    """Tests for the doctor command."""

    def test_missing_token_fails(self) -> None:
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 1
        assert "Doctor Results" in result.stdout
        assert "FAIL" in result.stdout
        assert "WARN" in result.stdout

    @pytest.mark.usefixtures("with_token")
    def test_reachable(self) -> None:
        recorder = RouteRecorder({
            ("GET", "/oapi/v1/platform/user"): json_response(200, {"userId": "u-42"}),
        })
        with patch("yunxiao_cli.cli.commands.doctor.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 0
        assert "FAIL" not in result.stdout
        assert "u-42" in result.stdout

    @pytest.mark.usefixtures("with_token")
    def test_unreachable(self) -> None:
        recorder = RouteRecorder({
            ("GET", "/oapi/v1/platform/user"): json_response(401, {"message": "bad token"}),
        })
        with patch("yunxiao_cli.cli.commands.doctor.YunxiaoApiClient", client_factory(recorder)):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 1
        assert "FAIL" in result.stdout
