"""
Doctor Command.

Environment and API diagnostics: token, base URL, and connectivity.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import typer
from rich.markup import escape
from rich.table import Table

from yunxiao_cli.api import YunxiaoApiClient, build_request_context
from yunxiao_cli.cli.runner import console, run_command
from yunxiao_cli.core.config import get_config, get_settings, resolve_token
from yunxiao_cli.core.exceptions import CliError

CURRENT_USER_PATH = "/oapi/v1/platform/user"
IDENTITY_FIELDS = ("id", "userId", "uid", "empId")


@dataclass
class DoctorCheck:
    name: str
    status: str
    detail: str


def extract_identity(value: Any) -> str | None:
    if not isinstance(value, dict):
        return None
    for key in IDENTITY_FIELDS:
        current = value.get(key)
        if isinstance(current, str) and current.strip():
            return current.strip()
        if isinstance(current, int) and not isinstance(current, bool):
            return str(current)
    return None


def _check_base_url(base_url: str) -> DoctorCheck:
    if not base_url.strip():
        return DoctorCheck("api.baseUrl", "fail", "Missing api.baseUrl in config.")
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL:
        return DoctorCheck("api.baseUrl", "fail", f"Invalid URL: {base_url}")
    if url.scheme not in ("http", "https") or not url.host:
        return DoctorCheck("api.baseUrl", "fail", f"Invalid URL: {base_url}")
    return DoctorCheck("api.baseUrl", "ok", f"Using {url.scheme}://{url.netloc.decode()}.")


async def run_checks() -> list[DoctorCheck]:
    config = get_config()
    token, source = resolve_token(config, get_settings())
    checks: list[DoctorCheck] = []

    if token:
        checks.append(DoctorCheck("auth.token", "ok", f"Token is configured ({source})."))
    else:
        checks.append(DoctorCheck(
            "auth.token", "fail", "Missing token. Set auth.token or YUNXIAO_ACCESS_TOKEN.",
        ))

    checks.append(_check_base_url(config.api.base_url))

    if any(check.status == "fail" for check in checks):
        checks.append(DoctorCheck(
            "api.connectivity", "warn", "Skipped because token/baseUrl check failed.",
        ))
        return checks

    try:
        async with YunxiaoApiClient(build_request_context(config)) as client:
            user = await client.get(CURRENT_USER_PATH)
    except CliError as e:
        checks.append(DoctorCheck("api.connectivity", "fail", e.message))
        return checks

    user_id = extract_identity(user)
    suffix = f", current user: {user_id}" if user_id else ""
    checks.append(DoctorCheck("api.connectivity", "ok", f"OpenAPI reachable{suffix}."))
    return checks


def doctor() -> None:
    """
    Run environment and API diagnostics.

    Examples:
        yx doctor
    """
    checks = run_command(run_checks())

    table = Table(title="Doctor Results", show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    colors = {"ok": "green", "warn": "yellow", "fail": "red"}
    for check in checks:
        color = colors[check.status]
        table.add_row(check.name, f"[{color}]{check.status.upper()}[/{color}]", escape(check.detail))

    console.print(table)

    if any(check.status == "fail" for check in checks):
        raise typer.Exit(1)
