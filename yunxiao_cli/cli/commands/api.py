"""
Raw API Commands.

Call the Yunxiao OpenAPI directly. Reads run as a single request (with
read retries); writes run through the compatibility candidate list.
"""

from typing import Any, Optional

import typer

from yunxiao_cli.api import RequestSpec, YunxiaoApiClient, build_request_context
from yunxiao_cli.api.compat import compat_candidates
from yunxiao_cli.cli.args import maybe_json, parse_key_value_pairs
from yunxiao_cli.cli.runner import print_result, run_command

app = typer.Typer(help="Call Yunxiao OpenAPI directly")

QUERY_HELP = "Query parameter key=value, repeatable"


@app.command()
def get(
    path: str = typer.Argument(..., help="API path, e.g. /oapi/v1/platform/user"),
    query: Optional[list[str]] = typer.Option(None, "--query", "-q", help=QUERY_HELP),
) -> None:
    """
    GET request.

    Examples:
        yx api get /oapi/v1/platform/user
        yx api get /oapi/v1/platform/organizations -q page=1
    """
    print_result(run_command(_get(path, query)))


async def _get(path: str, query: list[str] | None) -> Any:
    params = parse_key_value_pairs(query)
    async with YunxiaoApiClient(build_request_context()) as client:
        return await client.get(path, params)


async def _write(
    method: str,
    path: str,
    query: list[str] | None,
    body: str | None,
    form: bool,
    default_body: Any,
) -> Any:
    params = parse_key_value_pairs(query)
    payload = default_body if body is None else maybe_json(body)
    spec = RequestSpec(method, path, params, payload, "form" if form else "json")
    async with YunxiaoApiClient(build_request_context()) as client:
        return await client.request_with_fallback(
            compat_candidates(spec),
            operation=f"{method} {path}",
        )


def _register_write_command(name: str, method: str, help_text: str, default_body: Any = None) -> None:
    def command(
        path: str = typer.Argument(..., help="API path"),
        query: Optional[list[str]] = typer.Option(None, "--query", "-q", help=QUERY_HELP),
        body: Optional[str] = typer.Option(None, "--body", "-b", help="Request body (JSON)"),
        form: bool = typer.Option(False, "--form", help="Send the body form-encoded"),
    ) -> None:
        print_result(run_command(_write(method, path, query, body, form, default_body)))

    command.__doc__ = help_text
    app.command(name=name)(command)


_register_write_command("post", "POST", "POST request.", default_body={})
_register_write_command("put", "PUT", "PUT request.")
_register_write_command("patch", "PATCH", "PATCH request (falls back to PUT where PATCH is unavailable).")
_register_write_command("delete", "DELETE", "DELETE request.")
