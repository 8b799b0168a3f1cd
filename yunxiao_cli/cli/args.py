"""
Argument Helpers.

Parsing for repeatable key=value options and loosely-typed values.
"""

import json
from typing import Any

from yunxiao_cli.core.exceptions import CliError


def maybe_json(text: str) -> Any:
    """Parse text as JSON when it looks like an object, array, or quoted string."""
    trimmed = text.strip()
    if not trimmed:
        return ""

    looks_like_json = (
        (trimmed.startswith("{") and trimmed.endswith("}"))
        or (trimmed.startswith("[") and trimmed.endswith("]"))
        or (trimmed.startswith('"') and trimmed.endswith('"'))
    )
    if not looks_like_json:
        return text

    try:
        return json.loads(trimmed)
    except ValueError:
        return text


def parse_key_value_pairs(entries: list[str] | None, option: str = "--query") -> dict[str, Any]:
    """
    Parse ["a=1", "b={...}"] into a mapping.

    Raises:
        CliError: If an entry has no '=' or an empty key
    """
    result: dict[str, Any] = {}
    for entry in entries or []:
        key, sep, raw_value = entry.partition("=")
        if not sep or not key.strip():
            raise CliError(f"Invalid {option} value: {entry}. Use key=value.")
        result[key.strip()] = maybe_json(raw_value.strip())
    return result
