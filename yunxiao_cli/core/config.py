"""
Configuration Management.

Loads settings from the YAML config file and secrets/overrides from the
environment. Configuration is loaded once per process and treated as
read-only afterwards.

Config file (YAML, JSON is accepted too):
    ~/.yx/config.yaml  - auth, defaults, api, logging (override path with YX_CONFIG)

Environment:
    YUNXIAO_ACCESS_TOKEN - Access token, used when auth.token is not set
    YX_CONFIG            - Alternate config file path
    YX_BASE_URL          - Overrides api.baseUrl
    YX_TIMEOUT_MS        - Overrides api.timeoutMs
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from yunxiao_cli.core.config_schema import ConfigSchema
from yunxiao_cli.core.exceptions import ConfigError

CONFIG_DIR_NAME = ".yx"
CONFIG_FILE_NAME = "config.yaml"


class Settings(BaseSettings):
    """Secrets and overrides loaded from the environment."""

    yunxiao_access_token: str | None = None
    yx_config: str | None = None
    yx_base_url: str | None = None
    yx_timeout_ms: int | None = None

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )


def get_config_path(settings: Settings | None = None) -> Path:
    """Return the config file path, honouring YX_CONFIG."""
    settings = settings or get_settings()
    if settings.yx_config:
        return Path(settings.yx_config).expanduser()
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _format_validation_error(error: ValidationError) -> str:
    """Render the first validation issue as '<where>: <message>'."""
    issues = error.errors()
    if not issues:
        return "schema validation failed"
    first = issues[0]
    loc = first.get("loc") or ()
    where = ".".join(str(part) for part in loc) if loc else "(root)"
    return f"{where}: {first.get('msg', 'invalid value')}"


def load_config(path: Path) -> ConfigSchema:
    """
    Load and validate a config file.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid YAML or fails schema validation
    """
    if not path.exists():
        return ConfigSchema()

    try:
        with open(path, encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid config file at {path}. Fix the file or remove it to use defaults."
        ) from e

    try:
        return ConfigSchema.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid config format: {_format_validation_error(e)}") from e


def apply_overrides(config: ConfigSchema, settings: Settings) -> ConfigSchema:
    """Apply YX_BASE_URL / YX_TIMEOUT_MS on top of the file config."""
    updates: dict[str, Any] = {}
    if settings.yx_base_url:
        updates["base_url"] = settings.yx_base_url
    if settings.yx_timeout_ms is not None:
        if settings.yx_timeout_ms <= 0:
            raise ConfigError("Invalid config format: YX_TIMEOUT_MS: must be a positive integer")
        updates["timeout_ms"] = settings.yx_timeout_ms
    if not updates:
        return config
    return config.model_copy(update={"api": config.api.model_copy(update=updates)})


def resolve_token(config: ConfigSchema, settings: Settings) -> tuple[str | None, str | None]:
    """
    Resolve the access token.

    Returns:
        Tuple of (token, source) where source is "config", "env", or None.
    """
    if config.auth.token:
        return config.auth.token, "config"
    if settings.yunxiao_access_token:
        return settings.yunxiao_access_token, "env"
    return None, None


def mask_token(token: str | None) -> str:
    """Mask a token for display, keeping the first and last four characters."""
    if not token:
        return "(not set)"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}{'*' * (len(token) - 8)}{token[-4:]}"


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings."""
    return Settings()


@lru_cache
def get_config() -> ConfigSchema:
    """Get cached configuration (file + environment overrides)."""
    settings = get_settings()
    return apply_overrides(load_config(get_config_path(settings)), settings)
