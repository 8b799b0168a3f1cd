"""
Configuration Schemas.

Pydantic models defining the expected structure of the config file
(~/.yx/config.yaml). Unknown keys, wrong types, or non-positive timeouts
raise a ValidationError at load time instead of a cryptic KeyError deep
in the request path.

Field names follow the camelCase keys used in the file (baseUrl,
timeoutMs, organizationId); attributes are snake_case.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://openapi-rdc.aliyuncs.com"
DEFAULT_TIMEOUT_MS = 30000


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown keys are caught immediately."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class AuthSchema(_StrictBase):
    token: str | None = None


class DefaultsSchema(_StrictBase):
    organization_id: str | None = Field(default=None, alias="organizationId")
    project_id: str | None = Field(default=None, alias="projectId")
    repository_id: str | None = Field(default=None, alias="repositoryId")


class ApiSchema(_StrictBase):
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="baseUrl")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, alias="timeoutMs", gt=0)


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json"] = "console"


class ConfigSchema(_StrictBase):
    version: Literal[1] = 1
    auth: AuthSchema = Field(default_factory=AuthSchema)
    defaults: DefaultsSchema = Field(default_factory=DefaultsSchema)
    api: ApiSchema = Field(default_factory=ApiSchema)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
