"""Resource Controller configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .env import float_env_var, int_env_var, optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_SERVICE_URL = "https://resource-controller.cloud.ibm.com"
DEFAULT_IAM_URL = "https://iam.cloud.ibm.com"
DEFAULT_TIMEOUT_SECONDS = 60.0
ENV_PREFIX = "RESOURCE_CONTROLLER"


class AuthType(StrEnum):
    IAM = "iam"
    BEARER_TOKEN = "bearerToken"
    NO_AUTH = "noAuth"

    @classmethod
    def parse(cls, value: str) -> AuthType:
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        options = ", ".join(member.value for member in cls)
        raise ConfigurationError(f"Unsupported auth type {value!r} (expected one of: {options})")


@dataclass(frozen=True, slots=True)
class AuthSettings:
    auth_type: AuthType = AuthType.IAM
    apikey: str | None = field(default=None, repr=False)
    auth_url: str = DEFAULT_IAM_URL
    bearer_token: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class ResourceControllerConfig:
    """Holds the service endpoint, credentials and transport settings."""

    service_url: str
    auth: AuthSettings
    resilience: ResilienceConfig


def default_resilience_config(
    *,
    service_url: str = DEFAULT_SERVICE_URL,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    max_retries: int = 0,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="resource-controller",
        base_url=service_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        retry=RetryPolicy(total=max_retries),
        default_headers={"Accept": "application/json"},
    )


def _env(name: str) -> str:
    return f"{ENV_PREFIX}_{name}"


def _load_auth_settings() -> AuthSettings:
    auth_type = AuthType.parse(optional_env_var(_env("AUTH_TYPE"), AuthType.IAM.value))
    if auth_type is AuthType.IAM:
        values = require_env_vars((_env("APIKEY"),))
        return AuthSettings(
            auth_type=auth_type,
            apikey=values[_env("APIKEY")],
            auth_url=optional_env_var(_env("AUTH_URL"), DEFAULT_IAM_URL).rstrip("/"),
        )
    if auth_type is AuthType.BEARER_TOKEN:
        values = require_env_vars((_env("BEARER_TOKEN"),))
        return AuthSettings(auth_type=auth_type, bearer_token=values[_env("BEARER_TOKEN")])
    return AuthSettings(auth_type=auth_type)


def get_resource_controller_config(
    *,
    env_file: str | Path | None = None,
) -> ResourceControllerConfig:
    """Build the client configuration from ``RESOURCE_CONTROLLER_*`` variables.

    When ``env_file`` is given it is loaded first; variables already present in the
    process environment win over the file.
    """

    if env_file is not None:
        load_dotenv(env_file, override=False)

    service_url = optional_env_var(_env("URL"), DEFAULT_SERVICE_URL).rstrip("/")
    resilience = default_resilience_config(
        service_url=service_url,
        timeout_seconds=float_env_var(_env("TIMEOUT"), DEFAULT_TIMEOUT_SECONDS),
        max_retries=int_env_var(_env("MAX_RETRIES"), 0),
    )
    return ResourceControllerConfig(
        service_url=service_url,
        auth=_load_auth_settings(),
        resilience=resilience,
    )
