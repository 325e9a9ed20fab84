"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .resource_controller import (
    DEFAULT_IAM_URL,
    DEFAULT_SERVICE_URL,
    AuthSettings,
    AuthType,
    ResourceControllerConfig,
    default_resilience_config,
    get_resource_controller_config,
)

__all__ = [
    "DEFAULT_IAM_URL",
    "DEFAULT_SERVICE_URL",
    "AuthSettings",
    "AuthType",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResourceControllerConfig",
    "RetryPolicy",
    "default_resilience_config",
    "get_resource_controller_config",
    "require_env_vars",
]
