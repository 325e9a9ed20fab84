"""IBM Cloud Resource Controller adapter."""

from __future__ import annotations

from ibm_resource_controller.common.errors import (
    AuthenticationError,
    ParameterValidationError,
    ResourceControllerAPIError,
    ResourceControllerError,
)

from .client import DetailedResponse, ResourceControllerV2
from .pagination import (
    get_start_token,
    iter_resource_aliases,
    iter_resource_bindings,
    iter_resource_instances,
    iter_resource_keys,
)
from .schema import (
    InstanceState,
    LastOperation,
    Reclamation,
    ReclamationAction,
    ReclamationsList,
    ReclamationState,
    ResourceAlias,
    ResourceAliasesList,
    ResourceBinding,
    ResourceBindingsList,
    ResourceInstance,
    ResourceInstancesList,
    ResourceKey,
    ResourceKeysList,
)

__all__ = [
    "AuthenticationError",
    "DetailedResponse",
    "InstanceState",
    "LastOperation",
    "ParameterValidationError",
    "Reclamation",
    "ReclamationAction",
    "ReclamationState",
    "ReclamationsList",
    "ResourceAlias",
    "ResourceAliasesList",
    "ResourceBinding",
    "ResourceBindingsList",
    "ResourceControllerAPIError",
    "ResourceControllerError",
    "ResourceControllerV2",
    "ResourceInstance",
    "ResourceInstancesList",
    "ResourceKey",
    "ResourceKeysList",
    "get_start_token",
    "iter_resource_aliases",
    "iter_resource_bindings",
    "iter_resource_instances",
    "iter_resource_keys",
]
