"""Async HTTP client for the IBM Cloud Resource Controller API."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from ibm_resource_controller.adapters.http_resilience import ResilientClient
from ibm_resource_controller.adapters.iam import build_authenticator
from ibm_resource_controller.common.errors import (
    ParameterValidationError,
    ResourceControllerAPIError,
)
from ibm_resource_controller.config.resource_controller import get_resource_controller_config

from .schema import (
    ErrorPayload,
    Reclamation,
    ReclamationsList,
    ResourceAlias,
    ResourceAliasesList,
    ResourceBinding,
    ResourceBindingsList,
    ResourceInstance,
    ResourceInstancesList,
    ResourceKey,
    ResourceKeysList,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType

    import httpx

    from ibm_resource_controller.config.http_resilience import ResilienceConfig
    from ibm_resource_controller.config.resource_controller import ResourceControllerConfig

log = getLogger(__name__)

RESOURCE_INSTANCES = "/v2/resource_instances"
RESOURCE_ALIASES = "/v2/resource_aliases"
RESOURCE_BINDINGS = "/v2/resource_bindings"
RESOURCE_KEYS = "/v2/resource_keys"
RECLAMATIONS = "/v1/reclamations"

Headers = Mapping[str, str] | None


@dataclass(frozen=True, slots=True)
class DetailedResponse[T]:
    """What every operation returns: the HTTP status, headers and typed body."""

    status: int
    headers: httpx.Headers
    result: T | None = None


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(operation: str, **values: object) -> None:
    missing = [name for name, value in values.items() if _is_missing(value)]
    if missing:
        raise ParameterValidationError(operation, missing)


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _build_api_error(response: httpx.Response) -> ResourceControllerAPIError:
    payload: ErrorPayload | None = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        try:
            payload = ErrorPayload.model_validate(data)
        except ValidationError:
            payload = None

    message = (
        (payload.summary if payload else None)
        or response.text.strip()
        or response.reason_phrase
        or f"HTTP {response.status_code}"
    )
    transaction_id = (payload.transaction_id if payload else None) or response.headers.get(
        "Transaction-Id"
    )
    return ResourceControllerAPIError(
        message,
        status=response.status_code,
        code=payload.code if payload else None,
        transaction_id=transaction_id,
        response=response,
    )


class ResourceControllerV2:
    """Typed async wrapper around the Resource Controller v2 REST endpoints.

    Each public coroutine maps one REST operation: required identifiers are checked
    locally, everything else is handed to the service as-is. Non-2xx answers raise
    :class:`ResourceControllerAPIError` carrying the service's status and message.
    """

    def __init__(
        self,
        *,
        config: ResourceControllerConfig,
        authenticator: httpx.Auth | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        auth = authenticator if authenticator is not None else build_authenticator(config.auth)
        self._resilience = dataclasses.replace(config.resilience, auth=auth)
        self._client = (client_factory or _default_client_factory)(self._resilience)

    @classmethod
    def from_environment(
        cls,
        *,
        env_file: str | Path | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> ResourceControllerV2:
        return cls(
            config=get_resource_controller_config(env_file=env_file),
            client_factory=client_factory,
        )

    async def __aenter__(self) -> ResourceControllerV2:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _invoke[M: BaseModel](
        self,
        method: str,
        path: str,
        *,
        path_params: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
        headers: Headers = None,
        model: type[M] | None = None,
    ) -> DetailedResponse[M]:
        if path_params:
            path = path.format(**{key: quote(value, safe="") for key, value in path_params.items()})

        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        query = _compact(params) if params else None
        payload = _compact(body) if body is not None else None

        log.debug("%s %s params=%s", method, path, query)
        response = await self._client.request(
            method,
            path,
            params=query or None,
            json=payload,
            headers=request_headers,
        )
        log.debug("%s %s -> %s", method, path, response.status_code)

        if not response.is_success:
            error = _build_api_error(response)
            log.warning(
                "Resource Controller %s %s failed with %s: %s",
                method,
                path,
                error.status,
                error.message,
            )
            raise error

        result: M | None = None
        if model is not None and response.content:
            result = model.model_validate(response.json())
        return DetailedResponse(status=response.status_code, headers=response.headers, result=result)

    # Resource instances

    async def list_resource_instances(
        self,
        *,
        guid: str | None = None,
        name: str | None = None,
        resource_group_id: str | None = None,
        resource_id: str | None = None,
        resource_plan_id: str | None = None,
        type: str | None = None,  # noqa: A002
        sub_type: str | None = None,
        limit: int | None = None,
        start: str | None = None,
        state: str | None = None,
        order_direction: str | None = None,
        updated_from: str | None = None,
        updated_to: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceInstancesList]:
        params = {
            "guid": guid,
            "name": name,
            "resource_group_id": resource_group_id,
            "resource_id": resource_id,
            "resource_plan_id": resource_plan_id,
            "type": type,
            "sub_type": sub_type,
            "limit": limit,
            "start": start,
            "state": state,
            "order_direction": order_direction,
            "updated_from": updated_from,
            "updated_to": updated_to,
        }
        return await self._invoke(
            "GET", RESOURCE_INSTANCES, params=params, headers=headers, model=ResourceInstancesList
        )

    async def create_resource_instance(
        self,
        *,
        name: str,
        target: str,
        resource_group: str,
        resource_plan_id: str,
        tags: list[str] | None = None,
        allow_cleanup: bool | None = None,
        parameters: Mapping[str, Any] | None = None,
        entity_lock: bool | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceInstance]:
        _require(
            "create_resource_instance",
            name=name,
            target=target,
            resource_group=resource_group,
            resource_plan_id=resource_plan_id,
        )
        body = {
            "name": name,
            "target": target,
            "resource_group": resource_group,
            "resource_plan_id": resource_plan_id,
            "tags": tags,
            "allow_cleanup": allow_cleanup,
            "parameters": dict(parameters) if parameters is not None else None,
        }
        request_headers: dict[str, str] = {}
        if entity_lock is not None:
            request_headers["Entity-Lock"] = "true" if entity_lock else "false"
        if headers:
            request_headers.update(headers)
        return await self._invoke(
            "POST",
            RESOURCE_INSTANCES,
            body=body,
            headers=request_headers,
            model=ResourceInstance,
        )

    async def get_resource_instance(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceInstance]:
        _require("get_resource_instance", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_INSTANCES + "/{id}",
            path_params={"id": id},
            headers=headers,
            model=ResourceInstance,
        )

    async def update_resource_instance(
        self,
        *,
        id: str,  # noqa: A002
        name: str | None = None,
        parameters: Mapping[str, Any] | None = None,
        resource_plan_id: str | None = None,
        allow_cleanup: bool | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceInstance]:
        _require("update_resource_instance", id=id)
        body = {
            "name": name,
            "parameters": dict(parameters) if parameters is not None else None,
            "resource_plan_id": resource_plan_id,
            "allow_cleanup": allow_cleanup,
        }
        return await self._invoke(
            "PATCH",
            RESOURCE_INSTANCES + "/{id}",
            path_params={"id": id},
            body=body,
            headers=headers,
            model=ResourceInstance,
        )

    async def delete_resource_instance(
        self,
        *,
        id: str,  # noqa: A002
        recursive: bool | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[None]:
        _require("delete_resource_instance", id=id)
        return await self._invoke(
            "DELETE",
            RESOURCE_INSTANCES + "/{id}",
            path_params={"id": id},
            params={"recursive": recursive},
            headers=headers,
        )

    async def lock_resource_instance(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceInstance]:
        _require("lock_resource_instance", id=id)
        return await self._invoke(
            "POST",
            RESOURCE_INSTANCES + "/{id}/lock",
            path_params={"id": id},
            headers=headers,
            model=ResourceInstance,
        )

    async def unlock_resource_instance(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceInstance]:
        _require("unlock_resource_instance", id=id)
        return await self._invoke(
            "DELETE",
            RESOURCE_INSTANCES + "/{id}/lock",
            path_params={"id": id},
            headers=headers,
            model=ResourceInstance,
        )

    async def list_resource_aliases_for_instance(
        self,
        *,
        id: str,  # noqa: A002
        limit: int | None = None,
        start: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceAliasesList]:
        _require("list_resource_aliases_for_instance", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_INSTANCES + "/{id}/resource_aliases",
            path_params={"id": id},
            params={"limit": limit, "start": start},
            headers=headers,
            model=ResourceAliasesList,
        )

    async def list_resource_keys_for_instance(
        self,
        *,
        id: str,  # noqa: A002
        limit: int | None = None,
        start: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceKeysList]:
        _require("list_resource_keys_for_instance", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_INSTANCES + "/{id}/resource_keys",
            path_params={"id": id},
            params={"limit": limit, "start": start},
            headers=headers,
            model=ResourceKeysList,
        )

    # Resource aliases

    async def list_resource_aliases(
        self,
        *,
        guid: str | None = None,
        name: str | None = None,
        resource_instance_id: str | None = None,
        region_instance_id: str | None = None,
        resource_id: str | None = None,
        resource_group_id: str | None = None,
        limit: int | None = None,
        start: str | None = None,
        updated_from: str | None = None,
        updated_to: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceAliasesList]:
        params = {
            "guid": guid,
            "name": name,
            "resource_instance_id": resource_instance_id,
            "region_instance_id": region_instance_id,
            "resource_id": resource_id,
            "resource_group_id": resource_group_id,
            "limit": limit,
            "start": start,
            "updated_from": updated_from,
            "updated_to": updated_to,
        }
        return await self._invoke(
            "GET", RESOURCE_ALIASES, params=params, headers=headers, model=ResourceAliasesList
        )

    async def create_resource_alias(
        self,
        *,
        name: str,
        source: str,
        target: str,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceAlias]:
        _require("create_resource_alias", name=name, source=source, target=target)
        return await self._invoke(
            "POST",
            RESOURCE_ALIASES,
            body={"name": name, "source": source, "target": target},
            headers=headers,
            model=ResourceAlias,
        )

    async def get_resource_alias(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceAlias]:
        _require("get_resource_alias", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_ALIASES + "/{id}",
            path_params={"id": id},
            headers=headers,
            model=ResourceAlias,
        )

    async def update_resource_alias(
        self, *, id: str, name: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceAlias]:
        _require("update_resource_alias", id=id, name=name)
        return await self._invoke(
            "PATCH",
            RESOURCE_ALIASES + "/{id}",
            path_params={"id": id},
            body={"name": name},
            headers=headers,
            model=ResourceAlias,
        )

    async def delete_resource_alias(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[None]:
        _require("delete_resource_alias", id=id)
        return await self._invoke(
            "DELETE", RESOURCE_ALIASES + "/{id}", path_params={"id": id}, headers=headers
        )

    async def list_resource_bindings_for_alias(
        self,
        *,
        id: str,  # noqa: A002
        limit: int | None = None,
        start: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceBindingsList]:
        _require("list_resource_bindings_for_alias", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_ALIASES + "/{id}/resource_bindings",
            path_params={"id": id},
            params={"limit": limit, "start": start},
            headers=headers,
            model=ResourceBindingsList,
        )

    # Resource bindings

    async def list_resource_bindings(
        self,
        *,
        guid: str | None = None,
        name: str | None = None,
        resource_group_id: str | None = None,
        resource_id: str | None = None,
        region_binding_id: str | None = None,
        limit: int | None = None,
        start: str | None = None,
        updated_from: str | None = None,
        updated_to: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceBindingsList]:
        params = {
            "guid": guid,
            "name": name,
            "resource_group_id": resource_group_id,
            "resource_id": resource_id,
            "region_binding_id": region_binding_id,
            "limit": limit,
            "start": start,
            "updated_from": updated_from,
            "updated_to": updated_to,
        }
        return await self._invoke(
            "GET", RESOURCE_BINDINGS, params=params, headers=headers, model=ResourceBindingsList
        )

    async def create_resource_binding(
        self,
        *,
        source: str,
        target: str,
        name: str | None = None,
        parameters: Mapping[str, Any] | None = None,
        role: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceBinding]:
        _require("create_resource_binding", source=source, target=target)
        body = {
            "source": source,
            "target": target,
            "name": name,
            "parameters": dict(parameters) if parameters is not None else None,
            "role": role,
        }
        return await self._invoke(
            "POST", RESOURCE_BINDINGS, body=body, headers=headers, model=ResourceBinding
        )

    async def get_resource_binding(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceBinding]:
        _require("get_resource_binding", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_BINDINGS + "/{id}",
            path_params={"id": id},
            headers=headers,
            model=ResourceBinding,
        )

    async def update_resource_binding(
        self, *, id: str, name: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceBinding]:
        _require("update_resource_binding", id=id, name=name)
        return await self._invoke(
            "PATCH",
            RESOURCE_BINDINGS + "/{id}",
            path_params={"id": id},
            body={"name": name},
            headers=headers,
            model=ResourceBinding,
        )

    async def delete_resource_binding(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[None]:
        _require("delete_resource_binding", id=id)
        return await self._invoke(
            "DELETE", RESOURCE_BINDINGS + "/{id}", path_params={"id": id}, headers=headers
        )

    # Resource keys

    async def list_resource_keys(
        self,
        *,
        guid: str | None = None,
        name: str | None = None,
        resource_group_id: str | None = None,
        resource_id: str | None = None,
        limit: int | None = None,
        start: str | None = None,
        updated_from: str | None = None,
        updated_to: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceKeysList]:
        params = {
            "guid": guid,
            "name": name,
            "resource_group_id": resource_group_id,
            "resource_id": resource_id,
            "limit": limit,
            "start": start,
            "updated_from": updated_from,
            "updated_to": updated_to,
        }
        return await self._invoke(
            "GET", RESOURCE_KEYS, params=params, headers=headers, model=ResourceKeysList
        )

    async def create_resource_key(
        self,
        *,
        name: str,
        source: str,
        parameters: Mapping[str, Any] | None = None,
        role: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ResourceKey]:
        _require("create_resource_key", name=name, source=source)
        body = {
            "name": name,
            "source": source,
            "parameters": dict(parameters) if parameters is not None else None,
            "role": role,
        }
        return await self._invoke(
            "POST", RESOURCE_KEYS, body=body, headers=headers, model=ResourceKey
        )

    async def get_resource_key(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceKey]:
        _require("get_resource_key", id=id)
        return await self._invoke(
            "GET",
            RESOURCE_KEYS + "/{id}",
            path_params={"id": id},
            headers=headers,
            model=ResourceKey,
        )

    async def update_resource_key(
        self, *, id: str, name: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[ResourceKey]:
        _require("update_resource_key", id=id, name=name)
        return await self._invoke(
            "PATCH",
            RESOURCE_KEYS + "/{id}",
            path_params={"id": id},
            body={"name": name},
            headers=headers,
            model=ResourceKey,
        )

    async def delete_resource_key(
        self, *, id: str, headers: Headers = None  # noqa: A002
    ) -> DetailedResponse[None]:
        _require("delete_resource_key", id=id)
        return await self._invoke(
            "DELETE", RESOURCE_KEYS + "/{id}", path_params={"id": id}, headers=headers
        )

    # Reclamations

    async def list_reclamations(
        self,
        *,
        account_id: str | None = None,
        resource_instance_id: str | None = None,
        resource_group_id: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[ReclamationsList]:
        params = {
            "account_id": account_id,
            "resource_instance_id": resource_instance_id,
            "resource_group_id": resource_group_id,
        }
        return await self._invoke(
            "GET", RECLAMATIONS, params=params, headers=headers, model=ReclamationsList
        )

    async def run_reclamation_action(
        self,
        *,
        id: str,  # noqa: A002
        action_name: str,
        request_by: str | None = None,
        comment: str | None = None,
        headers: Headers = None,
    ) -> DetailedResponse[Reclamation]:
        _require("run_reclamation_action", id=id, action_name=action_name)
        return await self._invoke(
            "POST",
            RECLAMATIONS + "/{id}/actions/{action_name}",
            path_params={"id": id, "action_name": action_name},
            body={"request_by": request_by, "comment": comment},
            headers=headers,
            model=Reclamation,
        )
