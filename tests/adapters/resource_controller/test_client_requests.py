"""Request marshalling: verbs, paths, query strings, bodies and headers."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from ibm_resource_controller.adapters.resource_controller import (
    ReclamationAction,
    ResourceControllerV2,
    ResourceInstance,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

INSTANCE_CRN = "crn:v1:bluemix:public:service:global:a/account::instance-guid::"


class RecordingHandler:
    def __init__(self, status: int = 200, payload: dict[str, Any] | None = None) -> None:
        self.status = status
        self.payload = payload if payload is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status == 204:
            return httpx.Response(204)
        return httpx.Response(self.status, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _run(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
    handler: RecordingHandler,
    call: Callable[[ResourceControllerV2], Awaitable[Any]],
) -> Any:
    async def scenario() -> Any:
        async with make_controller(httpx.MockTransport(handler)) as controller:
            return await call(controller)

    return asyncio.run(scenario())


def _body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


def test_create_resource_instance_posts_body_and_entity_lock(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(201, {"id": INSTANCE_CRN, "crn": INSTANCE_CRN, "state": "active"})

    response = _run(
        make_controller,
        handler,
        lambda rc: rc.create_resource_instance(
            name="RcSdkInstance1",
            target="global",
            resource_group="rg-guid",
            resource_plan_id="plan-guid",
            parameters={"hello": "bye"},
            entity_lock=False,
            headers={"Transaction-Id": "tx-1"},
        ),
    )

    request = handler.last
    assert request.method == "POST"
    assert request.url.path == "/v2/resource_instances"
    assert request.headers["Entity-Lock"] == "false"
    assert request.headers["Transaction-Id"] == "tx-1"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert _body(request) == {
        "name": "RcSdkInstance1",
        "target": "global",
        "resource_group": "rg-guid",
        "resource_plan_id": "plan-guid",
        "parameters": {"hello": "bye"},
    }
    assert response.status == 201
    assert isinstance(response.result, ResourceInstance)
    assert response.result.id == response.result.crn


def test_list_resource_instances_sends_only_given_filters(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(payload={"rows_count": 0, "resources": []})

    response = _run(
        make_controller,
        handler,
        lambda rc: rc.list_resource_instances(guid="instance-guid", limit=10, type="service_instance"),
    )

    params = handler.last.url.params
    assert handler.last.method == "GET"
    assert dict(params) == {"guid": "instance-guid", "limit": "10", "type": "service_instance"}
    assert response.result is not None
    assert response.result.rows_count == 0


def test_path_identifiers_are_escaped(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(payload={"id": INSTANCE_CRN})

    _run(make_controller, handler, lambda rc: rc.get_resource_instance(id=INSTANCE_CRN))

    raw_path = handler.last.url.raw_path.decode("ascii")
    assert raw_path.startswith("/v2/resource_instances/crn%3Av1%3A")
    assert "%2F" in raw_path


def test_update_resource_instance_patches_only_given_fields(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(payload={"name": "renamed"})

    _run(
        make_controller,
        handler,
        lambda rc: rc.update_resource_instance(id="instance-guid", name="renamed"),
    )

    assert handler.last.method == "PATCH"
    assert handler.last.url.path == "/v2/resource_instances/instance-guid"
    assert _body(handler.last) == {"name": "renamed"}


def test_delete_resource_instance_returns_empty_result(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(204)

    response = _run(
        make_controller,
        handler,
        lambda rc: rc.delete_resource_instance(id="instance-guid", recursive=True),
    )

    assert handler.last.method == "DELETE"
    assert handler.last.url.params["recursive"] == "true"
    assert not handler.last.content
    assert response.status == 204
    assert response.result is None


@pytest.mark.parametrize(
    ("method_name", "verb", "path"),
    [
        ("lock_resource_instance", "POST", "/v2/resource_instances/instance-guid/lock"),
        ("unlock_resource_instance", "DELETE", "/v2/resource_instances/instance-guid/lock"),
        (
            "list_resource_aliases_for_instance",
            "GET",
            "/v2/resource_instances/instance-guid/resource_aliases",
        ),
        (
            "list_resource_keys_for_instance",
            "GET",
            "/v2/resource_instances/instance-guid/resource_keys",
        ),
        ("get_resource_alias", "GET", "/v2/resource_aliases/instance-guid"),
        ("delete_resource_alias", "DELETE", "/v2/resource_aliases/instance-guid"),
        (
            "list_resource_bindings_for_alias",
            "GET",
            "/v2/resource_aliases/instance-guid/resource_bindings",
        ),
        ("get_resource_binding", "GET", "/v2/resource_bindings/instance-guid"),
        ("delete_resource_binding", "DELETE", "/v2/resource_bindings/instance-guid"),
        ("get_resource_key", "GET", "/v2/resource_keys/instance-guid"),
        ("delete_resource_key", "DELETE", "/v2/resource_keys/instance-guid"),
    ],
)
def test_identifier_operations_hit_expected_endpoint(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
    method_name: str,
    verb: str,
    path: str,
) -> None:
    handler = RecordingHandler(payload={})

    _run(make_controller, handler, lambda rc: getattr(rc, method_name)(id="instance-guid"))

    assert handler.last.method == verb
    assert handler.last.url.path == path


def test_alias_binding_and_key_creation_bodies(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(201, payload={})

    async def create_all(rc: ResourceControllerV2) -> None:
        await rc.create_resource_alias(name="alias", source="instance-guid", target="crn:space")
        await rc.create_resource_binding(source="alias-guid", target="crn:app", role="Writer")
        await rc.create_resource_key(name="key", source="instance-guid")

    _run(make_controller, handler, create_all)

    alias_request, binding_request, key_request = handler.requests
    assert alias_request.url.path == "/v2/resource_aliases"
    assert _body(alias_request) == {"name": "alias", "source": "instance-guid", "target": "crn:space"}
    assert binding_request.url.path == "/v2/resource_bindings"
    assert _body(binding_request) == {"source": "alias-guid", "target": "crn:app", "role": "Writer"}
    assert key_request.url.path == "/v2/resource_keys"
    assert _body(key_request) == {"name": "key", "source": "instance-guid"}


@pytest.mark.parametrize(
    ("method_name", "path"),
    [
        ("update_resource_alias", "/v2/resource_aliases/some-guid"),
        ("update_resource_binding", "/v2/resource_bindings/some-guid"),
        ("update_resource_key", "/v2/resource_keys/some-guid"),
    ],
)
def test_rename_operations_patch_name(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
    method_name: str,
    path: str,
) -> None:
    handler = RecordingHandler(payload={"name": "renamed"})

    response = _run(
        make_controller,
        handler,
        lambda rc: getattr(rc, method_name)(id="some-guid", name="renamed"),
    )

    assert handler.last.method == "PATCH"
    assert handler.last.url.path == path
    assert _body(handler.last) == {"name": "renamed"}
    assert response.result.name == "renamed"


def test_reclamation_endpoints(
    make_controller: Callable[[httpx.AsyncBaseTransport], ResourceControllerV2],
) -> None:
    handler = RecordingHandler(payload={"id": "reclamation-id", "state": "RESTORING"})

    async def reclaim(rc: ResourceControllerV2) -> Any:
        await rc.list_reclamations(account_id="account", resource_instance_id="instance-guid")
        return await rc.run_reclamation_action(
            id="reclamation-id",
            action_name=ReclamationAction.RESTORE,
            request_by="tester",
        )

    response = _run(make_controller, handler, reclaim)

    list_request, action_request = handler.requests
    assert list_request.url.path == "/v1/reclamations"
    assert dict(list_request.url.params) == {
        "account_id": "account",
        "resource_instance_id": "instance-guid",
    }
    assert action_request.method == "POST"
    assert action_request.url.path == "/v1/reclamations/reclamation-id/actions/restore"
    assert _body(action_request) == {"request_by": "tester"}
    assert response.result.state == "RESTORING"
