"""Pydantic models describing the Resource Controller API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InstanceState(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    PENDING_RECLAMATION = "pending_reclamation"
    PROVISIONING = "provisioning"
    PRE_PROVISIONING = "pre_provisioning"
    REMOVED = "removed"


class ReclamationState(StrEnum):
    SCHEDULED = "SCHEDULED"
    RESTORING = "RESTORING"
    RECLAIMING = "RECLAIMING"


class ReclamationAction(StrEnum):
    RESTORE = "restore"
    RECLAIM = "reclaim"


class ResourceControllerModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class LastOperation(ResourceControllerModel):
    type: str | None = None
    sub_type: str | None = None
    async_: bool | None = Field(default=None, alias="async")
    state: str | None = None
    description: str | None = None
    cancelable: bool | None = None
    poll: bool | None = None


class _Audited(ResourceControllerModel):
    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None


class ResourceInstance(_Audited):
    id: str | None = None
    guid: str | None = None
    crn: str | None = None
    url: str | None = None
    name: str | None = None
    account_id: str | None = None
    resource_group_id: str | None = None
    resource_group_crn: str | None = None
    resource_id: str | None = None
    resource_plan_id: str | None = None
    target_crn: str | None = None
    region_id: str | None = None
    parameters: dict[str, Any] | None = None
    state: str | None = None
    type: str | None = None
    sub_type: str | None = None
    allow_cleanup: bool | None = None
    locked: bool | None = None
    last_operation: LastOperation | None = None
    dashboard_url: str | None = None
    restored_at: datetime | None = None
    restored_by: str | None = None
    scheduled_reclaim_at: datetime | None = None
    scheduled_reclaim_by: str | None = None
    resource_aliases_url: str | None = None
    resource_bindings_url: str | None = None
    resource_keys_url: str | None = None


class ResourceAlias(_Audited):
    id: str | None = None
    guid: str | None = None
    crn: str | None = None
    url: str | None = None
    name: str | None = None
    account_id: str | None = None
    resource_group_id: str | None = None
    target_crn: str | None = None
    state: str | None = None
    resource_instance_id: str | None = None
    region_instance_id: str | None = None
    region_instance_crn: str | None = None
    resource_instance_url: str | None = None
    resource_bindings_url: str | None = None
    resource_keys_url: str | None = None


class ResourceBinding(_Audited):
    id: str | None = None
    guid: str | None = None
    crn: str | None = None
    url: str | None = None
    name: str | None = None
    account_id: str | None = None
    resource_group_id: str | None = None
    source_crn: str | None = None
    target_crn: str | None = None
    role: str | None = None
    region_binding_id: str | None = None
    state: str | None = None
    credentials: dict[str, Any] | None = None
    iam_compatible: bool | None = None
    resource_alias_url: str | None = None


class ResourceKey(_Audited):
    id: str | None = None
    guid: str | None = None
    crn: str | None = None
    url: str | None = None
    name: str | None = None
    account_id: str | None = None
    resource_group_id: str | None = None
    source_crn: str | None = None
    role: str | None = None
    state: str | None = None
    credentials: dict[str, Any] | None = None
    iam_compatible: bool | None = None
    resource_instance_url: str | None = None


class Reclamation(ResourceControllerModel):
    id: str | None = None
    entity_id: str | None = None
    entity_type_id: str | None = None
    entity_crn: str | None = None
    resource_instance_id: str | None = None
    resource_group_id: str | None = None
    account_id: str | None = None
    policy_id: str | None = None
    state: str | None = None
    target_time: str | None = None
    custom_properties: dict[str, Any] | None = None
    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


class _PagedList(ResourceControllerModel):
    rows_count: int = 0
    next_url: str | None = None


class ResourceInstancesList(_PagedList):
    resources: list[ResourceInstance] = Field(default_factory=list)


class ResourceAliasesList(_PagedList):
    resources: list[ResourceAlias] = Field(default_factory=list)


class ResourceBindingsList(_PagedList):
    resources: list[ResourceBinding] = Field(default_factory=list)


class ResourceKeysList(_PagedList):
    resources: list[ResourceKey] = Field(default_factory=list)


class ReclamationsList(ResourceControllerModel):
    resources: list[Reclamation] = Field(default_factory=list)


class ErrorDetail(ResourceControllerModel):
    code: str | None = None
    message: str | None = None


class ErrorPayload(ResourceControllerModel):
    """Both error envelopes the service is known to return.

    Older endpoints answer ``{"message", "status_code", "error_code"}``, newer ones
    ``{"errors": [{"code", "message"}], "trace"}``.
    """

    message: str | None = None
    status_code: int | None = None
    error_code: str | None = None
    transaction_id: str | None = None
    errors: list[ErrorDetail] = Field(default_factory=list)
    trace: str | None = None

    @property
    def summary(self) -> str | None:
        if self.message:
            return self.message
        messages = [detail.message for detail in self.errors if detail.message]
        return "; ".join(messages) or None

    @property
    def code(self) -> str | None:
        if self.error_code:
            return self.error_code
        for detail in self.errors:
            if detail.code:
                return detail.code
        return None
