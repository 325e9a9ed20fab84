from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ibm_resource_controller.adapters.resource_controller import ResourceControllerV2
from tests.support.fake_resource_controller import FakeResourceController, client_factory_for
from tests.support.lifecycle import ScenarioSettings
from tests.support.settings import make_test_config

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from ibm_resource_controller.config.resource_controller import ResourceControllerConfig


@pytest.fixture
def scenario_settings() -> ScenarioSettings:
    return ScenarioSettings()


@pytest.fixture
def fake_service(scenario_settings: ScenarioSettings) -> FakeResourceController:
    return FakeResourceController(
        account_id=scenario_settings.account_id,
        resource_group_id=scenario_settings.resource_group_id,
        reclamation_plan_ids=frozenset({scenario_settings.reclamation_plan_id}),
    )


@pytest.fixture
def rc_config() -> ResourceControllerConfig:
    return make_test_config()


@pytest.fixture
def make_controller(
    rc_config: ResourceControllerConfig,
) -> Callable[[httpx.AsyncBaseTransport], ResourceControllerV2]:
    def factory(transport: httpx.AsyncBaseTransport) -> ResourceControllerV2:
        return ResourceControllerV2(config=rc_config, client_factory=client_factory_for(transport))

    return factory
