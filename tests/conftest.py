"""Shared pytest fixtures."""

from unittest.mock import Mock

import pytest

from bedrock_router.config_loader import AppConfigLoader, AppConfigSettings
from bedrock_router.providers import BedrockInvoker
from bedrock_router.router import ModelRouter
from tests.helpers.aws_fakes import FakeBedrockRuntime


@pytest.fixture
def appconfig_client():
    client = Mock()
    client.start_configuration_session.return_value = {"InitialConfigurationToken": "initial-token"}
    return client


@pytest.fixture
def settings():
    return AppConfigSettings(
        application="AIAssistantApp",
        environment="Production",
        profile="ModelSelectionStrategy",
    )


@pytest.fixture
def loader(settings, appconfig_client):
    return AppConfigLoader(settings, client=appconfig_client)


@pytest.fixture
def bedrock_runtime():
    return FakeBedrockRuntime()


@pytest.fixture
def invoker(bedrock_runtime):
    return BedrockInvoker(client=bedrock_runtime)


@pytest.fixture
def make_router(loader, invoker):
    def _make(default_max_tokens=500):
        return ModelRouter(config_loader=loader, invoker=invoker, default_max_tokens=default_max_tokens)

    return _make
