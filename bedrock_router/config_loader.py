from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Optional

import boto3

from .models import ModelSelectionStrategy
from .utils.exceptions import ConfigurationError
from .utils.logging_util import get_logger

logger = get_logger(__name__)

DEFAULT_APPLICATION = "AIAssistantApp"
DEFAULT_ENVIRONMENT = "Production"
DEFAULT_PROFILE = "ModelSelectionStrategy"


@dataclass
class AppConfigSettings:
    application: Optional[str] = None
    environment: Optional[str] = None
    profile: Optional[str] = None

    @classmethod
    def from_env(cls, defaults: bool = True) -> "AppConfigSettings":
        """
        Read APPCONFIG_APP / APPCONFIG_ENV / APPCONFIG_CONFIG. With
        defaults=False, unset variables stay None.
        """
        if defaults:
            return cls(
                application=os.environ.get("APPCONFIG_APP", DEFAULT_APPLICATION),
                environment=os.environ.get("APPCONFIG_ENV", DEFAULT_ENVIRONMENT),
                profile=os.environ.get("APPCONFIG_CONFIG", DEFAULT_PROFILE),
            )
        return cls(
            application=os.environ.get("APPCONFIG_APP") or None,
            environment=os.environ.get("APPCONFIG_ENV") or None,
            profile=os.environ.get("APPCONFIG_CONFIG") or None,
        )

    def validate(self) -> None:
        if not (self.application and self.environment and self.profile):
            raise ConfigurationError("AppConfig environment variables not configured")


class AppConfigLoader:
    """
    Fetches the model selection strategy from AppConfig (appconfigdata).

    The session token and the parsed strategy live on the instance, and a
    Lambda module keeps one instance for the life of the execution context.
    Lambda delivers one invocation at a time to a context, so there is a
    single writer and no locking. The constructor makes no AWS calls.
    """

    def __init__(
        self,
        settings: Optional[AppConfigSettings] = None,
        client: Any = None,
    ) -> None:
        self.settings = settings or AppConfigSettings.from_env()
        self._client = client
        self._token: Optional[str] = None
        self._cache: Optional[ModelSelectionStrategy] = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("appconfigdata")
        return self._client

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def cached_strategy(self) -> Optional[ModelSelectionStrategy]:
        return self._cache

    def get_strategy(self) -> ModelSelectionStrategy:
        """
        Return the current strategy. Never raises: any failure is logged and
        the hard-coded default strategy is returned instead.
        """
        try:
            return self._poll()
        except Exception:
            logger.exception("Failed to get AppConfig, using default model strategy")
            return ModelSelectionStrategy.default()

    def _poll(self) -> ModelSelectionStrategy:
        self.settings.validate()

        if self._token is None:
            session = self.client.start_configuration_session(
                ApplicationIdentifier=self.settings.application,
                EnvironmentIdentifier=self.settings.environment,
                ConfigurationProfileIdentifier=self.settings.profile,
            )
            self._token = session["InitialConfigurationToken"]

        resp = self.client.get_latest_configuration(ConfigurationToken=self._token)

        # Advance the token before looking at the payload
        self._token = resp["NextPollConfigurationToken"]

        payload = _read_payload(resp.get("Configuration"))
        if payload:
            # Empty payload means "unchanged since the last poll"
            self._cache = ModelSelectionStrategy.from_dict(json.loads(payload.decode("utf-8")))
            logger.info("Loaded model strategy: primary=%s", self._cache.primary_model)

        if self._cache is None:
            raise ConfigurationError("No configuration available")

        return self._cache


def _read_payload(configuration: Any) -> bytes:
    if configuration is None:
        return b""
    if isinstance(configuration, (bytes, bytearray)):
        return bytes(configuration)
    # botocore StreamingBody
    return configuration.read()
