"""Ambient Azure settings read from environment variables."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from types import MappingProxyType

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from azure_scope.environments import CloudEnvironment, environment_from_name
from azure_scope.errors import AmbientSettingsError

logger = logging.getLogger(__name__)


class SettingKey(StrEnum):
    """Well-known setting keys, named after their environment variables."""

    SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
    TENANT_ID = "AZURE_TENANT_ID"
    AUXILIARY_TENANT_IDS = "AZURE_AUXILIARY_TENANT_IDS"
    CLIENT_ID = "AZURE_CLIENT_ID"
    CLIENT_SECRET = "AZURE_CLIENT_SECRET"
    CERTIFICATE_PATH = "AZURE_CERTIFICATE_PATH"
    CERTIFICATE_PASSWORD = "AZURE_CERTIFICATE_PASSWORD"
    ENVIRONMENT_NAME = "AZURE_ENVIRONMENT"
    RESOURCE = "AZURE_AD_RESOURCE"


class AzureEnvironmentSettings(BaseSettings):
    """Raw ``AZURE_*`` variables.

    Every field maps to the upper-cased, ``AZURE_``-prefixed variable,
    e.g. ``tenant_id`` is read from ``AZURE_TENANT_ID``.
    """

    subscription_id: str = ""
    tenant_id: str = ""
    auxiliary_tenant_ids: str = ""
    client_id: str = ""
    client_secret: str = ""
    certificate_path: str = ""
    certificate_password: str = ""
    environment: str = ""
    environment_filepath: str = ""
    ad_resource: str = ""

    model_config = {"env_prefix": "AZURE_", "case_sensitive": False}


@dataclass(frozen=True)
class AmbientSettings:
    """Azure identity settings plus the cloud environment they target.

    ``values`` only holds keys that were set to a non-empty value.
    """

    environment: CloudEnvironment
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        values = {str(k): v for k, v in self.values.items()}
        object.__setattr__(self, "values", MappingProxyType(values))

    def get(self, key: SettingKey | str) -> str:
        return self.values.get(str(key), "")

    def get_subscription_id(self) -> str:
        return self.get(SettingKey.SUBSCRIPTION_ID)

    def with_values(self, updates: Mapping[SettingKey | str, str]) -> AmbientSettings:
        """Return a copy with ``updates`` applied. Empty values remove the key."""
        merged = dict(self.values)
        for key, value in updates.items():
            if value:
                merged[str(key)] = value
            else:
                merged.pop(str(key), None)
        return replace(self, values=merged)

    @classmethod
    def from_env(cls) -> AmbientSettings:
        """Load Azure settings from ``AZURE_*`` environment variables.

        Raises:
            AmbientSettingsError: the variables are malformed or name an
                environment that cannot be resolved.
        """
        try:
            raw = AzureEnvironmentSettings()
        except ValidationError as exc:
            raise AmbientSettingsError(f"invalid Azure settings: {exc}") from exc

        values = {
            SettingKey.SUBSCRIPTION_ID: raw.subscription_id,
            SettingKey.TENANT_ID: raw.tenant_id,
            SettingKey.AUXILIARY_TENANT_IDS: raw.auxiliary_tenant_ids,
            SettingKey.CLIENT_ID: raw.client_id,
            SettingKey.CLIENT_SECRET: raw.client_secret,
            SettingKey.CERTIFICATE_PATH: raw.certificate_path,
            SettingKey.CERTIFICATE_PASSWORD: raw.certificate_password,
            SettingKey.ENVIRONMENT_NAME: raw.environment,
            SettingKey.RESOURCE: raw.ad_resource,
        }
        environment = environment_from_name(raw.environment, raw.environment_filepath)
        logger.debug("Loaded Azure settings for environment %s", environment.name)
        return cls(
            environment=environment,
            values={str(k): v for k, v in values.items() if v},
        )


SettingsProvider = Callable[[], AmbientSettings]


def settings_from_environment() -> AmbientSettings:
    """Default settings provider."""
    return AmbientSettings.from_env()
