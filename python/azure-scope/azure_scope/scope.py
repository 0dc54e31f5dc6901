"""Resolve the Azure identity a controller runs as.

The resolver is called once at startup. It reads ambient settings, picks the
subscription, derives the cloud endpoints and builds a request authorizer.
Any failure is fatal; there are no retries and no partial results.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from azure_scope.authorizer import Authorizer, build_authorizer
from azure_scope.environments import (
    AzureCloud,
    canonical_environment_name,
    get_dns_zone_for_environment,
)
from azure_scope.errors import MissingSubscriptionError
from azure_scope.settings import (
    AmbientSettings,
    SettingKey,
    SettingsProvider,
    settings_from_environment,
)

logger = logging.getLogger(__name__)

AuthorizerFactory = Callable[[AmbientSettings], Authorizer]


@dataclass(frozen=True)
class IdentityBundle:
    """Resolved identity and endpoints for one Azure cloud."""

    authorizer: Authorizer
    environment_name: str
    resource_manager_endpoint: str
    resource_manager_dns_suffix: str
    subscription_id: str
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)


def _trim(value: str) -> str:
    # Secrets mounted from files usually end with a newline.
    return value.rstrip("\n")


class IdentityResolver:
    """Builds an IdentityBundle from an ambient settings provider."""

    def __init__(
        self,
        settings_provider: SettingsProvider = settings_from_environment,
        authorizer_factory: AuthorizerFactory = build_authorizer,
    ) -> None:
        self._settings_provider = settings_provider
        self._authorizer_factory = authorizer_factory

    def resolve(self, subscription_id: str = "") -> IdentityBundle:
        """Resolve the identity bundle.

        The authorizer factory receives a copy of the settings carrying the
        chosen subscription id and the newline-trimmed tenant id, client id and
        client secret. Known cloud names and aliases are reported under their
        canonical name, e.g. ``AzureUSGovernment`` as ``AzureUSGovernmentCloud``.

        Args:
            subscription_id: Explicit subscription, e.g. from the cluster spec.
                Empty means use ``AZURE_SUBSCRIPTION_ID``.

        Raises:
            AmbientSettingsError: settings could not be loaded.
            MissingSubscriptionError: no subscription id from either source.
            AuthorizerError: the authorizer could not be built.
        """
        settings = self._settings_provider()

        if subscription_id:
            logger.debug("Using explicit subscription id")
        else:
            subscription_id = settings.get_subscription_id()
            if not subscription_id:
                raise MissingSubscriptionError(
                    "error creating azure services. subscription id is not set: pass "
                    f"subscription_id explicitly or set the {SettingKey.SUBSCRIPTION_ID} "
                    "env var"
                )

        tenant_id = _trim(settings.get(SettingKey.TENANT_ID))
        client_id = _trim(settings.get(SettingKey.CLIENT_ID))
        client_secret = _trim(settings.get(SettingKey.CLIENT_SECRET))

        environment_name = canonical_environment_name(
            settings.get(SettingKey.ENVIRONMENT_NAME) or AzureCloud.PUBLIC.value
        )

        resolved = settings.with_values(
            {
                SettingKey.SUBSCRIPTION_ID: subscription_id,
                SettingKey.TENANT_ID: tenant_id,
                SettingKey.CLIENT_ID: client_id,
                SettingKey.CLIENT_SECRET: client_secret,
            }
        )
        authorizer = self._authorizer_factory(resolved)

        bundle = IdentityBundle(
            authorizer=authorizer,
            environment_name=environment_name,
            resource_manager_endpoint=settings.environment.resource_manager_endpoint,
            resource_manager_dns_suffix=get_dns_zone_for_environment(environment_name),
            subscription_id=subscription_id,
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
        )
        logger.info(
            "Resolved Azure identity: environment=%s subscription=%s",
            bundle.environment_name,
            bundle.subscription_id,
        )
        return bundle


def resolve_identity(subscription_id: str = "") -> IdentityBundle:
    """Resolve the identity using the process environment."""
    return IdentityResolver().resolve(subscription_id)
