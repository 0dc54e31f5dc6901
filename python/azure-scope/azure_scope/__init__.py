"""Azure identity and cloud endpoint resolution for controllers."""

from azure_scope.authorizer import Authorizer, BearerTokenAuthorizer, build_authorizer
from azure_scope.environments import (
    AzureCloud,
    CloudEnvironment,
    canonical_environment_name,
    environment_from_name,
    get_dns_zone_for_environment,
)
from azure_scope.errors import (
    AmbientSettingsError,
    AuthorizerError,
    MissingSubscriptionError,
    ScopeError,
    UnknownEnvironmentError,
)
from azure_scope.scope import IdentityBundle, IdentityResolver, resolve_identity
from azure_scope.settings import AmbientSettings, SettingKey, settings_from_environment

__all__ = [
    "AmbientSettings",
    "AmbientSettingsError",
    "Authorizer",
    "AuthorizerError",
    "AzureCloud",
    "BearerTokenAuthorizer",
    "CloudEnvironment",
    "IdentityBundle",
    "IdentityResolver",
    "MissingSubscriptionError",
    "ScopeError",
    "SettingKey",
    "UnknownEnvironmentError",
    "build_authorizer",
    "canonical_environment_name",
    "environment_from_name",
    "get_dns_zone_for_environment",
    "resolve_identity",
    "settings_from_environment",
]
