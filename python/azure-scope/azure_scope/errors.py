"""Exceptions raised while resolving the controller's Azure identity."""

from __future__ import annotations


class ScopeError(Exception):
    """Base class for identity resolution failures. All are fatal at startup."""


class AmbientSettingsError(ScopeError):
    """Ambient Azure settings are missing or malformed."""


class UnknownEnvironmentError(AmbientSettingsError):
    """The configured cloud environment name is not recognised."""


class MissingSubscriptionError(ScopeError):
    """No subscription id was passed in or found in the environment."""


class AuthorizerError(ScopeError):
    """A request authorizer could not be built from the settings."""
