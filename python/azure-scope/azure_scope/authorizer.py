"""Request authorizers backed by azure-identity token credentials."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx
from azure.identity import (
    CertificateCredential,
    ClientSecretCredential,
    ManagedIdentityCredential,
)

from azure_scope.errors import AuthorizerError
from azure_scope.settings import SettingKey

if TYPE_CHECKING:
    from collections.abc import Generator

    from azure.core.credentials import TokenCredential

    from azure_scope.settings import AmbientSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class Authorizer(Protocol):
    """Attaches credentials to outbound management-plane requests."""

    def authorize(self, request: httpx.Request) -> httpx.Request: ...


class BearerTokenAuthorizer(httpx.Auth):
    """Sets an OAuth bearer token on each request.

    Usable directly or as ``httpx.Client(auth=authorizer)``.
    """

    def __init__(self, credential: TokenCredential, scope: str) -> None:
        self.credential = credential
        self.scope = scope

    def authorize(self, request: httpx.Request) -> httpx.Request:
        token = self.credential.get_token(self.scope)
        request.headers["Authorization"] = f"Bearer {token.token}"
        return request

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield self.authorize(request)


def token_scope(settings: AmbientSettings) -> str:
    """Return the ``/.default`` scope for the settings' token audience."""
    resource = settings.get(SettingKey.RESOURCE) or settings.environment.resource_manager_endpoint
    return f"{resource.rstrip('/')}/.default"


def _require(settings: AmbientSettings, *keys: SettingKey) -> None:
    missing = [str(k) for k in keys if not settings.get(k)]
    if missing:
        raise AuthorizerError(f"missing Azure settings: {', '.join(missing)}")


def _build_credential(settings: AmbientSettings) -> TokenCredential:
    authority = settings.environment.active_directory_endpoint
    tenant_id = settings.get(SettingKey.TENANT_ID)
    client_id = settings.get(SettingKey.CLIENT_ID)
    aux_tenants = [
        t.strip() for t in settings.get(SettingKey.AUXILIARY_TENANT_IDS).split(",") if t.strip()
    ]

    if settings.get(SettingKey.CLIENT_SECRET):
        _require(settings, SettingKey.TENANT_ID, SettingKey.CLIENT_ID)
        logger.debug("Using client secret credential for client %s", client_id)
        return ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=settings.get(SettingKey.CLIENT_SECRET),
            authority=authority,
            additionally_allowed_tenants=aux_tenants,
        )

    if settings.get(SettingKey.CERTIFICATE_PATH):
        _require(settings, SettingKey.TENANT_ID, SettingKey.CLIENT_ID)
        logger.debug("Using certificate credential for client %s", client_id)
        return CertificateCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            certificate_path=settings.get(SettingKey.CERTIFICATE_PATH),
            password=settings.get(SettingKey.CERTIFICATE_PASSWORD) or None,
            authority=authority,
            additionally_allowed_tenants=aux_tenants,
        )

    # No explicit secret material: fall back to the node's managed identity.
    logger.debug("Using managed identity credential (client_id=%s)", client_id or "system")
    return ManagedIdentityCredential(client_id=client_id or None)


def build_authorizer(settings: AmbientSettings) -> BearerTokenAuthorizer:
    """Build a bearer token authorizer from resolved settings.

    Credential precedence: client secret, then client certificate, then
    managed identity.

    Raises:
        AuthorizerError: the credential material is incomplete or invalid.
    """
    try:
        credential = _build_credential(settings)
    except AuthorizerError:
        raise
    except (OSError, ValueError) as exc:
        raise AuthorizerError(f"cannot build Azure credential: {exc}") from exc
    return BearerTokenAuthorizer(credential, token_scope(settings))
