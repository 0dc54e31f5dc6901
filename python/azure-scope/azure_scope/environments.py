"""Azure cloud environments: endpoint descriptors and VM DNS zones."""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from azure_scope.errors import AmbientSettingsError, UnknownEnvironmentError

logger = logging.getLogger(__name__)


class AzureCloud(StrEnum):
    """Cloud environments the controller knows how to address."""

    CHINA = "AzureChinaCloud"
    GERMAN = "AzureGermanCloud"
    PUBLIC = "AzurePublicCloud"
    US_GOVERNMENT = "AzureUSGovernmentCloud"


DEFAULT_DNS_ZONE = "cloudapp.azure.com"

DNS_ZONES: dict[AzureCloud, str] = {
    AzureCloud.CHINA: "cloudapp.chinacloudapi.cn",
    AzureCloud.GERMAN: "cloudapp.microsoftazure.de",
    AzureCloud.PUBLIC: "cloudapp.azure.com",
    AzureCloud.US_GOVERNMENT: "cloudapp.usgovcloudapi.net",
}


def get_dns_zone_for_environment(environment_name: str) -> str:
    """Return the VM DNS zone for a cloud environment.

    Unknown names, including the empty string, fall back to the public cloud.
    """
    try:
        return DNS_ZONES[AzureCloud(environment_name)]
    except ValueError:
        return DEFAULT_DNS_ZONE


class CloudEnvironment(BaseModel):
    """Endpoints of one Azure cloud.

    Field aliases follow the JSON layout of custom environment files.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    resource_manager_endpoint: str = Field(alias="resourceManagerEndpoint")
    active_directory_endpoint: str = Field(alias="activeDirectoryEndpoint")


KNOWN_ENVIRONMENTS: dict[AzureCloud, CloudEnvironment] = {
    AzureCloud.CHINA: CloudEnvironment(
        name=AzureCloud.CHINA,
        resource_manager_endpoint="https://management.chinacloudapi.cn/",
        active_directory_endpoint="https://login.chinacloudapi.cn/",
    ),
    AzureCloud.GERMAN: CloudEnvironment(
        name=AzureCloud.GERMAN,
        resource_manager_endpoint="https://management.microsoftazure.de/",
        active_directory_endpoint="https://login.microsoftonline.de/",
    ),
    AzureCloud.PUBLIC: CloudEnvironment(
        name=AzureCloud.PUBLIC,
        resource_manager_endpoint="https://management.azure.com/",
        active_directory_endpoint="https://login.microsoftonline.com/",
    ),
    AzureCloud.US_GOVERNMENT: CloudEnvironment(
        name=AzureCloud.US_GOVERNMENT,
        resource_manager_endpoint="https://management.usgovcloudapi.net/",
        active_directory_endpoint="https://login.microsoftonline.us/",
    ),
}

# Upper-cased lookup keys, including the short names the Azure CLI uses.
_ALIASES: dict[str, AzureCloud] = {
    **{cloud.value.upper(): cloud for cloud in AzureCloud},
    "AZURECLOUD": AzureCloud.PUBLIC,
    "AZUREUSGOVERNMENT": AzureCloud.US_GOVERNMENT,
}


def canonical_environment_name(name: str) -> str:
    """Return the canonical name for a known cloud or alias, else ``name`` as given."""
    cloud = _ALIASES.get(name.upper())
    return cloud.value if cloud is not None else name


def environment_from_file(filepath: str | Path) -> CloudEnvironment:
    """Load a custom cloud environment from a JSON descriptor file."""
    path = Path(filepath)
    try:
        data = json.loads(path.read_text())
        return CloudEnvironment.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        raise AmbientSettingsError(
            f"cannot load Azure environment from {path}: {exc}"
        ) from exc


def environment_from_name(name: str, filepath: str | Path = "") -> CloudEnvironment:
    """Return the endpoint descriptor for an environment name.

    An empty name selects the public cloud. Names outside the known set are
    only accepted when ``filepath`` points at a custom environment file.
    """
    if not name:
        return KNOWN_ENVIRONMENTS[AzureCloud.PUBLIC]

    cloud = _ALIASES.get(name.upper())
    if cloud is not None:
        return KNOWN_ENVIRONMENTS[cloud]

    if filepath:
        logger.debug("Loading custom Azure environment %s from %s", name, filepath)
        return environment_from_file(filepath)

    known = ", ".join(sorted(AzureCloud))
    raise UnknownEnvironmentError(
        f"unknown Azure environment '{name}'. Known: {known}"
    )
