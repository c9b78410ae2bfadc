"""Readers for the platform's application and service environment.

The platform describes the running instance through ``VCAP_APPLICATION``
and its bound services through ``VCAP_SERVICES``, both JSON blobs, plus the
plain ``PORT``, ``DOMAIN`` and ``SPACE`` variables.

Example VCAP_SERVICES::

    {
      "user-provided": [
        {
          "credentials": {"host": "172.32.125.109:9200"},
          "label": "user-provided",
          "name": "pz-elasticsearch",
          "syslog_drain_url": "",
          "tags": []
        }
      ]
    }
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from pzcommon.config.services import LOCAL_SERVICE_ADDRESSES
from pzcommon.core.errors import ConfigError


class VcapApplicationModel(BaseModel):
    """The subset of VCAP_APPLICATION we read."""

    model_config = ConfigDict(extra="ignore")

    application_id: str = ""
    application_name: str = ""
    application_uris: list[str] = Field(default_factory=list)


class VcapCredentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str = ""


class VcapServiceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    credentials: VcapCredentials = Field(default_factory=VcapCredentials)
    label: str = ""
    name: str = ""
    syslog_drain_url: str = ""
    tags: list[str] = Field(default_factory=list)


class VcapServicesModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_provided: list[VcapServiceEntry] = Field(
        default_factory=list, alias="user-provided"
    )


class PlatformSettings(BaseSettings):
    """Platform environment variables.

    Complex fields (the two VCAP blobs) are decoded from JSON by
    pydantic-settings.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    vcap_application: VcapApplicationModel | None = Field(
        default=None, description="Instance description (JSON)"
    )
    vcap_services: VcapServicesModel | None = Field(
        default=None, description="Bound services (JSON)"
    )
    port: int | None = Field(default=None, description="Port to bind to")
    domain: str | None = Field(default=None, description="Domain override")
    space: str | None = Field(default=None, description="Deployment space")


def load_settings() -> PlatformSettings:
    """Read the platform settings from the environment.

    Raises:
        ConfigError: If a variable is set but malformed.
    """
    try:
        return PlatformSettings()
    except (SettingsError, ValidationError) as e:
        raise ConfigError(f"Unable to read platform environment: {e}") from e


@dataclass(frozen=True)
class VcapApplication:
    """Identity of the running instance as assigned by the platform.

    Attributes:
        name: Application name.
        address: Public address, the first application URI.
        bind_port: Local bind spec, ``":" + PORT``.
    """

    name: str
    address: str
    bind_port: str

    @property
    def domain(self) -> str:
        """The address minus its first DNS label, dot included.

        ``pz-workflow.int.geointservices.io`` gives ``.int.geointservices.io``.
        """
        _, dot, rest = self.address.partition(".")
        return dot + rest if dot else ""


def read_application(settings: PlatformSettings | None = None) -> VcapApplication | None:
    """Read the instance identity.

    Args:
        settings: Platform settings; read from the environment when omitted.

    Returns:
        The identity, or None when VCAP_APPLICATION is unset.

    Raises:
        ConfigError: If VCAP_APPLICATION is malformed, has no URIs, or PORT
            is unset.
    """
    settings = settings or load_settings()
    vcap = settings.vcap_application
    if vcap is None:
        return None

    if not vcap.application_uris:
        raise ConfigError("VCAP_APPLICATION has no application_uris")
    if settings.port is None:
        raise ConfigError("Unable to read $PORT for PCF deployment")

    return VcapApplication(
        name=vcap.application_name,
        address=vcap.application_uris[0],
        bind_port=f":{settings.port}",
    )


def read_services(settings: PlatformSettings | None = None) -> dict[str, str]:
    """Read the addresses of the bound services.

    Args:
        settings: Platform settings; read from the environment when omitted.

    Returns:
        Mapping of service name to ``host:port``. When VCAP_SERVICES is unset
        the local development addresses are returned. A name listed twice
        keeps its last address.

    Raises:
        ConfigError: If VCAP_SERVICES is malformed.
    """
    settings = settings or load_settings()
    vcap = settings.vcap_services
    if vcap is None:
        return dict(LOCAL_SERVICE_ADDRESSES)

    services: dict[str, str] = {}
    for entry in vcap.user_provided:
        services[entry.name] = entry.credentials.host
    return services
