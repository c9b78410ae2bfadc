"""Platform configuration and the service directory."""

from pzcommon.config.services import ServiceName
from pzcommon.config.system import SystemConfig
from pzcommon.config.vcap import (
    PlatformSettings,
    VcapApplication,
    read_application,
    read_services,
)

__all__ = [
    "PlatformSettings",
    "ServiceName",
    "SystemConfig",
    "VcapApplication",
    "read_application",
    "read_services",
]
