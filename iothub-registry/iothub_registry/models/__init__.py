"""Models for the IoTHub registry.

Every model class must be exported here, as nested models are resolved by name from this
package when deserializing.
"""

from .device import (
    Device,
    AuthenticationMechanism,
    SymmetricKey,
    X509Thumbprint,
    DeviceCapabilities,
    AUTH_TYPE_SAS,
    AUTH_TYPE_SELF_SIGNED,
    AUTH_TYPE_CERTIFICATE_AUTHORITY,
    AUTH_TYPE_NONE,
    STATUS_ENABLED,
    STATUS_DISABLED,
)
from .twin import DeviceTwin, DeviceTwinUpdate, TwinProperties

__all__ = [
    "Device",
    "AuthenticationMechanism",
    "SymmetricKey",
    "X509Thumbprint",
    "DeviceCapabilities",
    "DeviceTwin",
    "DeviceTwinUpdate",
    "TwinProperties",
    "AUTH_TYPE_SAS",
    "AUTH_TYPE_SELF_SIGNED",
    "AUTH_TYPE_CERTIFICATE_AUTHORITY",
    "AUTH_TYPE_NONE",
    "STATUS_ENABLED",
    "STATUS_DISABLED",
]
