"""IoTHub Registry Client Library

This library provides an asyncio client for the device identity registry and the device twins
of an Azure IoTHub, authenticated with shared access policy connection strings.
"""

from .iothub_registry_client import IoTHubRegistryClient
from .config import RegistryClientConfig, ProxyOptions
from .connection_string import ConnectionString
from .cursor import DeviceTwinCursor
from .device_merge import merge_devices
from .http_transport import HTTPTransport, HTTPRequest, HTTPResponse
from .exceptions import (
    IoTHubRegistryError,
    RequestPreparationError,
    RequestExecutionError,
    DecodeError,
    EndOfSequenceError,
    HTTPError,
    ArgumentError,
    UnauthorizedError,
    QuotaExceededError,
    NotFoundError,
    DeviceAlreadyExistsError,
    InvalidEtagError,
    ThrottlingError,
)
from .models import (
    Device,
    AuthenticationMechanism,
    SymmetricKey,
    X509Thumbprint,
    DeviceCapabilities,
    DeviceTwin,
    DeviceTwinUpdate,
    TwinProperties,
)
from .constant import VERSION as __version__

__all__ = [
    "IoTHubRegistryClient",
    "RegistryClientConfig",
    "ProxyOptions",
    "ConnectionString",
    "DeviceTwinCursor",
    "merge_devices",
    "HTTPTransport",
    "HTTPRequest",
    "HTTPResponse",
    "IoTHubRegistryError",
    "RequestPreparationError",
    "RequestExecutionError",
    "DecodeError",
    "EndOfSequenceError",
    "HTTPError",
    "ArgumentError",
    "UnauthorizedError",
    "QuotaExceededError",
    "NotFoundError",
    "DeviceAlreadyExistsError",
    "InvalidEtagError",
    "ThrottlingError",
    "Device",
    "AuthenticationMechanism",
    "SymmetricKey",
    "X509Thumbprint",
    "DeviceCapabilities",
    "DeviceTwin",
    "DeviceTwinUpdate",
    "TwinProperties",
]
