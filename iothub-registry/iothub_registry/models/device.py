# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes representing device identities in the IoTHub registry
"""

from msrest.serialization import Model

AUTH_TYPE_SAS = "sas"
AUTH_TYPE_SELF_SIGNED = "selfSigned"
AUTH_TYPE_CERTIFICATE_AUTHORITY = "certificateAuthority"
AUTH_TYPE_NONE = "none"

STATUS_ENABLED = "enabled"
STATUS_DISABLED = "disabled"


class SymmetricKey(Model):
    """Primary and secondary symmetric keys of a device.

    :param str primary_key: Base64 encoded primary key.
    :param str secondary_key: Base64 encoded secondary key.
    """

    _attribute_map = {
        "primary_key": {"key": "primaryKey", "type": "str"},
        "secondary_key": {"key": "secondaryKey", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(SymmetricKey, self).__init__(**kwargs)
        self.primary_key = kwargs.get("primary_key", None)
        self.secondary_key = kwargs.get("secondary_key", None)


class X509Thumbprint(Model):
    """Primary and secondary X509 thumbprints of a device.

    :param str primary_thumbprint: X509 client certificate primary thumbprint.
    :param str secondary_thumbprint: X509 client certificate secondary thumbprint.
    """

    _attribute_map = {
        "primary_thumbprint": {"key": "primaryThumbprint", "type": "str"},
        "secondary_thumbprint": {"key": "secondaryThumbprint", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(X509Thumbprint, self).__init__(**kwargs)
        self.primary_thumbprint = kwargs.get("primary_thumbprint", None)
        self.secondary_thumbprint = kwargs.get("secondary_thumbprint", None)


class AuthenticationMechanism(Model):
    """Authentication mechanism of a device.

    :param symmetric_key: The keys, when using SAS authentication.
    :type symmetric_key: ~iothub_registry.models.SymmetricKey
    :param x509_thumbprint: The thumbprints, when using self signed certificates.
    :type x509_thumbprint: ~iothub_registry.models.X509Thumbprint
    :param str type: The type of authentication. Possible values include: 'sas',
     'selfSigned', 'certificateAuthority', 'none'
    """

    _attribute_map = {
        "symmetric_key": {"key": "symmetricKey", "type": "SymmetricKey"},
        "x509_thumbprint": {"key": "x509Thumbprint", "type": "X509Thumbprint"},
        "type": {"key": "type", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(AuthenticationMechanism, self).__init__(**kwargs)
        self.symmetric_key = kwargs.get("symmetric_key", None)
        self.x509_thumbprint = kwargs.get("x509_thumbprint", None)
        self.type = kwargs.get("type", None)


class DeviceCapabilities(Model):
    """Status of capabilities enabled on the device.

    :param bool iot_edge: The property that determines if the device is an edge device or not.
    """

    _attribute_map = {"iot_edge": {"key": "iotEdge", "type": "bool"}}

    def __init__(self, **kwargs):
        super(DeviceCapabilities, self).__init__(**kwargs)
        self.iot_edge = kwargs.get("iot_edge", None)


class Device(Model):
    """A device identity in the IoTHub registry.

    :param str device_id: The unique identifier of the device.
    :param str generation_id: The IoTHub generated, case-sensitive string used to distinguish
     devices with the same device_id that were deleted and re-created.
    :param str etag: The string representing a weak ETag for the device identity.
    :param str status: The state of the device. Possible values include: 'enabled', 'disabled'
    :param str status_reason: The reason for the device identity status.
    :param authentication: The authentication mechanism used by the device.
    :type authentication: ~iothub_registry.models.AuthenticationMechanism
    :param capabilities: The set of capabilities of the device.
    :type capabilities: ~iothub_registry.models.DeviceCapabilities
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "generation_id": {"key": "generationId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "status": {"key": "status", "type": "str"},
        "status_reason": {"key": "statusReason", "type": "str"},
        "authentication": {"key": "authentication", "type": "AuthenticationMechanism"},
        "capabilities": {"key": "capabilities", "type": "DeviceCapabilities"},
    }

    def __init__(self, **kwargs):
        super(Device, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.generation_id = kwargs.get("generation_id", None)
        self.etag = kwargs.get("etag", None)
        self.status = kwargs.get("status", None)
        self.status_reason = kwargs.get("status_reason", None)
        self.authentication = kwargs.get("authentication", None)
        self.capabilities = kwargs.get("capabilities", None)
