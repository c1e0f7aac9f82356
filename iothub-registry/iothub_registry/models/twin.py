# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes related to device twin functionality
"""

from msrest.serialization import Model


class TwinProperties(Model):
    """The desired and reported properties of a twin.

    Both are free-form JSON documents. The service limits their depth and size, this
    client does not.

    :param desired: The properties sent _to_ the device to indicate its desired state.
    :type desired: dict[str, object]
    :param reported: The properties sent _from_ the device to indicate its actual state.
    :type reported: dict[str, object]
    """

    _attribute_map = {
        "desired": {"key": "desired", "type": "{object}"},
        "reported": {"key": "reported", "type": "{object}"},
    }

    def __init__(self, **kwargs):
        super(TwinProperties, self).__init__(**kwargs)
        self.desired = kwargs.get("desired", None)
        self.reported = kwargs.get("reported", None)


class DeviceTwin(Model):
    """The state information of a device, synchronized with the IoTHub registry.

    :param str device_id: The unique identifier of the device.
    :param str etag: The string representing a weak ETag for the twin.
    :param str device_etag: The string representing a weak ETag for the device identity.
    :param str authentication_type: The authentication type used by the device.
    :param str connection_state: The connection state of the device. Possible values
     include: 'Disconnected', 'Connected'
    :param int version: The version of the twin.
    :param str status: The enabled state of the device. Possible values include: 'enabled',
     'disabled'
    :param str status_reason: The reason for the current status of the device, if any.
    :param str last_activity_time: The date and time when the device last connected,
     received or sent a message.
    :param int cloud_to_device_message_count: The number of cloud-to-device messages sent.
    :param capabilities: The set of capabilities of the device.
    :type capabilities: ~iothub_registry.models.DeviceCapabilities
    :param tags: Free-form tags set by the solution back end.
    :type tags: dict[str, object]
    :param properties: The desired and reported properties of the twin.
    :type properties: ~iothub_registry.models.TwinProperties
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "device_etag": {"key": "deviceEtag", "type": "str"},
        "authentication_type": {"key": "authenticationType", "type": "str"},
        "connection_state": {"key": "connectionState", "type": "str"},
        "version": {"key": "version", "type": "long"},
        "status": {"key": "status", "type": "str"},
        "status_reason": {"key": "statusReason", "type": "str"},
        "last_activity_time": {"key": "lastActivityTime", "type": "str"},
        "cloud_to_device_message_count": {"key": "cloudToDeviceMessageCount", "type": "long"},
        "capabilities": {"key": "capabilities", "type": "DeviceCapabilities"},
        "tags": {"key": "tags", "type": "{object}"},
        "properties": {"key": "properties", "type": "TwinProperties"},
    }

    def __init__(self, **kwargs):
        super(DeviceTwin, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.etag = kwargs.get("etag", None)
        self.device_etag = kwargs.get("device_etag", None)
        self.authentication_type = kwargs.get("authentication_type", None)
        self.connection_state = kwargs.get("connection_state", None)
        self.version = kwargs.get("version", None)
        self.status = kwargs.get("status", None)
        self.status_reason = kwargs.get("status_reason", None)
        self.last_activity_time = kwargs.get("last_activity_time", None)
        self.cloud_to_device_message_count = kwargs.get("cloud_to_device_message_count", None)
        self.capabilities = kwargs.get("capabilities", None)
        self.tags = kwargs.get("tags", None)
        self.properties = kwargs.get("properties", None)


class DeviceTwinUpdate(Model):
    """A change to the tags and desired properties of a device twin.

    Reported properties are owned by the device and cannot be changed from the service side.

    :param tags: Tags to merge into (or replace) the twin tags.
    :type tags: dict[str, object]
    :param properties: Desired properties to merge into (or replace) the twin. Only the
     desired properties are used.
    :type properties: ~iothub_registry.models.TwinProperties
    """

    _attribute_map = {
        "tags": {"key": "tags", "type": "{object}"},
        "properties": {"key": "properties", "type": "TwinProperties"},
    }

    def __init__(self, **kwargs):
        super(DeviceTwinUpdate, self).__init__(**kwargs)
        self.tags = kwargs.get("tags", None)
        self.properties = kwargs.get("properties", None)
