# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with Connection Strings"""

import base64
import binascii

__all__ = ["ConnectionString"]

CS_DELIMITER = ";"
CS_VAL_SEPARATOR = "="

HOST_NAME = "HostName"
SHARED_ACCESS_KEY_NAME = "SharedAccessKeyName"
SHARED_ACCESS_KEY = "SharedAccessKey"
DEVICE_ID = "DeviceId"
GATEWAY_HOST_NAME = "GatewayHostName"

# Serialization order
_valid_keys = [
    HOST_NAME,
    GATEWAY_HOST_NAME,
    DEVICE_ID,
    SHARED_ACCESS_KEY_NAME,
    SHARED_ACCESS_KEY,
]


class ConnectionString(object):
    """Connection details for an IoTHub, as found in a shared access policy connection string.

    Values are immutable once the object is created. Use :meth:`from_string` to parse a
    connection string provided by Azure, or the initializer to build one from parts.

    :ivar str host_name: Hostname of the IoTHub
    :ivar str gateway_host_name: Hostname of a gateway to send requests through (optional)
    :ivar str name: Name of the shared access policy (optional)
    :ivar bytes key: Symmetric key of the shared access policy (already base64 decoded)
    :ivar str device_id: Device identity, only present in device connection strings (optional)
    """

    def __init__(self, host_name=None, key=None, name=None, gateway_host_name=None, device_id=None):
        """Initializer for ConnectionString

        No validation is done here, see :meth:`validate`.

        :param str host_name: Hostname of the IoTHub
        :param bytes key: The decoded symmetric key
        :param str name: Name of the shared access policy
        :param str gateway_host_name: Hostname of a gateway
        :param str device_id: Device identity
        """
        if isinstance(key, str):
            key = key.encode("utf-8")
        self._host_name = host_name
        self._key = key
        self._name = name
        self._gateway_host_name = gateway_host_name
        self._device_id = device_id

    @classmethod
    def from_string(cls, connection_string):
        """Parse and validate a connection string.

        :param str connection_string: String with connection details provided by Azure
        :raises: TypeError if connection_string is not a string
        :raises: ValueError if provided connection_string is invalid
        :returns: A new ConnectionString
        """
        d = _parse_connection_string(connection_string)
        try:
            key = base64.b64decode(d.get(SHARED_ACCESS_KEY, ""), validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Invalid Connection String - SharedAccessKey is not valid base64")
        cs = cls(
            host_name=d.get(HOST_NAME),
            key=key,
            name=d.get(SHARED_ACCESS_KEY_NAME),
            gateway_host_name=d.get(GATEWAY_HOST_NAME),
            device_id=d.get(DEVICE_ID),
        )
        cs.validate()
        return cs

    @property
    def host_name(self):
        return self._host_name

    @property
    def gateway_host_name(self):
        return self._gateway_host_name

    @property
    def name(self):
        return self._name

    @property
    def key(self):
        return self._key

    @property
    def device_id(self):
        return self._device_id

    @property
    def endpoint(self):
        """The host requests are sent to. The gateway takes priority over the IoTHub itself."""
        return self._gateway_host_name or self._host_name

    def validate(self):
        """Raise ValueError if the connection details are not internally consistent"""
        if not self._host_name:
            raise ValueError("Invalid Connection String - Missing HostName")
        if not self._key:
            raise ValueError("Invalid Connection String - Missing SharedAccessKey")

    def __getitem__(self, key):
        value = self._as_dict().get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, item):
        return self._as_dict().get(item) is not None

    def get(self, key, default=None):
        """Return the value for key if key is in the connection string, else default

        :param str key: The key to retrieve a value for
        :param str default: The default value returned if a key is not found
        :returns: The value for the given key
        """
        try:
            return self[key]
        except KeyError:
            return default

    def _as_dict(self):
        return {
            HOST_NAME: self._host_name,
            GATEWAY_HOST_NAME: self._gateway_host_name,
            DEVICE_ID: self._device_id,
            SHARED_ACCESS_KEY_NAME: self._name,
            SHARED_ACCESS_KEY: base64.b64encode(self._key).decode("utf-8") if self._key else None,
        }

    def __str__(self):
        d = self._as_dict()
        return CS_DELIMITER.join(
            key + CS_VAL_SEPARATOR + d[key] for key in _valid_keys if d[key] is not None
        )

    def __repr__(self):
        return "ConnectionString({host}, name={name})".format(
            host=self._host_name, name=self._name
        )

    def __eq__(self, other):
        if not isinstance(other, ConnectionString):
            return NotImplemented
        return self._as_dict() == other._as_dict()

    def __hash__(self):
        return hash(str(self))


def _parse_connection_string(connection_string):
    """Return a dictionary of values contained in a given connection string"""
    try:
        cs_args = connection_string.split(CS_DELIMITER)
    except (AttributeError, TypeError):
        raise TypeError("Connection String must be of type str")
    # Tolerate a trailing delimiter
    cs_args = [arg for arg in cs_args if arg]
    try:
        d = dict(arg.split(CS_VAL_SEPARATOR, 1) for arg in cs_args)
    except ValueError:
        # An argument without a separator cannot be made into a key/value pair
        raise ValueError("Invalid Connection String - Unable to parse")
    if len(cs_args) != len(d):
        # various errors related to incorrect parsing - duplicate args, bad syntax, etc.
        raise ValueError("Invalid Connection String - Unable to parse")
    # Unrecognized keys are ignored
    return {key: value for key, value in d.items() if key in _valid_keys}
