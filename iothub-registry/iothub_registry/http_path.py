# --------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import urllib.parse


def get_devices_path():
    """
    :return: The path of the device collection. It is of the format
    devices
    """
    return "devices"


def get_device_path(device_id):
    """
    :return: The path of a single device identity. It is of the format
    devices/uri_encode($device_id)
    """
    return "devices/{}".format(urllib.parse.quote(device_id, safe=""))


def get_twin_path(device_id):
    """
    :return: The path of a single device twin. It is of the format
    twins/uri_encode($device_id)
    """
    return "twins/{}".format(urllib.parse.quote(device_id, safe=""))
