# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the rules for combining partial device records into one device"""

import copy
import logging
from .models import Device

logger = logging.getLogger(__name__)


def _is_set(value):
    # None and the empty string both mean "not provided"
    return value is not None and value != ""


def merge_devices(*devices, device_id=None):
    """Combine device records into a new Device.

    Records are applied in order, so later records override earlier ones. A field of a record
    is applied only if it is set, and replaces the field of the result wholesale: nested records
    such as the authentication mechanism are never merged field by field. None entries are
    skipped. The inputs are not modified.

    Only the fields of the Device model are combined. Fields the model does not know, which
    a fetched device keeps in additional_properties (such as deviceScope), are not carried
    over to the result.

    A typical call passes a previously fetched device followed by the updates to apply to it.

    :param devices: The records to combine, base first.
    :type devices: :class:`iothub_registry.models.Device` or None
    :param str device_id: If provided, the device_id of the result, regardless of the
        device_id of any record.
    :raises: TypeError if a record is neither a Device nor None
    :returns: The combined device
    :rtype: :class:`iothub_registry.models.Device`
    """
    result = Device()
    for device in devices:
        if device is None:
            continue
        if not isinstance(device, Device):
            raise TypeError(
                "device records must be Device or None, not {}".format(type(device).__name__)
            )
        for attr in Device._attribute_map:
            value = getattr(device, attr, None)
            if _is_set(value):
                setattr(result, attr, copy.deepcopy(value))

    if device_id is not None:
        if _is_set(result.device_id) and result.device_id != device_id:
            logger.debug(
                "Overriding device id '{}' with '{}'".format(result.device_id, device_id)
            )
        result.device_id = device_id
    return result
