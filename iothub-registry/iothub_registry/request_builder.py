# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module builds the authenticated HTTP requests sent to the IoTHub registry.

Nothing in this module performs I/O. Any problem with the parameters of a request is raised
as a RequestPreparationError before a request is produced.
"""

import json
import logging
import urllib.parse
from msrest.exceptions import SerializationError
from msrest.serialization import Model
from . import constant
from . import exceptions as exc
from . import http_path
from . import models
from .connection_string import ConnectionString
from .http_transport import HTTPRequest
from .product_info import get_iothub_registry_user_agent
from .sastoken import SasTokenError, create_sastoken_generator

logger = logging.getLogger(__name__)


def _ensure_quoted(etag):
    if etag == "*":
        return etag
    if not isinstance(etag, str) or (len(etag) > 1 and etag[0] == '"' and etag[-1] == '"'):
        return etag
    return '"' + etag + '"'


def _check_model_fields(model):
    # msrest sends a mistyped nested model field as is, so check those before serializing
    for attr, attr_desc in model._attribute_map.items():
        value = getattr(model, attr, None)
        if value is None:
            continue
        attr_type = attr_desc["type"]
        if attr_type == "{object}":
            if not isinstance(value, dict):
                raise TypeError("{} must be a dict, not {}".format(attr, type(value).__name__))
        elif hasattr(models, attr_type):
            if not isinstance(value, getattr(models, attr_type)):
                raise TypeError(
                    "{} must be a {}, not {}".format(attr, attr_type, type(value).__name__)
                )
            _check_model_fields(value)


def coerce_connection_string(connection_string):
    """Return a validated ConnectionString for the given value.

    :param connection_string: A ConnectionString, or a connection string to parse
    :raises: RequestPreparationError if the connection string is missing or invalid
    """
    if connection_string is None:
        raise exc.RequestPreparationError("failed to prepare request: missing connection string")
    try:
        if not isinstance(connection_string, ConnectionString):
            connection_string = ConnectionString.from_string(connection_string)
        else:
            connection_string.validate()
    except (ValueError, TypeError) as e:
        raise exc.RequestPreparationError(
            "failed to prepare request: invalid connection string"
        ) from e
    return connection_string


def _require_device_id(device_id):
    if not isinstance(device_id, str) or not device_id:
        raise exc.RequestPreparationError("failed to prepare request: missing device id")


class RequestBuilder(object):
    """Builds one HTTPRequest per registry operation.

    :param config: The configuration of the client the requests are built for
    :type config: :class:`iothub_registry.RegistryClientConfig`
    """

    def __init__(self, config):
        self._config = config
        self._user_agent = get_iothub_registry_user_agent(config.product_info)

    def build(self, connection_string, method, path, body=None, headers=None, expiry_time=None):
        """Build an authenticated request for the given path.

        :param connection_string: The connection string to authenticate with
        :param str method: The request method
        :param str path: The path of the resource, relative to the host
        :param body: A model or JSON compatible value to send as the body (optional)
        :param dict headers: Extra headers for the request (optional)
        :param int expiry_time: Expiry time of the SAS token, in seconds since epoch. Derived
            from the configured ttl if not provided.

        :raises: RequestPreparationError if the request cannot be built
        :returns: The request
        :rtype: :class:`iothub_registry.http_transport.HTTPRequest`
        """
        connection_string = coerce_connection_string(connection_string)

        try:
            generator = create_sastoken_generator(
                connection_string, ttl=self._config.sastoken_ttl
            )
            sastoken = generator.generate_sastoken(expiry_time=expiry_time)
        except SasTokenError as e:
            raise exc.RequestPreparationError(
                "failed to prepare request: unable to sign request"
            ) from e

        url = "https://{endpoint}/{path}?{query}".format(
            endpoint=connection_string.endpoint,
            path=path,
            query=urllib.parse.urlencode({"api-version": self._config.api_version}),
        )
        request_headers = {
            constant.AUTHORIZATION_HEADER: str(sastoken),
            constant.USER_AGENT_HEADER: self._user_agent,
            constant.ACCEPT_HEADER: constant.JSON_CONTENT_TYPE,
        }
        if headers:
            request_headers.update(headers)

        data = None
        if body is not None:
            try:
                if isinstance(body, Model):
                    _check_model_fields(body)
                    body = body.serialize()
                data = json.dumps(body)
            except (TypeError, ValueError, SerializationError) as e:
                raise exc.RequestPreparationError(
                    "failed to prepare request: body is not serializable"
                ) from e
            request_headers[constant.CONTENT_TYPE_HEADER] = constant.JSON_CONTENT_TYPE

        logger.debug("Prepared {} request for {}".format(method, path))
        return HTTPRequest(method, url, headers=request_headers, body=data)

    def get_device(self, connection_string, device_id):
        _require_device_id(device_id)
        return self.build(connection_string, "GET", http_path.get_device_path(device_id))

    def put_device(self, connection_string, device_id, device):
        """Request to create or update a device. If-Match is only sent when the device
        carries an ETag, so that devices that do not exist yet can be created.
        """
        _require_device_id(device_id)
        headers = {}
        if device.etag:
            headers[constant.IF_MATCH_HEADER] = _ensure_quoted(device.etag)
        return self.build(
            connection_string,
            "PUT",
            http_path.get_device_path(device_id),
            body=device,
            headers=headers,
        )

    def delete_device(self, connection_string, device_id, etag=None):
        """Request to delete a device. Without a known ETag, any version is matched."""
        _require_device_id(device_id)
        if not etag:
            etag = "*"
        return self.build(
            connection_string,
            "DELETE",
            http_path.get_device_path(device_id),
            headers={constant.IF_MATCH_HEADER: _ensure_quoted(etag)},
        )

    def get_device_twins(self, connection_string, page_size=None, continuation_token=None):
        """Request for one page of device twins.

        :param int page_size: Number of twins requested. Defaults to the configured page size.
        :param str continuation_token: Opaque position returned by the previous page, if any.
            Sent back exactly as received.
        """
        if page_size is None:
            page_size = self._config.page_size
        headers = {constant.PAGE_SIZE_HEADER: str(page_size)}
        if continuation_token is not None:
            headers[constant.CONTINUATION_TOKEN_HEADER] = continuation_token
        return self.build(
            connection_string, "GET", http_path.get_devices_path(), headers=headers
        )

    def get_device_twin(self, connection_string, device_id):
        _require_device_id(device_id)
        return self.build(connection_string, "GET", http_path.get_twin_path(device_id))

    def update_device_twin(self, connection_string, device_id, update, etag=None, replace=False):
        """Request to change the tags and desired properties of a twin.

        :param update: The change to apply
        :type update: :class:`iothub_registry.models.DeviceTwinUpdate`
        :param str etag: The ETag the twin must match. Any version is matched if not provided.
        :param bool replace: Replace tags and desired properties (PUT) instead of merging
            them (PATCH)
        """
        _require_device_id(device_id)
        if update is None:
            raise exc.RequestPreparationError("failed to prepare request: missing twin update")
        if not etag:
            etag = "*"
        return self.build(
            connection_string,
            "PUT" if replace else "PATCH",
            http_path.get_twin_path(device_id),
            body=update,
            headers={constant.IF_MATCH_HEADER: _ensure_quoted(etag)},
        )
