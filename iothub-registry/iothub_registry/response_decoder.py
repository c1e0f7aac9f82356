# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module maps HTTP responses from the IoTHub registry to results or errors"""

import json
import logging
from msrest.exceptions import DeserializationError
from . import constant
from . import exceptions as exc
from .custom_typing import ServiceErrorBody

logger = logging.getLogger(__name__)

_status_code_errors = {
    400: exc.ArgumentError,
    401: exc.UnauthorizedError,
    403: exc.QuotaExceededError,
    404: exc.NotFoundError,
    409: exc.DeviceAlreadyExistsError,
    412: exc.InvalidEtagError,
    429: exc.ThrottlingError,
}


def is_success(status_code):
    return 200 <= status_code < 300


def translate_error(response):
    """Return the HTTPError matching a non-success response.

    The service message is extracted from the body when it is decodable; the error is
    returned regardless of the body content.

    :param response: The response to translate
    :type response: :class:`iothub_registry.http_transport.HTTPResponse`
    :rtype: :class:`iothub_registry.exceptions.HTTPError`
    """
    error_cls = _status_code_errors.get(response.status_code, exc.HTTPError)
    return error_cls(
        response.status_code,
        message=_extract_service_message(response.body),
        reason=response.reason or None,
    )


def _extract_service_message(body):
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error_body: ServiceErrorBody = payload
    message = error_body.get("Message") or error_body.get("message") or error_body.get("error")
    if not isinstance(message, str):
        return None
    exception_message = error_body.get("ExceptionMessage")
    if isinstance(exception_message, str) and exception_message:
        message = "{} ({})".format(message, exception_message)
    return message


def check_response(response):
    """Raise the matching HTTPError if the response does not have a success status code"""
    if not is_success(response.status_code):
        error = translate_error(response)
        logger.debug("Request failed: {}".format(error))
        raise error


def parse_json(body, entity):
    """Parse a JSON body.

    :param str body: The body to parse
    :param str entity: Name of the entity the body holds, used for error reporting
    :raises: DecodeError if the body is not valid JSON
    """
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise exc.DecodeError(entity) from e


def deserialize_model(model_cls, data, entity):
    """Deserialize already parsed JSON into a model.

    :raises: DecodeError if the data does not have the shape of the model
    """
    if not isinstance(data, dict):
        raise exc.DecodeError(entity)
    try:
        return model_cls.deserialize(data)
    except DeserializationError as e:
        raise exc.DecodeError(entity) from e


def decode_response(response, model_cls, entity):
    """Return the model held by a success response.

    :param response: The response to decode
    :type response: :class:`iothub_registry.http_transport.HTTPResponse`
    :param model_cls: The model class the body holds
    :param str entity: Name of the entity the body holds, used for error reporting
    :raises: HTTPError if the status code is not a success status code
    :raises: DecodeError if the body cannot be decoded as the model
    """
    check_response(response)
    return deserialize_model(model_cls, parse_json(response.body, entity), entity)


def decode_page(response, entity):
    """Return the items of a page response and the continuation token for the next page.

    The items are returned as parsed JSON, to be decoded one at a time. The continuation token
    is None when the response carries none, meaning this is the last page.

    :raises: HTTPError if the status code is not a success status code
    :raises: DecodeError if the body is not a JSON array
    """
    check_response(response)
    items = parse_json(response.body, entity)
    if not isinstance(items, list):
        raise exc.DecodeError(entity)
    continuation_token = response.headers.get(constant.CONTINUATION_TOKEN_HEADER) or None
    return items, continuation_token
