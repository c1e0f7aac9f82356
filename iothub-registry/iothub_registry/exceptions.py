# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define IoTHub registry user-facing exceptions to be shared across package"""


class IoTHubRegistryError(Exception):
    """Represents a failure from the IoTHub Registry Client"""

    pass


# Client Exceptions
class RequestPreparationError(IoTHubRegistryError):
    """A request could not be built from the provided parameters. No request was sent."""

    pass


class RequestExecutionError(IoTHubRegistryError):
    """A request could not be completed by the transport.
    The original error is available as __cause__
    """

    pass


class DecodeError(IoTHubRegistryError):
    """A response body did not match the expected shape"""

    def __init__(self, entity, message=None):
        """
        :param str entity: Name of the entity that failed to decode
        :param str message: Error message. Derived from the entity if not provided.
        """
        super().__init__(message or "failed to decode {}".format(entity))
        self.entity = entity


class EndOfSequenceError(IoTHubRegistryError):
    """A cursor has no current element: it was not advanced yet, or it is exhausted"""

    pass


# Service Exceptions
class HTTPError(IoTHubRegistryError):
    """Represents a non-success status code returned by IoTHub"""

    def __init__(self, status_code, message=None, reason=None):
        """
        :param int status_code: The HTTP status code of the response
        :param str message: The error message provided by the service, if any
        :param str reason: The HTTP reason phrase, if any
        """
        self.status_code = status_code
        self.message = message
        self.reason = reason
        super().__init__(self._format())

    def _format(self):
        text = "http error {}".format(self.status_code)
        if self.reason:
            text += " {}".format(self.reason)
        if self.message:
            text += ": {}".format(self.message)
        return text


class ArgumentError(HTTPError):
    """
    Service returned 400
    """

    pass


class UnauthorizedError(HTTPError):
    """
    Service returned 401
    """

    pass


class QuotaExceededError(HTTPError):
    """
    Service returned 403
    """

    pass


class NotFoundError(HTTPError):
    """
    Service returned 404
    """

    pass


class DeviceAlreadyExistsError(HTTPError):
    """
    Service returned 409
    """

    pass


class InvalidEtagError(HTTPError):
    """
    Service returned 412
    """

    pass


class ThrottlingError(HTTPError):
    """
    Service returned 429
    """

    pass
