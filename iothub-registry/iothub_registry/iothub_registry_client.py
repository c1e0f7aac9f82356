# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import asyncio
import functools
import logging
from typing import List, Optional, Tuple, Any

from . import exceptions as exc
from . import response_decoder as decoder
from .async_adapter import as_coroutine_function
from .config import RegistryClientConfig
from .cursor import DeviceTwinCursor
from .device_merge import merge_devices
from .http_transport import HTTPRequest, HTTPResponse
from .models import Device, DeviceTwin, DeviceTwinUpdate
from .request_builder import RequestBuilder, coerce_connection_string

logger = logging.getLogger(__name__)


class IoTHubRegistryClient:
    """A client for the device identity registry and the device twins of an IoTHub.

    The connection string is provided on each call, so a single client can be used with any
    number of IoTHubs. Each call makes exactly one HTTP request (enumeration makes one per page)
    and never retries.

    Every operation accepts a ``timeout``, in seconds. An expired deadline raises
    asyncio.TimeoutError, and task cancellation raises asyncio.CancelledError. Neither is
    wrapped in a RequestExecutionError.
    """

    def __init__(self, config: Optional[RegistryClientConfig] = None) -> None:
        """Initializer for an IoTHubRegistryClient

        :param config: The configuration of the client. A default configuration, using an
            HTTPTransport, is created if not provided.
        :type config: :class:`RegistryClientConfig`
        """
        if config is None:
            config = RegistryClientConfig()
        self._config = config
        self._request_builder = RequestBuilder(config)
        self._send = as_coroutine_function(config.transport.send)

    @property
    def config(self) -> RegistryClientConfig:
        return self._config

    async def _execute(self, request: HTTPRequest, timeout: Optional[float]) -> HTTPResponse:
        """Send a request, bounded by the given deadline.

        :raises: asyncio.TimeoutError if the deadline is exceeded, including when it is
            already exceeded before the request is sent
        :raises: RequestExecutionError if the transport fails to complete the request
        """
        if timeout is not None and timeout <= 0:
            raise asyncio.TimeoutError("Deadline exceeded before request was sent")
        logger.debug("Executing {!r}".format(request))
        try:
            if timeout is None:
                response = await self._send(request)
            else:
                response = await asyncio.wait_for(self._send(request), timeout)
        except (asyncio.TimeoutError, asyncio.CancelledError):
            raise
        except Exception as e:
            raise exc.RequestExecutionError("failed to execute request: {}".format(e)) from e
        logger.debug("Received {!r}".format(response))
        return response

    async def get_device(
        self, connection_string, device_id: str, *, timeout: Optional[float] = None
    ) -> Device:
        """Retrieves a device identity from IoTHub.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a device

        :returns: The Device object.
        """
        request = self._request_builder.get_device(connection_string, device_id)
        response = await self._execute(request, timeout)
        return decoder.decode_response(response, Device, "device")

    async def upsert_device(
        self,
        connection_string,
        device_id: str,
        *updates: Optional[Device],
        timeout: Optional[float] = None,
    ) -> Device:
        """Creates or updates a device identity on IoTHub.

        The updates are merged in order (see :func:`merge_devices`) and the device_id of the
        result is always the given device_id. To modify an existing device, pass the device as
        retrieved with get_device, followed by the changes.

        Fields of the retrieved device that the Device model does not know (kept in its
        additional_properties, such as deviceScope) are not sent, and the service may reset them.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param updates: Partial device records, as Device objects. None entries are ignored.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a device

        :returns: The Device object as stored by IoTHub.
        """
        try:
            device = merge_devices(*updates, device_id=device_id)
        except TypeError as e:
            raise exc.RequestPreparationError(
                "failed to prepare request: invalid device update"
            ) from e
        request = self._request_builder.put_device(connection_string, device_id, device)
        response = await self._execute(request, timeout)
        return decoder.decode_response(response, Device, "updated device")

    async def delete_device(
        self,
        connection_string,
        device_id: str,
        etag: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        """Deletes a device identity from IoTHub.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param str etag: The etag (if_match) value to use for the delete operation. If not
            provided, the device is deleted regardless of its version.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        """
        request = self._request_builder.delete_device(connection_string, device_id, etag)
        response = await self._execute(request, timeout)
        decoder.check_response(response)

    async def get_device_twins(
        self,
        connection_string,
        *,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> DeviceTwinCursor:
        """Enumerates the device twins of an IoTHub.

        The first page is fetched before returning. Later pages are fetched by the cursor as
        it is advanced.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param int page_size: Number of twins requested per page. Defaults to the configured
            page size.
        :param float timeout: Deadline for fetching the first page, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the first page could not be fetched
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a list of twins

        :returns: A cursor positioned before the first twin.
        """
        connection_string = coerce_connection_string(connection_string)
        if page_size is not None and (not isinstance(page_size, int) or page_size <= 0):
            raise exc.RequestPreparationError("failed to prepare request: invalid page size")
        cursor = DeviceTwinCursor(
            functools.partial(self._fetch_device_twins_page, connection_string, page_size)
        )
        await cursor._load_page(timeout)
        return cursor

    async def _fetch_device_twins_page(
        self,
        connection_string,
        page_size: Optional[int],
        continuation_token: Optional[str],
        timeout: Optional[float],
    ) -> Tuple[List[Any], Optional[str]]:
        request = self._request_builder.get_device_twins(
            connection_string, page_size=page_size, continuation_token=continuation_token
        )
        response = await self._execute(request, timeout)
        return decoder.decode_page(response, "device twins")

    async def get_device_twin(
        self, connection_string, device_id: str, *, timeout: Optional[float] = None
    ) -> DeviceTwin:
        """Gets a device twin.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a twin

        :returns: The DeviceTwin object.
        """
        request = self._request_builder.get_device_twin(connection_string, device_id)
        response = await self._execute(request, timeout)
        return decoder.decode_response(response, DeviceTwin, "device twin")

    async def update_device_twin(
        self,
        connection_string,
        device_id: str,
        update: DeviceTwinUpdate,
        etag: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> DeviceTwin:
        """Merges tags and desired properties into a device twin.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param update: The tags and desired properties to merge.
        :type update: :class:`DeviceTwinUpdate`
        :param str etag: The etag (if_match) value to use for the update operation.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a twin

        :returns: The updated DeviceTwin object.
        """
        request = self._request_builder.update_device_twin(
            connection_string, device_id, update, etag
        )
        response = await self._execute(request, timeout)
        return decoder.decode_response(response, DeviceTwin, "updated device twin")

    async def replace_device_twin(
        self,
        connection_string,
        device_id: str,
        update: DeviceTwinUpdate,
        etag: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> DeviceTwin:
        """Replaces tags and desired properties of a device twin.

        :param connection_string: The connection string of the IoTHub
        :type connection_string: :class:`ConnectionString` or str
        :param str device_id: The name (Id) of the device.
        :param update: The tags and desired properties to set.
        :type update: :class:`DeviceTwinUpdate`
        :param str etag: The etag (if_match) value to use for the replace operation.
        :param float timeout: Deadline for the call, in seconds.

        :raises: RequestPreparationError if the parameters are invalid
        :raises: RequestExecutionError if the request could not be completed
        :raises: HTTPError if the HTTP response status is not a success status
        :raises: DecodeError if the response does not hold a twin

        :returns: The replaced DeviceTwin object.
        """
        request = self._request_builder.update_device_twin(
            connection_string, device_id, update, etag, replace=True
        )
        response = await self._execute(request, timeout)
        return decoder.decode_response(response, DeviceTwin, "replaced device twin")
