# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the cursor used to enumerate device twins page by page"""

import asyncio
import logging
from typing import Any, List, Optional
from . import exceptions as exc
from .custom_typing import PageFetcher
from .models import DeviceTwin
from .response_decoder import deserialize_model

logger = logging.getLogger(__name__)


class DeviceTwinCursor:
    """
    Cursor that can be used to iterate over the device twins of an IoTHub.

    Pages are fetched lazily: a new page is only requested once every twin of the buffered page
    has been consumed, and only if the previous page came with a continuation token. The
    cursor cannot be restarted once exhausted or failed.

    A cursor must not be used by more than one task at a time.

    Note that for general usage, cursors should be obtained from an IoTHubRegistryClient
    instance, not directly constructed.

    Usage::

        cursor = await client.get_device_twins(connection_string)
        while await cursor.next():
            twin = cursor.decode()

    or::

        async for twin in await client.get_device_twins(connection_string):
            ...
    """

    def __init__(self, fetch_page: PageFetcher) -> None:
        """
        Constructor for internal use only

        :param fetch_page: Coroutine function taking a continuation token and a timeout, that
            returns the items of a page and the continuation token for the next page (or None
            if there are no more pages)
        """
        self._fetch_page = fetch_page
        self._page: List[Any] = []
        self._index = -1
        self._continuation_token: Optional[str] = None
        self._has_next = True
        self._error: Optional[BaseException] = None
        self._current: Optional[DeviceTwin] = None

    @property
    def error(self) -> Optional[BaseException]:
        """The failure that terminated the cursor, or None"""
        return self._error

    @property
    def continuation_token(self) -> Optional[str]:
        """Opaque token of the page the cursor will request next, or None"""
        return self._continuation_token

    @property
    def exhausted(self) -> bool:
        """True if the cursor cannot be advanced any further"""
        return self._error is not None or (
            not self._has_next and self._index >= len(self._page)
        )

    async def _load_page(self, timeout: Optional[float] = None) -> None:
        """Fetch the next page into the buffer. Errors are raised."""
        logger.debug("Fetching page of device twins")
        items, continuation_token = await self._fetch_page(self._continuation_token, timeout)
        self._page = items
        self._index = -1
        self._continuation_token = continuation_token
        self._has_next = continuation_token is not None
        logger.debug(
            "Fetched {} device twins (more pages: {})".format(len(items), self._has_next)
        )

    async def next(self, timeout: Optional[float] = None) -> bool:
        """Advance to the next device twin.

        :param float timeout: Deadline, in seconds, for fetching a page if one needs to be
            fetched. A deadline that is already expired fails without a request being sent.

        :returns: True if there is a current twin to decode, False if the cursor is exhausted
            or a page could not be fetched. The failure is available from :attr:`error`.
        :raises: asyncio.CancelledError if the task is cancelled during a fetch. The
            cancellation is recorded as the failure of the cursor.
        """
        if self._error is not None:
            return False
        self._current = None
        self._index += 1
        while self._index >= len(self._page):
            if not self._has_next:
                self._page = []
                self._index = 0
                logger.debug("Device twin cursor exhausted")
                return False
            try:
                await self._load_page(timeout)
                self._index = 0
            except asyncio.CancelledError as e:
                self._fail(e)
                raise
            except (exc.IoTHubRegistryError, asyncio.TimeoutError) as e:
                self._fail(e)
                return False
        return True

    def decode(self) -> DeviceTwin:
        """Return the current device twin.

        :raises: EndOfSequenceError if the cursor was not advanced yet, or is exhausted
        :raises: The failure of the cursor, if it failed
        :raises: DecodeError if the current item is not a device twin
        """
        if self._error is not None:
            raise self._error.with_traceback(None)
        if self._index < 0 or self._index >= len(self._page):
            raise exc.EndOfSequenceError("no more device twins")
        if self._current is None:
            self._current = deserialize_model(DeviceTwin, self._page[self._index], "device twin")
        return self._current

    def close(self) -> None:
        """Abandon the cursor. Buffered twins are dropped and no further page is requested."""
        self._page = []
        self._index = 0
        self._has_next = False
        self._continuation_token = None

    def _fail(self, error: BaseException) -> None:
        logger.info("Device twin cursor failed: {!r}".format(error))
        self._error = error
        self._page = []
        self._index = 0
        self._has_next = False

    def __aiter__(self) -> "DeviceTwinCursor":
        return self

    async def __anext__(self) -> DeviceTwin:
        if await self.next():
            return self.decode()
        if self._error is not None:
            raise self._error.with_traceback(None)
        raise StopAsyncIteration
