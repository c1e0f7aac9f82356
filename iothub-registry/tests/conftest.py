# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import asyncio
import base64
import json
import struct
import pytest
from iothub_registry.http_transport import HTTPResponse
from iothub_registry import constant

FAKE_HOSTNAME = "fake.azure-devices.net"
FAKE_KEY_NAME = "iothubowner"
FAKE_SHARED_ACCESS_KEY = "Zm9vYmFy"
FAKE_CONNECTION_STRING = "HostName={};SharedAccessKeyName={};SharedAccessKey={}".format(
    FAKE_HOSTNAME, FAKE_KEY_NAME, FAKE_SHARED_ACCESS_KEY
)


@pytest.fixture
def arbitrary_exception():
    class ArbitraryException(Exception):
        pass

    e = ArbitraryException("arbitrary description")
    return e


@pytest.fixture
def connection_string():
    return FAKE_CONNECTION_STRING


class FakeTransport(object):
    """Synchronous transport that returns queued responses and records every request"""

    def __init__(self, *responses):
        self.requests = []
        self.responses = list(responses)

    def send(self, request):
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeAsyncTransport(object):
    """Transport with a coroutine send that never completes until released"""

    def __init__(self, response=None):
        self.requests = []
        self.response = response or HTTPResponse(200, body="{}")
        self.is_hanging = asyncio.Event()
        self.stop_hanging = asyncio.Event()

    async def send(self, request):
        self.requests.append(request)
        self.is_hanging.set()
        await self.stop_hanging.wait()
        return self.response


class FakePagedBackend(object):
    """Transport serving device twins page by page.

    The position of the next page is encoded as a base64, big-endian unsigned 32-bit counter in
    the continuation header. The header is omitted on the last page.
    """

    def __init__(self, total):
        self.total = total
        self.requests = []

    def make_twin(self, i):
        return {
            "deviceId": "device-{}".format(i),
            "etag": "etag-{}".format(i),
            "status": "enabled",
            "version": i,
            "tags": {"index": i},
        }

    def send(self, request):
        self.requests.append(request)
        token = request.headers.get(constant.CONTINUATION_TOKEN_HEADER)
        start = struct.unpack(">I", base64.b64decode(token))[0] if token else 0
        count = int(request.headers[constant.PAGE_SIZE_HEADER])
        end = min(start + count, self.total)
        headers = {}
        if end < self.total:
            headers[constant.CONTINUATION_TOKEN_HEADER] = base64.b64encode(
                struct.pack(">I", end)
            ).decode("ascii")
        body = json.dumps([self.make_twin(i) for i in range(start, end)])
        return HTTPResponse(200, reason="OK", headers=headers, body=body)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def fake_paged_backend_factory():
    return FakePagedBackend


@pytest.fixture
def fake_async_transport_factory():
    # Events must be created inside the running loop, so tests instantiate it themselves
    return FakeAsyncTransport
