# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import asyncio
import json
import logging
import pytest
import requests
from iothub_registry import IoTHubRegistryClient, RegistryClientConfig, ConnectionString
from iothub_registry import constant
from iothub_registry import exceptions as exc
from iothub_registry.cursor import DeviceTwinCursor
from iothub_registry.http_transport import HTTPResponse, HTTPTransport
from iothub_registry.models import (
    Device,
    DeviceTwin,
    DeviceTwinUpdate,
    TwinProperties,
    AuthenticationMechanism,
    SymmetricKey,
)

logging.basicConfig(level=logging.DEBUG)
pytestmark = pytest.mark.asyncio

LOCAL_CONNECTION_STRING = (
    "HostName=localhost;SharedAccessKeyName=admin;SharedAccessKey=c3VwZXIgc2VjcmV0Cg=="
)

DEVICE_JSON = {
    "deviceId": "my-device",
    "generationId": "637000000000000000",
    "etag": "MQ==",
    "status": "enabled",
    "authentication": {"type": "sas", "symmetricKey": {"primaryKey": "a", "secondaryKey": "b"}},
}

TWIN_JSON = {
    "deviceId": "my-device",
    "etag": "AAAAAAAAAAE=",
    "version": 2,
    "tags": {"location": "EU"},
    "properties": {"desired": {"interval": 30}, "reported": {"interval": 10}},
}


def json_response(status_code, payload, headers=None):
    return HTTPResponse(status_code, headers=headers, body=json.dumps(payload))


@pytest.fixture
def client(fake_transport):
    return IoTHubRegistryClient(RegistryClientConfig(transport=fake_transport))


@pytest.mark.describe("IoTHubRegistryClient - Instantiation")
class TestClientInstantiation(object):
    @pytest.mark.it("Creates a default configuration with an HTTPTransport if none is provided")
    async def test_default_config(self):
        client = IoTHubRegistryClient()
        assert isinstance(client.config, RegistryClientConfig)
        assert isinstance(client.config.transport, HTTPTransport)

    @pytest.mark.it("Uses the provided configuration")
    async def test_config(self, fake_transport):
        client_config = RegistryClientConfig(transport=fake_transport)
        assert IoTHubRegistryClient(client_config).config is client_config


@pytest.mark.describe("IoTHubRegistryClient - .get_device()")
class TestGetDevice(object):
    @pytest.mark.it("Sends a GET request for the device and returns the decoded device")
    async def test_get_device(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, DEVICE_JSON))
        device = await client.get_device(connection_string, "my-device")
        assert isinstance(device, Device)
        assert device.device_id == "my-device"
        assert device.authentication.symmetric_key.primary_key == "a"
        assert len(fake_transport.requests) == 1
        request = fake_transport.requests[0]
        assert request.method == "GET"
        assert request.url.startswith("https://fake.azure-devices.net/devices/my-device?")
        assert request.headers[constant.AUTHORIZATION_HEADER].startswith("SharedAccessSignature ")

    @pytest.mark.it("Accepts a ConnectionString object")
    async def test_connection_string_object(self, client, fake_transport):
        fake_transport.responses.append(json_response(200, DEVICE_JSON))
        cs = ConnectionString(host_name="localhost", key=b"super secret\n", name="admin")
        await client.get_device(cs, "my-device")
        assert fake_transport.requests[0].url.startswith("https://localhost/")

    @pytest.mark.it("Raises the HTTPError matching the status code of a failed request")
    async def test_not_found(self, client, fake_transport, connection_string):
        fake_transport.responses.append(
            json_response(404, {"Message": "ErrorCode:DeviceNotFound;my-device"})
        )
        with pytest.raises(exc.NotFoundError) as e_info:
            await client.get_device(connection_string, "my-device")
        assert e_info.value.status_code == 404
        assert e_info.value.message == "ErrorCode:DeviceNotFound;my-device"

    @pytest.mark.it("Raises a DecodeError if the response does not hold a device")
    async def test_decode_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(200, body="this is not a device"))
        with pytest.raises(exc.DecodeError) as e_info:
            await client.get_device(connection_string, "my-device")
        assert str(e_info.value) == "failed to decode device"

    @pytest.mark.it(
        "Raises a RequestPreparationError without sending a request if the connection string is invalid"
    )
    @pytest.mark.parametrize(
        "connection_string",
        [
            pytest.param("invalid", id="Unparsable"),
            pytest.param(ConnectionString(host_name="localhost"), id="HostName only"),
            pytest.param(ConnectionString(name="bad"), id="Name only"),
            pytest.param(ConnectionString(name="admin", key=b"secret"), id="No HostName"),
            pytest.param(None, id="Missing"),
        ],
    )
    async def test_invalid_connection_string(self, client, fake_transport, connection_string):
        with pytest.raises(exc.RequestPreparationError) as e_info:
            await client.get_device(connection_string, "my-device")
        assert str(e_info.value).startswith("failed to prepare request: ")
        assert fake_transport.requests == []

    @pytest.mark.it("Raises a RequestPreparationError without sending a request if the device id is missing")
    async def test_missing_device_id(self, client, fake_transport, connection_string):
        with pytest.raises(exc.RequestPreparationError):
            await client.get_device(connection_string, "")
        assert fake_transport.requests == []

    @pytest.mark.it("Raises a RequestExecutionError caused by the transport error if the transport fails")
    async def test_transport_failure(self, client, fake_transport, connection_string):
        error = requests.exceptions.ConnectionError("connection refused")
        fake_transport.responses.append(error)
        with pytest.raises(exc.RequestExecutionError) as e_info:
            await client.get_device(connection_string, "my-device")
        assert str(e_info.value) == "failed to execute request: connection refused"
        assert e_info.value.__cause__ is error


@pytest.mark.describe("IoTHubRegistryClient - Deadlines and cancellation")
class TestDeadlines(object):
    @pytest.mark.it("Raises asyncio.TimeoutError without sending a request if the deadline is already expired")
    @pytest.mark.parametrize("timeout", [0, -1])
    async def test_expired_deadline(self, client, fake_transport, connection_string, timeout):
        with pytest.raises(asyncio.TimeoutError):
            await client.get_device(connection_string, "my-device", timeout=timeout)
        assert fake_transport.requests == []

    @pytest.mark.it("Raises asyncio.TimeoutError, unwrapped, if the deadline expires during a request")
    async def test_deadline_expires(self, fake_async_transport_factory, connection_string):
        transport = fake_async_transport_factory()
        client = IoTHubRegistryClient(RegistryClientConfig(transport=transport))
        with pytest.raises(asyncio.TimeoutError):
            await client.get_device(connection_string, "my-device", timeout=0.01)
        assert len(transport.requests) == 1

    @pytest.mark.it("Completes normally if the request finishes before the deadline")
    async def test_within_deadline(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, DEVICE_JSON))
        device = await client.get_device(connection_string, "my-device", timeout=30)
        assert device.device_id == "my-device"

    @pytest.mark.it("Raises asyncio.CancelledError, unwrapped, if the task is cancelled during a request")
    async def test_cancellation(self, fake_async_transport_factory, connection_string):
        transport = fake_async_transport_factory()
        client = IoTHubRegistryClient(RegistryClientConfig(transport=transport))
        task = asyncio.ensure_future(client.get_device(connection_string, "my-device"))
        await transport.is_hanging.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.it("Awaits a transport whose send method is a coroutine function")
    async def test_async_transport(self, fake_async_transport_factory, connection_string):
        transport = fake_async_transport_factory(json_response(200, DEVICE_JSON))
        transport.stop_hanging.set()
        client = IoTHubRegistryClient(RegistryClientConfig(transport=transport))
        device = await client.get_device(connection_string, "my-device")
        assert device.device_id == "my-device"


@pytest.mark.describe("IoTHubRegistryClient - .upsert_device()")
class TestUpsertDevice(object):
    @pytest.mark.it("Sends a PUT request with the merged updates and returns the stored device")
    async def test_upsert(self, client, fake_transport, connection_string):
        stored = dict(DEVICE_JSON, status="disabled", etag="Mg==")
        fake_transport.responses.append(json_response(200, stored))
        base = Device.deserialize(DEVICE_JSON)
        device = await client.upsert_device(
            connection_string, "my-device", base, Device(status="disabled")
        )
        assert device.status == "disabled"
        assert device.etag == "Mg=="
        request = fake_transport.requests[0]
        assert request.method == "PUT"
        assert "/devices/my-device?" in request.url
        body = json.loads(request.body)
        assert body["deviceId"] == "my-device"
        assert body["status"] == "disabled"
        assert body["authentication"] == DEVICE_JSON["authentication"]
        assert request.headers[constant.IF_MATCH_HEADER] == '"MQ=="'

    @pytest.mark.it("Creates a device from scratch, forcing its device id")
    async def test_create(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, DEVICE_JSON))
        update = Device(
            device_id="ignored",
            authentication=AuthenticationMechanism(
                type="sas", symmetric_key=SymmetricKey(primary_key="a", secondary_key="b")
            ),
        )
        await client.upsert_device(connection_string, "my-device", None, update)
        request = fake_transport.requests[0]
        assert json.loads(request.body)["deviceId"] == "my-device"
        assert constant.IF_MATCH_HEADER not in request.headers

    @pytest.mark.it("Raises an HTTPError carrying the status code of a failed request")
    async def test_server_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(500, reason="Internal Server Error"))
        with pytest.raises(exc.HTTPError) as e_info:
            await client.upsert_device(connection_string, "my-device", Device(status="enabled"))
        assert e_info.value.status_code == 500

    @pytest.mark.it("Raises a DecodeError if the response does not hold a device")
    async def test_decode_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(200, body="[]"))
        with pytest.raises(exc.DecodeError) as e_info:
            await client.upsert_device(connection_string, "my-device")
        assert str(e_info.value) == "failed to decode updated device"

    @pytest.mark.it("Raises a RequestPreparationError for an update that is not a Device")
    @pytest.mark.parametrize(
        "update",
        [
            pytest.param({"status": "disabled"}, id="dict"),
            pytest.param("disabled", id="str"),
            pytest.param(DeviceTwinUpdate(tags={"a": 1}), id="Other model"),
        ],
    )
    async def test_update_not_a_device(self, client, fake_transport, connection_string, update):
        with pytest.raises(exc.RequestPreparationError) as e_info:
            await client.upsert_device(connection_string, "my-device", update)
        assert str(e_info.value) == "failed to prepare request: invalid device update"
        assert isinstance(e_info.value.__cause__, TypeError)
        assert fake_transport.requests == []

    @pytest.mark.it("Raises a RequestPreparationError for a mistyped device field")
    async def test_mistyped_field(self, client, fake_transport, connection_string):
        with pytest.raises(exc.RequestPreparationError) as e_info:
            await client.upsert_device(
                connection_string, "my-device", Device(authentication="sas")
            )
        assert isinstance(e_info.value, exc.IoTHubRegistryError)
        assert fake_transport.requests == []

    @pytest.mark.it("Does not send the fields of a fetched device unknown to the Device model")
    async def test_unknown_fields_not_sent(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, DEVICE_JSON))
        base = Device.deserialize(dict(DEVICE_JSON, deviceScope="ms-azure-iot-edge://edge-1"))
        assert base.additional_properties == {"deviceScope": "ms-azure-iot-edge://edge-1"}
        await client.upsert_device(connection_string, "my-device", base)
        body = json.loads(fake_transport.requests[0].body)
        assert "deviceScope" not in body


@pytest.mark.describe("IoTHubRegistryClient - .delete_device()")
class TestDeleteDevice(object):
    @pytest.mark.it("Sends a DELETE request matching any version of the device")
    async def test_delete(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(204))
        assert await client.delete_device(connection_string, "my-device") is None
        request = fake_transport.requests[0]
        assert request.method == "DELETE"
        assert request.headers[constant.IF_MATCH_HEADER] == "*"

    @pytest.mark.it("Raises an InvalidEtagError if the ETag does not match")
    async def test_etag_mismatch(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(412))
        with pytest.raises(exc.InvalidEtagError):
            await client.delete_device(connection_string, "my-device", "MQ==")
        assert fake_transport.requests[0].headers[constant.IF_MATCH_HEADER] == '"MQ=="'


@pytest.mark.describe("IoTHubRegistryClient - .get_device_twins()")
class TestGetDeviceTwins(object):
    @pytest.mark.it("Enumerates every twin across pages, using the default page size")
    async def test_paginated(self, fake_paged_backend_factory):
        backend = fake_paged_backend_factory(101)
        client = IoTHubRegistryClient(RegistryClientConfig(transport=backend))

        cursor = await client.get_device_twins(LOCAL_CONNECTION_STRING)
        assert isinstance(cursor, DeviceTwinCursor)
        device_ids = []
        while await cursor.next():
            device_ids.append(cursor.decode().device_id)

        assert cursor.error is None
        assert device_ids == ["device-{}".format(i) for i in range(101)]
        assert len(backend.requests) == 2
        assert backend.requests[0].headers[constant.PAGE_SIZE_HEADER] == "100"
        assert constant.CONTINUATION_TOKEN_HEADER not in backend.requests[0].headers
        assert constant.CONTINUATION_TOKEN_HEADER in backend.requests[1].headers
        with pytest.raises(exc.EndOfSequenceError):
            cursor.decode()

    @pytest.mark.it("Fetches the first page before returning the cursor")
    async def test_first_page(self, fake_paged_backend_factory, connection_string):
        backend = fake_paged_backend_factory(3)
        client = IoTHubRegistryClient(RegistryClientConfig(transport=backend))
        await client.get_device_twins(connection_string)
        assert len(backend.requests) == 1

    @pytest.mark.it("Uses the provided page size")
    async def test_page_size(self, fake_paged_backend_factory, connection_string):
        backend = fake_paged_backend_factory(10)
        client = IoTHubRegistryClient(RegistryClientConfig(transport=backend))
        cursor = await client.get_device_twins(connection_string, page_size=3)
        twins = [twin async for twin in cursor]
        assert len(twins) == 10
        assert all(isinstance(twin, DeviceTwin) for twin in twins)
        assert len(backend.requests) == 4
        assert all(r.headers[constant.PAGE_SIZE_HEADER] == "3" for r in backend.requests)

    @pytest.mark.it("Returns an exhausted cursor when there are no twins")
    async def test_no_twins(self, fake_paged_backend_factory, connection_string):
        client = IoTHubRegistryClient(
            RegistryClientConfig(transport=fake_paged_backend_factory(0))
        )
        cursor = await client.get_device_twins(connection_string)
        assert not await cursor.next()
        assert cursor.error is None

    @pytest.mark.it("Raises the error of the first page fetch directly")
    async def test_first_page_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(401))
        with pytest.raises(exc.UnauthorizedError):
            await client.get_device_twins(connection_string)

    @pytest.mark.it("Raises a RequestPreparationError for an invalid page size")
    @pytest.mark.parametrize("page_size", [0, -5, "ten"])
    async def test_invalid_page_size(self, client, fake_transport, connection_string, page_size):
        with pytest.raises(exc.RequestPreparationError):
            await client.get_device_twins(connection_string, page_size=page_size)
        assert fake_transport.requests == []

    @pytest.mark.it(
        "Stops the cursor with a recorded asyncio.TimeoutError if the deadline is expired when a page is needed"
    )
    async def test_expired_deadline_at_page_boundary(
        self, fake_paged_backend_factory, connection_string
    ):
        backend = fake_paged_backend_factory(4)
        client = IoTHubRegistryClient(RegistryClientConfig(transport=backend))
        cursor = await client.get_device_twins(connection_string, page_size=2)
        assert await cursor.next(timeout=0)
        assert await cursor.next(timeout=0)
        assert not await cursor.next(timeout=0)
        assert isinstance(cursor.error, asyncio.TimeoutError)
        assert len(backend.requests) == 1

    @pytest.mark.it("Stops the cursor with a recorded error if a later page fails")
    async def test_later_page_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(
            json_response(200, [TWIN_JSON], headers={constant.CONTINUATION_TOKEN_HEADER: "AAAAAQ=="})
        )
        fake_transport.responses.append(HTTPResponse(503))
        cursor = await client.get_device_twins(connection_string)
        assert await cursor.next()
        assert cursor.decode().device_id == "my-device"
        assert not await cursor.next()
        assert isinstance(cursor.error, exc.HTTPError)
        assert cursor.error.status_code == 503
        assert fake_transport.requests[1].headers[constant.CONTINUATION_TOKEN_HEADER] == "AAAAAQ=="


@pytest.mark.describe("IoTHubRegistryClient - Device twin operations")
class TestDeviceTwinOperations(object):
    @pytest.mark.it(".get_device_twin() sends a GET request for the twin and returns the decoded twin")
    async def test_get_device_twin(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, TWIN_JSON))
        twin = await client.get_device_twin(connection_string, "my-device")
        assert twin.tags == {"location": "EU"}
        assert twin.properties.desired == {"interval": 30}
        assert fake_transport.requests[0].method == "GET"
        assert "/twins/my-device?" in fake_transport.requests[0].url

    @pytest.mark.it(".get_device_twin() raises a DecodeError if the response does not hold a twin")
    async def test_get_device_twin_decode_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(200, body="nope"))
        with pytest.raises(exc.DecodeError) as e_info:
            await client.get_device_twin(connection_string, "my-device")
        assert str(e_info.value) == "failed to decode device twin"

    @pytest.mark.it(".update_device_twin() sends a PATCH request and returns the updated twin")
    async def test_update_device_twin(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, TWIN_JSON))
        update = DeviceTwinUpdate(properties=TwinProperties(desired={"interval": 30}))
        twin = await client.update_device_twin(
            connection_string, "my-device", update, "AAAAAAAAAAE="
        )
        assert twin.version == 2
        request = fake_transport.requests[0]
        assert request.method == "PATCH"
        assert json.loads(request.body) == {"properties": {"desired": {"interval": 30}}}
        assert request.headers[constant.IF_MATCH_HEADER] == '"AAAAAAAAAAE="'

    @pytest.mark.it(".update_device_twin() raises a DecodeError if the response does not hold a twin")
    async def test_update_device_twin_decode_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(200, body="[]"))
        with pytest.raises(exc.DecodeError) as e_info:
            await client.update_device_twin(connection_string, "my-device", DeviceTwinUpdate())
        assert str(e_info.value) == "failed to decode updated device twin"

    @pytest.mark.it(".update_device_twin() raises a RequestPreparationError for a mistyped update")
    async def test_update_device_twin_mistyped(self, client, fake_transport, connection_string):
        with pytest.raises(exc.RequestPreparationError) as e_info:
            await client.update_device_twin(
                connection_string, "my-device", DeviceTwinUpdate(tags=["not", "a", "map"])
            )
        assert isinstance(e_info.value, exc.IoTHubRegistryError)
        assert fake_transport.requests == []

    @pytest.mark.it(".replace_device_twin() sends a PUT request and returns the replaced twin")
    async def test_replace_device_twin(self, client, fake_transport, connection_string):
        fake_transport.responses.append(json_response(200, TWIN_JSON))
        update = DeviceTwinUpdate(tags={"location": "EU"})
        twin = await client.replace_device_twin(connection_string, "my-device", update)
        assert twin.device_id == "my-device"
        request = fake_transport.requests[0]
        assert request.method == "PUT"
        assert request.headers[constant.IF_MATCH_HEADER] == "*"

    @pytest.mark.it(".replace_device_twin() raises a DecodeError if the response does not hold a twin")
    async def test_replace_device_twin_decode_error(self, client, fake_transport, connection_string):
        fake_transport.responses.append(HTTPResponse(200, body="1"))
        with pytest.raises(exc.DecodeError) as e_info:
            await client.replace_device_twin(connection_string, "my-device", DeviceTwinUpdate())
        assert str(e_info.value) == "failed to decode replaced device twin"
