# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import inspect
import logging
import threading
import pytest
from iothub_registry import async_adapter

logging.basicConfig(level=logging.DEBUG)
pytestmark = pytest.mark.asyncio


def dummy_function(arg1, arg2=None):
    """Dummy sync function"""
    return (arg1, arg2, threading.current_thread())


async def dummy_coroutine_function(arg1):
    return arg1


@pytest.mark.describe("emulate_async()")
class TestEmulateAsync(object):
    @pytest.mark.it("Returns a coroutine function when given a function")
    async def test_returns_coroutine(self):
        async_fn = async_adapter.emulate_async(dummy_function)
        assert inspect.iscoroutinefunction(async_fn)

    @pytest.mark.it("Returns a coroutine function that returns the result of the input function")
    async def test_coroutine_returns_input_function_result(self):
        async_fn = async_adapter.emulate_async(dummy_function)
        arg1, arg2, _ = await async_fn("a", arg2="b")
        assert arg1 == "a"
        assert arg2 == "b"

    @pytest.mark.it("Runs the input function on a thread other than the event loop thread")
    async def test_runs_in_executor(self):
        async_fn = async_adapter.emulate_async(dummy_function)
        _, _, thread = await async_fn("a")
        assert thread is not threading.current_thread()

    @pytest.mark.it("Copies the input function docstring to resulting coroutine function")
    async def test_coroutine_has_input_function_docstring(self):
        async_fn = async_adapter.emulate_async(dummy_function)
        assert async_fn.__doc__ == dummy_function.__doc__

    @pytest.mark.it("Propagates errors raised by the input function")
    async def test_error(self, mocker, arbitrary_exception):
        fn = mocker.MagicMock(side_effect=arbitrary_exception)
        async_fn = async_adapter.emulate_async(fn)
        with pytest.raises(type(arbitrary_exception)) as e_info:
            await async_fn()
        assert e_info.value is arbitrary_exception


@pytest.mark.describe("as_coroutine_function()")
class TestAsCoroutineFunction(object):
    @pytest.mark.it("Returns a coroutine function unchanged")
    async def test_coroutine_function(self):
        assert async_adapter.as_coroutine_function(dummy_coroutine_function) is (
            dummy_coroutine_function
        )

    @pytest.mark.it("Wraps a function so that it runs in the executor")
    async def test_function(self):
        async_fn = async_adapter.as_coroutine_function(dummy_function)
        assert inspect.iscoroutinefunction(async_fn)
        _, _, thread = await async_fn("a")
        assert thread is not threading.current_thread()
