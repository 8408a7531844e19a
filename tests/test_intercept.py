"""
Unit tests for the response interceptor pipeline.
"""

import asyncio

import pytest
from unittest.mock import MagicMock

from rpcsession.errors import EngineError
from rpcsession.intercept import (
    ENGINE_ERROR_ABORTED,
    ErrorResponseInterceptor,
    Intercept,
    OutParamResponseInterceptor,
    ResponseInterceptor,
    ResultResponseInterceptor,
    RetryAbortedInterceptor,
)
from rpcsession.schema import RpcRequest


def _done(value):
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


def _failed(error):
    future = asyncio.get_running_loop().create_future()
    future.set_exception(error)
    return future


class TestDefaultInterceptors:
    def setup_method(self):
        self.intercept = Intercept()
        self.request = RpcRequest(method="GetLayout", handle=2, out_key="qLayout")

    @pytest.mark.asyncio
    async def test_out_key_is_extracted(self):
        response = {"jsonrpc": "2.0", "id": 1, "result": {"qLayout": {"title": "Sheet"}}}
        value = await self.intercept.execute(None, _done(response), self.request)
        assert value == {"title": "Sheet"}

    @pytest.mark.asyncio
    async def test_q_return_wins(self):
        response = {"id": 1, "result": {"qReturn": True, "qLayout": {}}}
        value = await self.intercept.execute(None, _done(response), self.request)
        assert value is True

    @pytest.mark.asyncio
    async def test_multiple_out_params_returned_whole(self):
        request = RpcRequest(method="GetStuff", handle=1)
        response = {"id": 1, "result": {"qA": 1, "qB": 2}}
        value = await self.intercept.execute(None, _done(response), request)
        assert value == {"qA": 1, "qB": 2}

    @pytest.mark.asyncio
    async def test_error_response_raises_engine_error(self):
        response = {
            "id": 1,
            "error": {"code": 2, "parameter": "Invalid handle", "message": "Invalid Params"},
        }
        with pytest.raises(EngineError) as exc_info:
            await self.intercept.execute(None, _done(response), self.request)
        assert exc_info.value.code == 2
        assert exc_info.value.parameter == "Invalid handle"
        assert exc_info.value.message == "Invalid Params"

    @pytest.mark.asyncio
    async def test_transport_failure_passes_through(self):
        with pytest.raises(ConnectionError):
            await self.intercept.execute(None, _failed(ConnectionError("gone")), self.request)


class TestPipelineFlow:
    @pytest.mark.asyncio
    async def test_interceptors_receive_session_and_request(self):
        seen = []

        class Spy(ResponseInterceptor):
            def on_fulfilled(self, session, request, value):
                seen.append((session, request.method, value))
                return value

        request = RpcRequest(method="Echo", handle=1)
        intercept = Intercept([Spy()])
        session = object()

        assert await intercept.execute(session, _done("hi"), request) == "hi"
        assert seen == [(session, "Echo", "hi")]

    @pytest.mark.asyncio
    async def test_on_rejected_can_recover(self):
        class Fallback(ResponseInterceptor):
            def on_rejected(self, session, request, error):
                return "fallback"

        intercept = Intercept([ErrorResponseInterceptor(), Fallback()])
        response = {"error": {"code": 1, "message": "broken"}}
        request = RpcRequest(method="X", handle=1)

        assert await intercept.execute(None, _done(response), request) == "fallback"

    @pytest.mark.asyncio
    async def test_async_hooks(self):
        class Slow(ResponseInterceptor):
            async def on_fulfilled(self, session, request, value):
                await asyncio.sleep(0)
                return value + 1

        intercept = Intercept([Slow(), Slow()])
        assert await intercept.execute(None, _done(1), RpcRequest("X", 1)) == 3

    @pytest.mark.asyncio
    async def test_fulfilled_hooks_skipped_after_error(self):
        later = MagicMock()

        class Later(ResponseInterceptor):
            on_fulfilled = later

        intercept = Intercept([ErrorResponseInterceptor(), Later()])
        with pytest.raises(EngineError):
            await intercept.execute(None, _done({"error": {"code": 1}}), RpcRequest("X", 1))
        later.assert_not_called()

    def test_add(self):
        intercept = Intercept([])
        interceptor = ResultResponseInterceptor()
        intercept.add(interceptor)
        assert intercept.interceptors == [interceptor]


class TestRetryAbortedInterceptor:
    @pytest.mark.asyncio
    async def test_retries_aborted_request(self):
        request = RpcRequest(method="GetLayout", handle=2)

        async def retry():
            return {"title": "after retry"}

        request.retry = retry
        interceptor = RetryAbortedInterceptor(max_retries=2)
        error = EngineError(ENGINE_ERROR_ABORTED, "Request aborted")

        assert await interceptor.on_rejected(None, request, error) == {"title": "after retry"}
        assert request.tries == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        request = RpcRequest(method="GetLayout", handle=2, tries=2)
        request.retry = MagicMock()
        interceptor = RetryAbortedInterceptor(max_retries=2)
        error = EngineError(ENGINE_ERROR_ABORTED, "Request aborted")

        with pytest.raises(EngineError):
            await interceptor.on_rejected(None, request, error)
        request.retry.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self):
        request = RpcRequest(method="GetLayout", handle=2)
        request.retry = MagicMock()
        interceptor = RetryAbortedInterceptor()

        with pytest.raises(EngineError):
            await interceptor.on_rejected(None, request, EngineError(2, "Invalid params"))
        request.retry.assert_not_called()
