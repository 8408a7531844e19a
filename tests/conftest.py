"""Shared pytest fixtures: an in-memory transport and engine schema."""

import asyncio
import json

import pytest

from rpcsession.schema import Schema
from rpcsession.session import Session
from rpcsession.transport import SESSION_ATTACHED, CloseEvent, Transport

SCHEMA = {
    "structs": {
        "Global": {
            "GetActiveDoc": {"In": [], "Out": []},
            "OpenDoc": {
                "In": [{"Name": "qDocName", "DataType": "STRING"}],
                "Out": [],
            },
            "EngineVersion": {"In": [], "Out": [{"Name": "qVersion"}]},
        },
        "Doc": {
            "GetObject": {"In": [{"Name": "qId", "DataType": "STRING"}], "Out": []},
            "GetAppLayout": {"In": [], "Out": [{"Name": "qLayout"}]},
        },
        "GenericObject": {
            "GetLayout": {"In": [], "Out": [{"Name": "qLayout"}]},
        },
    }
}


class FakeTransport(Transport):
    """Transport that keeps requests in memory until a test answers them."""

    def __init__(self, session_state=SESSION_ATTACHED):
        super().__init__()
        self.session_state = session_state
        self.sent = []
        self.pending = {}
        self.replies = {}
        self.open_calls = 0
        self.close_calls = []
        self.open_error = None
        self.is_open = False
        self._next_id = 0

    async def open(self):
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error
        self.is_open = True

    async def reopen(self, timeout):
        await self.open()
        return self.session_state

    def send(self, payload):
        self._next_id += 1
        payload["id"] = self._next_id
        self.sent.append(dict(payload))
        future = asyncio.get_running_loop().create_future()
        reply = self.replies.get(payload["method"])
        if reply is not None:
            future.set_result({"jsonrpc": "2.0", "id": payload["id"], **reply})
        else:
            self.pending[payload["id"]] = future
        return future

    def respond(self, request_id, result=None, error=None):
        response = {"jsonrpc": "2.0", "id": request_id}
        if error is not None:
            response["error"] = error
        else:
            response["result"] = result
        self.pending.pop(request_id).set_result(response)

    def reply_with(self, method, result=None, error=None):
        """Answer every future request for ``method`` immediately."""
        self.replies[method] = {"error": error} if error is not None else {"result": result}

    async def close(self, code=1000, reason=""):
        self.close_calls.append(code)
        event = CloseEvent(code=code, reason=reason)
        if self.is_open:
            self.is_open = False
            self.events.emit("closed", event)
        return event


_CLOSE = object()


class FakeConnection:
    """Stands in for a websockets client connection."""

    def __init__(self):
        self.incoming = asyncio.Queue()
        self.sent = []
        self.close_code = None
        self.close_reason = None
        self.fail_with = None

    def feed(self, data):
        self.incoming.put_nowait(data if isinstance(data, str) else json.dumps(data))

    def drop(self, error=None):
        """Simulate the peer vanishing without a close frame."""
        self.fail_with = error
        self.incoming.put_nowait(_CLOSE)

    async def send(self, text):
        self.sent.append(json.loads(text))

    async def close(self, code=1000, reason=""):
        if self.close_code is None:
            self.close_code = code
            self.close_reason = reason
        self.incoming.put_nowait(_CLOSE)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self.incoming.get()
        if item is _CLOSE:
            if self.fail_with is not None:
                raise self.fail_with
            raise StopAsyncIteration
        return item


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def schema():
    return Schema(SCHEMA)


@pytest.fixture
def session(transport, schema):
    return Session(transport, schema=schema)


def doc_reference(handle=1, generic_id="my-app.qvf"):
    return {"qReturn": {"qType": "Doc", "qHandle": handle, "qGenericId": generic_id}}


def object_reference(handle, generic_type="sheet", generic_id="obj-1"):
    return {
        "qReturn": {
            "qType": "GenericObject",
            "qHandle": handle,
            "qGenericType": generic_type,
            "qGenericId": generic_id,
        }
    }
