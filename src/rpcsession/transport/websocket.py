"""
WebSocket transport for the engine JSON-RPC protocol.

Requests are JSON-RPC 2.0 objects with incrementing integer ids. Responses
resolve the future returned by ``send``; frames carrying a ``method`` and no
``id`` are notifications. Every other frame is published as ``message`` so
the session can route ``change`` / ``close`` handle lists.
"""

import asyncio
import json
from typing import Any, Callable

import websockets
from pydantic import ValidationError

from rpcsession.errors import TransportClosedError, TransportError
from rpcsession.logger import get_logger
from rpcsession.transport.base import Transport
from rpcsession.transport.models import (
    RPC_CLOSE_NORMAL,
    SESSION_CREATED,
    CloseEvent,
    NotificationMessage,
)

logger = get_logger(__name__)

# Close code reported when the connection drops without a close frame
ABNORMAL_CLOSURE = 1006


class WebSocketTransport(Transport):
    """
    JSON-RPC over a websocket connection.

    Args:
        url: WebSocket URL of the engine endpoint.
        connect: Factory returning an awaitable connection; defaults to
            ``websockets.connect``. Tests pass an in-memory replacement.
        open_timeout: Seconds to wait for the connection to open.
    """

    def __init__(
        self,
        url: str,
        connect: Callable[[str], Any] | None = None,
        open_timeout: float = 10.0,
    ):
        super().__init__()
        self.url = url
        self.open_timeout = open_timeout
        self._connect = connect or websockets.connect
        self._ws = None
        self._reader: asyncio.Task | None = None
        self._writers: set[asyncio.Task] = set()
        self._pending: dict[int, asyncio.Future] = {}
        self._next_id = 0
        self._session_state: str | None = None
        self._session_state_received = asyncio.Event()
        self._last_close: CloseEvent | None = None

    @property
    def is_open(self) -> bool:
        return self._ws is not None

    @property
    def session_state(self) -> str | None:
        """State reported by the last ``OnConnected`` notification."""
        return self._session_state

    async def open(self) -> None:
        if self._ws is not None:
            return

        logger.info(f"Connecting to {self.url}")
        try:
            ws = await asyncio.wait_for(self._connect(self.url), timeout=self.open_timeout)
        except asyncio.TimeoutError:
            raise TransportError(
                f"Timed out connecting to {self.url} after {self.open_timeout}s"
            ) from None
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise TransportError(f"Could not connect to {self.url}: {e}") from e

        self._ws = ws
        self._last_close = None
        self._reader = asyncio.create_task(self._read_loop(ws))
        logger.info(f"Connected to {self.url}")

    async def reopen(self, timeout: float) -> str:
        self._session_state = None
        self._session_state_received.clear()
        await self.open()
        try:
            await asyncio.wait_for(self._session_state_received.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"No OnConnected notification within {timeout}s, assuming a new session"
            )
            return SESSION_CREATED
        return self._session_state or SESSION_CREATED

    def send(self, payload: dict[str, Any]) -> asyncio.Future:
        self._next_id += 1
        request_id = self._next_id
        payload["id"] = request_id

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        if self._ws is None:
            future.set_exception(TransportClosedError("Connection is not open"))
            return future

        message = {"jsonrpc": "2.0"}
        message.update({k: v for k, v in payload.items() if v is not None})
        self._pending[request_id] = future
        self._emit("traffic", "sent", message)

        task = asyncio.create_task(self._write(self._ws, request_id, json.dumps(message)))
        self._writers.add(task)
        task.add_done_callback(self._writers.discard)
        return future

    async def close(self, code: int = RPC_CLOSE_NORMAL, reason: str = "") -> CloseEvent:
        ws = self._ws
        if ws is None:
            return self._last_close or CloseEvent(code=code, reason=reason)

        logger.info(f"Closing connection to {self.url} (code={code})")
        await ws.close(code=code, reason=reason)
        if self._reader is not None:
            await self._reader
        return self._last_close or CloseEvent(code=code, reason=reason)

    async def _write(self, ws, request_id: int, text: str) -> None:
        try:
            await ws.send(text)
        except (OSError, websockets.exceptions.ConnectionClosed) as e:
            future = self._pending.pop(request_id, None)
            if future is not None and not future.done():
                future.set_exception(TransportClosedError(f"Failed to send request: {e}"))

    async def _read_loop(self, ws) -> None:
        try:
            async for raw in ws:
                self._dispatch(raw)
        except websockets.exceptions.ConnectionClosedOK:
            pass
        except (OSError, websockets.exceptions.WebSocketException) as e:
            logger.warning(f"Connection to {self.url} failed: {e}")
            self._emit("socket-error", e)
        finally:
            self._on_closed(ws)

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Dropping malformed frame from {self.url}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Dropping non-object frame from {self.url}")
            return

        self._emit("traffic", "received", data)

        if "method" in data and "id" not in data:
            try:
                notification = NotificationMessage.model_validate(data)
            except ValidationError:
                logger.warning(f"Dropping malformed notification from {self.url}")
                return
            if notification.method == "OnConnected" and isinstance(notification.params, dict):
                self._session_state = notification.params.get("qSessionState")
                self._session_state_received.set()
            self._emit("notification", data)
            return

        self._emit("message", data)

        request_id = data.get("id")
        if request_id is None:
            return
        future = self._pending.pop(request_id, None)
        if future is None:
            logger.warning(f"Received response for unknown request id: {request_id}")
        elif not future.done():
            future.set_result(data)

    def _on_closed(self, ws) -> None:
        if self._ws is ws:
            self._ws = None

        code = getattr(ws, "close_code", None)
        event = CloseEvent(
            code=code if code is not None else ABNORMAL_CLOSURE,
            reason=getattr(ws, "close_reason", None) or "",
        )
        self._last_close = event

        pending = list(self._pending.values())
        self._pending.clear()
        for future in pending:
            if not future.done():
                future.set_exception(
                    TransportClosedError(f"Connection closed (code={event.code})")
                )

        logger.info(f"Connection to {self.url} closed (code={event.code})")
        self._emit("closed", event)

    def _emit(self, event: str, *args: Any) -> None:
        try:
            self.events.emit(event, *args)
        except Exception:
            logger.exception(f"Listener for transport event '{event}' failed")
