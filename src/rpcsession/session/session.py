"""
The session: one logical connection to the engine.

The session owns the transport, the API cache, the suspend/resume coordinator,
the interceptor pipeline and the schema. It turns transport events into its
own event surface (``session.events``):

- ``opened``, ``resumed``
- ``suspended`` ({"initiator": "manual" | "network"})
- ``closed`` (CloseEvent)
- ``socket-error`` (exception)
- ``notification:*`` (method, params) and ``notification:<method>`` (params)
- ``traffic:*`` (direction, data) and ``traffic:sent`` / ``traffic:received`` (data)

and emits ``changed`` / ``closed`` on the object APIs it created.
"""

import asyncio
from typing import Any, Callable

from rpcsession.errors import ObjectNotFoundError, SessionSuspendedError
from rpcsession.events import EventEmitter
from rpcsession.intercept.pipeline import Intercept
from rpcsession.logger import get_logger
from rpcsession.schema.api import ObjectApi, RpcRequest
from rpcsession.schema.factory import Schema
from rpcsession.session.cache import ApiCache
from rpcsession.session.result import PendingResult
from rpcsession.session.suspend_resume import SuspendResume
from rpcsession.transport.base import Transport
from rpcsession.transport.models import (
    RPC_CLOSE_MANUAL_SUSPEND,
    RPC_CLOSE_NORMAL,
    SESSION_ATTACHED,
    CloseEvent,
    ObjectReference,
    ProtocolOptions,
)

logger = get_logger(__name__)

GLOBAL_HANDLE = -1


class Session:
    """
    Stateful RPC session towards the engine.

    Args:
        transport: Connection to the engine.
        schema: Generates object API classes by engine type.
        apis: Handle-indexed cache of object APIs.
        intercept: Response interceptor pipeline.
        suspend_resume: Suspend/resume coordinator.
        protocol: Options merged into every request payload.
        suspend_on_close: Suspend instead of closing when the connection drops
            unexpectedly.
        event_listeners: Event name -> listener pairs bound at construction.
    """

    def __init__(
        self,
        transport: Transport,
        schema: Schema | None = None,
        apis: ApiCache | None = None,
        intercept: Intercept | None = None,
        suspend_resume: SuspendResume | None = None,
        protocol: ProtocolOptions | None = None,
        suspend_on_close: bool = False,
        event_listeners: dict[str, Callable[..., Any]] | None = None,
    ):
        self.transport = transport
        self.schema = schema or Schema()
        self.apis = apis or ApiCache()
        self.intercept = intercept or Intercept()
        self.suspend_resume = suspend_resume or SuspendResume(transport)
        self.protocol = protocol or ProtocolOptions()
        self.suspend_on_close = suspend_on_close
        self.events = EventEmitter()
        self._open_task: asyncio.Task | None = None
        self._suspend_tasks: set[asyncio.Future] = set()

        transport.events.on("socket-error", self._on_transport_error)
        transport.events.on("closed", self._on_transport_closed)
        transport.events.on("message", self._on_transport_message)
        transport.events.on("notification", self._on_transport_notification)
        transport.events.on("traffic", self._on_transport_traffic)
        self.events.on("closed", self._on_session_closed)
        for event, listener in (event_listeners or {}).items():
            self.events.on(event, listener)

    @property
    def is_suspended(self) -> bool:
        return self.suspend_resume.is_suspended

    # ─── Transport events ────────────────────────────────────────────

    def _on_transport_error(self, error: Exception) -> None:
        if self.is_suspended:
            return
        self.events.emit("socket-error", error)

    def _on_transport_closed(self, event: CloseEvent) -> None:
        if self.is_suspended:
            return
        if event.code in (RPC_CLOSE_NORMAL, RPC_CLOSE_MANUAL_SUSPEND):
            return
        if self.suspend_on_close:
            logger.warning(f"Connection lost (code={event.code}), suspending session")
            # Gate sends and events before the close task gets to run
            self.suspend_resume.is_suspended = True
            task = asyncio.ensure_future(self.suspend_resume.suspend())
            self._suspend_tasks.add(task)
            task.add_done_callback(self._suspend_tasks.discard)
            task.add_done_callback(self._on_network_suspended)
        else:
            self.events.emit("closed", event)

    def _on_network_suspended(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Failed to suspend after connection loss: {error}")
            return
        self.events.emit("suspended", {"initiator": "network"})

    def _on_transport_message(self, response: dict[str, Any]) -> None:
        if self.is_suspended:
            return
        for handle in response.get("change") or ():
            self.emit_handle_changed(handle)
        for handle in response.get("close") or ():
            self.emit_handle_closed(handle)

    def _on_transport_notification(self, notification: dict[str, Any]) -> None:
        method = notification.get("method")
        params = notification.get("params")
        self.events.emit("notification:*", method, params)
        self.events.emit(f"notification:{method}", params)

    def _on_transport_traffic(self, direction: str, data: Any) -> None:
        self.events.emit("traffic:*", direction, data)
        self.events.emit(f"traffic:{direction}", data)

    def _on_session_closed(self, *args: Any) -> None:
        entries = self.apis.get_apis()
        for entry in entries:
            entry.api.events.emit("closed")
            entry.api.events.remove_all_listeners()
        self.apis.clear()
        logger.debug(f"Session torn down, detached {len(entries)} APIs")

    # ─── Object APIs ─────────────────────────────────────────────────

    def get_object_api(
        self,
        handle: int,
        id: str | None,
        type: str,
        generic_type: str | None = None,
    ) -> ObjectApi:
        """
        Get the API for an engine object, creating it on first use.

        Repeated lookups for a live handle return the same instance.
        """
        api = self.apis.get_api(handle)
        if api is not None:
            return api
        api_class = self.schema.generate(type)
        api = api_class(self, handle, id, self.protocol.delta, generic_type)
        self.apis.add(handle, api)
        logger.debug(f"Created {type} API for handle {handle}")
        return api

    def handle_object_reference_response(self, response: dict[str, Any]) -> ObjectApi:
        """
        Resolve an object reference response into an API.

        The engine answers requests for missing objects with an empty
        reference instead of an error.

        Raises:
            ObjectNotFoundError: If the response has no handle or no type.
        """
        reference = ObjectReference.model_validate(response)
        if reference.handle is not None and reference.type:
            return self.get_object_api(
                handle=reference.handle,
                id=reference.generic_id,
                type=reference.type,
                generic_type=reference.generic_type,
            )
        raise ObjectNotFoundError("Object not found")

    def emit_handle_changed(self, handle: int) -> None:
        api = self.apis.get_api(handle)
        if api is not None:
            api.events.emit("changed")

    def emit_handle_closed(self, handle: int) -> None:
        api = self.apis.get_api(handle)
        if api is not None:
            api.events.emit("closed")
            api.events.remove_all_listeners()

    # ─── Lifecycle ───────────────────────────────────────────────────

    def open(self) -> asyncio.Task:
        """
        Open the connection and resolve with the ``Global`` API.

        Calling it again while opening or after opening returns the same task.
        """
        if self._open_task is None:
            self._open_task = asyncio.ensure_future(self._open())
            self._open_task.add_done_callback(self._on_open_done)
        return self._open_task

    async def _open(self) -> ObjectApi:
        await self.transport.open()
        root = self.get_object_api(
            handle=GLOBAL_HANDLE, id="Global", type="Global", generic_type="Global"
        )
        self.events.emit("opened")
        logger.info("Session opened")
        return root

    def _on_open_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._open_task is task:
                self._open_task = None

    def send(self, request: RpcRequest) -> PendingResult:
        """
        Send a request to the engine.

        Fails immediately, without touching the transport, while suspended.
        The returned result carries the request id assigned by the transport;
        results derived from it keep that id.
        """
        if self.is_suspended:
            return PendingResult.rejected(SessionSuspendedError("Session suspended"))

        payload = self.protocol.model_dump()
        payload.update(
            method=request.method,
            handle=request.handle,
            params=request.params,
            delta=request.delta,
        )
        response = self.transport.send(payload)
        request.id = payload["id"]
        request.retry = lambda: self.send(request)
        return PendingResult(self._intercept(response, request), request.id)

    async def _intercept(self, response: asyncio.Future, request: RpcRequest) -> Any:
        result = await self.intercept.execute(self, response, request)
        if ObjectReference.looks_like(result):
            return self.handle_object_reference_response(result)
        return result

    async def suspend(self) -> None:
        """Suspend the session and close the connection."""
        await self.suspend_resume.suspend()
        self.events.emit("suspended", {"initiator": "manual"})

    async def resume(self, only_if_attached: bool = False) -> str | None:
        """
        Resume a suspended session.

        Args:
            only_if_attached: Fail unless the engine re-attached to the
                previous session.

        Returns:
            The remote session state.

        Raises:
            SessionNotAttachedError: If ``only_if_attached`` is set and the
                engine created a new session.
        """
        was_suspended = self.is_suspended
        state = await self.suspend_resume.resume(only_if_attached)
        if was_suspended:
            self._restore_apis(state)
        self.events.emit("resumed")
        return state

    def _restore_apis(self, state: str) -> None:
        if state == SESSION_ATTACHED:
            for entry in self.apis.get_apis():
                entry.api.events.emit("changed")
            return
        # A new engine session only knows the Global object
        for entry in self.apis.get_apis():
            if entry.handle != GLOBAL_HANDLE:
                self.emit_handle_closed(entry.handle)
                self.apis.remove(entry.handle)

    async def close(self, code: int = RPC_CLOSE_NORMAL, reason: str = "") -> CloseEvent:
        """Close the session. Closing an already closed session is harmless."""
        self._open_task = None
        event = await self.transport.close(code, reason)
        self.events.emit("closed", event)
        logger.info(f"Session closed (code={event.code})")
        return event
