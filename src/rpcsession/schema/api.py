"""
Client-side object APIs.

An ``ObjectApi`` is the local proxy for one engine object. Generated subclasses
add one method per engine method; each call builds an ``RpcRequest`` and sends
it through the owning session.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from rpcsession.events import EventEmitter


@dataclass
class RpcRequest:
    """
    One outbound call.

    ``id``, ``retry`` and ``tries`` are filled in by the session and the
    interceptors once the request is sent.
    """

    method: str
    handle: int
    params: list[Any] | dict[str, Any] = field(default_factory=list)
    delta: bool | None = None
    out_key: str | int = -1
    id: int | None = None
    retry: Callable[[], Any] | None = field(default=None, repr=False)
    tries: int = 0


class ObjectApi:
    """Proxy bound to a single engine handle."""

    type: str = ""

    def __init__(
        self,
        session,
        handle: int,
        id: str | None,
        delta: bool = False,
        generic_type: str | None = None,
    ):
        self.session = session
        self.handle = handle
        self.id = id
        self.delta = delta
        self.generic_type = generic_type
        self.events = EventEmitter()

    def call(self, method: str, *args: Any, out_key: str | int = -1, **kwargs: Any):
        """
        Send ``method`` to this object.

        Positional arguments are sent as a params list, keyword arguments as a
        params object; mixing both is not allowed.
        """
        if args and kwargs:
            raise TypeError(f"{method}() takes positional or keyword arguments, not both")
        params: list[Any] | dict[str, Any] = dict(kwargs) if kwargs else list(args)
        request = RpcRequest(
            method=method,
            handle=self.handle,
            params=params,
            delta=self.delta,
            out_key=out_key,
        )
        return self.session.send(request)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} handle={self.handle} id={self.id!r}>"
