"""
Awaitable request results that carry their request id.

``Session.send`` returns a ``PendingResult``. Deriving a new result with
``then`` or ``catch`` keeps the originating ``request_id`` attached, so the id
stays discoverable however far the result is chained::

    result = session.send(request)
    doubled = result.then(lambda value: value * 2)
    assert doubled.request_id == result.request_id
    value = await doubled
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generator


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class PendingResult:
    """An awaitable outcome of one request."""

    def __init__(self, awaitable: Awaitable[Any], request_id: int | None = None):
        self._future = asyncio.ensure_future(awaitable)
        self.request_id = request_id

    @classmethod
    def rejected(cls, error: BaseException, request_id: int | None = None) -> "PendingResult":
        """A result that has already failed with ``error``."""
        future = asyncio.get_running_loop().create_future()
        future.set_exception(error)
        return cls(future, request_id)

    @classmethod
    def resolved(cls, value: Any, request_id: int | None = None) -> "PendingResult":
        future = asyncio.get_running_loop().create_future()
        future.set_result(value)
        return cls(future, request_id)

    def then(
        self,
        on_fulfilled: Callable[[Any], Any] | None = None,
        on_rejected: Callable[[Exception], Any] | None = None,
    ) -> "PendingResult":
        """
        Derive a result by transforming this one.

        Either callback may return a plain value or an awaitable. The derived
        result keeps this result's ``request_id``.
        """

        async def chain() -> Any:
            try:
                value = await self._future
            except Exception as e:
                if on_rejected is None:
                    raise
                return await _settle(on_rejected(e))
            if on_fulfilled is None:
                return value
            return await _settle(on_fulfilled(value))

        return PendingResult(chain(), self.request_id)

    def catch(self, on_rejected: Callable[[Exception], Any]) -> "PendingResult":
        return self.then(None, on_rejected)

    def done(self) -> bool:
        return self._future.done()

    def result(self) -> Any:
        return self._future.result()

    def exception(self) -> BaseException | None:
        return self._future.exception()

    def add_done_callback(self, callback: Callable[["PendingResult"], Any]) -> None:
        self._future.add_done_callback(lambda _: callback(self))

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    def __repr__(self) -> str:
        state = "done" if self._future.done() else "pending"
        return f"<PendingResult request_id={self.request_id} {state}>"
