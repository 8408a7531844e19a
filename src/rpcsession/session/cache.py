"""
Handle-indexed store of object APIs owned by a session.
"""

from dataclasses import dataclass
from typing import Any

from rpcsession.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiEntry:
    """One cached API and the handle it is bound to."""

    handle: int
    api: Any


class ApiCache:
    """
    Maps engine handles to object APIs.

    An API is dropped from the cache as soon as it emits ``closed``, so a
    handle the engine has closed (and may later reuse) is never served stale.
    """

    def __init__(self):
        self._entries: dict[int, Any] = {}

    def add(self, handle: int, api: Any) -> Any:
        """
        Cache ``api`` under ``handle``.

        Raises:
            ValueError: If an API is already cached for the handle.
        """
        if handle in self._entries:
            raise ValueError(f"An API is already cached for handle {handle}")
        self._entries[handle] = api
        api.events.on("closed", lambda: self._remove_if_current(handle, api))
        logger.debug(f"Cached API for handle {handle}")
        return api

    def get_api(self, handle: int) -> Any | None:
        return self._entries.get(handle)

    def get_apis(self) -> list[ApiEntry]:
        """Snapshot of every cached API."""
        return [ApiEntry(handle, api) for handle, api in self._entries.items()]

    def remove(self, handle: int) -> bool:
        """Drop the API cached for ``handle``. Returns False if none was cached."""
        return self._entries.pop(handle, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, handle: int) -> bool:
        return handle in self._entries

    def _remove_if_current(self, handle: int, api: Any) -> None:
        if self._entries.get(handle) is api:
            del self._entries[handle]
            logger.debug(f"Removed closed API for handle {handle}")
