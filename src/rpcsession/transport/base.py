"""
Base class for transports.

A transport carries JSON-RPC payloads to the engine and publishes its
lifecycle on ``events``:

- ``socket-error`` (exception)
- ``closed`` (CloseEvent)
- ``message`` (response dict)
- ``notification`` (method, params)
- ``traffic`` (direction, data) with direction ``sent`` or ``received``
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from rpcsession.events import EventEmitter
from rpcsession.transport.models import RPC_CLOSE_NORMAL, CloseEvent


class Transport(ABC):
    """Abstract message-oriented connection to the engine."""

    def __init__(self):
        self.events = EventEmitter()

    @abstractmethod
    async def open(self) -> None:
        """Establish the connection."""
        pass

    @abstractmethod
    async def reopen(self, timeout: float) -> str:
        """
        Open the connection again after a suspend.

        Returns:
            The remote session state, ``SESSION_ATTACHED`` or ``SESSION_CREATED``.
        """
        pass

    @abstractmethod
    def send(self, payload: dict[str, Any]) -> asyncio.Future:
        """
        Send a request.

        Assigns ``payload["id"]`` before returning.

        Returns:
            A future resolved with the raw response dict.
        """
        pass

    @abstractmethod
    async def close(self, code: int = RPC_CLOSE_NORMAL, reason: str = "") -> CloseEvent:
        """Close the connection. Closing a closed transport is not an error."""
        pass
