"""Exception types raised by rpcsession."""

from typing import Any


class RpcSessionError(Exception):
    """Base class for all rpcsession errors."""


class SessionSuspendedError(RpcSessionError):
    """Raised when a request is sent while the session is suspended."""


class SessionNotAttachedError(RpcSessionError):
    """Raised when a resume required re-attaching but the engine created a new session."""


class ObjectNotFoundError(RpcSessionError):
    """Raised when an object reference response carries no handle or type."""


class TransportError(RpcSessionError):
    """Raised for failures of the underlying connection."""


class TransportClosedError(TransportError):
    """Raised for requests that cannot complete because the connection is closed."""


class EngineError(RpcSessionError):
    """An error reported by the engine in a JSON-RPC error response."""

    code: int
    parameter: Any

    def __init__(self, code: int, message: str, parameter: Any = None) -> None:
        self.code = code
        self.parameter = parameter
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0]
