"""
rpcsession: the session layer of a stateful JSON-RPC client for a remote engine.
"""

from rpcsession.client import create_session
from rpcsession.config import CONFIG, SessionConfig, load_config
from rpcsession.errors import (
    EngineError,
    ObjectNotFoundError,
    RpcSessionError,
    SessionNotAttachedError,
    SessionSuspendedError,
    TransportClosedError,
    TransportError,
)
from rpcsession.events import EventEmitter
from rpcsession.intercept import Intercept, ResponseInterceptor, RetryAbortedInterceptor
from rpcsession.schema import ObjectApi, RpcRequest, Schema
from rpcsession.session import ApiCache, PendingResult, Session, SuspendResume
from rpcsession.transport import CloseEvent, Transport, WebSocketTransport

__version__ = "0.1.0"

__all__ = [
    "ApiCache",
    "CONFIG",
    "CloseEvent",
    "EngineError",
    "EventEmitter",
    "Intercept",
    "ObjectApi",
    "ObjectNotFoundError",
    "PendingResult",
    "ResponseInterceptor",
    "RetryAbortedInterceptor",
    "RpcRequest",
    "RpcSessionError",
    "Schema",
    "Session",
    "SessionConfig",
    "SessionNotAttachedError",
    "SessionSuspendedError",
    "SuspendResume",
    "Transport",
    "TransportClosedError",
    "TransportError",
    "WebSocketTransport",
    "create_session",
    "load_config",
]
