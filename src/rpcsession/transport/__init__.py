"""
Transports carrying JSON-RPC payloads between the session and the engine.
"""

from rpcsession.transport.base import Transport
from rpcsession.transport.models import (
    RPC_CLOSE_MANUAL_SUSPEND,
    RPC_CLOSE_NORMAL,
    SESSION_ATTACHED,
    SESSION_CREATED,
    CloseEvent,
    NotificationMessage,
    ObjectReference,
    ProtocolOptions,
    RpcErrorPayload,
)
from rpcsession.transport.websocket import WebSocketTransport

__all__ = [
    "Transport",
    "WebSocketTransport",
    "RPC_CLOSE_MANUAL_SUSPEND",
    "RPC_CLOSE_NORMAL",
    "SESSION_ATTACHED",
    "SESSION_CREATED",
    "CloseEvent",
    "NotificationMessage",
    "ObjectReference",
    "ProtocolOptions",
    "RpcErrorPayload",
]
