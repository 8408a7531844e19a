"""
Pydantic models for the engine JSON-RPC protocol.

Covers:
- Protocol options merged into every request
- Close events reported by the transport
- Error payloads, notifications and object references found in responses
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RPC_CLOSE_NORMAL = 1000
RPC_CLOSE_MANUAL_SUSPEND = 4000

SESSION_CREATED = "SESSION_CREATED"
SESSION_ATTACHED = "SESSION_ATTACHED"


class ProtocolOptions(BaseModel):
    """Options copied into every outbound request payload."""

    model_config = ConfigDict(extra="allow")

    delta: bool = False


class CloseEvent(BaseModel):
    """Transport → Session: the connection closed."""

    code: int = RPC_CLOSE_NORMAL
    reason: str = ""


class RpcErrorPayload(BaseModel):
    """The ``error`` member of a failed JSON-RPC response."""

    code: int = -1
    message: str = ""
    parameter: Any = None


class NotificationMessage(BaseModel):
    """Engine → Client: a message with a method and no request id."""

    method: str
    params: Any = Field(default_factory=dict)


class ObjectReference(BaseModel):
    """A response describing a remote object (``qHandle`` + ``qType``)."""

    handle: int | None = Field(default=None, alias="qHandle")
    type: str | None = Field(default=None, alias="qType")
    generic_id: str | None = Field(default=None, alias="qGenericId")
    generic_type: str | None = Field(default=None, alias="qGenericType")

    @classmethod
    def looks_like(cls, value: Any) -> bool:
        """True when ``value`` carries both a handle and a type key."""
        return isinstance(value, dict) and "qHandle" in value and "qType" in value
