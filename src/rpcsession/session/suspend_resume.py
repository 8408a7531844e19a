"""
Suspend / resume coordination.

Suspending closes the transport with the manual-suspend close code and keeps
the session's object APIs around; resuming reopens the transport and reports
whether the engine re-attached to the previous session or created a new one.
"""

from rpcsession.errors import SessionNotAttachedError
from rpcsession.logger import get_logger
from rpcsession.transport.base import Transport
from rpcsession.transport.models import (
    RPC_CLOSE_MANUAL_SUSPEND,
    SESSION_ATTACHED,
    SESSION_CREATED,
)

logger = get_logger(__name__)


class SuspendResume:
    """Tracks the suspended flag and drives the transport through suspend/resume."""

    def __init__(self, transport: Transport, reopen_timeout: float = 5.0):
        self.transport = transport
        self.reopen_timeout = reopen_timeout
        self.is_suspended = False
        self.session_state: str | None = None

    async def suspend(self) -> None:
        """Mark the session suspended and close the connection."""
        self.is_suspended = True
        logger.info("Suspending session")
        await self.transport.close(RPC_CLOSE_MANUAL_SUSPEND)

    async def resume(self, only_if_attached: bool = False) -> str | None:
        """
        Reopen the connection after a suspend.

        Args:
            only_if_attached: Fail instead of accepting a brand new engine session.

        Returns:
            The remote session state (``SESSION_ATTACHED`` or ``SESSION_CREATED``).

        Raises:
            SessionNotAttachedError: If ``only_if_attached`` is set and the
                engine did not re-attach. The session stays suspended.
        """
        if not self.is_suspended:
            return self.session_state

        state = await self.transport.reopen(self.reopen_timeout)
        if state != SESSION_ATTACHED and only_if_attached:
            logger.warning("Engine created a new session, staying suspended")
            await self.transport.close(RPC_CLOSE_MANUAL_SUSPEND)
            raise SessionNotAttachedError("Not attached")

        self.session_state = state or SESSION_CREATED
        self.is_suspended = False
        logger.info(f"Session resumed ({self.session_state})")
        return self.session_state
