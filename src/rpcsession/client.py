"""
Wiring of a ready-to-use session from configuration.

Usage:
    from rpcsession import create_session

    session = create_session(schema=definition, url="ws://localhost:9076/app/engineData")
    global_api = await session.open()
    doc = await global_api.get_active_doc()
"""

from typing import Any, Callable

from rpcsession.config import CONFIG, SessionConfig
from rpcsession.intercept import Intercept, ResponseInterceptor, RetryAbortedInterceptor
from rpcsession.schema import Schema
from rpcsession.session import ApiCache, Session, SuspendResume
from rpcsession.transport import ProtocolOptions, Transport, WebSocketTransport


def create_session(
    schema: Schema | dict[str, Any] | None = None,
    config: SessionConfig | None = None,
    transport: Transport | None = None,
    response_interceptors: list[ResponseInterceptor] | None = None,
    event_listeners: dict[str, Callable[..., Any]] | None = None,
    **overrides: Any,
) -> Session:
    """
    Create a session and its collaborators.

    Args:
        schema: A Schema or a raw schema definition dict.
        config: Settings; defaults to the environment-derived CONFIG.
        transport: Transport to use instead of a WebSocketTransport on ``config.url``.
        response_interceptors: Interceptors appended after the default ones.
        event_listeners: Session event listeners bound before anything is emitted.
        **overrides: Individual SessionConfig fields overriding ``config``.

    Returns:
        An unopened Session.
    """
    config = config or CONFIG
    if overrides:
        config = SessionConfig.model_validate({**config.model_dump(), **overrides})

    if not isinstance(schema, Schema):
        schema = Schema(schema)
    transport = transport or WebSocketTransport(config.url, open_timeout=config.open_timeout)

    intercept = Intercept()
    for interceptor in response_interceptors or ():
        intercept.add(interceptor)
    if config.max_retries:
        intercept.add(RetryAbortedInterceptor(config.max_retries))

    return Session(
        transport=transport,
        schema=schema,
        apis=ApiCache(),
        intercept=intercept,
        suspend_resume=SuspendResume(transport, reopen_timeout=config.reopen_timeout),
        protocol=ProtocolOptions(delta=config.delta),
        suspend_on_close=config.suspend_on_close,
        event_listeners=event_listeners,
    )
