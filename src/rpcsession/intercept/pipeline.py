"""
The response interceptor pipeline.
"""

import inspect
from typing import Any, Awaitable

from rpcsession.intercept.interceptors import ResponseInterceptor, default_interceptors


class Intercept:
    """Runs a response through an ordered list of interceptors.

    A fulfilled value flows through every ``on_fulfilled`` hook; once a hook
    raises, the error flows through the following ``on_rejected`` hooks until
    one of them recovers by returning a value.
    """

    def __init__(self, interceptors: list[ResponseInterceptor] | None = None):
        self.interceptors = (
            list(interceptors) if interceptors is not None else default_interceptors()
        )

    def add(self, interceptor: ResponseInterceptor) -> None:
        self.interceptors.append(interceptor)

    async def execute(self, session, response: Awaitable[Any], request) -> Any:
        error: Exception | None = None
        value: Any = None
        try:
            value = await response
        except Exception as e:
            error = e

        for interceptor in self.interceptors:
            hook = interceptor.on_fulfilled if error is None else interceptor.on_rejected
            if hook is None:
                continue
            try:
                outcome = hook(session, request, value if error is None else error)
                if inspect.isawaitable(outcome):
                    outcome = await outcome
            except Exception as e:
                error = e
            else:
                value, error = outcome, None

        if error is not None:
            raise error
        return value
