"""
Response interceptors.

Each interceptor may implement ``on_fulfilled(session, request, value)`` and
``on_rejected(session, request, error)``. Either hook may return a value or an
awaitable, and may raise to reject.
"""

from typing import Any

from rpcsession.errors import EngineError
from rpcsession.logger import get_logger
from rpcsession.transport.models import RpcErrorPayload

logger = get_logger(__name__)

# LocalizedErrorCode.LOCERR_GENERIC_ABORTED
ENGINE_ERROR_ABORTED = 15


class ResponseInterceptor:
    """Base class; both hooks are optional."""

    on_fulfilled = None
    on_rejected = None


class ErrorResponseInterceptor(ResponseInterceptor):
    """Turns a JSON-RPC ``error`` member into an ``EngineError``."""

    def on_fulfilled(self, session, request, response: Any) -> Any:
        if isinstance(response, dict) and response.get("error") is not None:
            error = RpcErrorPayload.model_validate(response["error"])
            raise EngineError(error.code, error.message, error.parameter)
        return response


class ResultResponseInterceptor(ResponseInterceptor):
    """Unwraps the ``result`` member of a JSON-RPC response."""

    def on_fulfilled(self, session, request, response: Any) -> Any:
        if isinstance(response, dict) and "result" in response:
            return response["result"]
        return response


class OutParamResponseInterceptor(ResponseInterceptor):
    """
    Picks the interesting out parameter of a result.

    ``qReturn`` wins; otherwise, when the method has exactly one out
    parameter (``request.out_key``), that member is returned.
    """

    def on_fulfilled(self, session, request, result: Any) -> Any:
        if not isinstance(result, dict):
            return result
        if "qReturn" in result:
            return result["qReturn"]
        out_key = getattr(request, "out_key", -1)
        if out_key != -1 and out_key in result:
            return result[out_key]
        return result


class RetryAbortedInterceptor(ResponseInterceptor):
    """Re-sends requests the engine aborted, up to ``max_retries`` times."""

    def __init__(self, max_retries: int = 3):
        self.max_retries = max_retries

    async def on_rejected(self, session, request, error: Exception) -> Any:
        if not isinstance(error, EngineError) or error.code != ENGINE_ERROR_ABORTED:
            raise error
        request.tries += 1
        if request.tries > self.max_retries:
            raise error
        logger.info(
            f"Retrying aborted {request.method} (attempt {request.tries}/{self.max_retries})"
        )
        return await request.retry()


def default_interceptors() -> list[ResponseInterceptor]:
    return [
        ErrorResponseInterceptor(),
        ResultResponseInterceptor(),
        OutParamResponseInterceptor(),
    ]
