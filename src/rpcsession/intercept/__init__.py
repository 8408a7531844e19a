"""
Response interceptors applied to every request sent through a session.
"""

from rpcsession.intercept.interceptors import (
    ENGINE_ERROR_ABORTED,
    ErrorResponseInterceptor,
    OutParamResponseInterceptor,
    ResponseInterceptor,
    ResultResponseInterceptor,
    RetryAbortedInterceptor,
    default_interceptors,
)
from rpcsession.intercept.pipeline import Intercept

__all__ = [
    "ENGINE_ERROR_ABORTED",
    "ErrorResponseInterceptor",
    "Intercept",
    "OutParamResponseInterceptor",
    "ResponseInterceptor",
    "ResultResponseInterceptor",
    "RetryAbortedInterceptor",
    "default_interceptors",
]
