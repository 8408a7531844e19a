"""
Session layer: lifecycle, object API cache, suspend/resume and request results.
"""

from rpcsession.session.cache import ApiCache, ApiEntry
from rpcsession.session.result import PendingResult
from rpcsession.session.session import GLOBAL_HANDLE, Session
from rpcsession.session.suspend_resume import SuspendResume

__all__ = [
    "ApiCache",
    "ApiEntry",
    "GLOBAL_HANDLE",
    "PendingResult",
    "Session",
    "SuspendResume",
]
