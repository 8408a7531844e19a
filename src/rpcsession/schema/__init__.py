"""
Object APIs and the schema that generates them.
"""

from rpcsession.schema.api import ObjectApi, RpcRequest
from rpcsession.schema.factory import Schema, to_snake_case

__all__ = ["ObjectApi", "RpcRequest", "Schema", "to_snake_case"]
