"""
Schema-driven generation of object API classes.

The schema follows the engine's JSON definition format::

    {
        "structs": {
            "Global": {
                "GetActiveDoc": {"In": [], "Out": []},
                "OpenDoc": {"In": [{"Name": "qDocName"}], "Out": []}
            }
        }
    }

``Schema.generate("Global")`` returns an ``ObjectApi`` subclass with
``get_active_doc()`` and ``open_doc(doc_name)`` methods.
"""

import re
from typing import Any, Callable

from rpcsession.logger import get_logger
from rpcsession.schema.api import ObjectApi

logger = get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """``GetActiveDoc`` -> ``get_active_doc``; a leading ``q`` prefix is dropped."""
    if len(name) > 1 and name[0] == "q" and name[1].isupper():
        name = name[1:]
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _build_method(method_name: str, definition: dict[str, Any]) -> Callable:
    in_params = definition.get("In", [])
    out_params = definition.get("Out", [])
    out_key = out_params[0]["Name"] if len(out_params) == 1 else -1
    keyword_names = {to_snake_case(p["Name"]): p["Name"] for p in in_params}

    def method(self, *args: Any, **kwargs: Any):
        engine_kwargs = {keyword_names.get(k, k): v for k, v in kwargs.items()}
        return self.call(method_name, *args, out_key=out_key, **engine_kwargs)

    method.__name__ = to_snake_case(method_name)
    method.__qualname__ = method.__name__
    method.__doc__ = f"Call the engine method ``{method_name}``."
    return method


class Schema:
    """Generates and caches one ``ObjectApi`` subclass per engine type."""

    def __init__(self, definition: dict[str, Any] | None = None):
        self.definition = definition or {}
        self._generated: dict[str, type[ObjectApi]] = {}

    @property
    def structs(self) -> dict[str, Any]:
        return self.definition.get("structs", {})

    def generate(self, type_name: str) -> type[ObjectApi]:
        """
        Get the API class for ``type_name``.

        Types missing from the schema get a bare ``ObjectApi`` subclass whose
        only way to talk to the engine is ``call``.
        """
        api_class = self._generated.get(type_name)
        if api_class is not None:
            return api_class

        methods = self.structs.get(type_name)
        if methods is None:
            logger.debug(f"Type '{type_name}' not in schema, generating a bare API")
            methods = {}

        namespace: dict[str, Any] = {"type": type_name}
        for method_name, method_definition in methods.items():
            namespace[to_snake_case(method_name)] = _build_method(method_name, method_definition)

        class_name = re.sub(r"\W", "", type_name) or "Generic"
        api_class = type(f"{class_name}Api", (ObjectApi,), namespace)
        self._generated[type_name] = api_class
        return api_class
