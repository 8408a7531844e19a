"""
Unit tests for schema-driven API generation.
"""

import pytest
from unittest.mock import MagicMock

from rpcsession.schema import ObjectApi, RpcRequest, Schema, to_snake_case

from conftest import SCHEMA


class TestSnakeCase:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("GetActiveDoc", "get_active_doc"),
            ("qDocName", "doc_name"),
            ("GetHyperCubeData", "get_hyper_cube_data"),
            ("GetJSON", "get_json"),
            ("qId", "id"),
        ],
    )
    def test_conversion(self, name, expected):
        assert to_snake_case(name) == expected


class TestSchema:
    def setup_method(self):
        self.schema = Schema(SCHEMA)
        self.session = MagicMock()

    def test_generate_creates_methods(self):
        api_class = self.schema.generate("Global")
        assert issubclass(api_class, ObjectApi)
        assert api_class.type == "Global"
        assert hasattr(api_class, "get_active_doc")
        assert hasattr(api_class, "open_doc")

    def test_generate_is_cached(self):
        assert self.schema.generate("Doc") is self.schema.generate("Doc")

    def test_unknown_type_gives_bare_api(self):
        api_class = self.schema.generate("Field")
        assert issubclass(api_class, ObjectApi)
        assert api_class.type == "Field"
        assert not hasattr(api_class, "get_layout")

    def test_constructor_binds_arguments(self):
        api = self.schema.generate("GenericObject")(self.session, 4, "obj-1", True, "sheet")
        assert api.session is self.session
        assert api.handle == 4
        assert api.id == "obj-1"
        assert api.delta is True
        assert api.generic_type == "sheet"

    def test_positional_call_builds_request(self):
        api = self.schema.generate("Global")(self.session, -1, "Global", False, "Global")
        api.open_doc("my-app.qvf")

        request = self.session.send.call_args[0][0]
        assert isinstance(request, RpcRequest)
        assert request.method == "OpenDoc"
        assert request.handle == -1
        assert request.params == ["my-app.qvf"]
        assert request.delta is False
        assert request.out_key == -1

    def test_keyword_call_uses_engine_names(self):
        api = self.schema.generate("Global")(self.session, -1, "Global")
        api.open_doc(doc_name="my-app.qvf")

        request = self.session.send.call_args[0][0]
        assert request.params == {"qDocName": "my-app.qvf"}

    def test_single_out_param_sets_out_key(self):
        api = self.schema.generate("GenericObject")(self.session, 2, "obj")
        api.get_layout()

        request = self.session.send.call_args[0][0]
        assert request.out_key == "qLayout"

    def test_call_returns_session_result(self):
        self.session.send.return_value = "pending"
        api = self.schema.generate("Doc")(self.session, 1, "app")
        assert api.get_object("obj-1") == "pending"

    def test_mixed_arguments_rejected(self):
        api = self.schema.generate("Doc")(self.session, 1, "app")
        with pytest.raises(TypeError):
            api.call("GetObject", "obj-1", qId="obj-1")

    def test_each_api_has_own_events(self):
        api_class = self.schema.generate("Doc")
        a = api_class(self.session, 1, "a")
        b = api_class(self.session, 2, "b")
        assert a.events is not b.events
