"""请求体构建单元测试"""

import pytest

from actionflow.action.body import (
    body_properties_from_request_body_contents,
    build_body,
    fill_no_choice_required_params,
    get_json_mime_type,
)
from actionflow.utils.exception import ActionConfigError


class TestBuildBody:
    """测试 build_body"""

    def test_read_only_properties_are_dropped(self):
        schema = {"properties": {"a": {"readOnly": True}, "b": {}}}

        assert build_body(schema, {"a": "x", "b": "y"}) == {"b": "y"}

    def test_missing_values_are_omitted(self):
        schema = {"properties": {"name": {}, "email": {}}}

        assert build_body(schema, {"name": "Ann"}) == {"name": "Ann"}

    def test_extra_parameters_are_ignored(self):
        schema = {"properties": {"name": {}}}

        assert build_body(schema, {"name": "Ann", "other": 1}) == {
            "name": "Ann"
        }

    def test_falsy_values_are_treated_as_not_supplied(self):
        schema = {
            "properties": {
                "count": {},
                "enabled": {},
                "note": {},
                "tags": {},
                "meta": {},
            }
        }
        params = {
            "count": 0,
            "enabled": False,
            "note": "",
            "tags": [],
            "meta": {},
        }

        assert build_body(schema, params) == {"tags": [], "meta": {}}

    def test_keep_falsy_keeps_everything_but_none(self):
        schema = {"properties": {"count": {}, "enabled": {}, "gone": {}}}
        params = {"count": 0, "enabled": False, "gone": None}

        assert build_body(schema, params, keep_falsy=True) == {
            "count": 0,
            "enabled": False,
        }

    def test_nested_objects_are_passed_through(self):
        schema = {
            "properties": {
                "address": {
                    "type": "object",
                    "properties": {"city": {"readOnly": True}},
                }
            }
        }
        params = {"address": {"city": "Paris"}}

        assert build_body(schema, params) == {"address": {"city": "Paris"}}

    def test_schema_without_properties(self):
        assert build_body({"type": "object"}, {"a": 1}) == {}


class TestRequestBodyContents:
    """测试媒体类型解析"""

    def test_get_json_mime_type(self):
        contents = {
            "application/xml": {"schema": {"type": "string"}},
            "application/json": {"schema": {"type": "object"}},
        }

        assert get_json_mime_type(contents) == {"schema": {"type": "object"}}

    def test_json_with_charset(self):
        contents = {"Application/JSON; charset=utf-8": {"schema": {"a": 1}}}

        assert body_properties_from_request_body_contents(contents) == {"a": 1}

    def test_missing_json_media_type_raises(self):
        with pytest.raises(ActionConfigError, match="application/json"):
            body_properties_from_request_body_contents(
                {"multipart/form-data": {"schema": {}}}
            )


class TestFillNoChoiceRequiredParams:
    """测试单值枚举的必填属性自动填充"""

    def test_fills_required_single_enum(self):
        schema = {
            "required": ["type", "name"],
            "properties": {
                "type": {"enum": ["customer"]},
                "name": {"type": "string"},
                "mode": {"enum": ["fast"]},
            },
        }

        out = fill_no_choice_required_params({"name": "Ann"}, schema)

        assert out == {"name": "Ann", "type": "customer"}

    def test_does_not_mutate_input(self):
        params = {"name": "Ann"}
        schema = {
            "required": ["type"],
            "properties": {"type": {"enum": ["customer"]}},
        }

        fill_no_choice_required_params(params, schema)

        assert params == {"name": "Ann"}

    def test_multi_value_enum_is_left_alone(self):
        schema = {
            "required": ["type"],
            "properties": {"type": {"enum": ["a", "b"]}},
        }

        assert fill_no_choice_required_params({}, schema) == {}
