from __future__ import annotations

import pytest

from taskrelay.core.parsing.errors import ParseError
from taskrelay.core.parsing.parser import parse_completion, strip_code_fence


def _pairs(fields) -> list[tuple[str, str]]:
    return [(field.key, field.value) for field in fields]


@pytest.mark.parametrize(
    "raw",
    [
        '{"name": "Tom", "email": "tom@example.com"}',
        '{\n  "product": "iPhone 15",\n  "price": "$999"\n}',
        '{"申请人": "张三", "phone": "13800138000"}',
    ],
)
@pytest.mark.parametrize("fence", [("```json\n", "\n```"), ("```\n", "\n```"), ("```json", "```")])
def test_fenced_object_parses_like_bare_object(raw: str, fence: tuple[str, str]) -> None:
    opening, closing = fence
    assert _pairs(parse_completion(f"{opening}{raw}{closing}")) == _pairs(parse_completion(raw))


def test_strip_code_fence_leaves_unfenced_text_alone() -> None:
    assert strip_code_fence('  {"a": "1"}  ') == '{"a": "1"}'
    assert strip_code_fence("```yaml\nkey: value\n```") == "key: value"


def test_empty_object_is_success_with_zero_fields() -> None:
    assert parse_completion("{}") == []


def test_fallback_recovers_object_after_prose() -> None:
    fields = parse_completion('I cannot help. {"a":"1"}')
    assert _pairs(fields) == [("a", "1")]


def test_fallback_takes_first_single_line_object() -> None:
    fields = parse_completion('Here you go: {"name":"Jerry"} and also {"name":"Tom"}')
    assert _pairs(fields) == [("name", "Jerry")]


def test_values_are_stringified_and_order_is_kept() -> None:
    fields = parse_completion('{"age": 21, "active": true, "spouse": null, "tags": ["a", "b"], "name": "Tom"}')
    assert _pairs(fields) == [
        ("age", "21"),
        ("active", "true"),
        ("spouse", "null"),
        ("tags", '["a", "b"]'),
        ("name", "Tom"),
    ]


def test_float_values_print_like_browser_numbers() -> None:
    fields = parse_completion('{"age": 21.0, "height": 1.75, "big": 1e21, "zero": -0.0}')
    assert _pairs(fields) == [("age", "21"), ("height", "1.75"), ("big", "1e+21"), ("zero", "0")]


def test_unparseable_reply_raises_with_original_text() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_completion("Sorry, there is nothing structured here.")
    assert exc_info.value.original_text == "Sorry, there is nothing structured here."


def test_json_array_is_not_an_object() -> None:
    with pytest.raises(ParseError):
        parse_completion('["name", "Tom"]')


def test_multiline_object_inside_prose_is_not_recovered() -> None:
    with pytest.raises(ParseError):
        parse_completion('Result:\n{\n"a": "1"\n}\nthanks')
