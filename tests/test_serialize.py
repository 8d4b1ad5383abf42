import json

from slacklog.serialize import CIRCULAR, code_format, safe_dumps


def test_compact_form_has_no_whitespace() -> None:
    assert safe_dumps({"name": "diego", "tags": ["a", "b"]}) == '{"name":"diego","tags":["a","b"]}'


def test_pretty_form_uses_two_space_indent() -> None:
    assert safe_dumps({"foo": "bar", "bar": "baz"}, indent=2) == (
        '{\n  "foo": "bar",\n  "bar": "baz"\n}'
    )


def test_non_ascii_is_kept() -> None:
    assert safe_dumps({"city": "São Paulo"}) == '{"city":"São Paulo"}'


def test_cycles_are_replaced_with_marker() -> None:
    error = {"name": "Error", "message": "boom"}
    error["cause"] = error
    payload = {"attachments": [{"fields": [error]}]}
    payload["attachments"].append(payload)

    result = json.loads(safe_dumps(payload))

    assert result["attachments"][0]["fields"][0]["cause"] == CIRCULAR
    assert result["attachments"][1] == CIRCULAR


def test_shared_references_are_not_cycles() -> None:
    shared = {"id": 1}

    result = json.loads(safe_dumps({"a": shared, "b": shared, "c": [shared, shared]}))

    assert result == {"a": {"id": 1}, "b": {"id": 1}, "c": [{"id": 1}, {"id": 1}]}


def test_unserializable_values_use_str() -> None:
    class Thing:
        def __str__(self) -> str:
            return "thing"

    result = json.loads(safe_dumps({"value": Thing(), (1, 2): ValueError("bad")}))

    assert result == {"value": "thing", "(1, 2)": "bad"}


def test_broken_str_does_not_raise() -> None:
    class Broken:
        def __str__(self) -> str:
            raise RuntimeError("nope")

    assert json.loads(safe_dumps([Broken()])) == ["[Unserializable]"]


def test_code_format() -> None:
    data = safe_dumps({"foo": "bar", "bar": "baz"}, indent=2)

    assert code_format(data) == f"```\n{data}\n```"
    assert code_format("line one\nline two") == "```\nline one\nline two\n```"
