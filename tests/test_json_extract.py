import pytest

from agent_planner.llm.json_extract import extract_json_block, extract_json_object


def test_plain_object():
    assert extract_json_object('{"a": 1}') == {"a": 1}


def test_fenced_object():
    text = 'Sure!\n```json\n{"a": {"b": 2}}\n```\nDone.'

    assert extract_json_object(text) == {"a": {"b": 2}}


def test_greedy_span_covers_nested_braces():
    text = 'prefix {"outer": {"inner": 1}} suffix'

    assert extract_json_block(text) == '{"outer": {"inner": 1}}'


def test_greedy_span_across_two_objects_does_not_decode():
    # first "{" to last "}" spans both objects
    with pytest.raises(ValueError, match="did not decode"):
        extract_json_object('{"a": 1} and {"b": 2}')


@pytest.mark.parametrize("text", [None, "", "no braces here"])
def test_missing_object_raises(text):
    with pytest.raises(ValueError):
        extract_json_object(text)


def test_array_is_not_an_object():
    with pytest.raises(ValueError):
        extract_json_object("```json\n[1, 2]\n```")
