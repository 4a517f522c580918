"""Tests for model response parsing."""

import pytest

from repokeeper.ai_agent.parsing import (
    AIResponseParseError,
    extract_json_from_response,
    parse_assessment,
    parse_json,
)


def test_extract_json_from_fenced_block():
    content = 'Here you go:\n```json\n{"score": 80}\n```\nThanks'
    assert extract_json_from_response(content) == '{"score": 80}'


def test_parse_json_with_leading_prose():
    assert parse_json('Sure! {"a": 1} hope that helps') == {"a": 1}


def test_parse_json_array():
    assert parse_json('```\n[{"title": "x"}]\n```') == [{"title": "x"}]


def test_parse_json_rejects_garbage():
    with pytest.raises(AIResponseParseError):
        parse_json("I cannot help with that")


def test_parse_assessment_clamps_score():
    assert parse_assessment('{"score": 140, "assessment": " great "}') == {
        "score": 100.0,
        "assessment": "great",
    }


def test_parse_assessment_unwraps_response_envelope():
    content = '{"response": "{\\"score\\": 72.5, \\"assessment\\": \\"ok\\"}"}'
    assert parse_assessment(content)["score"] == 72.5


@pytest.mark.parametrize("content", ['{"assessment": "no score"}', '{"score": "high"}', "[1, 2]"])
def test_parse_assessment_invalid(content):
    with pytest.raises(AIResponseParseError):
        parse_assessment(content)
