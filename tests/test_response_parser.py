"""
Tests for services/response_parser.py — text extraction, fence stripping,
JSON loading and structural validation.
"""

import pytest

from quiz_challenge.errors import MalformedJsonError, ProviderResponseShapeError, SchemaValidationError
from quiz_challenge.models import Question
from quiz_challenge.services.response_parser import ResponseValidator

from conftest import QUESTION_JSON, candidates_body


EXPECTED = Question(prompt_text="2+2?", options=["3", "4", "5", "6"], correct_index=1)


@pytest.fixture
def validator():
    return ResponseValidator()


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------

class TestExtraction:

    def test_candidates_shape(self, validator):
        assert validator.parse(candidates_body(QUESTION_JSON)) == EXPECTED

    def test_legacy_candidates_shape(self, validator):
        raw = {"candidates": [{"content": [{"parts": [{"text": QUESTION_JSON}]}]}]}
        assert validator.parse(raw) == EXPECTED

    def test_output_content_filtered_by_type(self, validator):
        raw = {"output": [{"content": [
            {"type": "reasoning", "text": "thinking..."},
            {"type": "text", "text": QUESTION_JSON},
        ]}]}
        assert validator.parse(raw) == EXPECTED

    def test_top_level_text(self, validator):
        assert validator.parse({"text": QUESTION_JSON}) == EXPECTED

    def test_outputs_shape(self, validator):
        raw = {"outputs": [{"content": [{"text": QUESTION_JSON}]}]}
        assert validator.parse(raw) == EXPECTED

    def test_plain_string_reply(self, validator):
        assert validator.parse(QUESTION_JSON) == EXPECTED

    def test_first_location_wins(self, validator):
        other = '{"promptText": "Capital of Italy?", "options": ["Rome", "Milan", "Turin", "Naples"], "correctIndex": 0}'
        raw = candidates_body(QUESTION_JSON)
        raw["text"] = other
        assert validator.parse(raw).prompt_text == "2+2?"

    def test_empty_candidate_text_falls_through(self, validator):
        raw = candidates_body("   ")
        raw["text"] = QUESTION_JSON
        assert validator.parse(raw) == EXPECTED

    @pytest.mark.parametrize("raw", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
        {"output": [{"content": [{"type": "image", "url": "x"}]}]},
        {"text": 42},
        "",
        None,
        [],
    ])
    def test_no_text_anywhere(self, validator, raw):
        with pytest.raises(ProviderResponseShapeError) as exc:
            validator.parse(raw)
        assert exc.value.raw_reply == raw


# ---------------------------------------------------------------------------
# Fences and JSON
# ---------------------------------------------------------------------------

class TestCleanup:

    def test_json_fence_matches_unfenced(self, validator):
        fenced = candidates_body(f"```json\n{QUESTION_JSON}\n```")
        plain = candidates_body(QUESTION_JSON)
        assert validator.parse(fenced) == validator.parse(plain)

    def test_bare_fence(self, validator):
        assert validator.parse(f"```\n{QUESTION_JSON}\n```") == EXPECTED

    def test_leading_prose_with_fence(self, validator):
        raw = 'Sure! ```json\n{"promptText":"2+2?","options":["3","4","5","6"],"correctIndex":1}\n``` '
        assert validator.parse(raw) == EXPECTED

    def test_malformed_json(self, validator):
        with pytest.raises(MalformedJsonError) as exc:
            validator.parse(candidates_body("```json\nnot json at all\n```"))
        assert exc.value.text == "not json at all"
        assert exc.value.parser_message

    def test_deeply_nested_json_is_malformed(self, validator):
        nested = "[" * 100000 + "]" * 100000
        with pytest.raises(MalformedJsonError):
            validator.parse({"text": nested})

    def test_deeply_nested_object_after_prose(self, validator):
        nested = "Sure! " + '{"a":' * 100000 + "1" + "}" * 100000
        with pytest.raises(MalformedJsonError):
            validator.parse(nested)

    def test_truncated_json(self, validator):
        with pytest.raises(MalformedJsonError):
            validator.parse('{"promptText": "2+2?", "options": ["3", "4"')


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------

class TestSchema:

    @pytest.mark.parametrize("payload", [
        '["a", "b"]',
        '{"options": ["3", "4", "5", "6"], "correctIndex": 1}',
        '{"promptText": 5, "options": ["3", "4", "5", "6"], "correctIndex": 1}',
        '{"promptText": "2+2?", "options": "3,4,5,6", "correctIndex": 1}',
        '{"promptText": "2+2?", "options": ["3", 4, "5", "6"], "correctIndex": 1}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"]}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": "1"}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": true}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": 1.5}',
    ])
    def test_rejects_missing_or_mistyped_fields(self, validator, payload):
        with pytest.raises(SchemaValidationError):
            validator.parse(payload)

    def test_error_carries_parsed_object(self, validator):
        with pytest.raises(SchemaValidationError) as exc:
            validator.parse('{"promptText": "2+2?"}')
        assert exc.value.payload == {"promptText": "2+2?"}

    def test_integral_float_index_accepted(self, validator):
        q = validator.parse('{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": 1.0}')
        assert q.correct_index == 1

    def test_snake_case_aliases(self, validator):
        q = validator.parse('{"question": "2+2?", "answers": ["3", "4", "5", "6"], "correct_index": 1}')
        assert q == EXPECTED

    @pytest.mark.parametrize("payload", [
        '{"promptText": "2+2?", "options": ["3", "4", "5"], "correctIndex": 1}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": 4}',
        '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": -1}',
        '{"promptText": "   ", "options": ["3", "4", "5", "6"], "correctIndex": 1}',
    ])
    def test_strict_mode_rejects_unplayable_questions(self, validator, payload):
        with pytest.raises(SchemaValidationError):
            validator.parse(payload)

    def test_lenient_mode_passes_shape_through(self):
        lenient = ResponseValidator(strict=False)
        q = lenient.parse('{"promptText": "2+2?", "options": ["3", "4", "5"], "correctIndex": 7}')
        assert q.options == ["3", "4", "5"]
        assert q.correct_index == 7
