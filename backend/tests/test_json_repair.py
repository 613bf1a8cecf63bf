"""Tests for LLM JSON parsing and each repair step."""

import pytest

from errors import ErrorKind, ServiceError
from json_repair import (
    extract_object,
    parse_llm_json,
    quote_bare_identifiers,
    repair,
    strip_code_fences,
    strip_comments,
    strip_trailing_commas,
)


class TestRepairSteps:

    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('Here:\n```\n{"a": 1}\n```\nDone') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_extract_object(self):
        assert extract_object('Sure! {"a": {"b": 2}} Hope it helps') == '{"a": {"b": 2}}'
        assert extract_object("no braces") == "no braces"

    def test_strip_comments(self):
        text = '{\n  "a": 1, // one\n  /* block */ "url": "https://x.test/y"\n}'
        assert strip_comments(text) == '{\n  "a": 1, \n   "url": "https://x.test/y"\n}'

    def test_strip_trailing_commas(self):
        assert strip_trailing_commas('{"a": [1, 2, ], "b": 3,}') == '{"a": [1, 2 ], "b": 3}'

    def test_quote_bare_identifiers(self):
        assert quote_bare_identifiers('{"reps": Max, "rest": Full Body}') == (
            '{"reps": "Max", "rest": "Full Body"}'
        )

    def test_quote_leaves_literals_alone(self):
        text = '{"a": true, "b": null, "c": 12, "d": "Quoted"}'
        assert quote_bare_identifiers(text) == text


class TestParseLlmJson:

    def test_strict_json_is_parsed_directly(self):
        assert parse_llm_json('{"speech": "Go!"}') == {"speech": "Go!"}

    def test_repairs_a_typical_llm_reply(self):
        reply = (
            "Here is your plan:\n```json\n"
            '{\n  "workoutPlan": [{"day": "Monday", "exercises": [\n'
            '    {"name": "Push-ups", "sets": 3, "reps": Max, "rest": "60 seconds"},\n'
            "  ]}],\n"
            '  "motivationQuote": "Keep going", // quote\n'
            "}\n```"
        )
        data = parse_llm_json(reply)
        assert data["workoutPlan"][0]["exercises"][0]["reps"] == "Max"
        assert data["motivationQuote"] == "Keep going"

    def test_unrepairable_reply_is_malformed_upstream(self):
        with pytest.raises(ServiceError) as exc_info:
            parse_llm_json("I'm sorry, I can't help with that.")
        assert exc_info.value.kind is ErrorKind.MALFORMED_UPSTREAM
        assert exc_info.value.status_code == 500
        assert "try again" in exc_info.value.details

    def test_repair_runs_steps_in_order(self):
        assert repair('```json\n{"a": [1,],}\n```') == '{"a": [1]}'
