"""
Unit Tests for the Structured Response Parser

Covers JSON extraction from noisy provider text and per-field defaults.
"""
import json

import pytest

from spear.agents.artifact import CodeArtifact
from spear.agents.exceptions import MalformedResponseError
from spear.agents.response_parser import (
    StructuredResponseParser,
    extract_json_object,
    strip_code_fences,
)


@pytest.fixture
def parser():
    return StructuredResponseParser()


class TestStripCodeFences:
    """Markdown fence removal."""

    def test_removes_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_unfenced_text(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestExtractJsonObject:
    """JSON object recovery."""

    def test_plain_object(self):
        assert extract_json_object('{"HTML Code": "<p>x</p>"}') == {"HTML Code": "<p>x</p>"}

    def test_fenced_object(self):
        raw = '```json\n{"CSS Code": "a{}"}\n```'

        assert extract_json_object(raw) == {"CSS Code": "a{}"}

    def test_object_inside_prose(self):
        """The object starting at the first brace is used when prose surrounds it."""
        raw = 'Sure! Here is your code:\n{"JavaScript Code": "run()"}\nEnjoy.'

        assert extract_json_object(raw) == {"JavaScript Code": "run()"}

    def test_trailing_prose_with_braces(self):
        raw = 'Sure! {"HTML Code": "<p>x</p>"} hope this {helps}'

        assert extract_json_object(raw) == {"HTML Code": "<p>x</p>"}

    def test_fenced_object_inside_prose(self):
        raw = 'Here you go:\n```json\n{"CSS Code": "a{}"}\n```\nLet me know {if} it works.'

        assert extract_json_object(raw) == {"CSS Code": "a{}"}

    def test_literal_newlines_inside_strings(self):
        """Raw control characters inside string values are tolerated."""
        raw = '{"JavaScript Code": "let a = 1;\nlet b = 2;"}'

        assert extract_json_object(raw) == {"JavaScript Code": "let a = 1;\nlet b = 2;"}

    @pytest.mark.parametrize("raw", [
        "I cannot help with that.",
        "{not json at all}",
        '["HTML Code"]',
        "",
        "   ",
    ])
    def test_unrecoverable_text_raises(self, raw):
        with pytest.raises(MalformedResponseError) as exc_info:
            extract_json_object(raw)

        assert exc_info.value.raw_text == raw

    def test_empty_response_reason(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            extract_json_object("")

        assert exc_info.value.reason == "Empty response"


class TestStructuredResponseParser:
    """Field mapping, defaults and formatting."""

    def test_all_fields_parsed_and_formatted(self, parser):
        raw = json.dumps({
            "HTML Code": "<button>Hi</button>",
            "CSS Code": "button{color:red}",
            "JavaScript Code": "",
        })

        artifact = parser.parse(raw)

        assert artifact == CodeArtifact(
            markup="<button>Hi</button>",
            style="button {\n  color: red;\n}",
            behavior="",
        )

    def test_missing_field_uses_default(self, parser):
        """A field absent from valid JSON comes from the supplied default."""
        defaults = CodeArtifact(markup="<p>old</p>", style="p {\n  margin: 0;\n}", behavior="old();")
        raw = json.dumps({"HTML Code": "<p>new</p>", "JavaScript Code": "fresh();"})

        artifact = parser.parse(raw, defaults=defaults)

        assert artifact.markup == "<p>new</p>"
        assert artifact.style == defaults.style
        assert artifact.behavior == "fresh();"

    def test_default_is_formatted(self, parser):
        """Defaulted fields go through the formatter like recovered ones."""
        defaults = CodeArtifact(style="a{color:red}")

        artifact = parser.parse(json.dumps({"HTML Code": "<p>x</p>"}), defaults=defaults)

        assert artifact.style == "a {\n  color: red;\n}"

    @pytest.mark.parametrize("bad_value", [None, 42, ["a"], {"x": 1}])
    def test_invalid_field_uses_default(self, parser, bad_value):
        defaults = CodeArtifact(behavior="keep();")
        raw = json.dumps({"HTML Code": "<p>x</p>", "CSS Code": "", "JavaScript Code": bad_value})

        artifact = parser.parse(raw, defaults=defaults)

        assert artifact.behavior == "keep();"

    def test_missing_fields_default_to_empty(self, parser):
        """With no defaults, missing fields become empty strings."""
        artifact = parser.parse(json.dumps({"HTML Code": "<p>x</p>"}))

        assert artifact.style == ""
        assert artifact.behavior == ""

    def test_empty_string_field_is_kept(self, parser):
        """An explicit empty string is a value, not a missing field."""
        defaults = CodeArtifact(behavior="old();")

        artifact = parser.parse(code_json(js=""), defaults=defaults)

        assert artifact.behavior == ""

    def test_wire_style_keys_are_accepted(self, parser):
        """Keys such as htmlCode match case and punctuation insensitively."""
        raw = json.dumps({"html_code": "<p>x</p>", "cssCode": "a{color:red}", "JAVASCRIPT-CODE": "go();"})

        artifact = parser.parse(raw)

        assert artifact.markup == "<p>x</p>"
        assert artifact.style == "a {\n  color: red;\n}"
        assert artifact.behavior == "go();"

    def test_malformed_response_raises(self, parser):
        with pytest.raises(MalformedResponseError):
            parser.parse("Here you go: <button>Hi</button>")

    def test_defaults_are_not_mutated(self, parser):
        defaults = CodeArtifact(markup="<p>old</p>")

        parser.parse(code_json(html="<p>new</p>"), defaults=defaults)

        assert defaults.markup == "<p>old</p>"


def code_json(html: str = "", css: str = "", js: str = "") -> str:
    return json.dumps({"HTML Code": html, "CSS Code": css, "JavaScript Code": js})
