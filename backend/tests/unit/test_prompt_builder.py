"""
Unit Tests for the Prompt Builder
"""
import pytest

from spear.agents.exceptions import TemplateError
from spear.agents.prompt_builder import render, required_variables
from spear.core.prompts import CSS_FIELD, HTML_FIELD, JS_FIELD


class TestRequiredVariables:
    """Placeholder discovery."""

    def test_generation_variables(self):
        assert required_variables("generation") == ["user_prompt"]

    def test_modification_variables(self):
        assert set(required_variables("modification")) == {"html_code", "css_code", "js_code", "message"}

    def test_classification_variables(self):
        assert set(required_variables("classification")) == {"message", "labels"}

    def test_unknown_template(self):
        with pytest.raises(TemplateError) as exc_info:
            required_variables("nope")

        assert exc_info.value.template_name == "nope"
        assert exc_info.value.missing == []


class TestRender:
    """Template rendering."""

    def test_generation_embeds_prompt_and_field_names(self):
        prompt = render("generation", {"user_prompt": "a red button"})

        assert '"a red button"' in prompt
        for field in (HTML_FIELD, CSS_FIELD, JS_FIELD):
            assert f'"{field}"' in prompt

    def test_json_templates_ask_for_bare_json(self):
        for name, variables in [
            ("generation", {"user_prompt": "x"}),
            ("modification", {"html_code": "", "css_code": "", "js_code": "", "message": "x"}),
        ]:
            prompt = render(name, variables)
            assert "ONLY a valid JSON object" in prompt
            assert "no code fences" in prompt

    def test_modification_embeds_current_code(self):
        prompt = render("modification", {
            "html_code": "<p>old</p>",
            "css_code": "p {\n  margin: 0;\n}",
            "js_code": "init();",
            "message": "make it blue",
        })

        assert "<p>old</p>" in prompt
        assert "margin: 0;" in prompt
        assert "init();" in prompt
        assert '"make it blue"' in prompt

    def test_braces_in_values_are_not_placeholders(self):
        """User text with braces is inserted verbatim."""
        prompt = render("generation", {"user_prompt": "use {user_prompt} and {0} literally"})

        assert "use {user_prompt} and {0} literally" in prompt

    def test_missing_variable(self):
        with pytest.raises(TemplateError) as exc_info:
            render("modification", {"html_code": "", "message": "x"})

        assert set(exc_info.value.missing) == {"css_code", "js_code"}

    def test_none_counts_as_missing(self):
        with pytest.raises(TemplateError) as exc_info:
            render("generation", {"user_prompt": None})

        assert exc_info.value.missing == ["user_prompt"]

    def test_unknown_template(self):
        with pytest.raises(TemplateError):
            render("missing", {})

    def test_custom_template_table(self):
        templates = {"greet": "Hello {name}"}

        assert render("greet", {"name": "Ada"}, templates=templates) == "Hello Ada"

    def test_rendering_is_deterministic(self):
        variables = {"message": "hi", "labels": "A, or B"}

        assert render("classification", variables) == render("classification", variables)
