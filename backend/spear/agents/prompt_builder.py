"""
Prompt Builder.

Renders a named template from ``spear.core.prompts`` into the exact string
sent to a provider. Pure: no I/O and no shared state.
"""
from string import Formatter
from typing import Mapping, Optional

from spear.agents.exceptions import TemplateError
from spear.core.prompts import TEMPLATES


def required_variables(template_name: str, templates: Optional[Mapping[str, str]] = None) -> list[str]:
    """Return the placeholder names of a template, in first-use order."""
    templates = TEMPLATES if templates is None else templates
    try:
        template = templates[template_name]
    except KeyError:
        raise TemplateError(template_name) from None

    names: list[str] = []
    for _, field_name, _, _ in Formatter().parse(template):
        if field_name and field_name not in names:
            names.append(field_name)
    return names


def render(
    template_name: str,
    variables: Mapping[str, str],
    templates: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render a template with the given variables.

    Substituted values are inserted verbatim; braces inside them are never
    treated as placeholders.

    Raises:
        TemplateError: Unknown template, or a required variable is missing.
    """
    templates = TEMPLATES if templates is None else templates
    names = required_variables(template_name, templates)

    missing = [name for name in names if name not in variables or variables[name] is None]
    if missing:
        raise TemplateError(template_name, missing=missing)

    return templates[template_name].format(**{name: str(variables[name]) for name in names})
