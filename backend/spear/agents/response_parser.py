"""
Structured Response Parser.

Turns provider text that should be a three-field JSON object into a
formatted CodeArtifact. Extraction and field mapping are shared by the
generation and modification pipelines so both recover from bad output the
same way.
"""
import json
import logging
import re
from typing import Mapping, Optional

from spear.agents.artifact import CodeArtifact, FragmentKind
from spear.agents.exceptions import MalformedResponseError
from spear.core.prompts import CSS_FIELD, HTML_FIELD, JS_FIELD
from spear.services.code_formatter import CodeFormatter

logger = logging.getLogger(__name__)

# JSON keys requested by the code prompts
DEFAULT_FIELD_KEYS: Mapping[FragmentKind, str] = {
    FragmentKind.MARKUP: HTML_FIELD,
    FragmentKind.STYLE: CSS_FIELD,
    FragmentKind.BEHAVIOR: JS_FIELD,
}

_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


def _normalize_key(key: str) -> str:
    return re.sub(r"[^a-z0-9]", "", key.lower())


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the whole text, if present."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def extract_json_object(raw_text: str) -> dict:
    """
    Extract the JSON object from provider text.

    Tries, in order: the text with code fences removed, then the object that
    starts at the first "{", ignoring whatever prose follows it. Raw control
    characters inside strings (literal newlines in code) are accepted.

    Raises:
        MalformedResponseError: No JSON object could be recovered
    """
    if raw_text is None or not raw_text.strip():
        raise MalformedResponseError(raw_text or "", reason="Empty response")

    text = strip_code_fences(raw_text)
    decoder = json.JSONDecoder(strict=False)
    last_error: Optional[str] = None

    try:
        data = decoder.decode(text)
    except json.JSONDecodeError as e:
        last_error = str(e)
    else:
        if isinstance(data, dict):
            return data
        last_error = f"Expected a JSON object, got {type(data).__name__}"

    start = text.find("{")
    if start != -1:
        try:
            data, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError as e:
            last_error = str(e)
        else:
            if isinstance(data, dict):
                return data

    raise MalformedResponseError(raw_text, reason=last_error or "No JSON object found")


def _lookup(data: dict, key: str) -> Optional[str]:
    """Find a string field by exact key, then by case/punctuation-insensitive key."""
    value = data.get(key)
    if value is None:
        wanted = _normalize_key(key)
        for candidate_key, candidate_value in data.items():
            if isinstance(candidate_key, str) and _normalize_key(candidate_key) == wanted:
                value = candidate_value
                break
    return value if isinstance(value, str) else None


class StructuredResponseParser:
    """Parses and formats three-field code responses."""

    def __init__(
        self,
        formatter: Optional[CodeFormatter] = None,
        field_keys: Optional[Mapping[FragmentKind, str]] = None,
    ):
        self.formatter = formatter or CodeFormatter()
        self.field_keys = dict(field_keys or DEFAULT_FIELD_KEYS)

    def parse(self, raw_text: str, defaults: Optional[CodeArtifact] = None) -> CodeArtifact:
        """
        Parse provider text into a formatted artifact.

        Args:
            raw_text: Provider response text
            defaults: Per-field fallback for missing, null or non-string
                fields (empty artifact when omitted)

        Returns:
            New CodeArtifact with every field formatted by kind

        Raises:
            MalformedResponseError: The text holds no JSON object
        """
        defaults = defaults or CodeArtifact()
        data = extract_json_object(raw_text)

        fragments = {}
        for kind in FragmentKind:
            value = _lookup(data, self.field_keys[kind])
            if value is None:
                logger.info(f"[PARSER] Field '{self.field_keys[kind]}' missing - using default")
                value = defaults.get(kind)
            fragments[kind.value] = self.formatter.format_safe(kind, value)

        return CodeArtifact(**fragments)
