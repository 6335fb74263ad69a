"""
Code formatting for generated fragments.

Normalizes whitespace and indentation per fragment kind:
- markup: parsed with BeautifulSoup and re-serialized with block elements on
  their own lines and inline content kept on one line
- style: parsed with tinycss2, one declaration per line, semicolons always
- behavior: jsbeautifier

Every formatter is a fixpoint on its own output: formatting twice gives the
same text as formatting once.
"""
import logging
import re
from typing import Callable, Dict, Iterable, List

import jsbeautifier
import tinycss2
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag
from tinycss2.ast import WhitespaceToken

from spear.agents.artifact import FragmentKind

logger = logging.getLogger(__name__)


class FormattingError(Exception):
    """Raised when a fragment cannot be formatted."""

    def __init__(self, kind: FragmentKind, message: str):
        super().__init__(f"Cannot format {kind.value}: {message}")
        self.kind = kind


# =============================================================================
# MARKUP
# =============================================================================

INLINE_TAGS = frozenset({
    "a", "abbr", "acronym", "b", "bdi", "bdo", "big", "br", "button", "cite",
    "code", "data", "dfn", "em", "font", "i", "img", "input", "kbd", "label",
    "mark", "meter", "output", "progress", "q", "s", "samp", "select", "small",
    "span", "strike", "strong", "sub", "sup", "time", "tt", "u", "var", "wbr",
})

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "param", "source", "track", "wbr",
})

# Content of these elements is emitted exactly as written
RAW_TAGS = frozenset({"script", "style", "pre", "textarea"})

_HTML_WHITESPACE = re.compile(r"[ \t\n\r\f]+")


def _escape_text(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\xa0", "&nbsp;")
    )


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _open_tag(tag: Tag) -> str:
    parts = [tag.name]
    for name, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        if value is None or value == "":
            parts.append(name)
        else:
            parts.append(f'{name}="{_escape_attr(str(value))}"')
    return "<" + " ".join(parts) + ">"


def _is_inline_flow(node) -> bool:
    """True for text and inline elements whose whole subtree is inline."""
    if isinstance(node, PreformattedString):
        return False
    if isinstance(node, NavigableString):
        return True
    if isinstance(node, Tag):
        return (
            node.name in INLINE_TAGS
            and node.name not in RAW_TAGS
            and all(_is_inline_flow(child) for child in node.contents)
        )
    return False


def _render_inline(node) -> str:
    if isinstance(node, NavigableString):
        return _escape_text(_HTML_WHITESPACE.sub(" ", str(node)))
    if node.name in VOID_TAGS:
        return _open_tag(node)
    inner = "".join(_render_inline(child) for child in node.contents)
    return f"{_open_tag(node)}{inner}</{node.name}>"


class _MarkupRenderer:
    def __init__(self, indent_size: int):
        self.unit = " " * indent_size

    def render(self, text: str) -> str:
        soup = BeautifulSoup(text, "html.parser")
        return "\n".join(self._children(soup.contents, 0))

    def _children(self, nodes: Iterable, depth: int) -> List[str]:
        indent = self.unit * depth
        lines: List[str] = []
        run: List = []

        def flush():
            if run:
                # Text nodes are already collapsed; attribute values stay as written
                text = "".join(_render_inline(node) for node in run).strip(" ")
                if text:
                    lines.append(indent + text)
                run.clear()

        for node in nodes:
            if _is_inline_flow(node):
                run.append(node)
                continue
            flush()
            if isinstance(node, PreformattedString):
                # Comments, doctypes, CDATA, processing instructions
                lines.append(indent + node.output_ready().strip())
            elif isinstance(node, Tag):
                lines.extend(self._element(node, depth))
        flush()
        return lines

    def _element(self, tag: Tag, depth: int) -> List[str]:
        indent = self.unit * depth
        open_tag = _open_tag(tag)

        if tag.name in VOID_TAGS:
            return [indent + open_tag]

        if tag.name in RAW_TAGS:
            inner = tag.decode_contents(formatter="minimal")
            return [f"{indent}{open_tag}{inner}</{tag.name}>"]

        if all(_is_inline_flow(child) for child in tag.contents):
            inner = "".join(_render_inline(child) for child in tag.contents).strip(" ")
            return [f"{indent}{open_tag}{inner}</{tag.name}>"]

        return [
            indent + open_tag,
            *self._children(tag.contents, depth + 1),
            f"{indent}</{tag.name}>",
        ]


# =============================================================================
# STYLE
# =============================================================================

# At-rules whose block holds rules rather than declarations
NESTED_RULE_AT_RULES = frozenset({
    "media", "supports", "document", "-moz-document", "container", "layer",
    "scope", "starting-style", "keyframes", "-webkit-keyframes", "-moz-keyframes",
})


def _compact(tokens) -> str:
    """Serialize component values with each whitespace run collapsed to one space."""
    compacted = []
    for token in tokens:
        if token.type == "whitespace":
            if compacted and compacted[-1].type != "whitespace":
                compacted.append(WhitespaceToken(token.source_line, token.source_column, " "))
            continue
        compacted.append(token)
    while compacted and compacted[-1].type == "whitespace":
        compacted.pop()
    return tinycss2.serialize(compacted)


class _StyleRenderer:
    def __init__(self, indent_size: int):
        self.unit = " " * indent_size

    def render(self, text: str) -> str:
        rules = tinycss2.parse_stylesheet(text, skip_comments=False, skip_whitespace=True)
        return "\n".join(self._rules(rules, 0))

    def _rules(self, nodes: Iterable, depth: int) -> List[str]:
        indent = self.unit * depth
        lines: List[str] = []
        for node in nodes:
            if node.type == "error":
                raise ValueError(node.message)
            if node.type == "whitespace":
                continue
            if node.type == "comment":
                lines.append(f"{indent}/*{node.value}*/")
            elif node.type == "qualified-rule":
                lines.extend(self._block(_compact(node.prelude), node.content, depth, nested_rules=False))
            elif node.type == "at-rule":
                head = f"@{node.at_keyword}"
                prelude = _compact(node.prelude)
                if prelude:
                    head += f" {prelude}"
                if node.content is None:
                    lines.append(f"{indent}{head};")
                else:
                    nested = node.lower_at_keyword in NESTED_RULE_AT_RULES
                    lines.extend(self._block(head, node.content, depth, nested_rules=nested))
            elif node.type == "declaration":
                lines.append(indent + self._declaration(node))
        return lines

    def _block(self, head: str, content, depth: int, nested_rules: bool) -> List[str]:
        indent = self.unit * depth
        if nested_rules:
            items = tinycss2.parse_rule_list(content, skip_comments=False, skip_whitespace=True)
        else:
            items = tinycss2.parse_blocks_contents(content, skip_comments=False, skip_whitespace=True)
        body = self._rules(items, depth + 1)
        if not body:
            return [f"{indent}{head} {{}}"]
        return [f"{indent}{head} {{", *body, f"{indent}}}"]

    @staticmethod
    def _declaration(decl) -> str:
        value = _compact(decl.value)
        if decl.important:
            value = f"{value} !important" if value else "!important"
        return f"{decl.name}: {value};"


# =============================================================================
# FORMATTER
# =============================================================================


class CodeFormatter:
    """
    Formats code fragments by kind.

    ``format`` raises FormattingError; ``format_safe`` never raises and
    returns the input unchanged when formatting fails.
    """

    def __init__(self, indent_size: int = 2):
        self.indent_size = indent_size
        self._markup = _MarkupRenderer(indent_size)
        self._style = _StyleRenderer(indent_size)
        self._handlers: Dict[FragmentKind, Callable[[str], str]] = {
            FragmentKind.MARKUP: self._markup.render,
            FragmentKind.STYLE: self._style.render,
            FragmentKind.BEHAVIOR: self._format_behavior,
        }

    def _format_behavior(self, text: str) -> str:
        options = jsbeautifier.default_options()
        options.indent_size = self.indent_size
        options.end_with_newline = False
        return jsbeautifier.beautify(text, options)

    def format(self, kind: FragmentKind, text: str) -> str:
        if not text or not text.strip():
            return ""
        try:
            return self._handlers[kind](text)
        except Exception as e:
            raise FormattingError(kind, str(e)) from e

    def format_safe(self, kind: FragmentKind, text: str) -> str:
        try:
            return self.format(kind, text)
        except FormattingError as e:
            logger.warning(f"[FORMATTER] {e} - passing text through unformatted")
            return text
