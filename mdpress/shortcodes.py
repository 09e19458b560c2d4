"""Shortcode parsing and rendering.

Two forms are recognized in plain text:

    {{ youtube(id="dQw4w9WgXcQ", autoplay=true) }}

    {% quote(author="Vincent") %}
    A quote
    {% end %}

Both render the Jinja2 template ``shortcodes/<name>.html`` with the arguments
as template variables; the block form also passes its content as ``body``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment, TemplateError

from .constants import (
    BLOCK_SHORTCODE_CLOSE,
    BLOCK_SHORTCODE_OPEN,
    INLINE_SHORTCODE_CLOSE,
    INLINE_SHORTCODE_OPEN,
    SHORTCODE_END,
    SHORTCODE_TEMPLATE,
)
from .exceptions import ShortcodeError

logger = logging.getLogger(__name__)

_VALUE = r"""(?:"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|true|false|[+-]?\d+(?:\.\d+)?)"""
_ARG = r"\w+\s*=\s*" + _VALUE
_CALL = r"\s*(?P<name>\w+)\((?P<args>\s*(?:" + _ARG + r"\s*(?:,\s*" + _ARG + r"\s*)*)?)\)\s*"

INLINE_SHORTCODE_RE = re.compile(r"^\{\{" + _CALL + r"\}\}$")
BLOCK_SHORTCODE_RE = re.compile(r"^\{%" + _CALL + r"%\}$")
SINGLE_LINE_SHORTCODE_RE = re.compile(
    r"^(?P<opener>\{%" + _CALL + r"%\})(?P<body>.*)" + re.escape(SHORTCODE_END) + "$",
    re.DOTALL,
)
ARG_RE = re.compile(r"(?P<key>\w+)\s*=\s*(?P<value>" + _VALUE + ")")


def is_inline_shortcode(text: str) -> bool:
    return (
        text.startswith(INLINE_SHORTCODE_OPEN)
        and text.endswith(INLINE_SHORTCODE_CLOSE)
        and INLINE_SHORTCODE_RE.match(text) is not None
    )


def is_block_delimited(text: str) -> bool:
    """Check whether text is wrapped in block-shortcode delimiters.

    Such text is swallowed by the transformer even when it does not match the
    shortcode grammar; `is_block_shortcode` tells whether a body follows.
    """
    return text.startswith(BLOCK_SHORTCODE_OPEN) and text.endswith(BLOCK_SHORTCODE_CLOSE)


def is_block_shortcode(text: str) -> bool:
    return is_block_delimited(text) and BLOCK_SHORTCODE_RE.match(text) is not None


def is_shortcode_end(text: str) -> bool:
    return text.strip() == SHORTCODE_END


def split_single_line_shortcode(text: str) -> tuple[str, str] | None:
    """Split a block shortcode written on one line into opening tag and body.

    Examples:
        split_single_line_shortcode('{% quote(author="V") %}Hi{% end %}')
        # ('{% quote(author="V") %}', "Hi")
    """
    match = SINGLE_LINE_SHORTCODE_RE.match(text)
    if match is None:
        return None
    return match.group("opener"), match.group("body")


def _convert_value(raw: str) -> Any:
    if raw[0] in "\"'":
        return re.sub(r"\\(.)", r"\1", raw[1:-1])
    if raw == "true":
        return True
    if raw == "false":
        return False
    if "." in raw:
        return float(raw)
    return int(raw)


def parse_shortcode(text: str) -> tuple[str, dict[str, Any]]:
    """Split a shortcode invocation into its name and arguments.

    Args:
        text: Inline (``{{ ... }}``) or block-opening (``{% ... %}``) shortcode.

    Returns:
        tuple[str, dict[str, Any]]: The shortcode name and its arguments.
            Quoted values become strings, ``true``/``false`` booleans, and
            numbers ints or floats.

    Raises:
        ValueError: If `text` does not match the shortcode grammar.

    Examples:
        parse_shortcode('{{ youtube(id="abc", autoplay=true) }}')
        # ("youtube", {"id": "abc", "autoplay": True})
    """
    match = INLINE_SHORTCODE_RE.match(text) or BLOCK_SHORTCODE_RE.match(text)
    if match is None:
        raise ValueError(f"Not a shortcode: {text!r}")

    args = {
        arg.group("key"): _convert_value(arg.group("value"))
        for arg in ARG_RE.finditer(match.group("args"))
    }
    return match.group("name"), args


def render_simple_shortcode(env: Environment, name: str, args: dict[str, Any]) -> str:
    """Render ``shortcodes/<name>.html`` with `args` as the template context.

    Raises:
        ShortcodeError: If the template is missing or fails to render.
    """
    try:
        template = env.get_template(SHORTCODE_TEMPLATE.format(name=name))
        return template.render(**args)
    except TemplateError as error:
        raise ShortcodeError(name) from error


@dataclass
class ShortcodeBuilder:
    """Accumulates the body of an open block shortcode.

    Attributes:
        name: Shortcode name.
        args: Arguments parsed from the opening tag.
        parts: Raw text fragments seen since the opening tag.
    """

    name: str
    args: dict[str, Any]
    parts: list[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> ShortcodeBuilder:
        name, args = parse_shortcode(text)
        return cls(name=name, args=args)

    @property
    def body(self) -> str:
        return "".join(self.parts)

    def append(self, text: str) -> None:
        self.parts.append(text)

    def render(self, env: Environment) -> str:
        logger.debug("Rendering block shortcode `%s` (%d body chars)", self.name, len(self.body))
        return render_simple_shortcode(env, self.name, {**self.args, "body": self.body})
