"""Syntax highlighting of fenced code blocks with Pygments.

A `HighlighterState` lives between a code-block start and end event. It holds
the lexer picked from the block's info string and a formatter bound to the
configured theme, and turns each text event of the block into inline-styled
HTML spans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from .constants import FENCE_MARKER, PLAIN_TEXT_LEXER

logger = logging.getLogger(__name__)

END_SNIPPET = "</code></pre>\n"


def should_highlight(content: str, enabled: bool) -> bool:
    """Decide once per document whether code blocks get highlighted.

    Highlighting is skipped entirely unless it is enabled and the raw source
    contains a fence marker. Prose containing a literal fence marker still
    activates it.
    """
    return enabled and FENCE_MARKER in content


def theme_exists(name: str) -> bool:
    return name in set(get_all_styles())


def find_lexer(token: str) -> Lexer:
    """Look up a lexer by language alias, falling back to plain text.

    Args:
        token: Language alias such as ``"python"`` or ``"js"``; may be empty.

    Returns:
        Lexer: Lexer for the alias, or a `TextLexer` when the alias is unknown.
    """
    if token:
        try:
            return get_lexer_by_name(token, stripnl=False)
        except ClassNotFound:
            logger.debug("No lexer for `%s`, using plain text", token)
    return get_lexer_by_name(PLAIN_TEXT_LEXER, stripnl=False)


def start_snippet(theme: str) -> str:
    """Return the opening wrapper for a highlighted block, colored by `theme`."""
    style = get_style_by_name(theme)
    return f'<pre style="background-color: {style.background_color};"><code>'


@dataclass
class HighlighterState:
    """Highlighter bound to one code block.

    Attributes:
        lexer: Pygments lexer selected for the block.
        style: Pygments style class providing the theme colors.
    """

    lexer: Lexer
    style: type[Style]
    formatter: HtmlFormatter = field(init=False, repr=False)

    def __post_init__(self):
        self.formatter = HtmlFormatter(nowrap=True, noclasses=True, style=self.style)

    @classmethod
    def for_block(cls, info: str, theme: str) -> HighlighterState:
        """Build a highlighter from a code block's info string.

        Only the first whitespace-delimited token of `info` names the
        language; the rest (attributes, titles) is ignored.

        Examples:
            HighlighterState.for_block("python linenos", "monokai")
        """
        tokens = info.split()
        lexer = find_lexer(tokens[0] if tokens else "")
        logger.debug("Highlighting code block with %s", lexer.name)
        return cls(lexer=lexer, style=get_style_by_name(theme))

    def highlight(self, text: str) -> str:
        return pygments_highlight(text, self.lexer, self.formatter)
