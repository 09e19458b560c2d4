"""Structural events produced from markdown-it tokens.

markdown-it nests inline content under ``inline`` tokens and emits code as
single tokens. The transformer wants one flat stream where every boundary is
its own event, so this module flattens the token list:

* ``inline`` tokens are replaced by their children;
* ``fence`` and ``code_block`` become ``code_block_open`` (info string kept in
  ``info``), one ``text`` event with the literal content, and
  ``code_block_close``;
* ``code_inline`` becomes ``code_inline_open``, ``text``, ``code_inline_close``.

Every other token is yielded unchanged.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin

TEXT = "text"
SOFTBREAK = "softbreak"
HTML_INLINE = "html_inline"
HTML_BLOCK = "html_block"
HEADING_OPEN = "heading_open"
HEADING_CLOSE = "heading_close"
PARAGRAPH_OPEN = "paragraph_open"
PARAGRAPH_CLOSE = "paragraph_close"
LINK_OPEN = "link_open"
LINK_CLOSE = "link_close"
CODE_BLOCK_OPEN = "code_block_open"
CODE_BLOCK_CLOSE = "code_block_close"
CODE_INLINE_OPEN = "code_inline_open"
CODE_INLINE_CLOSE = "code_inline_close"


def build_parser() -> MarkdownIt:
    """Return a CommonMark parser with tables and footnotes enabled."""
    return MarkdownIt("commonmark").enable("table").use(footnote_plugin)


def html_event(content: str, block: bool = False) -> Token:
    """Create an event whose content is written to the output verbatim.

    Block events replace block-level tokens so the renderer keeps its line
    handling; inline events replace text-level ones.
    """
    if block:
        return Token(HTML_BLOCK, "", 0, content=content, block=True)
    return Token(HTML_INLINE, "", 0, content=content)


def _code_block_events(token: Token) -> Iterator[Token]:
    info = token.info.strip() if token.type == "fence" else ""
    yield Token(
        CODE_BLOCK_OPEN, "code", 1, map=token.map, markup=token.markup, info=info, block=True
    )
    yield Token(TEXT, "", 0, content=token.content)
    yield Token(CODE_BLOCK_CLOSE, "code", -1, markup=token.markup, block=True)


def _code_inline_events(token: Token) -> Iterator[Token]:
    yield Token(CODE_INLINE_OPEN, "code", 1, markup=token.markup)
    yield Token(TEXT, "", 0, content=token.content)
    yield Token(CODE_INLINE_CLOSE, "code", -1, markup=token.markup)


def _flatten(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        if token.type == "inline":
            yield from _flatten(token.children or [])
        elif token.type in ("fence", "code_block"):
            yield from _code_block_events(token)
        elif token.type == "code_inline":
            yield from _code_inline_events(token)
        else:
            yield token


def iter_events(
    parser: MarkdownIt, content: str, env: MutableMapping[str, Any] | None = None
) -> Iterator[Token]:
    """Tokenize `content` and yield its structural events in document order.

    Args:
        parser: Parser returned by `build_parser`.
        content: Markdown source.
        env: Environment shared with the renderer; footnotes store their
            state in it.

    Returns:
        Iterator[Token]: Single-pass stream of events.

    Examples:
        [event.type for event in iter_events(build_parser(), "`x`")]
        # ["paragraph_open", "code_inline_open", "text", "code_inline_close",
        #  "paragraph_close"]
    """
    yield from _flatten(parser.parse(content, env if env is not None else {}))
