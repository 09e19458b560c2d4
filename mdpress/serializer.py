"""HTML serialization of a (rewritten) event stream."""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token


def _inline_token(children: list[Token]) -> Token:
    return Token("inline", "", 0, children=children, block=True)


def regroup(events: Iterable[Token]) -> list[Token]:
    """Nest runs of inline events back under ``inline`` tokens.

    markdown-it's renderer decides line breaks from a block token's
    neighbors, so it has to see the same shape the parser produced.
    """
    tokens: list[Token] = []
    pending: list[Token] = []

    for event in events:
        if event.block:
            if pending:
                tokens.append(_inline_token(pending))
                pending = []
            tokens.append(event)
        else:
            pending.append(event)

    if pending:
        tokens.append(_inline_token(pending))

    return tokens


def push_html(
    parser: MarkdownIt, events: Iterable[Token], env: MutableMapping[str, Any] | None = None
) -> str:
    """Render events to HTML with the parser's renderer.

    Html events are written verbatim; every other event goes through the
    renderer's default rules.

    Args:
        parser: Parser whose renderer and options are used.
        events: Event stream, consumed completely.
        env: Environment populated while parsing.

    Returns:
        str: The concatenated HTML.
    """
    return parser.renderer.render(regroup(events), parser.options, env if env is not None else {})
