"""Single-pass markdown to HTML rendering.

The document is tokenized once; every structural event goes through
`EventTransformer.dispatch`, which rewrites it according to the transformer's
state (code block, open shortcode, pending header) before it is serialized.
Four concerns share that pass:

* code highlighting inside fenced blocks;
* shortcodes in plain text, which close the surrounding paragraph early;
* header ids and anchor links, collected for the table of contents;
* ``./`` links rewritten to permalinks.

Errors do not stop the pass. The first one is kept and raised once the stream
has been drained.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from markdown_it.token import Token

from .anchors import AnchorRegistry, find_anchor, generate_slug
from .config import ConfigError
from .constants import EMPTY_PARAGRAPH
from .context import RenderContext
from .exceptions import AnchorTemplateError, LinkResolutionError, ShortcodeError
from .highlighting import END_SNIPPET, HighlighterState, should_highlight, start_snippet, theme_exists
from .links import is_relative_link, resolve_internal_link
from .models import Header, InsertAnchor, PendingHeader, RenderResult, TransformState
from .serializer import push_html
from .shortcodes import (
    ShortcodeBuilder,
    is_block_delimited,
    is_block_shortcode,
    is_inline_shortcode,
    is_shortcode_end,
    parse_shortcode,
    render_simple_shortcode,
    split_single_line_shortcode,
)
from .tokenizer import (
    CODE_BLOCK_CLOSE,
    CODE_BLOCK_OPEN,
    CODE_INLINE_CLOSE,
    CODE_INLINE_OPEN,
    HEADING_CLOSE,
    HEADING_OPEN,
    HTML_INLINE,
    LINK_CLOSE,
    LINK_OPEN,
    PARAGRAPH_CLOSE,
    PARAGRAPH_OPEN,
    SOFTBREAK,
    TEXT,
    build_parser,
    html_event,
    iter_events,
)
from .templates import render_anchor_link
from .toc import make_table_of_contents

logger = logging.getLogger(__name__)


class EventTransformer:
    """Rewrites structural events for one document.

    Args:
        context: Settings for the render.
        highlight: Whether code blocks are highlighted; decided once per
            document by `should_highlight`.

    Examples:
        transformer = EventTransformer(context, highlight=False)
        events = list(transformer.transform(iter_events(parser, content)))
    """

    def __init__(self, context: RenderContext, highlight: bool = False):
        self.context = context
        self.highlight = highlight
        self.state = TransformState(anchors=AnchorRegistry(context.reserved_anchors))

    def transform(self, events: Iterable[Token]) -> Iterator[Token]:
        for event in events:
            yield from self.dispatch(event)

    def dispatch(self, event: Token) -> list[Token]:
        """Rewrite one event into zero or more output events."""
        if self.state.shortcode is not None:
            # Header markup inside a shortcode body is body text, not a header
            if event.type in (HEADING_OPEN, HEADING_CLOSE):
                return [html_event("", block=True)]
            if not event.block and event.type != TEXT:
                return self._absorb_into_shortcode(event)

        handler = self._HANDLERS.get(event.type)
        if handler is None:
            return self._emit(event)
        return handler(self, event)

    def record_error(self, error: Exception) -> None:
        if self.state.error is None:
            self.state.error = error
        else:
            logger.warning("Ignoring error after the first one: %s", error)

    def finish(self) -> None:
        """Settle state left open when the stream ends."""
        if self.state.shortcode is not None:
            logger.warning(
                "Shortcode `%s` has no `{%% end %%}` tag, its body was dropped",
                self.state.shortcode.name,
            )
            self.state.shortcode = None

    def _emit(self, event: Token) -> list[Token]:
        header = self.state.header
        if header is not None and not header.anchored and not event.block:
            header.deferred.append(event)
            return []
        return [event]

    # Text

    def _on_text(self, event: Token) -> list[Token]:
        state = self.state
        text = event.content

        if state.highlighter is not None:
            return [html_event(state.highlighter.highlight(text))]

        if state.shortcode is not None:
            return self._continue_shortcode(text)

        if state.header is not None and not state.header.anchored:
            return self._anchor_header(text, event)

        if state.in_code_block:
            return [event]

        if is_inline_shortcode(text):
            return self._render_inline_shortcode(text)

        if is_block_delimited(text):
            single_line = split_single_line_shortcode(text)
            if single_line is not None:
                opener, body = single_line
                builder = ShortcodeBuilder.from_text(opener)
                builder.append(body)
                return self._render_block_shortcode(builder)
            if is_block_shortcode(text):
                state.shortcode = ShortcodeBuilder.from_text(text)
                logger.debug("Opened block shortcode `%s`", state.shortcode.name)
            return [event.copy(content="")]

        return [event]

    # Shortcodes

    def _render_inline_shortcode(self, text: str) -> list[Token]:
        name, args = parse_shortcode(text)
        try:
            rendered = render_simple_shortcode(self.context.templates, name, args)
        except ShortcodeError as error:
            self.record_error(error)
            return [html_event("")]
        return self._replace_paragraph(rendered)

    def _continue_shortcode(self, text: str) -> list[Token]:
        builder = self.state.shortcode
        if not is_shortcode_end(text):
            builder.append(text)
            return [html_event("")]

        self.state.shortcode = None
        return self._render_block_shortcode(builder)

    def _render_block_shortcode(self, builder: ShortcodeBuilder) -> list[Token]:
        try:
            rendered = builder.render(self.context.templates)
        except ShortcodeError as error:
            self.record_error(error)
            return [html_event("")]
        return self._replace_paragraph(rendered)

    def _replace_paragraph(self, rendered: str) -> list[Token]:
        state = self.state
        if not state.in_paragraph:
            return [html_event(rendered)]

        # The tokenizer opened a paragraph around the shortcode; close it first
        state.in_paragraph = False
        state.added_shortcode = True
        return [html_event(f"</p>{rendered}")]

    def _absorb_into_shortcode(self, event: Token) -> list[Token]:
        # Soft breaks only reflect how the tokenizer split lines
        if event.type == HTML_INLINE:
            self.state.shortcode.append(event.content)
        elif event.type != SOFTBREAK and event.markup:
            self.state.shortcode.append(event.markup)
        return [html_event("")]

    def _on_paragraph_open(self, event: Token) -> list[Token]:
        # Tight list items hide their paragraph tags
        self.state.in_paragraph = not event.hidden
        return [event]

    def _on_paragraph_close(self, event: Token) -> list[Token]:
        self.state.in_paragraph = False
        if self.state.added_shortcode:
            self.state.added_shortcode = False
            return [html_event("", block=True)]
        return [event]

    # Code

    def _on_code_block_open(self, event: Token) -> list[Token]:
        self.state.in_code_block = True
        if not self.highlight:
            return [html_event("<pre><code>", block=True)]

        theme = self.context.highlight_theme
        self.state.highlighter = HighlighterState.for_block(event.info, theme)
        return [html_event(start_snippet(theme), block=True)]

    def _on_code_block_close(self, event: Token) -> list[Token]:
        self.state.in_code_block = False
        if self.state.highlighter is None:
            return [html_event("</code></pre>\n", block=True)]

        self.state.highlighter = None
        return [html_event(END_SNIPPET, block=True)]

    def _on_code_inline_open(self, event: Token) -> list[Token]:
        self.state.in_code_block = True
        return self._emit(event)

    def _on_code_inline_close(self, event: Token) -> list[Token]:
        self.state.in_code_block = False
        return self._emit(event)

    # Headers

    def _on_heading_open(self, event: Token) -> list[Token]:
        self.state.header = PendingHeader(level=int(event.tag[1:]))
        # Attributes are added once the header text is known
        return [html_event(f"<{event.tag} ", block=True)]

    def _on_heading_close(self, event: Token) -> list[Token]:
        header = self.state.header
        events: list[Token] = []
        if header is not None:
            if not header.anchored:
                events.extend(self._anchor_header("", None))
            if header.anchor_link:
                events.append(html_event(header.anchor_link))
        self.state.header = None
        events.append(event)
        return events

    def _anchor_header(self, title: str, event: Token | None) -> list[Token]:
        state = self.state
        header = state.header
        slug = generate_slug(title, preserve_unicode=self.context.preserve_unicode)
        anchor = find_anchor(state.anchors, slug)
        state.anchors.register(anchor)
        header.anchored = True

        state.headers.append(
            Header(
                level=header.level,
                id=anchor,
                title=title,
                permalink=f"{self.context.current_page_permalink}#{anchor}",
            )
        )
        logger.debug("Header `%s` anchored as `%s`", title, anchor)

        anchor_link = self._render_anchor_link(anchor)
        opening = f'id="{anchor}">'
        if self.context.insert_anchor is InsertAnchor.LEFT:
            opening += anchor_link
        elif self.context.insert_anchor is InsertAnchor.RIGHT:
            header.anchor_link = anchor_link

        events = [html_event(opening), *header.deferred]
        header.deferred = []
        if event is not None:
            events.append(event)
        return events

    def _render_anchor_link(self, anchor: str) -> str:
        if not self.context.should_insert_anchor():
            return ""
        try:
            return render_anchor_link(self.context.templates, anchor)
        except AnchorTemplateError as error:
            self.record_error(error)
            return ""

    # Links

    def _on_link_open(self, event: Token) -> list[Token]:
        # Header text must not contain nested anchors
        if self.state.header is not None:
            return [html_event("")]

        href = event.attrGet("href")
        if isinstance(href, str) and is_relative_link(href):
            try:
                url = resolve_internal_link(href, self.context.permalinks)
            except LinkResolutionError as error:
                self.record_error(error)
                return [html_event("")]
            logger.debug("Rewrote link %s to %s", href, url)
            event = event.copy(attrs={**event.attrs, "href": url})

        return self._emit(event)

    def _on_link_close(self, event: Token) -> list[Token]:
        if self.state.header is not None:
            return [html_event("")]
        return self._emit(event)

    _HANDLERS: dict[str, Callable[[EventTransformer, Token], list[Token]]] = {
        TEXT: _on_text,
        PARAGRAPH_OPEN: _on_paragraph_open,
        PARAGRAPH_CLOSE: _on_paragraph_close,
        CODE_BLOCK_OPEN: _on_code_block_open,
        CODE_BLOCK_CLOSE: _on_code_block_close,
        CODE_INLINE_OPEN: _on_code_inline_open,
        CODE_INLINE_CLOSE: _on_code_inline_close,
        HEADING_OPEN: _on_heading_open,
        HEADING_CLOSE: _on_heading_close,
        LINK_OPEN: _on_link_open,
        LINK_CLOSE: _on_link_close,
    }


def markdown_to_html(content: str, context: RenderContext) -> RenderResult:
    """Render a markdown document to HTML and collect its table of contents.

    The whole event stream is always consumed, even after an error; the
    first error is then raised and no partial HTML is returned.

    Args:
        content: Markdown source of the document.
        context: Settings for the render.

    Returns:
        RenderResult: HTML with empty paragraphs removed, and the nested
            table of contents.

    Raises:
        ShortcodeError: If a shortcode template is missing or fails.
        AnchorTemplateError: If the anchor-link template fails.
        LinkResolutionError: If a ``./`` link is not in the permalink table.
        ConfigError: If highlighting is needed and the theme is unknown.

    Examples:
        context = RenderContext(templates=build_template_env(), current_page_permalink="/post/")
        result = markdown_to_html("# Hello\\n\\nWorld", context)
        result.html  # '<h1 id="hello">Hello</h1>\\n<p>World</p>\\n'
    """
    highlight = should_highlight(content, context.highlight_code)
    if highlight and not theme_exists(context.highlight_theme):
        raise ConfigError(f"`highlight_theme` {context.highlight_theme!r} is not a known theme")
    logger.debug("Rendering %d characters (highlighting: %s)", len(content), highlight)

    parser = build_parser()
    env: dict = {}
    transformer = EventTransformer(context, highlight=highlight)

    html = push_html(parser, transformer.transform(iter_events(parser, content, env)), env)
    transformer.finish()

    if transformer.state.error is not None:
        raise transformer.state.error

    return RenderResult(
        html=html.replace(EMPTY_PARAGRAPH, ""),
        toc=make_table_of_contents(transformer.state.headers),
    )
