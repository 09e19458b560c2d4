"""Data models for mdpress."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from markdown_it.token import Token

from .anchors import AnchorRegistry
from .highlighting import HighlighterState
from .shortcodes import ShortcodeBuilder


class InsertAnchor(Enum):
    """Where the anchor link goes relative to a header's title.

    Attributes:
        LEFT: Anchor link before the title.
        RIGHT: Anchor link after the title.
        NONE: No anchor link; the header still gets an ``id``.
    """

    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


@dataclass
class Header:
    """A rendered header, as listed in the table of contents.

    Attributes:
        level: Header level, 1 to 6.
        id: Identifier assigned to the header's ``id`` attribute.
        title: Text of the header's first text fragment.
        permalink: Page permalink followed by ``#<id>``.
        children: Headers nested under this one in the table of contents.
    """

    level: int
    id: str
    title: str
    permalink: str
    children: list[Header] = field(default_factory=list)


@dataclass
class PendingHeader:
    """A header whose opening tag has been emitted but not yet completed.

    Attributes:
        level: Header level taken from the opening tag.
        anchored: Whether the ``id`` attribute and anchor have been emitted.
        anchor_link: Rendered anchor link waiting to be placed after the title.
        deferred: Events seen before the first text fragment, re-emitted once
            the opening tag is completed.
    """

    level: int
    anchored: bool = False
    anchor_link: str = ""
    deferred: list[Token] = field(default_factory=list)


@dataclass
class TransformState:
    """Everything the event transformer carries from one event to the next.

    Attributes:
        in_code_block: Inside a fenced block or an inline code span.
        highlighter: Active highlighter while inside a highlighted code block.
        shortcode: Open block shortcode collecting its body.
        header: Header currently being rendered.
        in_paragraph: A visible paragraph is open; shortcodes replacing its
            content must close it first.
        added_shortcode: The current paragraph was closed early by a shortcode,
            so its closing tag must be dropped.
        anchors: Identifiers used so far in the document.
        headers: Completed headers in document order.
        error: First error recorded during the pass.
    """

    in_code_block: bool = False
    highlighter: HighlighterState | None = None
    shortcode: ShortcodeBuilder | None = None
    header: PendingHeader | None = None
    in_paragraph: bool = False
    added_shortcode: bool = False
    anchors: AnchorRegistry = field(default_factory=AnchorRegistry)
    headers: list[Header] = field(default_factory=list)
    error: Exception | None = None


@dataclass
class RenderResult:
    """Outcome of a successful render.

    Attributes:
        html: Final HTML with empty paragraphs removed.
        toc: Table of contents as a forest of nested headers.
    """

    html: str
    toc: list[Header]
