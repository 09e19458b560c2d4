"""Table of contents built from the headers found while rendering."""

from __future__ import annotations

from dataclasses import replace

from .models import Header


def make_table_of_contents(headers: list[Header]) -> list[Header]:
    """Nest a flat list of headers by level.

    Each header becomes a child of the closest preceding header with a
    smaller level, or a root when there is none. Levels may skip (an ``h4``
    directly under an ``h2``). The input headers are left untouched.

    Args:
        headers: Headers in document order.

    Returns:
        list[Header]: Root headers, with nested headers in `children`.

    Examples:
        make_table_of_contents([Header(1, "a", "A", "/#a"), Header(2, "b", "B", "/#b")])
        # [Header(1, "a", ..., children=[Header(2, "b", ...)])]
    """
    toc: list[Header] = []
    stack: list[Header] = []

    for header in headers:
        node = replace(header, children=[])
        while stack and stack[-1].level >= node.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            toc.append(node)
        stack.append(node)

    return toc


def render_toc_markdown(
    toc: list[Header], list_style: str = "1.", indent_chars: str = "    "
) -> list[str]:
    """Render a table of contents as Markdown list lines.

    Args:
        toc: Result of `make_table_of_contents`.
        list_style: Bullet used for each entry (``"1."``, ``"*"`` or ``"-"``).
        indent_chars: Indentation added per nesting depth.

    Returns:
        list[str]: Lines of the list, each ending with a newline.

    Examples:
        render_toc_markdown(toc, list_style="-")
        # ["- [Intro](/post/#intro)\\n", "    - [Setup](/post/#setup)\\n"]
    """
    lines: list[str] = []

    def visit(headers: list[Header], depth: int) -> None:
        for header in headers:
            lines.append(f"{indent_chars * depth}{list_style} [{header.title}]({header.permalink})\n")
            visit(header.children, depth + 1)

    visit(toc, 0)
    return lines
