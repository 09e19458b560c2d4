"""Per-render settings handed to the transformer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from jinja2 import Environment

from .config import RenderConfig, normalize_config
from .models import InsertAnchor
from .templates import build_template_env


@dataclass(frozen=True)
class RenderContext:
    """Read-only settings for rendering one document.

    Attributes:
        templates: Jinja2 environment providing ``anchor-link.html`` and the
            ``shortcodes/*.html`` templates.
        highlight_code: Whether fenced code blocks may be highlighted.
        highlight_theme: Pygments style name.
        current_page_permalink: Permalink of the document being rendered;
            header permalinks are built from it.
        insert_anchor: Anchor link placement.
        permalinks: Document paths mapped to permalinks, for ``./`` links.
        reserved_anchors: Identifiers already used on the page.
        preserve_unicode: Whether header ids keep Unicode characters.
    """

    templates: Environment
    highlight_code: bool = False
    highlight_theme: str = "monokai"
    current_page_permalink: str = ""
    insert_anchor: InsertAnchor = InsertAnchor.NONE
    permalinks: Mapping[str, str] = field(default_factory=dict)
    reserved_anchors: tuple[str, ...] = ()
    preserve_unicode: bool = False

    def should_insert_anchor(self) -> bool:
        return self.insert_anchor is not InsertAnchor.NONE

    @classmethod
    def from_config(
        cls,
        config: RenderConfig,
        templates: Environment | None = None,
        current_page_permalink: str = "",
        permalinks: Mapping[str, str] | None = None,
        reserved_anchors: tuple[str, ...] = (),
    ) -> RenderContext:
        """Build a context from a validated `RenderConfig`.

        A template environment is created from ``config.template_dirs`` when
        `templates` is not given.

        Examples:
            context = RenderContext.from_config(
                build_config(Path.cwd()),
                current_page_permalink="https://example.com/blog/post/",
                permalinks={"blog/other.md": "https://example.com/blog/other/"},
            )
        """
        config = normalize_config(config)
        return cls(
            templates=templates or build_template_env(config.template_dirs),
            highlight_code=config.highlight_code,
            highlight_theme=config.highlight_theme,
            current_page_permalink=current_page_permalink,
            insert_anchor=InsertAnchor(config.insert_anchor),
            permalinks=dict(permalinks or {}),
            reserved_anchors=tuple(reserved_anchors),
            preserve_unicode=config.preserve_unicode,
        )
