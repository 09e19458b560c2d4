"""
mdpress: Markdown to HTML with highlighting, shortcodes, anchors and links.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdpress content/post.md --permalink https://example.com/post/

Library Usage:
    from mdpress import RenderContext, build_template_env, markdown_to_html

    context = RenderContext(
        templates=build_template_env(["templates"]),
        current_page_permalink="https://example.com/post/",
        permalinks={"other.md": "https://example.com/other/"},
    )
    result = markdown_to_html(content, context)
    result.html, result.toc
"""

from .anchors import AnchorRegistry, find_anchor, generate_slug
from .config import ConfigError, RenderConfig, build_config
from .context import RenderContext
from .exceptions import AnchorTemplateError, LinkResolutionError, RenderError, ShortcodeError
from .models import Header, InsertAnchor, RenderResult
from .templates import build_template_env
from .toc import make_table_of_contents, render_toc_markdown
from .transformer import EventTransformer, markdown_to_html

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "markdown_to_html",
    "EventTransformer",
    "make_table_of_contents",
    "render_toc_markdown",
    "generate_slug",
    "find_anchor",
    "build_template_env",
    # Data models
    "AnchorRegistry",
    "Header",
    "InsertAnchor",
    "RenderContext",
    "RenderResult",
    # Configuration
    "RenderConfig",
    "build_config",
    # Exceptions
    "AnchorTemplateError",
    "ConfigError",
    "LinkResolutionError",
    "RenderError",
    "ShortcodeError",
    # Version
    "__version__",
]
