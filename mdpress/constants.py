"""Constants used across the mdpress package."""

from __future__ import annotations

# Highlighting is only attempted when the raw source contains a fence marker
FENCE_MARKER = "```"
PLAIN_TEXT_LEXER = "text"

# Shortcode delimiters
INLINE_SHORTCODE_OPEN = "{{"
INLINE_SHORTCODE_CLOSE = "}}"
BLOCK_SHORTCODE_OPEN = "{%"
BLOCK_SHORTCODE_CLOSE = "%}"
SHORTCODE_END = "{% end %}"

# Template names
ANCHOR_LINK_TEMPLATE = "anchor-link.html"
SHORTCODE_TEMPLATE = "shortcodes/{name}.html"

# Relative links handled by the link resolver
RELATIVE_LINK_PREFIX = "./"

# Paragraphs emptied by shortcodes are removed after rendering
EMPTY_PARAGRAPH = "<p></p>"

MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".mkdn")
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
