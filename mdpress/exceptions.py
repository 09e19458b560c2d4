"""Package-specific exception types."""

from __future__ import annotations


class RenderError(ValueError):
    """Base class for rendering-related errors.

    Represents errors encountered while transforming markdown into HTML.
    """


class ShortcodeError(RenderError):
    """Raised when a shortcode template fails to render.

    Args:
        name: Name of the shortcode being rendered.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Failed to render {self.name} shortcode")


class AnchorTemplateError(RenderError):
    """Raised when the anchor-link template fails to render.

    Args:
        anchor: Header identifier the anchor was rendered for.
    """

    def __init__(self, anchor: str):
        self.anchor = anchor
        super().__init__(f"Failed to render anchor link for header `{self.anchor}`")


class LinkResolutionError(RenderError):
    """Raised when a relative link has no entry in the permalink table.

    Args:
        link: The relative link as written in the document.
    """

    def __init__(self, link: str):
        self.link = link
        super().__init__(f"Relative link {self.link} not found.")
