"""Jinja2 environment used for anchor links and shortcodes."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from .constants import ANCHOR_LINK_TEMPLATE
from .exceptions import AnchorTemplateError

BUILTIN_TEMPLATES = {
    "anchor-link.html": (
        '<a class="anchor" href="#{{ id }}" aria-label="Anchor link for: {{ id }}">🔗</a>'
    ),
    "shortcodes/youtube.html": (
        '<div{% if class is defined %} class="{{ class }}"{% endif %}>\n'
        '    <iframe src="https://www.youtube.com/embed/{{ id }}'
        '{% if autoplay is defined and autoplay %}?autoplay=1{% endif %}" '
        "webkitallowfullscreen mozallowfullscreen allowfullscreen></iframe>\n"
        "</div>"
    ),
    "shortcodes/vimeo.html": (
        '<div{% if class is defined %} class="{{ class }}"{% endif %}>\n'
        '    <iframe src="https://player.vimeo.com/video/{{ id }}" '
        "webkitallowfullscreen mozallowfullscreen allowfullscreen></iframe>\n"
        "</div>"
    ),
    "shortcodes/streamable.html": (
        '<div{% if class is defined %} class="{{ class }}"{% endif %}>\n'
        '    <iframe src="https://streamable.com/e/{{ id }}" '
        "webkitallowfullscreen mozallowfullscreen allowfullscreen></iframe>\n"
        "</div>"
    ),
    "shortcodes/gist.html": (
        '<div{% if class is defined %} class="{{ class }}"{% endif %}>\n'
        '    <script src="{{ url }}.js{% if file is defined %}?file={{ file }}{% endif %}">'
        "</script>\n"
        "</div>"
    ),
}


def build_template_env(template_dirs: Iterable[str | Path] = ()) -> Environment:
    """Create the template environment for a render.

    Templates found in `template_dirs` take precedence over the built-in
    ones, so a site can restyle ``anchor-link.html`` or any shortcode.
    Undefined variables raise instead of rendering as empty strings.

    Args:
        template_dirs: Directories searched, in order, before the built-ins.

    Returns:
        Environment: Jinja2 environment with HTML autoescaping enabled.

    Examples:
        env = build_template_env(["templates"])
        env.get_template("shortcodes/youtube.html").render(id="dQw4w9WgXcQ")
    """
    loaders: list[BaseLoader] = []
    directories = [str(directory) for directory in template_dirs]
    if directories:
        loaders.append(FileSystemLoader(directories))
    loaders.append(DictLoader(BUILTIN_TEMPLATES))

    # nosemgrep: python.flask.security.xss.audit.direct-use-of-jinja2.direct-use-of-jinja2
    return Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html"]),
    )


def render_anchor_link(env: Environment, anchor: str) -> str:
    """Render ``anchor-link.html`` for a header identifier.

    Raises:
        AnchorTemplateError: If the template is missing or fails to render.
    """
    try:
        return env.get_template(ANCHOR_LINK_TEMPLATE).render(id=anchor)
    except TemplateError as error:
        raise AnchorTemplateError(anchor) from error
