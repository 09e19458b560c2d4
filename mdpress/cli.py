"""
Renders a Markdown file to HTML.
Shortcodes are expanded, headers anchored and ``./`` links resolved; with
``--toc`` the table of contents is printed instead of the HTML.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .context import RenderContext
from .exceptions import RenderError
from .filesystem import (
    enforce_file_size,
    get_max_file_size,
    load_permalinks,
    normalize_filepath,
    safe_read,
)
from .toc import render_toc_markdown
from .transformer import markdown_to_html

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option("--permalink", default="", help="Permalink of the rendered page")
@click.option(
    "--insert-anchor",
    type=click.Choice(["left", "right", "none"]),
    help="Where to place header anchor links",
)
@click.option("--highlight/--no-highlight", default=None, help="Highlight fenced code blocks")
@click.option("--theme", help="Pygments style used for highlighting")
@click.option(
    "--templates",
    "template_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help="Template directory searched before the built-in templates (repeatable)",
)
@click.option(
    "--permalinks",
    "permalinks_file",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML file mapping document paths to permalinks",
)
@click.option("--toc", "print_toc", is_flag=True, help="Print the table of contents instead")
@click.option("--verbose", "-v", is_flag=True, help="Log rendering decisions to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    permalink: str = "",
    insert_anchor: str | None = None,
    highlight: bool | None = None,
    theme: str | None = None,
    template_dirs: tuple[str, ...] = (),
    permalinks_file: str | None = None,
    print_toc: bool = False,
    verbose: bool = False,
):
    """
    Entry point for rendering a Markdown file.

    Args:
        filepath: Path to the Markdown file to render.
        permalink: Permalink of the page, used for header permalinks.
        insert_anchor: Override for the anchor link placement.
        highlight: Override for code highlighting.
        theme: Override for the highlight theme.
        template_dirs: Template directories overriding the configured ones.
        permalinks_file: TOML permalink table for ``./`` links.
        print_toc: Print the table of contents as a Markdown list.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths or contain
            unsupported overrides, including invalid configuration values.
        click.ClickException: If the file cannot be read or rendering fails.

    Examples:
        mdpress content/post.md --permalink https://example.com/post/ --insert-anchor right
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            insert_anchor=insert_anchor,
            highlight_code=highlight,
            highlight_theme=theme,
            template_dirs=template_dirs or None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        permalinks = load_permalinks(Path(permalinks_file)) if permalinks_file else {}
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        enforce_file_size(filepath, get_max_file_size(default=config.max_file_size))
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except (IOError, ValueError) as error:
        raise click.ClickException(str(error)) from error

    context = RenderContext.from_config(
        config, current_page_permalink=permalink, permalinks=permalinks
    )
    try:
        result = markdown_to_html(content, context)
    except (RenderError, ConfigError) as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    if print_toc:
        print(
            "".join(render_toc_markdown(result.toc, config.list_style, config.indent_chars)),
            end="",
        )
    else:
        print(result.html, end="")


if __name__ == "__main__":
    cli()
