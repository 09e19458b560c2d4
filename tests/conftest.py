import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from mdpress.context import RenderContext
from mdpress.models import InsertAnchor
from mdpress.templates import build_template_env

SHORTCODE_TEMPLATES = {
    "quote.html": "<blockquote>{{ body }}<cite>{{ author }}</cite></blockquote>",
    "badge.html": '<span class="badge">{{ label }}{% if count is defined %} ({{ count }}){% endif %}</span>',
    "broken.html": "{{ missing_variable }}",
}


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def templates_dir(tmp_path: Path) -> Path:
    """Template directory with a few test shortcodes."""
    directory = tmp_path / "templates"
    (directory / "shortcodes").mkdir(parents=True)
    for name, body in SHORTCODE_TEMPLATES.items():
        (directory / "shortcodes" / name).write_text(textwrap.dedent(body), encoding="utf-8")
    return directory


@pytest.fixture()
def make_context(templates_dir: Path):
    """Builds a `RenderContext` using the test templates."""
    env = build_template_env([templates_dir])

    def factory(**overrides) -> RenderContext:
        settings = {
            "templates": env,
            "current_page_permalink": "https://example.com/page/",
            "insert_anchor": InsertAnchor.NONE,
        }
        settings.update(overrides)
        return RenderContext(**settings)

    return factory
