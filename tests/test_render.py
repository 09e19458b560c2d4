from __future__ import annotations

import logging

import pytest

import mdpress.transformer as transformer_module
from mdpress.config import ConfigError
from mdpress.exceptions import AnchorTemplateError, LinkResolutionError, ShortcodeError
from mdpress.highlighting import HighlighterState
from mdpress.models import InsertAnchor
from mdpress.transformer import markdown_to_html

ANCHOR_LINK = '<a class="anchor" href="#{0}" aria-label="Anchor link for: {0}">🔗</a>'


def test_plain_document(make_context):
    result = markdown_to_html("# Hello\n\nWorld", make_context())

    assert result.html == '<h1 id="hello">Hello</h1>\n<p>World</p>\n'
    assert [header.id for header in result.toc] == ["hello"]


def test_end_to_end_header_and_relative_link(make_context):
    context = make_context(
        insert_anchor=InsertAnchor.RIGHT,
        permalinks={"other.md": "/other/"},
        reserved_anchors=("example",),
    )

    result = markdown_to_html("# Example\n\nSee [x](./other.md)", context)

    assert result.html == (
        f'<h1 id="example-1">Example{ANCHOR_LINK.format("example-1")}</h1>\n'
        '<p>See <a href="/other/">x</a></p>\n'
    )
    assert result.toc[0].id == "example-1"
    assert result.toc[0].permalink == "https://example.com/page/#example-1"


def test_left_anchor_precedes_title(make_context):
    result = markdown_to_html("## Hello *world*", make_context(insert_anchor=InsertAnchor.LEFT))

    assert result.html == (
        f'<h2 id="hello">{ANCHOR_LINK.format("hello")}Hello <em>world</em></h2>\n'
    )


def test_right_anchor_follows_multi_fragment_title(make_context):
    result = markdown_to_html("## Hello *world*", make_context(insert_anchor=InsertAnchor.RIGHT))

    assert result.html == (
        f'<h2 id="hello">Hello <em>world</em>{ANCHOR_LINK.format("hello")}</h2>\n'
    )
    assert result.toc[0].title == "Hello "


def test_duplicate_headers_get_numbered_ids(make_context):
    result = markdown_to_html("# Example\n\n# Example\n\n## Example\n", make_context())

    assert [header.id for header in result.toc] == ["example", "example-1"]
    assert [header.id for header in result.toc[1].children] == ["example-2"]
    assert 'id="example-2"' in result.html


def test_header_starting_with_markup_is_closed_properly(make_context):
    result = markdown_to_html("# *Big* news", make_context())

    assert result.html == '<h1 id="big"><em>Big</em> news</h1>\n'


def test_header_with_inline_code_uses_code_text(make_context):
    result = markdown_to_html("# `render` function", make_context())

    assert result.html == '<h1 id="render"><code>render</code> function</h1>\n'


def test_links_inside_headers_are_dropped(make_context):
    result = markdown_to_html("# [Home](/home) page", make_context())

    assert result.html == '<h1 id="home">Home page</h1>\n'


def test_empty_header_still_gets_an_id(make_context):
    result = markdown_to_html("#\n", make_context())

    assert result.html == '<h1 id="untitled"></h1>\n'
    assert result.toc[0].title == ""


def test_inline_shortcode_replaces_paragraph(make_context):
    result = markdown_to_html('Intro\n\n{{ badge(label="new", count=3) }}\n\nOutro', make_context())

    assert result.html == '<p>Intro</p>\n<span class="badge">new (3)</span><p>Outro</p>\n'


def test_builtin_youtube_shortcode(make_context):
    result = markdown_to_html('{{ youtube(id="dQw4w9WgXcQ") }}', make_context())

    assert result.html.startswith("<div>")
    assert 'src="https://www.youtube.com/embed/dQw4w9WgXcQ"' in result.html
    assert "<p>" not in result.html


def test_block_shortcode_renders_template_output_exactly(make_context):
    context = make_context()
    expected = context.templates.get_template("shortcodes/quote.html").render(
        author="Vincent", body="A quote"
    )

    result = markdown_to_html('{% quote(author="Vincent") %}\nA quote\n{% end %}', context)

    assert result.html == expected
    assert result.html == "<blockquote>A quote<cite>Vincent</cite></blockquote>"


def test_block_shortcode_body_drops_line_breaks(make_context):
    result = markdown_to_html(
        '{% quote(author="V") %}\nfirst line\nsecond line\n{% end %}', make_context()
    )

    assert result.html == "<blockquote>first linesecond line<cite>V</cite></blockquote>"


def test_block_shortcode_keeps_inline_code_markup(make_context):
    result = markdown_to_html('{% quote(author="V") %}\nuse `x`\n{% end %}', make_context())

    assert result.html == "<blockquote>use `x`<cite>V</cite></blockquote>"


def test_text_after_block_shortcode_is_rendered(make_context):
    result = markdown_to_html(
        '{% quote(author="V") %}\nbody\n{% end %}\n\nAfter *all*', make_context()
    )

    assert result.html == (
        "<blockquote>body<cite>V</cite></blockquote><p>After <em>all</em></p>\n"
    )


def test_shortcode_body_is_not_interpreted(make_context):
    result = markdown_to_html(
        '{% quote(author="V") %}\n{{ badge(label="x") }}\n{% end %}', make_context()
    )

    assert result.html == '<blockquote>{{ badge(label=&#34;x&#34;) }}<cite>V</cite></blockquote>'


def test_shortcodes_are_ignored_in_code(make_context):
    content = '`{{ badge(label="x") }}`\n\n```\n{{ badge(label="x") }}\n```\n'

    result = markdown_to_html(content, make_context())

    assert result.html == (
        "<p><code>{{ badge(label=&quot;x&quot;) }}</code></p>\n"
        "<pre><code>{{ badge(label=&quot;x&quot;) }}\n</code></pre>\n"
    )


def test_unknown_block_tag_is_swallowed(make_context):
    result = markdown_to_html("{% if x %}\n\nText", make_context())

    assert result.html == "\n<p>Text</p>\n"


def test_unclosed_block_shortcode_is_dropped_with_warning(make_context, caplog):
    with caplog.at_level(logging.WARNING, logger="mdpress.transformer"):
        result = markdown_to_html('{% quote(author="V") %}\nnever closed', make_context())

    assert result.html == "\n"
    assert "has no `{% end %}` tag" in caplog.text


def test_missing_shortcode_template_fails(make_context):
    with pytest.raises(ShortcodeError) as excinfo:
        markdown_to_html('{{ nope(a=1) }}', make_context())

    assert excinfo.value.name == "nope"


def test_failing_block_shortcode_fails(make_context):
    with pytest.raises(ShortcodeError):
        markdown_to_html("{% broken() %}\nbody\n{% end %}", make_context())


def test_missing_relative_link_fails(make_context):
    with pytest.raises(LinkResolutionError) as excinfo:
        markdown_to_html("[x](./missing.md)", make_context(permalinks={"other.md": "/other/"}))

    assert excinfo.value.link == "./missing.md"


def test_relative_link_with_fragment(make_context):
    context = make_context(permalinks={"other.md": "/other/"})

    result = markdown_to_html("[x](./other.md#part)", context)

    assert result.html == '<p><a href="/other/#part">x</a></p>\n'


def test_absolute_links_are_untouched(make_context):
    result = markdown_to_html("[x](https://example.com/a.md)", make_context())

    assert result.html == '<p><a href="https://example.com/a.md">x</a></p>\n'


def test_first_error_wins_and_later_ones_are_logged(make_context, caplog):
    with caplog.at_level(logging.WARNING, logger="mdpress.transformer"):
        with pytest.raises(ShortcodeError):
            markdown_to_html("{{ nope(a=1) }}\n\n[x](./missing.md)", make_context())

    assert "Relative link ./missing.md not found." in caplog.text


def test_anchor_template_failure_is_reported(make_context):
    from jinja2 import DictLoader, Environment

    env = Environment(loader=DictLoader({"anchor-link.html": "{{ undefined_call() }}"}))

    with pytest.raises(AnchorTemplateError):
        markdown_to_html("# Title", make_context(templates=env, insert_anchor=InsertAnchor.LEFT))


def test_no_fence_marker_never_invokes_highlighter(make_context, monkeypatch):
    def fail(info, theme):
        raise AssertionError("highlighter should not run")

    monkeypatch.setattr(HighlighterState, "for_block", staticmethod(fail))

    result = markdown_to_html("~~~python\nx = 1\n~~~\n", make_context(highlight_code=True))

    assert result.html == "<pre><code>x = 1\n</code></pre>\n"


def test_two_code_blocks_get_independent_highlighters(make_context, monkeypatch):
    calls: list[str] = []
    original = HighlighterState.for_block

    def spy(info, theme):
        calls.append(info)
        return original(info, theme)

    monkeypatch.setattr(transformer_module.HighlighterState, "for_block", staticmethod(spy))
    content = "```python\nx = 1\n```\n\n```nosuchlang\nplain <b>\n```\n"

    result = markdown_to_html(content, make_context(highlight_code=True, highlight_theme="monokai"))

    assert calls == ["python", "nosuchlang"]
    assert result.html.count('<pre style="background-color: #272822;"><code>') == 2
    assert result.html.count("</code></pre>\n") == 2
    assert "plain &lt;b&gt;" in result.html
    assert "<span" in result.html


def test_highlighting_disabled_emits_plain_code(make_context):
    result = markdown_to_html("```python\nx < 1\n```\n", make_context(highlight_code=False))

    assert result.html == "<pre><code>x &lt; 1\n</code></pre>\n"


def test_unknown_theme_is_rejected_when_highlighting(make_context):
    with pytest.raises(ConfigError):
        markdown_to_html("```\nx\n```\n", make_context(highlight_code=True, highlight_theme="nope"))


def test_footnotes_and_tables_render(make_context):
    result = markdown_to_html("| a |\n|---|\n| 1 |\n\nText[^1]\n\n[^1]: Note\n", make_context())

    assert "<table>" in result.html
    assert 'class="footnote-ref"' in result.html


def test_rendering_is_idempotent(make_context):
    context = make_context(
        insert_anchor=InsertAnchor.RIGHT,
        highlight_code=True,
        permalinks={"other.md": "/other/"},
    )
    content = (
        "# Title\n\n## Part\n\n## Part\n\n```python\nprint('hi')\n```\n\n"
        '{{ badge(label="x") }}\n\n[other](./other.md)\n'
    )

    assert markdown_to_html(content, context) == markdown_to_html(content, context)


def test_single_line_block_shortcode(make_context):
    result = markdown_to_html('{% quote(author="v") %}body{% end %}', make_context())

    assert result.html == "<blockquote>body<cite>v</cite></blockquote>"


def test_shortcode_in_table_cell_leaves_paragraphs_intact(make_context):
    content = '| a |\n|---|\n| {{ badge(label="x") }} |\n\nNext paragraph\n'

    result = markdown_to_html(content, make_context())

    assert '<td><span class="badge">x</span></td>' in result.html
    assert "</p><span" not in result.html
    assert result.html.endswith("</table>\n<p>Next paragraph</p>\n")


def test_shortcode_in_tight_list_item(make_context):
    result = markdown_to_html('- {{ badge(label="x") }}\n- item\n', make_context())

    assert result.html == (
        '<ul>\n<li><span class="badge">x</span></li>\n<li>item</li>\n</ul>\n'
    )


def test_header_inside_shortcode_body_is_body_text(make_context):
    result = markdown_to_html('{% quote(author="v") %}\n# Title\n{% end %}\n', make_context())

    assert result.html == "\n<blockquote>Title<cite>v</cite></blockquote>"
    assert result.toc == []


def test_shortcode_syntax_in_header_is_header_text(make_context):
    result = markdown_to_html('# {{ badge(label="x") }}', make_context())

    assert result.html == '<h1 id="badgelabelx">{{ badge(label=&quot;x&quot;) }}</h1>\n'
    assert result.toc[0].title == '{{ badge(label="x") }}'
