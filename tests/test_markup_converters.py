from __future__ import annotations

from block_markup.renderers import ConversionContext


def _cells(run_factory, *values):
    return [[run_factory(value)] if value else [] for value in values]


def _row(run_factory, *values, row_id: str = "row"):
    return {"type": "table_row", "id": row_id, "table_row": {"cells": _cells(run_factory, *values)}}


def test_paragraph_with_bold_run(block_factory, run_factory, convert):
    block = block_factory("paragraph", [run_factory("Hello "), run_factory("world", bold=True)])

    markup = convert(block)

    assert markup == "<!-- wp:paragraph -->\n<p>Hello <strong>world</strong></p>\n<!-- /wp:paragraph -->"


def test_empty_paragraph_keeps_placeholder(block_factory, convert):
    markup = convert(block_factory("paragraph", []))

    assert "<p>&nbsp;</p>" in markup


def test_paragraph_colour_and_indented_children(block_factory, convert):
    child = block_factory("paragraph", "Nested")
    block = block_factory("paragraph", "Parent", color="blue", children=[child])

    markup = convert(block)

    assert '<!-- wp:paragraph {"className":"notion-color-blue"} -->' in markup
    assert '<p class="notion-color-blue">Parent</p>' in markup
    assert '<div class="wp-block-group notion-indent">' in markup
    assert markup.index("Parent") < markup.index("Nested")


def test_heading_levels(block_factory, convert):
    markup = convert(block_factory("heading_1", "One"), block_factory("heading_3", "Three"))

    assert '<!-- wp:heading {"level":1} -->\n<h1 class="wp-block-heading">One</h1>\n<!-- /wp:heading -->' in markup
    assert '<h3 class="wp-block-heading">Three</h3>' in markup


def test_toggleable_heading_wraps_children(block_factory, convert):
    block = block_factory(
        "heading_2",
        "FAQ",
        is_toggleable=True,
        children=[block_factory("paragraph", "Answer")],
    )

    markup = convert(block)

    assert markup.startswith("<!-- wp:details -->")
    assert '<summary><h2 class="wp-block-heading">FAQ</h2></summary>' in markup
    assert "Answer" in markup
    assert markup.endswith("</details>\n<!-- /wp:details -->")


def test_quote_renders_children_inside(block_factory, convert):
    block = block_factory("quote", "Said", children=[block_factory("paragraph", "More")])

    markup = convert(block)

    assert markup.startswith('<!-- wp:quote -->\n<blockquote class="wp-block-quote"><p>Said</p>')
    assert markup.index("More") < markup.index("</blockquote>")


def test_callout_with_emoji_and_background_colour(block_factory, convert):
    block = block_factory(
        "callout",
        "Heads up",
        icon={"type": "emoji", "emoji": "💡"},
        color="yellow_background",
    )

    markup = convert(block)

    assert '<div class="notion-callout notion-callout-yellow">' in markup
    assert '<span class="notion-callout-icon">💡</span>' in markup
    assert "<p>Heads up</p>" in markup


def test_callout_unknown_colour_falls_back_to_default(block_factory, convert):
    markup = convert(block_factory("callout", "x", color="neon"))

    assert "notion-callout-default" in markup


def test_to_do_checked_state(block_factory, convert):
    markup = convert(block_factory("to_do", "Done", checked=True), block_factory("to_do", "Open"))

    assert '<p class="notion-to-do is-checked"><span class="notion-to-do-box" aria-hidden="true">☑</span> Done</p>' in markup
    assert '<p class="notion-to-do"><span class="notion-to-do-box" aria-hidden="true">☐</span> Open</p>' in markup


def test_toggle_renders_disclosure(block_factory, convert):
    block = block_factory("toggle", "More", children=[block_factory("paragraph", "Hidden")])

    markup = convert(block)

    assert '<details class="wp-block-details notion-toggle"><summary>More</summary>' in markup
    assert markup.index("Hidden") < markup.index("</details>")


def test_empty_toggle_still_renders_wrapper(block_factory, convert):
    markup = convert(block_factory("toggle", []))

    assert "<summary>&nbsp;</summary></details>" in markup


def test_code_block_language_and_escaping(block_factory, run_factory, convert):
    block = block_factory(
        "code",
        'print("<hi>")',
        language="Python",
        caption=[run_factory("Example")],
    )

    markup = convert(block)

    assert '<!-- wp:code {"language":"python"} -->' in markup
    assert 'class="language-python">print(&quot;&lt;hi&gt;&quot;)</code></pre>' in markup
    assert '<p class="notion-code-caption"><em>Example</em></p>' in markup


def test_code_block_unknown_language_is_plaintext(block_factory, convert):
    markup = convert(block_factory("code", "x", language="brainfuck"))

    assert markup.startswith("<!-- wp:code -->")
    assert "language-plaintext" in markup


def test_equation_block(block_factory, convert):
    markup = convert(block_factory("equation", expression="a < b"))

    assert '<code class="language-latex">a &lt; b</code>' in markup


def test_divider(block_factory, convert):
    markup = convert(block_factory("divider"))

    assert markup == (
        '<!-- wp:separator -->\n<hr class="wp-block-separator has-alpha-channel-opacity"/>\n<!-- /wp:separator -->'
    )


def test_table_with_header_pads_and_truncates_rows(block_factory, run_factory, convert):
    block = block_factory(
        "table",
        table_width=2,
        has_column_header=True,
        children=[
            _row(run_factory, "Name", "Role", row_id="r1"),
            _row(run_factory, "Ada", row_id="r2"),
            _row(run_factory, "Grace", "Admiral", "Extra", row_id="r3"),
        ],
    )

    markup = convert(block)

    assert markup.startswith('<!-- wp:table {"hasFixedLayout":false} -->\n<figure class="wp-block-table"><table>')
    assert "<thead><tr><th>Name</th><th>Role</th></tr></thead>" in markup
    assert "<tr><td>Ada</td><td></td></tr>" in markup
    assert "<tr><td>Grace</td><td>Admiral</td></tr>" in markup
    assert "Extra" not in markup


def test_table_row_header(block_factory, run_factory, convert):
    block = block_factory(
        "table",
        table_width=2,
        has_row_header=True,
        children=[_row(run_factory, "Key", "Value")],
    )

    markup = convert(block)

    assert '<tbody><tr><th scope="row">Key</th><td>Value</td></tr></tbody>' in markup
    assert "<thead>" not in markup


def test_table_without_rows(block_factory, convert):
    markup = convert(block_factory("table", table_width=3))

    assert "[Table with no content]" in markup


def test_column_list_wraps_columns(block_factory):
    from block_markup.renderers import MarkupRenderer

    columns = block_factory(
        "column_list",
        children=[
            block_factory("column", width_ratio=0.5, children=[block_factory("paragraph", "Left")]),
            block_factory("column", children=[block_factory("paragraph", "Right")]),
        ],
    )

    result = MarkupRenderer().convert_blocks([columns])

    assert result.markup.startswith('<!-- wp:columns -->\n<div class="wp-block-columns">')
    assert '<!-- wp:column {"width":"50%"} -->\n<div class="wp-block-column" style="flex-basis:50%">' in result.markup
    assert result.markup.count("<!-- wp:column ") + result.markup.count("<!-- wp:column -->") == 2
    assert result.markup.count("<div") == result.markup.count("</div>")
    assert result.diagnostics.is_clean


def test_child_page_links_through_page_resolver(block_factory, convert):
    block = block_factory("child_page", title="Roadmap", block_id="abc-123")
    ctx = ConversionContext(resolve_page=lambda page_id: f"https://site.example/{page_id}")

    markup = convert(block, ctx=ctx)

    assert '📄 <a href="https://site.example/abc123" data-notion-id="abc-123">Roadmap</a>' in markup


def test_child_page_without_resolver_is_labelled(block_factory, convert):
    markup = convert(block_factory("child_page", title="Roadmap", block_id="abc-123"))

    assert '<p class="notion-child-page" data-notion-id="abc-123">📄 <strong>Roadmap</strong></p>' in markup


def test_child_database_and_link_to_page(block_factory, convert):
    markup = convert(
        block_factory("child_database", title="Tasks", block_id="db1"),
        block_factory("link_to_page", type="page_id", page_id="p1"),
    )

    assert "📊 <strong>Tasks</strong>" in markup
    assert '<p class="notion-link-to-page" data-notion-id="p1">🔗 <strong>Linked page</strong></p>' in markup


def test_synced_block_wraps_children(block_factory, convert):
    block = block_factory("synced_block", synced_from=None, children=[block_factory("paragraph", "Shared")])

    markup = convert(block)

    assert '<div class="wp-block-group notion-synced-block">' in markup
    assert "Shared" in markup


def test_image_with_caption(block_factory, run_factory, convert):
    block = block_factory(
        "image",
        type="external",
        external={"url": "https://cdn.example.com/cat.png"},
        caption=[run_factory("A <cat>")],
    )

    markup = convert(block)

    assert markup.startswith('<!-- wp:image {"sizeSlug":"large"} -->')
    assert '<img src="https://cdn.example.com/cat.png" alt="A &lt;cat&gt;"/>' in markup
    assert '<figcaption class="wp-element-caption">A &lt;cat&gt;</figcaption>' in markup


def test_image_source_goes_through_resource_resolver(block_factory, convert):
    block = block_factory("image", type="file", file={"url": "https://s3.example.com/cat.png?X-Sig=1"})
    ctx = ConversionContext(resolve_resource=lambda url: "/uploads/cat.png")

    markup = convert(block, ctx=ctx)

    assert '<img src="/uploads/cat.png" alt="Image"/>' in markup


def test_file_block(block_factory, convert):
    block = block_factory(
        "file",
        type="file",
        file={"url": "https://files.example.com/report.pdf?a=1&b=2"},
        name="Report.pdf",
    )

    markup = convert(block)

    assert '<a href="https://files.example.com/report.pdf?a=1&amp;b=2">Report.pdf</a>' in markup
    assert "wp-block-file__button" in markup
    assert "\\u0026" in markup.splitlines()[0]


def test_pdf_block_embeds_object(block_factory, convert):
    block = block_factory("pdf", type="external", external={"url": "https://example.com/docs/guide.pdf"})

    markup = convert(block)

    assert '<object class="wp-block-file__embed" data="https://example.com/docs/guide.pdf"' in markup
    assert 'aria-label="guide.pdf"' in markup


def test_video_from_provider_uses_embed(block_factory, convert):
    block = block_factory("video", type="external", external={"url": "https://www.youtube.com/watch?v=abc"})

    markup = convert(block)

    assert '"providerNameSlug":"youtube"' in markup
    assert "is-provider-youtube" in markup
    assert "wp-embed-aspect-16-9" in markup


def test_hosted_video_and_audio(block_factory, convert):
    markup = convert(
        block_factory("video", type="file", file={"url": "https://files.example.com/clip.mp4"}),
        block_factory("audio", type="external", external={"url": "https://files.example.com/song.mp3"}),
    )

    assert '<video controls src="https://files.example.com/clip.mp4"></video>' in markup
    assert '<audio controls src="https://files.example.com/song.mp3"></audio>' in markup


def test_embed_provider_detection(block_factory, convert):
    markup = convert(block_factory("embed", url="https://x.com/someone/status/1"))

    assert '"type":"rich"' in markup
    assert "is-provider-twitter" in markup


def test_generic_embed_uses_sandboxed_iframe(block_factory, convert):
    markup = convert(block_factory("embed", url="https://maps.example.com/view?id=1"))

    assert '<iframe src="https://maps.example.com/view?id=1"' in markup
    assert 'sandbox="allow-scripts allow-same-origin allow-presentation"' in markup


def test_embed_with_unsafe_scheme_is_rejected(block_factory, renderer):
    result = renderer.convert_blocks([block_factory("embed", url="javascript:alert(1)")])

    assert "Invalid embed URL (unsupported scheme)" in result.markup
    assert "javascript" not in result.markup
    assert result.diagnostics.error_count == 1


def test_bookmark_and_link_preview_render_cards(block_factory, convert):
    markup = convert(
        block_factory("bookmark", url="https://example.com/blog/my-first-post.html"),
        block_factory("link_preview", url="https://example.com/"),
    )

    assert '<div class="notion-bookmark-title">My First Post</div>' in markup
    assert '<div class="notion-bookmark-title">example.com</div>' in markup
    assert markup.count('class="notion-bookmark-link"') == 2


def test_block_attributes_cannot_close_comment(block_factory, convert):
    markup = convert(block_factory("embed", url="https://youtube.com/watch?v=1&x=--><script>"))

    opener = markup.splitlines()[0]
    assert opener.count("-->") == 1
    assert "<script>" not in markup
