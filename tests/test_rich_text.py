from __future__ import annotations

from itertools import permutations

from hypothesis import given
from hypothesis import strategies as st

from block_markup.models.rich_text import Annotations, TextRun, text_runs
from block_markup.renderers.rich_text import (
    EMPTY_PLACEHOLDER,
    TextRunRenderer,
    internal_page_id,
    plain_text,
    render_rich_text,
    safe_url,
)


def test_plain_run_is_escaped():
    output = render_rich_text([TextRun(content='<script>alert("x")</script> & co')])

    assert "<script>" not in output
    assert output == "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt; &amp; co"


def test_empty_run_list_returns_placeholder():
    assert render_rich_text([]) == EMPTY_PLACEHOLDER
    assert render_rich_text(None) == EMPTY_PLACEHOLDER
    assert render_rich_text([TextRun(content="")]) == EMPTY_PLACEHOLDER


def test_annotations_nest_in_fixed_order(text_run):
    run = text_run("x", "underline", "bold", "code", "italic", "strikethrough")

    output = render_rich_text([run])

    assert output == "<u><s><em><strong><code>x</code></strong></em></s></u>"


def test_annotation_order_independent_of_input_order():
    outputs = {
        render_rich_text([TextRun(content="word", annotations=Annotations.of(order))])
        for order in permutations(["bold", "italic", "underline"])
    }

    assert outputs == {"<u><em><strong>word</strong></em></u>"}


def test_color_and_link_wrap_outermost():
    run = TextRun(
        content="docs",
        annotations=Annotations(bold=True),
        color="red",
        link="https://example.com/docs",
    )

    output = render_rich_text([run])

    assert output == (
        '<a href="https://example.com/docs"><span class="notion-color-red"><strong>docs</strong></span></a>'
    )


def test_default_color_adds_no_span():
    assert render_rich_text([TextRun(content="plain", color="default")]) == "plain"


def test_unsafe_link_is_dropped_but_text_kept():
    output = render_rich_text([TextRun(content="click", link="javascript:alert(1)")])

    assert output == "click"
    assert "href" not in output


def test_internal_link_resolved_through_page_resolver():
    page_id = "0123456789abcdef0123456789abcdef"
    renderer = TextRunRenderer(resolve_page=lambda pid: f"/pages/{pid[:6]}")

    output = renderer.render([TextRun(content="see", link=f"/{page_id}")])

    assert output == f'<a href="/pages/012345" data-notion-id="{page_id}">see</a>'


def test_internal_link_kept_when_resolver_misses():
    url = "https://www.notion.so/Team-Page-0123456789abcdef0123456789abcdef"
    renderer = TextRunRenderer(resolve_page=lambda pid: None)

    output = renderer.render([TextRun(content="team", link=url)])

    assert f'href="{url}"' in output
    assert 'data-notion-id="0123456789abcdef0123456789abcdef"' in output


def test_newlines_become_line_breaks():
    assert render_rich_text([TextRun(content="a\nb")]) == "a<br>b"


def test_equation_run_renders_as_code():
    runs = text_runs([{"type": "equation", "equation": {"expression": "e=mc^2"}, "plain_text": "e=mc^2"}])

    assert render_rich_text(runs) == '<code class="notion-equation">e=mc^2</code>'


def test_upstream_shape_is_normalised(run_factory):
    runs = text_runs([run_factory("Hello ", italic=True), run_factory("world", bold=True, color="blue")])

    assert [run.content for run in runs] == ["Hello ", "world"]
    assert runs[0].annotations.italic
    assert runs[1].color == "blue"
    assert render_rich_text(runs) == '<em>Hello </em><span class="notion-color-blue"><strong>world</strong></span>'


def test_malformed_runs_degrade_to_empty_content():
    runs = text_runs([{"type": "text"}, {"type": "mention", "plain_text": "@Ada"}, 42])

    assert [run.content for run in runs] == ["", "@Ada"]
    assert render_rich_text(runs) == "@Ada"


def test_plain_text_strips_markup(text_run):
    runs = [text_run("Bold", "bold"), text_run(" & <plain>")]

    assert plain_text(runs) == "Bold & <plain>"


def test_safe_url_allows_known_schemes_and_relative_paths():
    assert safe_url("https://example.com") == "https://example.com"
    assert safe_url("mailto:a@example.com") == "mailto:a@example.com"
    assert safe_url("/relative/path") == "/relative/path"
    assert safe_url("#anchor") == "#anchor"
    assert safe_url("data:text/html;base64,AAAA") is None
    assert safe_url("//evil.example.com") is None
    assert safe_url("") is None


def test_internal_page_id_ignores_foreign_hosts():
    page_id = "0123456789abcdef0123456789abcdef"

    assert internal_page_id(f"https://example.com/{page_id}") is None
    assert internal_page_id(f"https://acme.notion.site/Page-{page_id}") == page_id
    assert internal_page_id("/01234567-89ab-cdef-0123-456789abcdef") == page_id


@given(st.text())
def test_rendered_text_never_contains_raw_markup(content):
    output = render_rich_text([TextRun(content=content, annotations=Annotations(bold=True))])

    inner = output.removeprefix("<strong>").removesuffix("</strong>")
    assert "<" not in inner.replace("<br>", "")
    assert '"' not in inner


@given(st.permutations(["bold", "italic", "strikethrough", "underline", "code"]))
def test_full_annotation_set_nests_identically(order):
    output = render_rich_text([TextRun(content="t", annotations=Annotations.of(order))])

    assert output == "<u><s><em><strong><code>t</code></strong></em></s></u>"


def test_null_fields_in_a_run_are_blanked():
    runs = text_runs(
        [
            {"content": None, "annotations": None, "color": 3, "link": None},
            {"content": "keep", "annotations": {"bold": None, "italic": True}, "is_equation": None},
        ]
    )

    assert [run.content for run in runs] == ["", "keep"]
    assert runs[0].annotations == Annotations()
    assert runs[0].color is None
    assert runs[1].annotations.active() == frozenset({"italic"})
    assert render_rich_text(runs) == "<em>keep</em>"


def test_unreadable_run_is_skipped():
    runs = text_runs([{"content": "bad", "annotations": {"bold": "sometimes"}}, "fine"])

    assert [run.content for run in runs] == ["fine"]
