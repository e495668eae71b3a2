"""Block converters producing block-comment delimited CMS markup."""

from __future__ import annotations

from typing import Any

from block_markup.diagnostics import DiagnosticKind, MalformedInputError
from block_markup.models.blocks import (
    Block,
    BlockType,
    CalloutBlock,
    ChildDatabaseBlock,
    ChildPageBlock,
    CodeBlock,
    ColumnBlock,
    EquationBlock,
    HeadingBlock,
    LinkToPageBlock,
    SyncedBlock,
    TableBlock,
    TableRowBlock,
    ToDoBlock,
)
from block_markup.renderers.base import BaseConverter, ConversionContext, Converter, placeholder_comment
from block_markup.renderers.rich_text import EMPTY_PLACEHOLDER, escape, safe_url

from .helpers import class_attr, color_class, indented_children, join_sections, recoverable_text, wrap_block
from .lists import BulletedListConverter, NumberedListConverter
from .media import (
    AudioConverter,
    BookmarkConverter,
    EmbedConverter,
    FileConverter,
    ImageConverter,
    PdfConverter,
    VideoConverter,
)

CALLOUT_COLORS = frozenset(
    {"default", "gray", "brown", "orange", "yellow", "green", "blue", "purple", "pink", "red"}
)

CODE_LANGUAGES: dict[str, str] = {
    "abap": "abap",
    "arduino": "arduino",
    "bash": "bash",
    "basic": "basic",
    "c": "c",
    "clojure": "clojure",
    "coffeescript": "coffeescript",
    "c++": "cpp",
    "c#": "csharp",
    "css": "css",
    "dart": "dart",
    "diff": "diff",
    "docker": "docker",
    "elixir": "elixir",
    "elm": "elm",
    "erlang": "erlang",
    "flow": "flow",
    "fortran": "fortran",
    "f#": "fsharp",
    "gherkin": "gherkin",
    "glsl": "glsl",
    "go": "go",
    "graphql": "graphql",
    "groovy": "groovy",
    "haskell": "haskell",
    "html": "markup",
    "java": "java",
    "javascript": "javascript",
    "json": "json",
    "julia": "julia",
    "kotlin": "kotlin",
    "latex": "latex",
    "less": "less",
    "lisp": "lisp",
    "livescript": "livescript",
    "lua": "lua",
    "makefile": "makefile",
    "markdown": "markdown",
    "markup": "markup",
    "matlab": "matlab",
    "mermaid": "mermaid",
    "nix": "nix",
    "objective-c": "objectivec",
    "ocaml": "ocaml",
    "pascal": "pascal",
    "perl": "perl",
    "php": "php",
    "plain text": "plaintext",
    "powershell": "powershell",
    "prolog": "prolog",
    "protobuf": "protobuf",
    "python": "python",
    "r": "r",
    "reason": "reason",
    "ruby": "ruby",
    "rust": "rust",
    "sass": "sass",
    "scala": "scala",
    "scheme": "scheme",
    "scss": "scss",
    "shell": "shell",
    "sql": "sql",
    "swift": "swift",
    "typescript": "typescript",
    "vb.net": "vbnet",
    "verilog": "verilog",
    "vhdl": "vhdl",
    "visual basic": "vbnet",
    "webassembly": "wasm",
    "xml": "markup",
    "yaml": "yaml",
    "java/c/c++/c#": "clike",
}

# ---------------------------------------------------------------------------
# Text blocks


class ParagraphConverter(BaseConverter):
    block_types = (BlockType.PARAGRAPH.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        text = context.rich_text(getattr(block, "rich_text", ()))
        color = color_class(getattr(block, "color", None))
        attrs = {"className": color} if color else None
        paragraph = wrap_block("paragraph", f"<p{class_attr(color)}>{text}</p>", attrs)
        return join_sections([paragraph, indented_children(block, context)])


class HeadingConverter(BaseConverter):
    block_types = (BlockType.HEADING_1.value, BlockType.HEADING_2.value, BlockType.HEADING_3.value)

    def convert(self, block: Block, context: ConversionContext) -> str:
        level = block.level if isinstance(block, HeadingBlock) else 2
        text = context.rich_text(getattr(block, "rich_text", ()))
        color = color_class(getattr(block, "color", None))
        heading_html = f"<h{level}{class_attr('wp-block-heading', color)}>{text}</h{level}>"
        if isinstance(block, HeadingBlock) and block.is_toggleable:
            children = context.render_children(block)
            inner = f'<details class="wp-block-details notion-toggle-heading"><summary>{heading_html}</summary>'
            if children:
                inner = f"{inner}\n{children}\n"
            return wrap_block("details", f"{inner}</details>")
        heading = wrap_block("heading", heading_html, {"level": level})
        return join_sections([heading, indented_children(block, context)])


class QuoteConverter(BaseConverter):
    block_types = (BlockType.QUOTE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        text = context.rich_text(getattr(block, "rich_text", ()))
        color = color_class(getattr(block, "color", None))
        children = context.render_children(block)
        inner = f"<p>{text}</p>"
        if children:
            inner = f"{inner}\n{children}\n"
        return wrap_block("quote", f"<blockquote{class_attr('wp-block-quote', color)}>{inner}</blockquote>")


class CalloutConverter(BaseConverter):
    block_types = (BlockType.CALLOUT.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        text = context.rich_text(getattr(block, "rich_text", ()))
        color = (getattr(block, "color", None) or "default").removesuffix("_background")
        if color not in CALLOUT_COLORS:
            color = "default"
        parts = [f'<div class="notion-callout notion-callout-{color}">']
        icon = self._icon(block, context)
        if icon:
            parts.append(icon)
        parts.append(f'<div class="notion-callout-content"><p>{text}</p>')
        children = context.render_children(block)
        if children:
            parts.append(f"\n{children}\n")
        parts.append("</div></div>")
        return wrap_block("html", "".join(parts))

    def _icon(self, block: Block, context: ConversionContext) -> str:
        icon = block.icon if isinstance(block, CalloutBlock) else None
        if icon is None:
            return ""
        if icon.kind == "emoji" and icon.emoji:
            return f'<span class="notion-callout-icon">{escape(icon.emoji)}</span>'
        src = safe_url(context.resource_url(icon.url or ""))
        if src:
            return f'<span class="notion-callout-icon"><img src="{escape(src)}" alt="" width="20" height="20"/></span>'
        return ""


class ToDoConverter(BaseConverter):
    block_types = (BlockType.TO_DO.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        checked = block.checked if isinstance(block, ToDoBlock) else bool(block.extra_field("checked"))
        text = context.rich_text(getattr(block, "rich_text", ()))
        state = "is-checked" if checked else ""
        glyph = "☑" if checked else "☐"
        classes = " ".join(name for name in ("notion-to-do", state) if name)
        paragraph = wrap_block(
            "paragraph",
            f'<p class="{classes}"><span class="notion-to-do-box" aria-hidden="true">{glyph}</span> {text}</p>',
            {"className": classes},
        )
        return join_sections([paragraph, indented_children(block, context)])


class ToggleConverter(BaseConverter):
    block_types = (BlockType.TOGGLE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        summary = context.rich_text(getattr(block, "rich_text", ()))
        color = color_class(getattr(block, "color", None), prefix="notion-toggle")
        children = context.render_children(block)
        inner = f"<details{class_attr('wp-block-details', 'notion-toggle', color)}><summary>{summary}</summary>"
        if children:
            inner = f"{inner}\n{children}\n"
        return wrap_block("details", f"{inner}</details>")


class CodeConverter(BaseConverter):
    block_types = (BlockType.CODE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        if not isinstance(block, CodeBlock):
            raise MalformedInputError("code block payload was not recognised")
        code = escape(context.plain_text(block.rich_text))
        language = CODE_LANGUAGES.get(block.language.strip().lower(), "plaintext")
        attrs = {"language": language} if language != "plaintext" else None
        code_html = f'<pre class="wp-block-code"><code lang="{escape(language)}" class="language-{escape(language)}">{code}</code></pre>'
        sections = [wrap_block("code", code_html, attrs)]
        caption = context.plain_text(block.caption).strip()
        if caption:
            sections.append(
                wrap_block(
                    "paragraph",
                    f'<p class="notion-code-caption"><em>{escape(caption)}</em></p>',
                    {"className": "notion-code-caption"},
                )
            )
        return join_sections(sections)


class EquationConverter(BaseConverter):
    block_types = (BlockType.EQUATION.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        expression = block.expression if isinstance(block, EquationBlock) else ""
        body = escape(expression) if expression.strip() else EMPTY_PLACEHOLDER
        return wrap_block(
            "html",
            f'<div class="notion-equation"><code class="language-latex">{body}</code></div>',
        )


# ---------------------------------------------------------------------------
# Structural blocks


class DividerConverter(BaseConverter):
    block_types = (BlockType.DIVIDER.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        return wrap_block("separator", '<hr class="wp-block-separator has-alpha-channel-opacity"/>')


class TableConverter(BaseConverter):
    """Tables read their rows from ``table_row`` children.

    Every row is padded or truncated to ``table_width`` so the grid stays
    rectangular even when the source rows disagree.
    """

    block_types = (BlockType.TABLE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        if not isinstance(block, TableBlock):
            raise MalformedInputError("table block payload was not recognised")
        rows = [child for child in block.children if isinstance(child, TableRowBlock)]
        if block.extra_field("children_truncated"):
            return context.truncated(block)
        if not rows:
            return wrap_block("paragraph", '<p class="notion-empty-table">[Table with no content]</p>')
        if not context.children_allowed:
            return context.truncated(block)

        width = block.table_width or max(len(row.cells) for row in rows)
        row_context = context.descend()
        header_rows: list[str] = []
        body_rows: list[str] = []
        for index, row in enumerate(rows):
            is_header_row = block.has_column_header and index == 0
            rendered = self._render_row(row, width, is_header_row, block.has_row_header, row_context)
            (header_rows if is_header_row else body_rows).append(rendered)

        parts = ['<figure class="wp-block-table"><table>']
        if header_rows:
            parts.append(f"<thead>{''.join(header_rows)}</thead>")
        if body_rows:
            parts.append(f"<tbody>{''.join(body_rows)}</tbody>")
        parts.append("</table></figure>")
        attrs: dict[str, Any] = {}
        if block.has_column_header:
            attrs["hasFixedLayout"] = False
        return wrap_block("table", "".join(parts), attrs or None)

    def _render_row(
        self,
        row: TableRowBlock,
        width: int,
        is_header_row: bool,
        has_row_header: bool,
        context: ConversionContext,
    ) -> str:
        if context.diagnostics is not None:
            context.diagnostics.count_block(BlockType.TABLE_ROW.value)
        cells = list(row.cells[:width])
        cells.extend(() for _ in range(width - len(cells)))
        rendered: list[str] = []
        for column, cell in enumerate(cells):
            content = context.rich_text(cell) if cell else ""
            if is_header_row:
                rendered.append(f"<th>{content}</th>")
            elif has_row_header and column == 0:
                rendered.append(f'<th scope="row">{content}</th>')
            else:
                rendered.append(f"<td>{content}</td>")
        return f"<tr>{''.join(rendered)}</tr>"


class ColumnListConverter(BaseConverter):
    block_types = (BlockType.COLUMN_LIST.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        columns = context.render_children(block)
        inner = f'<div class="wp-block-columns">\n{columns}\n</div>' if columns else '<div class="wp-block-columns"></div>'
        return wrap_block("columns", inner)


class ColumnConverter(BaseConverter):
    block_types = (BlockType.COLUMN.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        ratio = block.width_ratio if isinstance(block, ColumnBlock) else None
        attrs = None
        style = ""
        if ratio and 0 < ratio <= 1:
            basis = f"{round(ratio * 100, 2):g}%"
            attrs = {"width": basis}
            style = f' style="flex-basis:{basis}"'
        children = context.render_children(block)
        inner = f'<div class="wp-block-column"{style}>'
        if children:
            inner = f"{inner}\n{children}\n"
        return wrap_block("column", f"{inner}</div>", attrs)


class SyncedBlockConverter(BaseConverter):
    block_types = (BlockType.SYNCED_BLOCK.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        children = context.render_children(block)
        if not children:
            source = block.synced_from if isinstance(block, SyncedBlock) else None
            source_id = (source or {}).get("block_id") or ""
            if source_id:
                context.report(
                    DiagnosticKind.UNRESOLVED_DEPENDENCY,
                    block,
                    f"synced content from {source_id} was not supplied",
                )
                return f"<!-- Synced block content not supplied (source: {escape(str(source_id))}) -->"
            return placeholder_comment("Empty synced block", block)
        return wrap_block(
            "group",
            f'<div class="wp-block-group notion-synced-block">\n{children}\n</div>',
            {"className": "notion-synced-block"},
        )


class PageLinkConverter(BaseConverter):
    """Child pages, child databases and page mentions rendered as links."""

    block_types = (
        BlockType.CHILD_PAGE.value,
        BlockType.CHILD_DATABASE.value,
        BlockType.LINK_TO_PAGE.value,
    )

    def convert(self, block: Block, context: ConversionContext) -> str:
        target_id, label, kind, icon = self._describe(block)
        css = f"notion-{kind}"
        href = safe_url(context.page_url(target_id))
        if href:
            body = f'{icon} <a href="{escape(href)}" data-notion-id="{escape(target_id or "")}">{escape(label)}</a>'
            paragraph = f'<p class="{css}">{body}</p>'
        else:
            if context.resolve_page is not None:
                context.report(
                    DiagnosticKind.UNRESOLVED_DEPENDENCY,
                    block,
                    f"no public URL for {target_id or 'missing target'}",
                )
            paragraph = (
                f'<p class="{css}" data-notion-id="{escape(target_id or "")}">'
                f"{icon} <strong>{escape(label)}</strong></p>"
            )
        return wrap_block("paragraph", paragraph, {"className": css})

    def _describe(self, block: Block) -> tuple[str | None, str, str, str]:
        if isinstance(block, ChildPageBlock):
            return block.id, block.title or "Untitled page", "child-page", "📄"
        if isinstance(block, ChildDatabaseBlock):
            return block.id, block.title or "Untitled database", "child-database", "📊"
        if isinstance(block, LinkToPageBlock):
            label = "Linked database" if block.target_kind == "database" else "Linked page"
            return block.target_id, label, "link-to-page", "🔗"
        raise MalformedInputError("page link payload was not recognised")


# ---------------------------------------------------------------------------
# Fallback


class FallbackConverter(BaseConverter):
    """Visible placeholder for block types without a converter.

    Readable text found in the payload and any children are still rendered
    so unrecognised variants lose as little content as possible.
    """

    def supports(self, block_type: str) -> bool:
        return True

    def convert(self, block: Block, context: ConversionContext) -> str:
        sections = [placeholder_comment("Unsupported block", block)]
        text = recoverable_text(block)
        if text:
            sections.append(
                wrap_block(
                    "paragraph",
                    f'<p class="notion-unsupported-block">{escape(text)}</p>',
                    {"className": "notion-unsupported-block"},
                )
            )
        sections.append(context.render_children(block))
        return join_sections(sections)


DEFAULT_CONVERTERS: tuple[tuple[str, Converter], ...] = tuple(
    (block_type, converter)
    for converter in (
        ParagraphConverter(),
        HeadingConverter(),
        BulletedListConverter(),
        NumberedListConverter(),
        ToDoConverter(),
        ToggleConverter(),
        QuoteConverter(),
        CalloutConverter(),
        CodeConverter(),
        EquationConverter(),
        DividerConverter(),
        TableConverter(),
        ColumnListConverter(),
        ColumnConverter(),
        SyncedBlockConverter(),
        PageLinkConverter(),
        ImageConverter(),
        FileConverter(),
        PdfConverter(),
        VideoConverter(),
        AudioConverter(),
        EmbedConverter(),
        BookmarkConverter(),
    )
    for block_type in converter.block_types
)


__all__ = [
    "CODE_LANGUAGES",
    "CalloutConverter",
    "CodeConverter",
    "ColumnConverter",
    "ColumnListConverter",
    "DEFAULT_CONVERTERS",
    "DividerConverter",
    "EquationConverter",
    "FallbackConverter",
    "HeadingConverter",
    "PageLinkConverter",
    "ParagraphConverter",
    "QuoteConverter",
    "SyncedBlockConverter",
    "TableConverter",
    "ToDoConverter",
    "ToggleConverter",
]
