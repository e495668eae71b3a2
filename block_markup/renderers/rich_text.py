"""Inline markup for text runs.

Each run is escaped first and then wrapped in a fixed order, innermost to
outermost: code, bold, italic, strikethrough, underline, colour span, link.
The order never depends on how the source annotation set was ordered.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from urllib.parse import urlsplit

from block_markup.models.rich_text import TextRun

EMPTY_PLACEHOLDER = "&nbsp;"

ANNOTATION_TAGS: tuple[tuple[str, str], ...] = (
    ("code", "code"),
    ("bold", "strong"),
    ("italic", "em"),
    ("strikethrough", "s"),
    ("underline", "u"),
)

SAFE_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

_PAGE_ID_RE = re.compile(r"([0-9a-f]{32})(?:[?#].*)?$", re.IGNORECASE)
_DASHED_ID_RE = re.compile(
    r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})(?:[?#].*)?$",
    re.IGNORECASE,
)
_CLASS_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]")

PageResolver = Callable[[str], "str | None"]


def escape(text: str) -> str:
    return html.escape(text, quote=True)


def css_class(value: str) -> str:
    """Reduce ``value`` to characters that are safe inside a class attribute."""
    return _CLASS_UNSAFE_RE.sub("", value)


def safe_url(url: str | None) -> str | None:
    """Return ``url`` when it uses an allowed scheme (or is relative), else ``None``."""
    if not url:
        return None
    candidate = url.strip()
    if not candidate:
        return None
    if candidate.startswith(("/", "#", "?")) and not candidate.startswith("//"):
        return candidate
    try:
        scheme = urlsplit(candidate).scheme.lower()
    except ValueError:
        return None
    if scheme in SAFE_SCHEMES:
        return candidate
    return None


def internal_page_id(url: str) -> str | None:
    """Extract a workspace page id from a relative or workspace-hosted URL."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    host = parts.netloc.lower()
    if host and not (host == "notion.so" or host.endswith(".notion.so") or host.endswith(".notion.site")):
        return None
    path = parts.path
    match = _PAGE_ID_RE.search(path) or _DASHED_ID_RE.search(path)
    if not match:
        return None
    return match.group(1).replace("-", "").lower()


@dataclass(frozen=True, slots=True)
class TextRunRenderer:
    """Render runs to inline markup or plain text.

    ``resolve_page`` rewrites links that point at workspace pages; when it
    returns ``None`` the original URL is kept.
    """

    resolve_page: PageResolver | None = None

    def render(self, runs: Sequence[TextRun] | None) -> str:
        if not runs:
            return EMPTY_PLACEHOLDER
        rendered = "".join(self.render_run(run) for run in runs)
        return rendered or EMPTY_PLACEHOLDER

    def render_run(self, run: TextRun) -> str:
        content = run.content or ""
        if not content:
            return ""
        formatted = escape(content).replace("\n", "<br>")
        if run.is_equation:
            formatted = f'<code class="notion-equation">{formatted}</code>'

        active = run.annotations.active()
        for name, tag in ANNOTATION_TAGS:
            if name in active:
                formatted = f"<{tag}>{formatted}</{tag}>"

        if run.has_color:
            color = css_class(run.color or "")
            if color:
                formatted = f'<span class="notion-color-{color}">{formatted}</span>'

        return self._apply_link(formatted, run.link)

    def plain_text(self, runs: Iterable[TextRun] | None) -> str:
        if not runs:
            return ""
        return "".join(run.content or "" for run in runs)

    def _apply_link(self, formatted: str, link: str | None) -> str:
        if not link:
            return formatted
        page_id = internal_page_id(link)
        target: str | None = link
        if page_id and self.resolve_page is not None:
            target = self.resolve_page(page_id) or link
        href = safe_url(target)
        if href is None:
            return formatted
        if page_id:
            return f'<a href="{escape(href)}" data-notion-id="{escape(page_id)}">{formatted}</a>'
        return f'<a href="{escape(href)}">{formatted}</a>'


DEFAULT_TEXT_RENDERER = TextRunRenderer()


def render_rich_text(runs: Sequence[TextRun] | None) -> str:
    return DEFAULT_TEXT_RENDERER.render(runs)


def plain_text(runs: Iterable[TextRun] | None) -> str:
    return DEFAULT_TEXT_RENDERER.plain_text(runs)


__all__ = [
    "ANNOTATION_TAGS",
    "EMPTY_PLACEHOLDER",
    "TextRunRenderer",
    "css_class",
    "escape",
    "internal_page_id",
    "plain_text",
    "render_rich_text",
    "safe_url",
]
