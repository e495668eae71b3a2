"""Media and embed converters.

Media URLs are passed through ``ConversionContext.resource_url`` so callers
can substitute locally hosted copies; the converters never fetch anything.
"""

from __future__ import annotations

import posixpath
import re
from urllib.parse import unquote, urlsplit

from block_markup.diagnostics import DiagnosticKind, MalformedInputError, UnresolvedDependencyError
from block_markup.models.blocks import Block, BlockType, LinkEmbedBlock, MediaBlock
from block_markup.renderers.base import BaseConverter, ConversionContext
from block_markup.renderers.rich_text import escape, safe_url

from .helpers import caption_html, join_sections, wrap_block

# Host fragment to provider slug.
EMBED_PROVIDERS: tuple[tuple[str, str], ...] = (
    ("youtube.com", "youtube"),
    ("youtu.be", "youtube"),
    ("vimeo.com", "vimeo"),
    ("twitter.com", "twitter"),
    ("x.com", "twitter"),
    ("instagram.com", "instagram"),
    ("spotify.com", "spotify"),
    ("soundcloud.com", "soundcloud"),
)

VIDEO_PROVIDERS = frozenset({"youtube", "vimeo"})

_EXTENSION_RE = re.compile(r"\.[^.]+$")


def detect_provider(url: str) -> str | None:
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return None
    host = host.removeprefix("www.")
    if not host:
        return None
    for fragment, provider in EMBED_PROVIDERS:
        if host == fragment or host.endswith(f".{fragment}"):
            return provider
    return None


def url_title(url: str) -> str:
    """Readable label derived from the last path segment, or the host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "Link"
    path = parts.path.strip("/")
    if path:
        segment = unquote(path.split("/")[-1])
        segment = _EXTENSION_RE.sub("", segment).replace("-", " ").replace("_", " ")
        words = [word[:1].upper() + word[1:] for word in segment.split(" ")]
        title = " ".join(words).strip()
        if title:
            return title
    return parts.hostname or "Link"


def file_name_from_url(url: str) -> str:
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    return unquote(posixpath.basename(path))


def _media_source(block: Block, context: ConversionContext, label: str) -> str:
    raw = block.url if isinstance(block, (MediaBlock, LinkEmbedBlock)) else ""
    if not raw:
        raise MalformedInputError(f"{label} block has no source URL")
    resolved = context.resource_url(raw)
    if not resolved:
        raise UnresolvedDependencyError(f"{label} source {raw} could not be resolved")
    href = safe_url(resolved)
    if href is None:
        raise MalformedInputError(f"{label} source uses an unsupported scheme")
    return href


class ImageConverter(BaseConverter):
    block_types = (BlockType.IMAGE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        src = _media_source(block, context, "image")
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        alt = caption or "Image"
        figure = (
            f'<figure class="wp-block-image size-large"><img src="{escape(src)}" alt="{escape(alt)}"/>'
            f"{caption_html(escape(caption))}</figure>"
        )
        return wrap_block("image", figure, {"sizeSlug": "large"})


class FileConverter(BaseConverter):
    block_types = (BlockType.FILE.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        href = _media_source(block, context, "file")
        name = self._file_name(block, href)
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        body = (
            f'<div class="wp-block-file"><a href="{escape(href)}">{escape(name)}</a>'
            f'<a href="{escape(href)}" class="wp-block-file__button wp-element-button" download>Download</a>'
            f"{caption_html(escape(caption))}</div>"
        )
        return wrap_block("file", body, {"href": href})

    @staticmethod
    def _file_name(block: Block, href: str) -> str:
        name = getattr(block, "name", None)
        if not name and isinstance(block, MediaBlock) and block.file is not None:
            name = block.file.name
        return name or file_name_from_url(href) or "Download file"


class PdfConverter(FileConverter):
    block_types = (BlockType.PDF.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        href = _media_source(block, context, "pdf")
        name = self._file_name(block, href)
        body = (
            f'<div class="wp-block-file"><object class="wp-block-file__embed" data="{escape(href)}" '
            f'type="application/pdf" style="width:100%;height:600px" aria-label="{escape(name)}"></object>'
            f'<a href="{escape(href)}" class="wp-block-file__button wp-element-button" download '
            f'aria-label="Download PDF">Download</a></div>'
        )
        pdf = wrap_block("file", body, {"href": href, "displayPreview": True})
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        if not caption:
            return pdf
        return join_sections(
            [pdf, wrap_block("paragraph", f'<p class="notion-pdf-caption">{escape(caption)}</p>')]
        )


class VideoConverter(BaseConverter):
    block_types = (BlockType.VIDEO.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        src = _media_source(block, context, "video")
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        hosted = isinstance(block, MediaBlock) and block.file is not None and block.file.kind != "external"
        provider = None if hosted else detect_provider(src)
        if provider in VIDEO_PROVIDERS:
            return oembed_markup(src, provider, caption)
        figure = (
            f'<figure class="wp-block-video"><video controls src="{escape(src)}"></video>'
            f"{caption_html(escape(caption))}</figure>"
        )
        return wrap_block("video", figure)


class AudioConverter(BaseConverter):
    block_types = (BlockType.AUDIO.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        src = _media_source(block, context, "audio")
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        figure = (
            f'<figure class="wp-block-audio"><audio controls src="{escape(src)}"></audio>'
            f"{caption_html(escape(caption))}</figure>"
        )
        return wrap_block("audio", figure)


def oembed_markup(url: str, provider: str, caption: str = "") -> str:
    is_video = provider in VIDEO_PROVIDERS
    embed_type = "video" if is_video else "rich"
    classes = [
        "wp-block-embed",
        f"is-type-{embed_type}",
        f"is-provider-{provider}",
        f"wp-block-embed-{provider}",
    ]
    attrs: dict[str, object] = {
        "url": url,
        "type": embed_type,
        "providerNameSlug": provider,
        "responsive": True,
    }
    if is_video:
        classes.extend(["wp-embed-aspect-16-9", "wp-has-aspect-ratio"])
        attrs["className"] = "wp-embed-aspect-16-9 wp-has-aspect-ratio"
    figure = (
        f'<figure class="{" ".join(classes)}"><div class="wp-block-embed__wrapper">\n{escape(url)}\n</div>'
        f"{caption_html(escape(caption))}</figure>"
    )
    return wrap_block("embed", figure, attrs)


class EmbedConverter(BaseConverter):
    block_types = (BlockType.EMBED.value,)

    def convert(self, block: Block, context: ConversionContext) -> str:
        url = block.url.strip() if isinstance(block, LinkEmbedBlock) else ""
        if not url:
            raise MalformedInputError("embed block has no URL")
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        provider = detect_provider(url)
        if provider is not None and safe_url(url):
            return oembed_markup(url, provider, caption)
        return self._generic(block, url, context)

    def _generic(self, block: Block, url: str, context: ConversionContext) -> str:
        try:
            scheme = urlsplit(url).scheme.lower()
        except ValueError:
            scheme = ""
        if scheme not in ("http", "https"):
            context.report(DiagnosticKind.MALFORMED_INPUT, block, f"embed URL scheme {scheme or 'missing'} rejected")
            return wrap_block("paragraph", "<p><em>Invalid embed URL (unsupported scheme)</em></p>")
        return wrap_block(
            "html",
            '<div class="notion-embed">'
            f'<iframe src="{escape(url)}" width="100%" height="500" frameborder="0" allowfullscreen '
            'sandbox="allow-scripts allow-same-origin allow-presentation"></iframe></div>',
        )


class BookmarkConverter(BaseConverter):
    """Bookmarks and link previews render as a link card."""

    block_types = (BlockType.BOOKMARK.value, BlockType.LINK_PREVIEW.value)

    def convert(self, block: Block, context: ConversionContext) -> str:
        url = block.url.strip() if isinstance(block, LinkEmbedBlock) else ""
        if not url:
            raise MalformedInputError("bookmark block has no URL")
        href = safe_url(url)
        caption = context.plain_text(getattr(block, "caption", ())).strip()
        title = escape(caption or url_title(url))
        if href is None:
            context.report(DiagnosticKind.MALFORMED_INPUT, block, "bookmark URL scheme rejected")
            return wrap_block(
                "html",
                f'<div class="notion-bookmark"><div class="notion-bookmark-title">{title}</div>'
                f'<div class="notion-bookmark-url">{escape(url)}</div></div>',
            )
        return wrap_block(
            "html",
            f'<div class="notion-bookmark"><a href="{escape(href)}" target="_blank" rel="noopener noreferrer" '
            f'class="notion-bookmark-link"><div class="notion-bookmark-title">{title}</div>'
            f'<div class="notion-bookmark-url">{escape(url)}</div></a></div>',
        )


__all__ = [
    "AudioConverter",
    "BookmarkConverter",
    "EMBED_PROVIDERS",
    "EmbedConverter",
    "FileConverter",
    "ImageConverter",
    "PdfConverter",
    "VideoConverter",
    "detect_provider",
    "file_name_from_url",
    "oembed_markup",
    "url_title",
]
