"""Media, embed and icon definitions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from block_markup.models.rich_text import TextRun, text_runs

from .base import Block, BlockType

ReferenceKind = Literal["external", "file", "file_upload"]


class FileReference(BaseModel):
    """Pointer to hosted or external media, already fetched by the caller."""

    kind: ReferenceKind = "external"
    url: str = ""
    expiry_time: str | None = None
    name: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_api_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"url": data}
        if not isinstance(data, dict) or "kind" in data:
            return data
        kind = data.get("type") or ("file" if "file" in data else "external")
        source = data.get(kind) if isinstance(data.get(kind), dict) else {}
        url = source.get("url") or data.get("url") or ""
        if kind == "file_upload" and not url:
            url = source.get("id") or ""
        return {
            "kind": kind if kind in ("external", "file", "file_upload") else "external",
            "url": url if isinstance(url, str) else "",
            "expiry_time": source.get("expiry_time"),
            "name": data.get("name") if isinstance(data.get("name"), str) else None,
        }


class Icon(BaseModel):
    kind: Literal["emoji", "external", "file", "custom_emoji"] = "emoji"
    emoji: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_api_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": "emoji", "emoji": data}
        if not isinstance(data, dict) or "kind" in data:
            return data
        kind = data.get("type") or "emoji"
        if kind == "emoji":
            return {"kind": "emoji", "emoji": data.get("emoji")}
        source = data.get(kind) if isinstance(data.get(kind), dict) else {}
        return {"kind": kind, "url": source.get("url")}


class MediaBlock(Block):
    file: FileReference | None = None
    caption: tuple[TextRun, ...] = ()
    name: str | None = None

    @classmethod
    def _unpack_payload(cls, payload: dict[str, Any]) -> dict[str, Any]:
        reference = FileReference.model_validate(payload) if payload else None
        return {
            "file": reference,
            "caption": payload.get("caption"),
            "name": payload.get("name"),
        }

    @field_validator("caption", mode="before")
    @classmethod
    def _coerce_caption(cls, value: Any) -> tuple[TextRun, ...]:
        return text_runs(value)

    @property
    def url(self) -> str:
        return self.file.url if self.file else ""


class ImageBlock(MediaBlock):
    type: BlockType = Field(default=BlockType.IMAGE, frozen=True)


class FileBlock(MediaBlock):
    type: BlockType = Field(default=BlockType.FILE, frozen=True)


class PdfBlock(MediaBlock):
    type: BlockType = Field(default=BlockType.PDF, frozen=True)


class VideoBlock(MediaBlock):
    type: BlockType = Field(default=BlockType.VIDEO, frozen=True)


class AudioBlock(MediaBlock):
    type: BlockType = Field(default=BlockType.AUDIO, frozen=True)


class LinkEmbedBlock(Block):
    url: str = ""
    caption: tuple[TextRun, ...] = ()

    @field_validator("caption", mode="before")
    @classmethod
    def _coerce_caption(cls, value: Any) -> tuple[TextRun, ...]:
        return text_runs(value)

    @field_validator("url", mode="before")
    @classmethod
    def _coerce_url(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class EmbedBlock(LinkEmbedBlock):
    type: BlockType = Field(default=BlockType.EMBED, frozen=True)


class BookmarkBlock(LinkEmbedBlock):
    type: BlockType = Field(default=BlockType.BOOKMARK, frozen=True)


class LinkPreviewBlock(LinkEmbedBlock):
    type: BlockType = Field(default=BlockType.LINK_PREVIEW, frozen=True)


__all__ = [
    "AudioBlock",
    "BookmarkBlock",
    "EmbedBlock",
    "FileBlock",
    "FileReference",
    "Icon",
    "ImageBlock",
    "LinkEmbedBlock",
    "LinkPreviewBlock",
    "MediaBlock",
    "PdfBlock",
    "VideoBlock",
]
