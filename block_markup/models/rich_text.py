"""Text runs: contiguous spans of text sharing one annotation set."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

ANNOTATION_NAMES: tuple[str, ...] = ("bold", "italic", "strikethrough", "underline", "code")


class Annotations(BaseModel):
    """Style flags applied to a run; unknown keys are ignored."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator(*ANNOTATION_NAMES, mode="before")
    @classmethod
    def _missing_flag_is_off(cls, value: Any) -> Any:
        return False if value is None else value

    @classmethod
    def of(cls, names: Iterable[str]) -> Annotations:
        """Build annotations from a collection of flag names."""
        wanted = {name for name in names if name in ANNOTATION_NAMES}
        return cls(**{name: True for name in wanted})

    def active(self) -> frozenset[str]:
        return frozenset(name for name in ANNOTATION_NAMES if getattr(self, name))


class TextRun(BaseModel):
    content: str = ""
    annotations: Annotations = Annotations()
    color: str | None = None
    link: str | None = None
    is_equation: bool = False

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_api_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"content": data}
        if not isinstance(data, dict) or "content" in data:
            return data
        return _normalise_api_run(data)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        return value if isinstance(value, str) else ""

    @field_validator("annotations", mode="before")
    @classmethod
    def _coerce_annotations(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, Annotations)) else Annotations()

    @field_validator("is_equation", mode="before")
    @classmethod
    def _coerce_equation_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("color", "link", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @property
    def has_color(self) -> bool:
        return bool(self.color) and self.color != "default"


def _normalise_api_run(item: dict[str, Any]) -> dict[str, Any]:
    run_type = item.get("type") or "text"
    text = item.get("text") if isinstance(item.get("text"), dict) else {}
    annotations = item.get("annotations") if isinstance(item.get("annotations"), dict) else {}

    is_equation = False
    if run_type == "text":
        content = text.get("content", item.get("plain_text"))
    elif run_type == "equation":
        equation = item.get("equation") if isinstance(item.get("equation"), dict) else {}
        content = equation.get("expression", item.get("plain_text"))
        is_equation = True
    else:
        content = item.get("plain_text")

    link_obj = text.get("link") if isinstance(text.get("link"), dict) else {}
    link = link_obj.get("url") or item.get("href") or None

    return {
        "content": content if isinstance(content, str) else "",
        "annotations": annotations,
        "color": annotations.get("color") or item.get("color"),
        "link": link if isinstance(link, str) else None,
        "is_equation": is_equation,
    }


def text_runs(value: Any) -> tuple[TextRun, ...]:
    """Coerce a loosely-typed rich-text array into runs, skipping junk entries."""
    if not value:
        return ()
    if isinstance(value, (str, dict, TextRun)):
        value = [value]
    runs: list[TextRun] = []
    for item in value:
        if isinstance(item, TextRun):
            runs.append(item)
        elif isinstance(item, (dict, str)):
            try:
                runs.append(TextRun.model_validate(item))
            except ValidationError as exc:
                logger.debug("Skipping unreadable text run %r: %s", item, exc)
    return tuple(runs)


__all__ = ["ANNOTATION_NAMES", "Annotations", "TextRun", "text_runs"]
