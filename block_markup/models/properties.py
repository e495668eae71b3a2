"""Typed record properties as delivered by the upstream service."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class PropertyType(str, Enum):
    TITLE = "title"
    RICH_TEXT = "rich_text"
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    STATUS = "status"
    CHECKBOX = "checkbox"
    DATE = "date"
    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"
    RELATION = "relation"
    ROLLUP = "rollup"
    FORMULA = "formula"
    FILES = "files"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    PEOPLE = "people"
    CREATED_BY = "created_by"
    LAST_EDITED_BY = "last_edited_by"


TEXT_TYPES = frozenset({PropertyType.TITLE, PropertyType.RICH_TEXT, PropertyType.TEXT})
DATE_TYPES = frozenset({PropertyType.DATE, PropertyType.CREATED_TIME, PropertyType.LAST_EDITED_TIME})
USER_TYPES = frozenset({PropertyType.PEOPLE, PropertyType.CREATED_BY, PropertyType.LAST_EDITED_BY})
LINK_TYPES = frozenset({PropertyType.URL, PropertyType.EMAIL, PropertyType.PHONE_NUMBER})


def property_type_for(value: PropertyType | str | None) -> PropertyType | None:
    if isinstance(value, PropertyType):
        return value
    try:
        return PropertyType(str(value))
    except ValueError:
        return None


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SelectOption(_Payload):
    id: str | None = None
    name: str = ""
    color: str = "default"

    @field_validator("color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> str:
        return value if isinstance(value, str) and value else "default"


class DateValue(_Payload):
    start: str | None = None
    end: str | None = None
    time_zone: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"start": data}
        return data

    @property
    def has_time(self) -> bool:
        return bool(self.start) and "T" in self.start


class PersonValue(_Payload):
    id: str | None = None
    name: str | None = None
    avatar_url: str | None = None
    email: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_email(cls, data: Any) -> Any:
        if isinstance(data, dict) and "email" not in data:
            person = data.get("person")
            if isinstance(person, dict) and person.get("email"):
                return {**data, "email": person["email"]}
        return data


class FileValue(_Payload):
    name: str | None = None
    url: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_api_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"url": data}
        if not isinstance(data, dict) or data.get("url"):
            return data
        for key in ("file", "external"):
            source = data.get(key)
            if isinstance(source, dict) and source.get("url"):
                return {"name": data.get("name"), "url": source["url"]}
        return data


class RelationRef(_Payload):
    id: str

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": data}
        return data


class RollupValue(_Payload):
    type: str = "number"
    number: float | None = None
    date: DateValue | None = None
    array: list[Any] = []
    function: str | None = None


class FormulaValue(_Payload):
    type: str = "string"
    string: str | None = None
    number: float | None = None
    boolean: bool | None = None
    date: DateValue | None = None


def parse_property(payload: dict[str, Any]) -> tuple[str, Any]:
    """Split an upstream ``{"type": t, t: value}`` property into its parts."""
    prop_type = payload.get("type")
    if not isinstance(prop_type, str):
        return "unknown", payload
    return prop_type, payload.get(prop_type)


__all__ = [
    "DATE_TYPES",
    "DateValue",
    "FileValue",
    "FormulaValue",
    "LINK_TYPES",
    "PersonValue",
    "PropertyType",
    "RelationRef",
    "RollupValue",
    "SelectOption",
    "TEXT_TYPES",
    "USER_TYPES",
    "parse_property",
    "property_type_for",
]
