"""Typed record representation shared by every store implementation.

Store properties are polymorphic (title, url, select, date...). Each kind is a
small frozen dataclass; ``StoredRecord`` exposes accessors that return ``None``
when a property is absent, has another type, or carries no value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Union


@dataclass(frozen=True, slots=True)
class TitleValue:
    text: str


@dataclass(frozen=True, slots=True)
class RichTextValue:
    text: str


@dataclass(frozen=True, slots=True)
class UrlValue:
    url: str | None


@dataclass(frozen=True, slots=True)
class SelectValue:
    name: str | None


@dataclass(frozen=True, slots=True)
class MultiSelectValue:
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DateValue:
    start: datetime | None
    end: datetime | None = None


@dataclass(frozen=True, slots=True)
class UnknownValue:
    """Property of a type the sync does not interpret."""

    type: str
    raw: Any = field(default=None, compare=False, repr=False)


PropertyValue = Union[
    TitleValue,
    RichTextValue,
    UrlValue,
    SelectValue,
    MultiSelectValue,
    DateValue,
    UnknownValue,
]


@dataclass(slots=True)
class StoredRecord:
    """A record previously written to the store."""

    id: str
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    archived: bool = False
    last_edited: datetime | None = None

    def text(self, name: str) -> str | None:
        value = self.properties.get(name)
        if isinstance(value, (TitleValue, RichTextValue)) and value.text:
            return value.text
        return None

    def url(self, name: str) -> str | None:
        value = self.properties.get(name)
        if isinstance(value, UrlValue) and value.url:
            return value.url
        return None

    def select(self, name: str) -> str | None:
        value = self.properties.get(name)
        if isinstance(value, SelectValue) and value.name is not None:
            return value.name
        return None

    def multi_select(self, name: str) -> tuple[str, ...] | None:
        value = self.properties.get(name)
        if isinstance(value, MultiSelectValue):
            return value.names
        return None

    def date_start(self, name: str) -> datetime | None:
        value = self.properties.get(name)
        if isinstance(value, DateValue):
            return value.start
        return None


@dataclass(frozen=True, slots=True)
class RecordFields:
    """Store-agnostic field set written for one feed item."""

    name: str
    url: str
    tags: tuple[str, ...]
    published_at: datetime | None = None


__all__ = [
    "DateValue",
    "MultiSelectValue",
    "PropertyValue",
    "RecordFields",
    "RichTextValue",
    "SelectValue",
    "StoredRecord",
    "TitleValue",
    "UnknownValue",
    "UrlValue",
]
