"""Record store SPI and implementations."""

from .base import RecordStore
from .notion import NotionStore
from .records import (
    DateValue,
    MultiSelectValue,
    PropertyValue,
    RecordFields,
    RichTextValue,
    SelectValue,
    StoredRecord,
    TitleValue,
    UnknownValue,
    UrlValue,
)

__all__ = [
    "DateValue",
    "MultiSelectValue",
    "NotionStore",
    "PropertyValue",
    "RecordFields",
    "RecordStore",
    "RichTextValue",
    "SelectValue",
    "StoredRecord",
    "TitleValue",
    "UnknownValue",
    "UrlValue",
]
