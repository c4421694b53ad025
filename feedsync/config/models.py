"""Pydantic models describing the feedsync configuration file."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_NOTION_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


class FeedConfig(BaseModel):
    """One monitored feed."""

    url: str
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    expires: int = Field(default=0, description="Expiry window in seconds; 0 inherits the global default.")

    @field_validator("url")
    @classmethod
    def _require_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Feed url cannot be empty")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if value in (None, ""):
            return []
        if isinstance(value, str):
            return [value]
        return [str(tag) for tag in value]

    @field_validator("expires")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("expires must be >= 0")
        return value

    @property
    def expiry_window(self) -> timedelta:
        return timedelta(seconds=self.expires)


class CleanConfig(BaseModel):
    """Defaults for the cleanup pass."""

    status: list[str] = Field(default_factory=list)


class PropertyNames(BaseModel):
    """Names of the database properties the sync reads and writes."""

    name: str = "Name"
    url: str = "URL"
    tags: str = "Tags"
    publish: str = "Publish"
    status: str = "Status"


class StoreSettings(BaseModel):
    """Connection settings for the Notion record store."""

    database_id: str = ""
    token: str = Field(default="", repr=False)
    base_url: str = DEFAULT_NOTION_BASE_URL
    notion_version: str = DEFAULT_NOTION_VERSION
    timeout: float = 30.0
    page_size: int = 100
    properties: PropertyNames = Field(default_factory=PropertyNames)

    @model_validator(mode="after")
    def _apply_environment(self) -> "StoreSettings":
        if not self.database_id:
            self.database_id = os.environ.get("NOTION_DATABASE_ID", "")
        if not self.token:
            self.token = os.environ.get("NOTION_TOKEN", "")
        if not 1 <= self.page_size <= 100:
            raise ValueError("page_size must be between 1 and 100")
        return self


class FetchSettings(BaseModel):
    """HTTP options used when downloading feeds."""

    timeout: float = 15.0
    user_agent: str = "feedsync/0.1 (+https://github.com/feedsync/feedsync)"


class SyncConfig(BaseModel):
    """Top-level configuration document."""

    expires: int = 0
    clean: CleanConfig = Field(default_factory=CleanConfig)
    feeds: list[FeedConfig] = Field(default_factory=list)
    store: StoreSettings = Field(default_factory=StoreSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)

    @field_validator("expires")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("expires must be >= 0")
        return value

    @model_validator(mode="after")
    def _apply_default_expiry(self) -> "SyncConfig":
        for feed in self.feeds:
            if feed.expires == 0:
                feed.expires = self.expires
        return self


__all__ = [
    "CleanConfig",
    "FeedConfig",
    "FetchSettings",
    "PropertyNames",
    "StoreSettings",
    "SyncConfig",
]
