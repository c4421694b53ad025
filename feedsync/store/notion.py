"""Notion database implementation of the record store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from ..config import StoreSettings
from ..exceptions import SearchError, StoreError, WriteError
from .base import RecordStore
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


def parse_notion_datetime(value: str | None) -> datetime | None:
    """Parse a Notion ISO8601 date or datetime into an aware UTC datetime."""

    if not value:
        return None
    text = value.strip()
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _plain_text(fragments: Any) -> str:
    if not isinstance(fragments, list):
        return ""
    parts: list[str] = []
    for fragment in fragments:
        if not isinstance(fragment, dict):
            continue
        text = fragment.get("plain_text")
        if text is None:
            text = (fragment.get("text") or {}).get("content")
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def decode_property(payload: Any) -> PropertyValue:
    """Map a Notion property object to its typed value."""

    if not isinstance(payload, dict):
        return UnknownValue(type="invalid", raw=payload)
    kind = payload.get("type")
    if kind == "title":
        return TitleValue(text=_plain_text(payload.get("title")))
    if kind == "rich_text":
        return RichTextValue(text=_plain_text(payload.get("rich_text")))
    if kind == "url":
        url = payload.get("url")
        return UrlValue(url=url if isinstance(url, str) else None)
    if kind in ("select", "status"):
        option = payload.get(kind) or {}
        name = option.get("name") if isinstance(option, dict) else None
        return SelectValue(name=name if isinstance(name, str) else None)
    if kind == "multi_select":
        options = payload.get("multi_select") or []
        names = tuple(
            opt["name"] for opt in options if isinstance(opt, dict) and isinstance(opt.get("name"), str)
        )
        return MultiSelectValue(names=names)
    if kind == "date":
        date = payload.get("date") or {}
        if not isinstance(date, dict):
            date = {}
        return DateValue(
            start=parse_notion_datetime(date.get("start")),
            end=parse_notion_datetime(date.get("end")),
        )
    return UnknownValue(type=str(kind), raw=payload)


def decode_page(payload: dict[str, Any]) -> StoredRecord:
    properties = payload.get("properties") or {}
    return StoredRecord(
        id=str(payload.get("id", "")),
        properties={name: decode_property(value) for name, value in properties.items()},
        archived=bool(payload.get("archived") or payload.get("in_trash")),
        last_edited=parse_notion_datetime(payload.get("last_edited_time")),
    )


class NotionStore(RecordStore):
    """Read and write feed records as pages of a Notion database."""

    def __init__(
        self,
        settings: StoreSettings,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if not settings.token:
            raise StoreError("Notion token is not configured (set NOTION_TOKEN or store.token)")
        if not settings.database_id:
            raise StoreError("Notion database id is not configured (set NOTION_DATABASE_ID or store.database_id)")
        self.settings = settings
        self.names = settings.properties
        self.logger = logger or structlog.get_logger("feedsync.store")
        self._client = client or httpx.Client(
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
        self._headers = {
            "Authorization": f"Bearer {settings.token}",
            "Notion-Version": settings.notion_version,
            "Content-Type": "application/json",
        }

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # RecordStore
    # ------------------------------------------------------------------
    def search(self, query: str) -> list[StoredRecord]:
        body: dict[str, Any] = {
            "query": query,
            "filter": {"property": "object", "value": "page"},
            "sort": {"timestamp": "last_edited_time", "direction": "descending"},
            "page_size": self.settings.page_size,
        }
        records: list[StoredRecord] = []
        while True:
            payload = self._request("POST", "/search", body, error_cls=SearchError)
            for result in payload.get("results") or []:
                if isinstance(result, dict) and result.get("object") == "page":
                    records.append(decode_page(result))
            cursor = payload.get("next_cursor")
            if not payload.get("has_more") or not cursor:
                break
            body["start_cursor"] = cursor
        self.logger.debug("search_completed", query=query, results=len(records))
        return records

    def create(self, parent: str, fields: RecordFields) -> StoredRecord:
        body = {
            "parent": {"type": "database_id", "database_id": parent},
            "properties": self.encode_fields(fields),
        }
        return decode_page(self._request("POST", "/pages", body, error_cls=WriteError))

    def update(self, record_id: str, fields: RecordFields) -> StoredRecord:
        body = {"properties": self.encode_fields(fields)}
        return decode_page(self._request("PATCH", f"/pages/{record_id}", body, error_cls=WriteError))

    def archive(self, record_id: str) -> None:
        self._request("PATCH", f"/pages/{record_id}", {"archived": True}, error_cls=WriteError)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def encode_fields(self, fields: RecordFields) -> dict[str, Any]:
        properties: dict[str, Any] = {
            self.names.name: {"title": [{"text": {"content": fields.name}}]},
            self.names.url: {"url": fields.url},
            self.names.tags: {"multi_select": [{"name": tag} for tag in fields.tags]},
        }
        if fields.published_at is not None:
            properties[self.names.publish] = {"date": {"start": fields.published_at.isoformat()}}
        return properties

    def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any],
        *,
        error_cls: type[StoreError],
    ) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, json=body, headers=self._headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise error_cls(f"{method} {path} failed: {exc}") from exc
        if response.is_error:
            raise error_cls(
                f"{method} {path} returned {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise error_cls(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise error_cls(f"{method} {path} returned unexpected payload")
        return payload

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(payload, dict):
            code = payload.get("code")
            message = payload.get("message") or ""
            return f"{code}: {message}" if code else str(message)
        return response.text[:200]


__all__ = ["NotionStore", "decode_page", "decode_property", "parse_notion_datetime"]
