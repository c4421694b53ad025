"""Pytest configuration providing snapshot management and shared fixtures."""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from feedsync.config import FeedConfig, PropertyNames, StoreSettings
from feedsync.engine import FeedItem, ParsedFeed
from feedsync.exceptions import FeedFetchError, WriteError
from feedsync.store import (
    DateValue,
    MultiSelectValue,
    RecordFields,
    RecordStore,
    SelectValue,
    StoredRecord,
    TitleValue,
    UrlValue,
)

NOW = datetime(2024, 5, 20, 12, 0, 0, tzinfo=timezone.utc)


def pytest_addoption(parser: pytest.Parser) -> None:  # pragma: no cover
    parser.addoption(
        "--snapshot-update",
        action="store_true",
        default=False,
        help="Update stored snapshots.",
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class SnapshotManager:
    """Assert helper storing expectations in one JSON file per test directory."""

    def __init__(self, request: pytest.FixtureRequest) -> None:
        self.request = request
        self.update = request.config.getoption("--snapshot-update")
        self.root = Path(request.config.rootpath) / "tests" / "snapshots"

    def assert_match(self, data: Any, *, key: str | None = None) -> None:
        normalized = _json_safe(data)
        module_name = Path(self.request.fspath).parent.name
        snapshot_path = self.root / f"{module_name}.json"
        if snapshot_path.exists():
            stored = json.loads(snapshot_path.read_text(encoding="utf-8"))
        else:
            stored = {}
        test_key = key or self.request.node.name
        current = stored.get(test_key)
        if current == normalized:
            return
        if self.update:
            stored[test_key] = normalized
            snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            snapshot_path.write_text(
                json.dumps(stored, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
            return
        expected = json.dumps(current, ensure_ascii=False, indent=2, sort_keys=True)
        actual = json.dumps(normalized, ensure_ascii=False, indent=2, sort_keys=True)
        raise AssertionError(
            f"Snapshot mismatch for {test_key}\nExpected:\n{expected}\nActual:\n{actual}"
        )


@pytest.fixture
def snapshot(request: pytest.FixtureRequest) -> SnapshotManager:
    return SnapshotManager(request)


class FakeStore(RecordStore):
    """In-memory record store mimicking Notion's text search."""

    def __init__(self, names: PropertyNames | None = None) -> None:
        self.names = names or PropertyNames()
        self.records: dict[str, StoredRecord] = {}
        self.parents: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_urls: set[str] = set()
        self.fail_ids: set[str] = set()
        self.search_error: Exception | None = None
        self.include_archived = False
        self._counter = 0

    def _next_id(self) -> tuple[str, datetime]:
        self._counter += 1
        return f"page-{self._counter}", NOW - timedelta(days=30) + timedelta(seconds=self._counter)

    def _properties(self, fields: RecordFields) -> dict[str, Any]:
        properties: dict[str, Any] = {
            self.names.name: TitleValue(text=fields.name),
            self.names.url: UrlValue(url=fields.url),
            self.names.tags: MultiSelectValue(names=fields.tags),
        }
        if fields.published_at is not None:
            properties[self.names.publish] = DateValue(start=fields.published_at)
        return properties

    def add_record(
        self,
        name: str,
        url: str | None = None,
        status: str | None = None,
        published_at: datetime | None = None,
        archived: bool = False,
    ) -> StoredRecord:
        record_id, edited = self._next_id()
        properties: dict[str, Any] = {self.names.name: TitleValue(text=name)}
        if url is not None:
            properties[self.names.url] = UrlValue(url=url)
        if status is not None:
            properties[self.names.status] = SelectValue(name=status)
        if published_at is not None:
            properties[self.names.publish] = DateValue(start=published_at)
        record = StoredRecord(id=record_id, properties=properties, archived=archived, last_edited=edited)
        self.records[record_id] = record
        return record

    def live(self) -> list[StoredRecord]:
        return [record for record in self.records.values() if not record.archived]

    def search(self, query: str) -> list[StoredRecord]:
        self.calls.append(("search", query))
        if self.search_error is not None:
            raise self.search_error
        matches = [
            record
            for record in self.records.values()
            if (self.include_archived or not record.archived)
            and query in (record.text(self.names.name) or "")
        ]
        return sorted(matches, key=lambda r: r.last_edited, reverse=True)

    def create(self, parent: str, fields: RecordFields) -> StoredRecord:
        self.calls.append(("create", fields.url))
        if fields.url in self.fail_urls:
            raise WriteError(f"create rejected for {fields.url}", status_code=400)
        record_id, edited = self._next_id()
        record = StoredRecord(id=record_id, properties=self._properties(fields), last_edited=edited)
        self.records[record_id] = record
        self.parents[record_id] = parent
        return record

    def update(self, record_id: str, fields: RecordFields) -> StoredRecord:
        self.calls.append(("update", record_id))
        if record_id in self.fail_ids or fields.url in self.fail_urls:
            raise WriteError(f"update rejected for {record_id}", status_code=409)
        existing = self.records[record_id]
        properties = dict(existing.properties)
        properties.update(self._properties(fields))
        _, edited = self._next_id()
        updated = replace(existing, properties=properties, last_edited=edited)
        self.records[record_id] = updated
        return updated

    def archive(self, record_id: str) -> None:
        self.calls.append(("archive", record_id))
        if record_id in self.fail_ids:
            raise WriteError(f"archive rejected for {record_id}", status_code=500)
        self.records[record_id] = replace(self.records[record_id], archived=True)


class FakeFetcher:
    """Serve canned feeds keyed by URL."""

    def __init__(self, feeds: dict[str, ParsedFeed | Exception] | None = None) -> None:
        self.feeds = dict(feeds or {})
        self.fetched: list[str] = []
        self.closed = False

    def fetch(self, url: str) -> ParsedFeed:
        self.fetched.append(url)
        result = self.feeds.get(url)
        if result is None:
            raise FeedFetchError(f"Failed to fetch feed: {url} (status 404)")
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def store_settings() -> StoreSettings:
    return StoreSettings(database_id="db-123", token="secret-token")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def feed_config() -> Callable[..., FeedConfig]:
    def _builder(**overrides: Any) -> FeedConfig:
        base: dict[str, Any] = {
            "url": "https://example.com/feed.xml",
            "title": "Example",
            "tags": ["tech"],
            "expires": 3600,
        }
        base.update(overrides)
        return FeedConfig(**base)

    return _builder


@pytest.fixture
def parsed_feed() -> Callable[..., ParsedFeed]:
    def _builder(items: list[tuple[str, str, datetime | None]], title: str = "Example Blog", url: str = "https://example.com/feed.xml") -> ParsedFeed:
        return ParsedFeed(
            url=url,
            title=title,
            items=[FeedItem(link=link, title=item_title, published_at=published) for link, item_title, published in items],
        )

    return _builder
