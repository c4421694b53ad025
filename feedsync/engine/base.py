"""Steps shared by the reconcile and cleanup passes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from ..config import FeedConfig, StoreSettings
from ..logging_conf import feed_logger
from ..store import RecordStore, StoredRecord
from .fetcher import FeedFetcher, ParsedFeed


@dataclass(slots=True)
class FeedContext:
    """Fetched feed plus the store records found for it."""

    title: str
    feed: ParsedFeed
    candidates: list[StoredRecord]


class FeedPass:
    """Fetch a feed, resolve its title and look up its existing records."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        store: RecordStore,
        settings: StoreSettings,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.settings = settings
        self.names = settings.properties

    def prepare(self, feed: FeedConfig) -> FeedContext:
        """Raise FeedFetchError or SearchError; nothing is written before this returns."""

        parsed = self.fetcher.fetch(feed.url)
        title = feed.title or parsed.title
        candidates = self.store.search(title)
        self.logger_for(title).info(
            "feed_fetched", url=feed.url, items=len(parsed.items), candidates=len(candidates)
        )
        return FeedContext(title=title, feed=parsed, candidates=candidates)

    @staticmethod
    def logger_for(title: str) -> structlog.BoundLogger:
        return feed_logger(title)

    @staticmethod
    def current_time(now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now


__all__ = ["FeedContext", "FeedPass"]
