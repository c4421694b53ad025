"""Mapping from feed items to store field sets."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..config import FeedConfig
from ..store import RecordFields
from .fetcher import FeedItem


def record_name(item: FeedItem, feed_title: str) -> str:
    return f"{item.title} | {feed_title}"


def record_tags(feed: FeedConfig, feed_title: str) -> tuple[str, ...]:
    """Feed title first, then the configured tags."""

    return (feed_title, *feed.tags)


def fields_from_item(feed: FeedConfig, feed_title: str, item: FeedItem) -> RecordFields:
    return RecordFields(
        name=record_name(item, feed_title),
        url=item.link,
        tags=record_tags(feed, feed_title),
        published_at=item.published_at,
    )


def freshness_cutoff(now: datetime, window: timedelta) -> datetime:
    """Anything published strictly before the returned instant is stale."""

    return now - window


__all__ = ["fields_from_item", "freshness_cutoff", "record_name", "record_tags"]
