"""Feed downloading and parsing."""

from __future__ import annotations

import calendar
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import feedparser
import httpx
import structlog

from ..config import FetchSettings
from ..exceptions import FeedFetchError


@dataclass(frozen=True, slots=True)
class FeedItem:
    """One entry of a fetched feed."""

    link: str
    title: str = ""
    published_at: datetime | None = None


@dataclass(slots=True)
class ParsedFeed:
    """Standardised feed wrapper."""

    url: str
    title: str
    items: list[FeedItem] = field(default_factory=list)


def _to_datetime(entry: dict[str, Any]) -> datetime | None:
    """
    Convert feed entry date fields to timezone-aware UTC datetime.
    Priority: published_parsed -> updated_parsed -> None.
    """
    for key in ("published_parsed", "updated_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                # feedparser normalises *_parsed to UTC
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError):
                continue
    return None


def parse_entry(entry: dict[str, Any]) -> FeedItem:
    """Map a raw feedparser entry to a FeedItem."""

    title = (entry.get("title") or "").strip()
    link = (entry.get("link") or entry.get("feedburner_origlink") or "").strip()
    return FeedItem(link=link, title=title, published_at=_to_datetime(entry))


def parse_feed(url: str, content: bytes | str, headers: dict[str, str] | None = None) -> ParsedFeed:
    """
    Parse an RSS/Atom document.

    Raises FeedFetchError when feedparser flags the document as malformed and
    could not recover any entries from it.
    """
    parsed = feedparser.parse(content, response_headers=headers or {})
    entries = getattr(parsed, "entries", None)
    if getattr(parsed, "bozo", 0) and not entries:
        exc = getattr(parsed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FeedFetchError(msg)
    feed_meta = getattr(parsed, "feed", {}) or {}
    title = (feed_meta.get("title") or "").strip()
    return ParsedFeed(url=url, title=title, items=[parse_entry(e) for e in entries or []])


class FeedFetcher:
    """Download feeds over HTTP and parse them with feedparser."""

    def __init__(
        self,
        settings: FetchSettings | None = None,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or FetchSettings()
        self.logger = logger or structlog.get_logger("feedsync.fetcher")
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str) -> ParsedFeed:
        try:
            response = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FeedFetchError(f"Failed to fetch feed: {url} ({exc})") from exc
        if response.is_error:
            raise FeedFetchError(f"Failed to fetch feed: {url} (status {response.status_code})")
        # body is already decoded by httpx; only the charset hint is useful to feedparser
        headers = {"content-location": str(response.url)}
        if "content-type" in response.headers:
            headers["content-type"] = response.headers["content-type"]
        feed = parse_feed(url, response.content, headers)
        self.logger.debug("feed_downloaded", url=url, items=len(feed.items))
        return feed


__all__ = ["FeedFetcher", "FeedItem", "ParsedFeed", "parse_entry", "parse_feed"]
