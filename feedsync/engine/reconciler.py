"""Create-or-update pass mirroring fresh feed items into the store."""

from __future__ import annotations

from datetime import datetime

from ..config import FeedConfig
from ..exceptions import WriteError
from ..store import StoredRecord
from .base import FeedPass
from .fields import fields_from_item, freshness_cutoff


def correlate(candidates: list[StoredRecord], url_property: str) -> tuple[dict[str, str], set[str]]:
    """Map stored URL -> record id for live records, and collect archived URLs.

    Records without a URL value are ignored. When several live records share a
    URL the later one in iteration order wins.
    """
    links: dict[str, str] = {}
    archived: set[str] = set()
    for record in candidates:
        url = record.url(url_property)
        if url is None:
            continue
        if record.archived:
            archived.add(url)
            continue
        links[url] = record.id
    return links, archived


class Reconciler(FeedPass):
    """Ensure every fresh feed item is represented by an up-to-date record."""

    def run(self, feed: FeedConfig, now: datetime | None = None) -> tuple[str, dict[str, int]]:
        """Return the resolved feed title and the per-item counts."""
        context = self.prepare(feed)
        logger = self.logger_for(context.title)
        links, archived = correlate(context.candidates, self.names.url)
        cutoff = freshness_cutoff(self.current_time(now), feed.expiry_window)

        summary = {"created": 0, "updated": 0, "skipped": 0, "failed": 0}
        for item in context.feed.items:
            if item.published_at is None or item.published_at < cutoff:
                summary["skipped"] += 1
                continue
            record_id = links.get(item.link)
            if record_id is None and item.link in archived:
                logger.info("archived_link_skipped", url=item.link)
                summary["skipped"] += 1
                continue
            fields = fields_from_item(feed, context.title, item)
            if record_id is not None:
                try:
                    self.store.update(record_id, fields)
                except WriteError as exc:
                    logger.error("record_update_failed", url=item.link, record_id=record_id, error=str(exc))
                    summary["failed"] += 1
                else:
                    logger.info("record_updated", url=item.link, record_id=record_id)
                    summary["updated"] += 1
            else:
                try:
                    self.store.create(self.settings.database_id, fields)
                except WriteError as exc:
                    logger.error("record_create_failed", url=item.link, error=str(exc))
                    summary["failed"] += 1
                else:
                    logger.info("record_created", url=item.link)
                    summary["created"] += 1
        return context.title, summary


__all__ = ["Reconciler", "correlate"]
