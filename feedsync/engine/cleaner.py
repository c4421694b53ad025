"""Archival pass retiring stale records in a targeted status."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..config import FeedConfig
from ..exceptions import WriteError
from .base import FeedPass
from .fields import freshness_cutoff


class Cleaner(FeedPass):
    """Archive records that are both stale and in one of the given statuses."""

    def run(
        self,
        feed: FeedConfig,
        statuses: Iterable[str],
        now: datetime | None = None,
    ) -> tuple[str, dict[str, int]]:
        targets = set(statuses)
        context = self.prepare(feed)
        logger = self.logger_for(context.title)
        cutoff = freshness_cutoff(self.current_time(now), feed.expiry_window)

        summary = {"archived": 0, "skipped": 0, "failed": 0}
        for record in context.candidates:
            if record.archived:
                summary["skipped"] += 1
                continue
            status = record.select(self.names.status)
            if status is None or status not in targets:
                summary["skipped"] += 1
                continue
            published_at = record.date_start(self.names.publish)
            if published_at is None or published_at >= cutoff:
                summary["skipped"] += 1
                continue
            try:
                self.store.archive(record.id)
            except WriteError as exc:
                logger.error("record_archive_failed", record_id=record.id, error=str(exc))
                summary["failed"] += 1
            else:
                logger.info("record_archived", record_id=record.id, status=status)
                summary["archived"] += 1
        return context.title, summary


__all__ = ["Cleaner"]
