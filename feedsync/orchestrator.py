"""Run the reconcile or cleanup pass over every configured feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from .config import FeedConfig, SyncConfig
from .engine import Cleaner, FeedFetcher, Reconciler
from .exceptions import FeedSyncError
from .logging_conf import configure_logging
from .store import RecordStore


@dataclass(slots=True)
class FeedRunResult:
    """Outcome of one feed's pass."""

    url: str
    title: str
    summary: dict[str, int] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def clean(self) -> bool:
        """True when the feed pass succeeded and no individual write failed."""

        return self.ok and not self.summary.get("failed")


class Orchestrator:
    """Central coordinator processing feeds sequentially in configuration order."""

    def __init__(
        self,
        config: SyncConfig,
        fetcher: FeedFetcher,
        store: RecordStore,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.store = store
        self.reconciler = Reconciler(fetcher, store, config.store)
        self.cleaner = Cleaner(fetcher, store, config.store)
        self.logger = configure_logging().bind(component="orchestrator")

    def pull_all(self, now: datetime | None = None) -> list[FeedRunResult]:
        results = []
        for feed in self.config.feeds:
            results.append(self._run(feed, "pull", lambda f: self.reconciler.run(f, now=now)))
        return results

    def clean_all(
        self,
        statuses: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> list[FeedRunResult]:
        targets = list(statuses) if statuses else list(self.config.clean.status)
        if not targets:
            self.logger.warning("clean_without_status")
        results = []
        for feed in self.config.feeds:
            results.append(
                self._run(feed, "clean", lambda f: self.cleaner.run(f, targets, now=now))
            )
        return results

    def close(self) -> None:
        self.fetcher.close()
        self.store.close()

    def _run(self, feed: FeedConfig, command: str, action) -> FeedRunResult:
        result = FeedRunResult(url=feed.url, title=feed.title or feed.url)
        try:
            result.title, result.summary = action(feed)
        except FeedSyncError as exc:
            self.logger.error("feed_failed", command=command, url=feed.url, error=str(exc))
            result.error = str(exc)
        else:
            self.logger.info("feed_completed", command=command, url=feed.url, **result.summary)
        return result


__all__ = ["FeedRunResult", "Orchestrator"]
