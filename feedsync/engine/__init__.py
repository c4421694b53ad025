"""Engine components: fetch -> correlate -> create/update, and stale-record cleanup."""

from .base import FeedContext, FeedPass
from .cleaner import Cleaner
from .fetcher import FeedFetcher, FeedItem, ParsedFeed
from .fields import fields_from_item, freshness_cutoff
from .reconciler import Reconciler, correlate

__all__ = [
    "Cleaner",
    "FeedContext",
    "FeedFetcher",
    "FeedItem",
    "FeedPass",
    "ParsedFeed",
    "Reconciler",
    "correlate",
    "fields_from_item",
    "freshness_cutoff",
]
