"""
feedsync

Mirror RSS/Atom feeds into a Notion database.

- ``pull``: create or update one record per fresh feed item, keyed by link.
- ``clean``: archive stale records whose status is in a configured set.

Example
-------
from feedsync.config import load_config
from feedsync.engine import FeedFetcher
from feedsync.orchestrator import Orchestrator
from feedsync.store import NotionStore

config = load_config("config.yml")
store = NotionStore(config.store)
orchestrator = Orchestrator(config, FeedFetcher(config.fetch), store)
for result in orchestrator.pull_all():
    print(result.title, result.summary)
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
