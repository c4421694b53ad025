from __future__ import annotations

from pathlib import Path

import pytest

from feedsync.config import load_config, resolve_config_path
from feedsync.exceptions import ConfigError

CONFIG = """
expires: 86400
clean:
  status: [Done, Archive]
feeds:
  - url: https://example.com/a.xml
    title: A
    tags: [tech]
  - url: https://example.com/b.xml
    expires: 600
store:
  database_id: db-from-file
  token: token-from-file
  properties:
    url: Link
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_resolves_feed_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, CONFIG))

    assert [feed.expires for feed in config.feeds] == [86400, 600]
    assert config.feeds[0].tags == ["tech"]
    assert config.feeds[1].title == ""
    assert config.clean.status == ["Done", "Archive"]
    assert config.store.database_id == "db-from-file"
    assert config.store.properties.url == "Link"
    assert config.store.properties.publish == "Publish"


def test_load_config_expands_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path, CONFIG)
    monkeypatch.setenv("FEEDSYNC_TEST_DIR", str(tmp_path))

    config = load_config("$FEEDSYNC_TEST_DIR/config.yml")

    assert len(config.feeds) == 2
    assert resolve_config_path("$FEEDSYNC_TEST_DIR/x.yml") == tmp_path / "x.yml"


def test_store_credentials_fall_back_to_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTION_DATABASE_ID", "db-env")
    monkeypatch.setenv("NOTION_TOKEN", "token-env")

    config = load_config(_write(tmp_path, "feeds: []\n"))

    assert config.store.database_id == "db-env"
    assert config.store.token == "token-env"


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yml")


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "feeds: [\n",
        "feeds:\n  - title: no url\n",
        "expires: -1\n",
    ],
)
def test_invalid_documents_raise_config_error(tmp_path: Path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, text))
