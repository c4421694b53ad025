"""Configuration loading helpers for feedsync."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import SyncConfig

DEFAULT_CONFIG_PATH = "./config.yml"


def resolve_config_path(raw: str | Path) -> Path:
    """Expand ``$VARS`` and ``~`` in a config path."""

    return Path(os.path.expandvars(str(raw))).expanduser()


def _read_file(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file is not valid YAML: {path} ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> SyncConfig:
    """Read and validate the YAML configuration, resolving per-feed defaults."""

    resolved = resolve_config_path(path)
    payload = _read_file(resolved)
    try:
        return SyncConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {resolved}:\n{exc}") from exc


__all__ = ["DEFAULT_CONFIG_PATH", "load_config", "resolve_config_path"]
