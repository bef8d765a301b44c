"""Configuration loaded from ``minisheet.yaml``, with defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from minisheet.logging.events import set_log_dir

CONFIG_FILE = "minisheet.yaml"

DEFAULT_CONFIG = {
    "logging_enabled": False,
    "log_dir": "logs",
    "logging_fsync": False,
    "logging_tail_bytes": 2_097_152,  # 2 MB
}


def _flatten_logging_block(user_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten a nested ``logging:`` block into flat config keys.

    Supports::

        logging:
          enabled: true
          dir: logs
          fsync: false

    Maps to ``logging_enabled``, ``log_dir``, ``logging_fsync`` and
    ``logging_tail_bytes``.  Flat keys given alongside the block win.
    """
    block = user_config.pop("logging", None)
    if not isinstance(block, dict):
        return user_config

    mapping = {
        "enabled": "logging_enabled",
        "dir": "log_dir",
        "fsync": "logging_fsync",
        "tail_bytes": "logging_tail_bytes",
    }
    for short_key, flat_key in mapping.items():
        if short_key in block:
            user_config.setdefault(flat_key, block[short_key])
    return user_config


def load_config(config_dir: Path) -> dict[str, Any]:
    """Load configuration from ``minisheet.yaml`` in *config_dir*, with defaults.

    Args:
        config_dir: Directory that may contain ``minisheet.yaml``.

    Returns:
        Merged configuration dict.  Unknown keys are kept.

    Raises:
        ValueError: If the file is not a YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = config_dir / CONFIG_FILE
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(user_config).__name__}")
        config.update(_flatten_logging_block(user_config))
    return config


def configure_logging(config: dict[str, Any], base_dir: Path) -> Path | None:
    """Point the event sink at the configured log directory.

    Relative ``log_dir`` values are resolved against *base_dir*.  Returns
    the log directory, or None when logging is disabled.
    """
    if not config.get("logging_enabled"):
        set_log_dir(None)
        return None
    log_dir = Path(config.get("log_dir") or DEFAULT_CONFIG["log_dir"])
    if not log_dir.is_absolute():
        log_dir = base_dir / log_dir
    tail_bytes = config.get("logging_tail_bytes")
    set_log_dir(
        log_dir,
        fsync=bool(config.get("logging_fsync", False)),
        tail_bytes=int(tail_bytes) if tail_bytes is not None else None,
    )
    return log_dir
