"""Configuration loading (TOML, env vars)."""

from __future__ import annotations

import logging
import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ccstatus.types.config import DisplayConfig, StatuslineConfig, StoreConfig

# Load .env from current directory (and parents), won't override existing env vars
load_dotenv()

logger = logging.getLogger(__name__)


def config_path() -> Path:
    """Location of the user's statusline.toml."""
    if override := os.environ.get("CCSTATUS_CONFIG"):
        return Path(override).expanduser()
    return Path.home() / ".claude" / "statusline.toml"


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    if data_dir := os.environ.get("CCSTATUS_DATA_DIR"):
        config["data_dir"] = data_dir
    if cache_dir := os.environ.get("CCSTATUS_CACHE_DIR"):
        config["cache_dir"] = cache_dir
    if separator := os.environ.get("CCSTATUS_SEPARATOR"):
        config["separator"] = separator
    if log_file := os.environ.get("CCSTATUS_LOG_FILE"):
        config["log_file"] = log_file
    if log_level := os.environ.get("CCSTATUS_LOG_LEVEL"):
        config["log_level"] = log_level.upper()

    return config


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Load statusline.toml if it exists; a broken file counts as empty."""
    toml_path = path or config_path()
    if not toml_path.exists():
        return {}
    try:
        import tomllib
        with open(toml_path, "rb") as f:
            return tomllib.load(f)
    except Exception as exc:
        logger.warning("Ignoring unreadable config %s: %s", toml_path, exc)
        return {}


def _display_from(section: dict[str, Any]) -> DisplayConfig:
    display = DisplayConfig()
    overrides: dict[str, Any] = {}
    for f in fields(DisplayConfig):
        if f.name not in section:
            continue
        value = section[f.name]
        if f.name == "separator":
            if isinstance(value, str):
                overrides["separator"] = value
        elif isinstance(value, bool):
            overrides[f.name] = value
        else:
            logger.warning("Ignoring non-boolean display.%s = %r", f.name, value)
    return replace(display, **overrides)


def resolve_config(
    *,
    data_dir: str | Path | None = None,
    toml_path: Path | None = None,
) -> StatuslineConfig:
    """Merge defaults, TOML, environment and explicit arguments (in that order)."""
    toml = load_toml_config(toml_path)
    env = load_env_config()

    display_section = toml.get("display", {})
    display = _display_from(display_section if isinstance(display_section, dict) else {})
    if "separator" in env:
        display = replace(display, separator=env["separator"])

    store_section = toml.get("store", {})
    if not isinstance(store_section, dict):
        store_section = {}
    store = StoreConfig()
    toml_dirs = {k: v for k, v in store_section.items() if isinstance(v, str) and v}
    chosen_data_dir = data_dir or env.get("data_dir") or toml_dirs.get("data_dir")
    chosen_cache_dir = env.get("cache_dir") or toml_dirs.get("cache_dir")
    if chosen_data_dir:
        store = replace(store, data_dir=Path(chosen_data_dir).expanduser())
    if chosen_cache_dir:
        store = replace(store, cache_dir=Path(chosen_cache_dir).expanduser())

    log_file = env.get("log_file")
    return StatuslineConfig(
        display=display,
        store=store,
        log_file=Path(log_file).expanduser() if log_file else None,
        log_level=env.get("log_level", "WARNING"),
    )
