"""Configuration loading with precedence handling.

Precedence (highest to lowest):
1. CLI arguments (passed to get_config)
2. Environment variables (VSPLIT_*)
3. Config file (~/.vsplit/config.toml)
4. Default values

Environment variables:
- VSPLIT_CONFIG_PATH: config file location
- VSPLIT_FFMPEG_PATH, VSPLIT_FFPROBE_PATH: tool paths
- VSPLIT_QUALITY, VSPLIT_SEGMENT_DURATION, VSPLIT_OUTPUT_DIR: split defaults
- VSPLIT_REAP_TIMEOUT, VSPLIT_KILL_AFTER_GRACE: cancellation behavior
- VSPLIT_LOG_LEVEL, VSPLIT_LOG_FILE, VSPLIT_LOG_FORMAT: logging
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from vsplit.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from vsplit.config.env import EnvReader
from vsplit.config.models import VSplitConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vsplit"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed in strict mode."""


# path -> (parsed dict, mtime)
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path() -> Path:
    """Config file path, overridable with VSPLIT_CONFIG_PATH."""
    env_path = os.environ.get("VSPLIT_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def _load_toml(path: Path, strict: bool) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}
    logger.debug("Loaded config from %s", path)
    return data


def load_config_file(
    path: Path | None = None, *, strict: bool = False
) -> dict[str, Any]:
    """Load and cache the TOML config file.

    The cache is keyed by path and invalidated when the file's mtime
    changes.

    Args:
        path: Config file. None uses get_default_config_path().
        strict: Raise ConfigError on parse failure instead of returning {}.

    Returns:
        Parsed configuration; empty if the file does not exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]
        result = _load_toml(path, strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Forget cached config files."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    cli_source: ConfigSource | None = None,
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> VSplitConfig:
    """Load configuration with full precedence handling.

    Args:
        config_path: Config file (overrides VSPLIT_CONFIG_PATH).
        cli_source: Values given on the command line.
        env_reader: Environment reader; os.environ is used if None.
        strict: Raise ConfigError when the config file cannot be parsed.

    Returns:
        Merged VSplitConfig.

    Raises:
        ConfigError: When strict and the file cannot be parsed.
        ValueError: When a merged value is invalid.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    if cli_source is not None:
        builder.apply(cli_source)
    return builder.build()
