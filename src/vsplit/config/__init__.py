"""Configuration management.

Precedence: CLI flags > environment (VSPLIT_*) > config file
(~/.vsplit/config.toml) > defaults.
"""

from vsplit.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from vsplit.config.env import EnvReader
from vsplit.config.loader import (
    ConfigError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from vsplit.config.logging_factory import build_logging_config
from vsplit.config.models import (
    LoggingConfig,
    RunnerConfig,
    SplitConfig,
    ToolPathsConfig,
    VSplitConfig,
)

__all__ = [
    "ConfigBuilder",
    "ConfigError",
    "ConfigSource",
    "EnvReader",
    "LoggingConfig",
    "RunnerConfig",
    "SplitConfig",
    "ToolPathsConfig",
    "VSplitConfig",
    "build_logging_config",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "source_from_env",
    "source_from_file",
]
