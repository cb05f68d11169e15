"""Core infrastructure layer - no playback logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging and user-facing output (Loguru)
- Console management (Rich)
"""

from .config import (
    Config,
    LoggingConfig,
    PlayerConfig,
    UIConfig,
    create_default_config,
    ensure_directories,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
)
from .console import get_console, safe_print
from .output import log, set_ui_mode, setup_loguru, setup_stderr_logging

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "PlayerConfig",
    "UIConfig",
    "create_default_config",
    "ensure_directories",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    # Console
    "get_console",
    "safe_print",
    # Output
    "log",
    "set_ui_mode",
    "setup_loguru",
    "setup_stderr_logging",
]
