"""
Configuration management for Audio Deck
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class PlayerConfig:
    """Configuration for the playback engine."""

    mpv_socket_path: Optional[str] = None
    volume: float = 1.0  # 0.0 - 1.0
    load_timeout: float = 5.0  # Seconds to wait for a source to become ready
    auto_advance: bool = False  # Move to the next track when one ends
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]
    )

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be between 0.0 and 1.0, got {self.volume}")
        if self.load_timeout <= 0:
            raise ValueError(
                f"load_timeout must be positive, got {self.load_timeout}"
            )


@dataclass
class UIConfig:
    """Configuration for the terminal interface."""

    refresh_rate: int = 10  # Frames per second
    use_colors: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/audio-deck/audio-deck.log)
    )
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "audio-deck"
    return Path.home() / ".config" / "audio-deck"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/audio-deck (or ~/.config/audio-deck)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "audio-deck"
    return Path.home() / ".local" / "share" / "audio-deck"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Audio Deck Configuration

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/audio-deck-mpv"

# Initial volume (0.0 - 1.0)
volume = 1.0

# Seconds to wait for a track to load before reporting it unplayable
load_timeout = 5.0

# Start the next track automatically when one finishes
auto_advance = false

# File extensions accepted when adding tracks
supported_formats = [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]

[ui]
# Screen refresh rate in frames per second
refresh_rate = 10

# Use colors in terminal output
use_colors = true

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/audio-deck/audio-deck.log)
# log_file = "/path/to/custom/audio-deck.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides on top of file values."""
    socket_path = os.environ.get("AUDIO_DECK_MPV_SOCKET")
    if socket_path:
        config.player.mpv_socket_path = socket_path

    log_level = os.environ.get("AUDIO_DECK_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - AUDIO_DECK_MPV_SOCKET
    - AUDIO_DECK_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=float(player_data.get("volume", config.player.volume)),
            load_timeout=float(
                player_data.get("load_timeout", config.player.load_timeout)
            ),
            auto_advance=player_data.get("auto_advance", config.player.auto_advance),
            supported_formats=player_data.get(
                "supported_formats", config.player.supported_formats
            ),
        )
        try:
            config.player.validate()
        except ValueError as e:
            logger.warning(f"Invalid player configuration: {e}")
            logger.warning("Using default player configuration.")
            config.player = PlayerConfig()

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        config.ui = UIConfig(
            refresh_rate=ui_data.get("refresh_rate", config.ui.refresh_rate),
            use_colors=ui_data.get("use_colors", config.ui.use_colors),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
        )

    return _apply_env_overrides(config)


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
