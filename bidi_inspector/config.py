"""Configuration loading for bidi-inspector."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_WEBSOCKET_URL = "ws://localhost:9222/session"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ENV_URL = "BIDI_INSPECTOR_URL"
ENV_TIMEOUT = "BIDI_INSPECTOR_TIMEOUT"


def get_config_dir() -> Path:
    """Get the bidi-inspector config directory."""
    return Path.home() / ".bidi-inspector"


def get_config_file() -> Path:
    """Get path to the default config file."""
    return get_config_dir() / "config.json"


@dataclass
class ClientConfig:
    """Settings for the WebSocket channel, logging and the log recorder."""

    websocket_url: str = DEFAULT_WEBSOCKET_URL
    command_timeout: float = 30.0
    connect_timeout: float = 10.0
    max_message_size: Optional[int] = None  # None disables the frame size limit
    ping_interval: Optional[float] = 20.0
    log_level: str = "INFO"
    log_format: str = LOG_FORMAT
    recorder_flush_interval: float = 2.5
    recorder_buffer_size: int = 1000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """Build a config from the sectioned JSON layout.

        Args:
            data: Dict with optional "connection", "logging" and "recorder" sections

        Returns:
            ClientConfig with defaults for anything missing
        """
        connection = data.get("connection", {})
        logging_section = data.get("logging", {})
        recorder = data.get("recorder", {})

        defaults = cls()
        return cls(
            websocket_url=connection.get("url", defaults.websocket_url),
            command_timeout=float(
                connection.get("command_timeout", defaults.command_timeout)
            ),
            connect_timeout=float(
                connection.get("connect_timeout", defaults.connect_timeout)
            ),
            max_message_size=connection.get(
                "max_message_size", defaults.max_message_size
            ),
            ping_interval=connection.get("ping_interval", defaults.ping_interval),
            log_level=logging_section.get("level", defaults.log_level),
            log_format=logging_section.get("format", defaults.log_format),
            recorder_flush_interval=float(
                recorder.get("flush_interval", defaults.recorder_flush_interval)
            ),
            recorder_buffer_size=int(
                recorder.get("buffer_size", defaults.recorder_buffer_size)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the sectioned JSON layout."""
        return {
            "connection": {
                "url": self.websocket_url,
                "command_timeout": self.command_timeout,
                "connect_timeout": self.connect_timeout,
                "max_message_size": self.max_message_size,
                "ping_interval": self.ping_interval,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "recorder": {
                "flush_interval": self.recorder_flush_interval,
                "buffer_size": self.recorder_buffer_size,
            },
        }


def _apply_env_overrides(config: ClientConfig) -> ClientConfig:
    url = os.environ.get(ENV_URL)
    if url:
        config.websocket_url = url

    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            config.command_timeout = float(timeout)
        except ValueError:
            logger.warning(f"Ignoring invalid {ENV_TIMEOUT}={timeout!r}")

    return config


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load configuration from a JSON file plus environment overrides.

    A missing default file is not an error; an explicitly given path that
    does not exist is.

    Args:
        path: Optional path to a config file (default: ~/.bidi-inspector/config.json)

    Returns:
        Loaded ClientConfig

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file is not valid JSON
    """
    config_file = path or get_config_file()

    if config_file.exists():
        try:
            with open(config_file) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {config_file}: {e}") from e
        logger.debug(f"Loaded config from {config_file}")
        config = ClientConfig.from_dict(data)
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {path}")
    else:
        config = ClientConfig()

    return _apply_env_overrides(config)


def create_default_config(path: Optional[Path] = None) -> Path:
    """Write the default configuration file.

    Args:
        path: Target path (default: ~/.bidi-inspector/config.json)

    Returns:
        Path that was written
    """
    config_file = path or get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        json.dump(ClientConfig().to_dict(), f, indent=2)
    return config_file


__all__ = [
    "ClientConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_file",
    "load_config",
]
