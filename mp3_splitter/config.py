"""
Configuration management for the MP3 splitter command line
"""
import os
import json
import logging
from typing import Optional
from dataclasses import dataclass, asdict

from .base import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = 'MP3_SPLITTER_CONFIG_FILE'
DEFAULT_CONFIG_FILE = 'mp3_splitter_config.json'


@dataclass
class SplitterConfig:
    """Defaults used when command line arguments are omitted"""
    default_input: str = 'audiofile.mp3'
    default_chunk_minutes: float = 10
    default_prefix: str = 'audiofile_part'
    output_dir: str = 'mp3_chunks'

    # Logging
    log_dir: str = 'logs'
    log_level: str = 'DEBUG'

    @classmethod
    def from_env(cls) -> 'SplitterConfig':
        """Create configuration from environment variables"""
        config = cls()

        if os.getenv('MP3_SPLITTER_INPUT'):
            config.default_input = os.getenv('MP3_SPLITTER_INPUT')

        if os.getenv('MP3_SPLITTER_CHUNK_MINUTES'):
            try:
                minutes = float(os.getenv('MP3_SPLITTER_CHUNK_MINUTES'))
                if minutes > 0:
                    config.default_chunk_minutes = minutes
                else:
                    logger.warning(f"Ignoring non-positive MP3_SPLITTER_CHUNK_MINUTES={minutes}")
            except ValueError:
                logger.warning("Ignoring invalid MP3_SPLITTER_CHUNK_MINUTES="
                               f"{os.getenv('MP3_SPLITTER_CHUNK_MINUTES')!r}")

        if os.getenv('MP3_SPLITTER_PREFIX'):
            config.default_prefix = os.getenv('MP3_SPLITTER_PREFIX')

        if os.getenv('MP3_SPLITTER_OUTPUT_DIR'):
            config.output_dir = os.getenv('MP3_SPLITTER_OUTPUT_DIR')

        if os.getenv('MP3_SPLITTER_LOG_DIR'):
            config.log_dir = os.getenv('MP3_SPLITTER_LOG_DIR')

        if os.getenv('MP3_SPLITTER_LOG_LEVEL'):
            config.log_level = os.getenv('MP3_SPLITTER_LOG_LEVEL').upper()

        return config

    @classmethod
    def from_file(cls, file_path: str) -> 'SplitterConfig':
        """
        Load configuration from JSON file

        Raises:
            ConfigError: If the file cannot be read, is not JSON, or has unknown keys
        """
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
            return cls(**data)
        except (OSError, ValueError, TypeError) as e:
            raise ConfigError(f"Invalid configuration file {file_path}: {e}") from e

    def to_file(self, file_path: str):
        """Save configuration to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(asdict(self), f, indent=2)


# Global configuration instance
_config: Optional[SplitterConfig] = None


def get_config() -> SplitterConfig:
    """Get the global splitter configuration"""
    global _config
    if _config is None:
        # Try to load from file first
        config_file = os.getenv(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
        if os.path.exists(config_file):
            _config = SplitterConfig.from_file(config_file)
        else:
            # Fall back to environment variables
            _config = SplitterConfig.from_env()
    return _config


def set_config(config: SplitterConfig):
    """Set the global splitter configuration"""
    global _config
    _config = config


def reset_config():
    """Reset configuration to defaults"""
    global _config
    _config = None
