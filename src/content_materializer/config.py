"""
Configuration management for the content materializer.

Provides centralized configuration using Pydantic for validation and
environment variable support. Supports materializer.yaml for per-project
settings.
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

YAML_FILENAME = "materializer.yaml"

# Destination filename prefix used by the host application
DEFAULT_FILE_PREFIX = "audio_stream_"
DEFAULT_CHUNK_SIZE = 64 * 1024


def load_materializer_yaml(search_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load materializer.yaml configuration file.

    Searches for materializer.yaml starting from search_dir (or
    PROJECT_ROOT) and walking up to 3 parent directories.

    Args:
        search_dir: Directory to start searching from

    Returns:
        Dictionary with materializer.yaml contents, or empty dict if not found
    """
    start = search_dir or PROJECT_ROOT
    for parent in [start] + list(start.parents)[:3]:
        candidate = parent / YAML_FILENAME
        if candidate.exists():
            with open(candidate, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    return {}


class Config(BaseSettings):
    """
    Materializer configuration with environment variable support.

    Configuration can be provided via:
    1. Environment variables (prefixed with CONTENT_MATERIALIZER_)
    2. .env file
    3. materializer.yaml
    4. Default values

    Example:
        export CONTENT_MATERIALIZER_CACHE_DIR="/data/app/cache"
        export CONTENT_MATERIALIZER_CHUNK_SIZE=131072
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_MATERIALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Destination
    cache_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        description="Existing, writable directory that receives materialized files"
    )
    file_prefix: str = Field(
        default=DEFAULT_FILE_PREFIX,
        description="Filename prefix for materialized files"
    )

    # Copy settings
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        description="Number of bytes read from the source per copy iteration"
    )

    # HTTP resolver settings
    http_connect_timeout: float = Field(
        default=10.0,
        description="Connect timeout in seconds for http(s) references"
    )
    http_read_timeout: float = Field(
        default=300.0,
        description="Read timeout in seconds for http(s) references"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level used by the command line"
    )

    @field_validator("chunk_size")
    @classmethod
    def _chunk_size_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("chunk_size must be a positive integer")
        return value

    @property
    def http_timeout(self):
        """(connect, read) timeout tuple in the form requests expects."""
        return (self.http_connect_timeout, self.http_read_timeout)


def get_config(search_dir: Optional[Path] = None) -> Config:
    """
    Get the materializer configuration instance.

    Merges settings from materializer.yaml (if present) with environment
    variables and the .env file; environment values win. The cache
    directory is never created here, it must already exist.

    Args:
        search_dir: Directory to start the materializer.yaml search from

    Returns:
        Config: Materializer configuration
    """
    yaml_values = load_materializer_yaml(search_dir)
    known = {
        key: value
        for key, value in yaml_values.items()
        if key in Config.model_fields
    }
    # Init kwargs take precedence over env in pydantic-settings, so only pass
    # YAML values that the environment does not already set.
    env_config = Config()
    overrides = {
        key: value
        for key, value in known.items()
        if key not in env_config.model_fields_set
    }
    if not overrides:
        return env_config
    return Config(**overrides)
