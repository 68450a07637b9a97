"""Configuration management for the S3 CLI."""

import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError, field_validator

from s3_archive.exceptions import ConfigError

DEFAULT_CONFIG_PATH = '~/.config/s3-cli/config.json'


def _expand(value):
    if isinstance(value, str):
        return os.path.expanduser(os.path.expandvars(value))
    return value


class StoreConfig(BaseModel):
    """Object store endpoint, credentials and bucket."""
    domain: str
    region: str
    access_key: str
    secret_key: str
    bucket: str

    @field_validator('domain', 'region', 'access_key', 'secret_key', 'bucket', mode='before')
    @classmethod
    def expand_values(cls, v):
        """Expand environment variables so secrets can live outside the file."""
        return _expand(v)


class TransferConfig(BaseModel):
    """Transfer tuning."""
    spool_threshold_mb: int = 8
    max_attempts: int = 3
    archive_dir: str = '.'

    @field_validator('archive_dir', mode='before')
    @classmethod
    def expand_archive_dir(cls, v):
        return _expand(v)

    @field_validator('spool_threshold_mb', 'max_attempts')
    @classmethod
    def must_be_positive(cls, v):
        if v < 1:
            raise ValueError('must be at least 1')
        return v

    @property
    def spool_threshold(self) -> int:
        return self.spool_threshold_mb * 1024 * 1024


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "s3-cli.log"
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

    @field_validator('file', mode='before')
    @classmethod
    def expand_file(cls, v):
        return _expand(v)


class Config(StoreConfig):
    """Main configuration model."""
    transfer: TransferConfig = TransferConfig()
    logging: LoggingConfig = LoggingConfig()


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    return Path(os.path.expanduser(str(config_path or DEFAULT_CONFIG_PATH)))


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from a JSON file.

    Raises:
        FileNotFoundError: the file does not exist
        ConfigError: the file is not valid JSON or fails validation
    """
    config_file = resolve_config_path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, 'r') as f:
        try:
            config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_file}: {e}") from e

    try:
        return Config(**config_data)
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e


def create_default_config(config_path: Optional[Union[str, Path]] = None) -> Path:
    """Write a template configuration file and return its path."""
    config_file = resolve_config_path(config_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    default_config = {
        "domain": "https://s3.example.com",
        "region": "us-east-1",
        "access_key": "YOUR_ACCESS_KEY",
        "secret_key": "${S3_SECRET_KEY}",
        "bucket": "your-bucket-name",
        "transfer": {
            "spool_threshold_mb": 8,
            "max_attempts": 3,
            "archive_dir": "."
        },
        "logging": {
            "level": "INFO",
            "file": "~/.config/s3-cli/s3-cli.log",
            "max_bytes": 10485760,
            "backup_count": 5
        }
    }

    with open(config_file, 'w') as f:
        json.dump(default_config, f, indent=2)

    return config_file
