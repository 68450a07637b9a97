"""Shared utilities for CLI commands."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import click
from tabulate import tabulate

from config import Config, load_config
from s3_archive.client import S3ObjectStore
from s3_archive.models import TransferOutcome

QUIET_LOGGERS = ('boto3', 'botocore', 's3transfer', 'urllib3')


def load_app_config(ctx: click.Context) -> Config:
    """Load the configuration named on the root command.

    Returns:
        Validated Config

    Raises:
        FileNotFoundError, ConfigError: If configuration cannot be loaded
    """
    return load_config(ctx.obj.get('config_path'))


def setup_logging_from_context(ctx: click.Context) -> Config:
    """Load config and configure logging from Click context.

    Falls back to basic console logging when the configuration cannot be
    loaded, then re-raises so the command can report the error.

    Args:
        ctx: Click context containing config path and verbose flag

    Returns:
        The loaded Config
    """
    verbose = ctx.obj.get('verbose', False)
    try:
        config = load_app_config(ctx)
    except Exception:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            force=True
        )
        raise

    setup_logging(config, verbose)
    return config


def setup_logging(config: Config, verbose: bool = False):
    """Set up logging with a rotating log file; console only with --verbose.

    Args:
        config: Application configuration
        verbose: Whether to show console logging
    """
    log_file = Path(config.logging.file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers = []

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=config.logging.max_bytes,
        backupCount=config.logging.backup_count
    )
    file_handler.setLevel(getattr(logging, config.logging.level.upper(), logging.INFO))
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter('LOG: %(levelname)s - %(message)s'))
        root_logger.addHandler(console_handler)

    root_logger.setLevel(logging.DEBUG)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_store(config: Config) -> S3ObjectStore:
    """Build the one store client used for the whole command."""
    return S3ObjectStore(config, config.transfer)


def handle_error(error: Exception, verbose: bool = False, exit_code: int = 1):
    """Handle and display errors consistently.

    Args:
        error: Exception to handle
        verbose: Whether to show full traceback
        exit_code: Process exit status
    """
    if verbose:
        import traceback
        click.echo(f"Error: {error}", err=True)
        click.echo(traceback.format_exc(), err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(exit_code)


def object_url(config: Config, key: Optional[str] = None) -> str:
    """``<endpoint>/<bucket>[/<key>]`` as printed in outcome lines."""
    base = f"{config.domain}/{config.bucket}"
    return f"{base}/{key}" if key is not None else base


def format_size(bytes_size: int) -> str:
    """Format bytes as human-readable size.

    Args:
        bytes_size: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 GB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} PB"


def summary_table(outcomes: List[TransferOutcome]) -> str:
    """Render run totals as a grid table."""
    succeeded = [o for o in outcomes if o.success]
    table_data = [[
        len(outcomes),
        len(succeeded),
        len(outcomes) - len(succeeded),
        format_size(sum(o.size for o in succeeded)),
    ]]
    headers = ['Objects', 'Succeeded', 'Failed', 'Transferred']
    return tabulate(table_data, headers=headers, tablefmt='grid')
