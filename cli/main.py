"""Main CLI entry point - Root command group with global options."""

import click

from config import DEFAULT_CONFIG_PATH
from version import __version__


@click.group()
@click.option('--config', '-c', default=DEFAULT_CONFIG_PATH, show_default=True,
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed logging on console')
@click.version_option(version=__version__, prog_name='S3 CLI')
@click.pass_context
def cli(ctx, config, verbose):
    """S3 CLI - move files between disk and an S3-compatible bucket.

    Single objects:
        send, recv, list

    Whole buckets through one tar archive:
        dump, populate

    Examples:
        # Upload two files to the configured bucket
        python -m main send notes.txt photo.jpg

        # Download an object into the current directory
        python -m main recv notes.txt

        # Dump the bucket into <bucket>_dump.tar
        python -m main dump

        # Upload every entry of an archive into the configured bucket
        python -m main populate my-bucket_dump.tar
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose


def register_all_commands():
    """Register all command modules with the main CLI."""
    from cli import (
        config_commands,
        transfer_commands,
        archive_commands,
    )

    config_commands.register_commands(cli)
    transfer_commands.register_commands(cli)
    archive_commands.register_commands(cli)


# Register all commands when module is imported
register_all_commands()
