"""Single-object commands: send, recv, list."""

import click

from cli.utils import (
    setup_logging_from_context,
    get_store,
    handle_error,
    object_url
)
from s3_archive.transfer import list_objects, recv_file, send_file


def register_commands(cli):
    """Register transfer commands with main CLI."""

    @cli.command('send')
    @click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False))
    @click.pass_context
    def send(ctx, files):
        """Upload local files to the bucket under their base names.

        Examples:
            python -m main send notes.txt photo.jpg
        """
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)
            store = get_store(config)

            for path in files:
                key = send_file(store, config.bucket, path)
                click.echo(f"{object_url(config, key)} <- {path}")

        except Exception as e:
            handle_error(e, verbose)

    @cli.command('recv')
    @click.argument('keys', nargs=-1, required=True)
    @click.option('--dest', '-d', default='.', type=click.Path(file_okay=False),
                  help='Directory to download into')
    @click.pass_context
    def recv(ctx, keys, dest):
        """Download objects from the bucket.

        Keys containing '/' are written into matching subdirectories.

        Examples:
            python -m main recv notes.txt
            python -m main recv photos/2024/a.jpg --dest restore
        """
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)
            store = get_store(config)

            for key in keys:
                target = recv_file(store, config.bucket, key, dest)
                click.echo(f"{object_url(config, key)} -> {target}")

        except Exception as e:
            handle_error(e, verbose)

    @cli.command('list')
    @click.pass_context
    def list_cmd(ctx):
        """List every object key in the bucket, one per line."""
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)

            for key in list_objects(get_store(config), config.bucket):
                click.echo(key)

        except Exception as e:
            handle_error(e, verbose)
