"""Bucket archive commands: dump and populate."""

import sys

import click
from tqdm import tqdm

from cli.utils import (
    setup_logging_from_context,
    get_store,
    handle_error,
    object_url,
    summary_table
)
from s3_archive.dump import dump
from s3_archive.exceptions import ArchiveCorruptError
from s3_archive.populate import populate

STRICT_EXIT_CODE = 2


def register_commands(cli):
    """Register archive commands with main CLI."""

    @cli.command('dump')
    @click.option('--output-dir', '-o', type=click.Path(file_okay=False),
                  help='Directory for the archive (default: transfer.archive_dir)')
    @click.option('--overwrite', is_flag=True, help='Replace an existing archive')
    @click.option('--strict', is_flag=True, help='Exit with status 2 if any object failed')
    @click.option('--no-progress', is_flag=True, help='Hide the progress bar')
    @click.pass_context
    def dump_cmd(ctx, output_dir, overwrite, strict, no_progress):
        """Dump every object of the bucket into <bucket>_dump.tar.

        Objects that cannot be downloaded are reported and skipped; the
        archive holds everything else, in listing order.

        Examples:
            python -m main dump
            python -m main dump --output-dir /backups --overwrite
        """
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)
            store = get_store(config)

            with tqdm(desc="Dumping", unit='obj', disable=no_progress, leave=False) as pbar:
                def report(outcome):
                    pbar.update(1)
                    if outcome.success:
                        status = "OK"
                    else:
                        status = f"Error: {outcome.error}"
                    tqdm.write(f"{object_url(config, outcome.key)} -> {status}")

                result = dump(
                    store,
                    config.bucket,
                    output_dir=output_dir or config.transfer.archive_dir,
                    overwrite=overwrite,
                    spool_threshold=config.transfer.spool_threshold,
                    on_outcome=report,
                )

            click.echo()
            click.echo(summary_table(result.outcomes))
            click.echo(f"{object_url(config)} -> {result.archive_path}")

        except Exception as e:
            handle_error(e, verbose)

        if strict and result.failed:
            sys.exit(STRICT_EXIT_CODE)

    @cli.command('populate')
    @click.argument('archive', type=click.Path(dir_okay=False))
    @click.option('--strict', is_flag=True, help='Exit with status 2 if any entry failed')
    @click.option('--no-progress', is_flag=True, help='Hide the progress bar')
    @click.pass_context
    def populate_cmd(ctx, archive, strict, no_progress):
        """Upload every entry of ARCHIVE into the bucket.

        Each entry is stored under its name inside the archive. Entries that
        fail to upload are reported and skipped.

        Examples:
            python -m main populate my-bucket_dump.tar
        """
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)
            store = get_store(config)

            with tqdm(desc="Populating", unit='obj', disable=no_progress, leave=False) as pbar:
                def report(outcome):
                    pbar.update(1)
                    if outcome.success:
                        source = outcome.key
                    else:
                        source = f"Error: {outcome.error}"
                    tqdm.write(f"{object_url(config, outcome.key)} <- {source}")

                result = populate(
                    store,
                    archive,
                    config.bucket,
                    spool_threshold=config.transfer.spool_threshold,
                    on_outcome=report,
                )

            click.echo()
            click.echo(summary_table(result.outcomes))
            click.echo(f"{object_url(config)} <- {archive}")

        except ArchiveCorruptError as e:
            click.echo()
            click.echo(summary_table(e.outcomes))
            handle_error(e, verbose)
        except Exception as e:
            handle_error(e, verbose)

        if strict and result.failed:
            sys.exit(STRICT_EXIT_CODE)
