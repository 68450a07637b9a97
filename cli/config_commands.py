"""Configuration management commands."""

import click

from config import create_default_config, resolve_config_path
from cli.utils import (
    setup_logging_from_context,
    get_store,
    handle_error
)


def register_commands(cli):
    """Register config commands with main CLI."""

    @cli.group('config')
    @click.pass_context
    def config_group(ctx):
        """Configuration management commands.

        Initialize, inspect, and test the store configuration.
        """
        pass

    @config_group.command('init')
    @click.pass_context
    def init_config(ctx):
        """Create a default configuration file.

        Examples:
            # Create ~/.config/s3-cli/config.json
            python -m main config init

            # Create config at custom location
            python -m main --config my_config.json config init
        """
        config_path = resolve_config_path(ctx.obj['config_path'])

        if config_path.exists():
            click.echo(f"Configuration file already exists: {config_path}")
            if not click.confirm("Overwrite existing configuration?"):
                return

        create_default_config(config_path)
        click.echo(f"✓ Created configuration file: {config_path}")
        click.echo("\nNext steps:")
        click.echo("  1. Set domain, region and bucket")
        click.echo("  2. Set access_key and secret_key (or reference environment variables)")
        click.echo("  3. Test the configuration with: python -m main config test")

    @config_group.command('show')
    @click.pass_context
    def show_config(ctx):
        """Print the resolved configuration with the secret key masked."""
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)
        except Exception as e:
            handle_error(e, verbose)

        click.echo(f"Endpoint:     {config.domain}")
        click.echo(f"Region:       {config.region}")
        click.echo(f"Bucket:       {config.bucket}")
        click.echo(f"Access key:   {config.access_key}")
        click.echo(f"Secret key:   {'*' * 8 if config.secret_key else '(not set)'}")
        click.echo(f"Archive dir:  {config.transfer.archive_dir}")
        click.echo(f"Spool:        {config.transfer.spool_threshold_mb} MB")
        click.echo(f"Log file:     {config.logging.file}")

    @config_group.command('test')
    @click.pass_context
    def test_config(ctx):
        """Verify the configured bucket is reachable.

        Examples:
            python -m main config test
        """
        verbose = ctx.obj['verbose']

        try:
            config = setup_logging_from_context(ctx)

            click.echo(f"Checking {config.domain}/{config.bucket} ...")
            get_store(config).head_bucket(config.bucket)
            click.echo("✓ Bucket is reachable")

        except Exception as e:
            handle_error(e, verbose)
