#!/usr/bin/env python3
"""S3 CLI - send, receive, list, dump and populate an S3-compatible bucket.

Examples:
    # Get help
    python -m main --help
    python -m main dump --help

    # Single objects
    python -m main send report.pdf       # Upload under its base name
    python -m main recv report.pdf       # Download into the current directory
    python -m main list                  # One key per line

    # Whole bucket
    python -m main dump                  # Bucket -> <bucket>_dump.tar
    python -m main populate backup.tar   # Archive entries -> bucket
"""

from cli.main import cli

if __name__ == '__main__':
    cli()
