"""Click command modules for the S3 CLI."""
