"""S3 archive tools.

Moves files between the local filesystem and an S3-compatible bucket, and
dumps or restores a whole bucket through a single tar archive.
"""

from s3_archive.client import ObjectStoreClient, S3ObjectStore
from s3_archive.container import ArchiveEntry, ArchiveReader, ArchiveWriter, open_for_read, open_for_write
from s3_archive.dump import dump
from s3_archive.exceptions import (
    ArchiveCorruptError,
    ArchiveError,
    ArchiveExistsError,
    ArchiveFormatError,
    ConfigError,
    EntryNameError,
    GetError,
    ListError,
    ObjectStoreError,
    PutError,
    S3ArchiveError,
)
from s3_archive.models import DumpResult, PopulateResult, TransferOutcome
from s3_archive.populate import populate
from s3_archive.transfer import list_objects, recv_file, send_file

__all__ = [
    'ObjectStoreClient',
    'S3ObjectStore',
    'ArchiveEntry',
    'ArchiveReader',
    'ArchiveWriter',
    'open_for_read',
    'open_for_write',
    'dump',
    'populate',
    'send_file',
    'recv_file',
    'list_objects',
    'DumpResult',
    'PopulateResult',
    'TransferOutcome',
    'S3ArchiveError',
    'ConfigError',
    'ObjectStoreError',
    'ListError',
    'GetError',
    'PutError',
    'ArchiveError',
    'ArchiveExistsError',
    'ArchiveFormatError',
    'ArchiveCorruptError',
    'EntryNameError',
]
