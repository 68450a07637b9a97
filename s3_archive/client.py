"""Object store access for the archive tools.

Orchestrators only rely on the small :class:`ObjectStoreClient` protocol;
:class:`S3ObjectStore` implements it on top of boto3 for any S3-compatible
endpoint.
"""

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol

import boto3
from boto3.exceptions import Boto3Error, S3TransferFailedError
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from s3transfer.exceptions import RetriesExceededError

from s3_archive.exceptions import GetError, ListError, ObjectStoreError, PutError

logger = logging.getLogger(__name__)

# Managed transfers raise boto3 and s3transfer errors on top of botocore ones.
BOTO_ERRORS = (ClientError, BotoCoreError, Boto3Error, RetriesExceededError, S3TransferFailedError)


class _CountingWriter:
    """Wraps a writable file object and counts bytes written through it."""

    def __init__(self, fileobj: BinaryIO):
        self._fileobj = fileobj
        self.bytes_written = 0

    def write(self, data) -> int:
        written = self._fileobj.write(data)
        self.bytes_written += len(data)
        return written


class ObjectStoreClient(Protocol):
    """What the dump and populate orchestrators need from a store."""

    def list_keys(self, bucket: str) -> List[str]:
        ...

    def download_fileobj(self, bucket: str, key: str, fileobj: BinaryIO) -> int:
        ...

    def upload_fileobj(self, bucket: str, key: str, fileobj: BinaryIO) -> None:
        ...


class S3ObjectStore:
    """boto3-backed object store client, built once per run."""

    def __init__(self, store_config, transfer_config=None, s3_client=None):
        self.endpoint = store_config.domain
        self.default_bucket = store_config.bucket

        if s3_client is not None:
            self.s3_client = s3_client
            return

        max_attempts = transfer_config.max_attempts if transfer_config else 3
        boto_config = BotoConfig(
            region_name=store_config.region,
            retries={'max_attempts': max_attempts, 'mode': 'adaptive'}
        )
        self.s3_client = boto3.client(
            's3',
            endpoint_url=store_config.domain or None,
            aws_access_key_id=store_config.access_key,
            aws_secret_access_key=store_config.secret_key,
            config=boto_config,
        )
        logger.info(f"S3 client ready for endpoint {self.endpoint} (region {store_config.region})")

    def list_keys(self, bucket: str) -> List[str]:
        """All keys in ``bucket``, in listing order, across every page."""
        keys = []
        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=bucket):
                for obj in page.get('Contents', []):
                    keys.append(obj['Key'])
        except BOTO_ERRORS as e:
            logger.error(f"Listing bucket {bucket} failed: {e}")
            raise ListError(bucket, cause=e) from e

        logger.debug(f"Listed {len(keys)} objects in {bucket}")
        return keys

    def download_fileobj(self, bucket: str, key: str, fileobj: BinaryIO) -> int:
        """Stream an object into ``fileobj`` and return its size in bytes."""
        writer = _CountingWriter(fileobj)
        try:
            self.s3_client.download_fileobj(bucket, key, writer)
        except BOTO_ERRORS as e:
            logger.warning(f"Download of {bucket}/{key} failed: {e}")
            raise GetError(bucket, key, cause=e) from e
        return writer.bytes_written

    def upload_fileobj(self, bucket: str, key: str, fileobj: BinaryIO) -> None:
        """Stream ``fileobj`` into the object ``key``."""
        try:
            self.s3_client.upload_fileobj(fileobj, bucket, key)
        except BOTO_ERRORS as e:
            logger.warning(f"Upload of {bucket}/{key} failed: {e}")
            raise PutError(bucket, key, cause=e) from e

    def upload_file(self, bucket: str, key: str, path: Path) -> None:
        try:
            self.s3_client.upload_file(str(path), bucket, key)
        except BOTO_ERRORS as e:
            raise PutError(bucket, key, cause=e) from e

    def download_file(self, bucket: str, key: str, path: Path) -> None:
        try:
            self.s3_client.download_file(bucket, key, str(path))
        except BOTO_ERRORS as e:
            raise GetError(bucket, key, cause=e) from e

    def head_bucket(self, bucket: Optional[str] = None) -> None:
        """Check the bucket exists and is reachable with these credentials."""
        bucket = bucket or self.default_bucket
        try:
            self.s3_client.head_bucket(Bucket=bucket)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code')
            if error_code in ('404', 'NoSuchBucket'):
                raise ObjectStoreError(bucket, cause=e, message='bucket not found') from e
            elif error_code in ('403', 'AccessDenied'):
                raise ObjectStoreError(bucket, cause=e, message='access denied') from e
            raise ObjectStoreError(bucket, cause=e) from e
        except BotoCoreError as e:
            raise ObjectStoreError(bucket, cause=e) from e
        logger.info(f"Verified access to bucket: {bucket}")
