"""Dump an entire bucket into a single local archive."""

import logging
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from s3_archive.client import ObjectStoreClient
from s3_archive.container import archive_name_for, open_for_write
from s3_archive.exceptions import EntryNameError, ObjectStoreError
from s3_archive.models import DumpResult, TransferOutcome

logger = logging.getLogger(__name__)

DEFAULT_SPOOL_THRESHOLD = 8 * 1024 * 1024

OutcomeCallback = Callable[[TransferOutcome], None]


def dump(
    store: ObjectStoreClient,
    bucket: str,
    output_dir: Union[str, Path] = '.',
    overwrite: bool = False,
    spool_threshold: int = DEFAULT_SPOOL_THRESHOLD,
    on_outcome: Optional[OutcomeCallback] = None,
) -> DumpResult:
    """Write every object of ``bucket`` into ``<output_dir>/<bucket>_dump.tar``.

    Objects are fetched and appended one at a time in listing order. A failed
    download or an unstorable key is recorded as a failed outcome and the dump
    moves on to the next key.

    Args:
        store: Object store client
        bucket: Bucket to dump
        output_dir: Directory for the archive
        overwrite: Replace an existing archive instead of failing
        spool_threshold: Payloads above this many bytes are buffered on disk
        on_outcome: Optional callback invoked with each outcome as it happens

    Returns:
        DumpResult with the archive path and one outcome per listed key

    Raises:
        ListError: listing the bucket failed; no archive is created
        ArchiveExistsError: the archive exists and ``overwrite`` is False
        OSError: the archive could not be created or written
    """
    # Listing comes first so a listing failure leaves nothing on disk.
    keys = store.list_keys(bucket)
    archive_path = Path(output_dir) / archive_name_for(bucket)
    result = DumpResult(bucket=bucket, archive_path=archive_path)

    logger.info(f"Dumping {len(keys)} objects from {bucket} into {archive_path}")

    with open_for_write(archive_path, overwrite=overwrite) as writer:
        for key in keys:
            outcome = _dump_object(store, bucket, key, writer, spool_threshold)
            result.outcomes.append(outcome)
            if on_outcome:
                on_outcome(outcome)

    logger.info(
        f"Dump of {bucket} finished: {len(result.succeeded)} ok, "
        f"{len(result.failed)} failed"
    )
    return result


def _dump_object(store, bucket, key, writer, spool_threshold) -> TransferOutcome:
    with tempfile.SpooledTemporaryFile(max_size=spool_threshold) as spool:
        try:
            store.download_fileobj(bucket, key, spool)
        except ObjectStoreError as e:
            logger.warning(f"Skipping {key}: {e}")
            return TransferOutcome.failed(key, e.reason)

        size = spool.tell()
        spool.seek(0)
        try:
            writer.append(key, spool, size)
        except EntryNameError as e:
            logger.warning(f"Skipping {key}: {e}")
            return TransferOutcome.failed(key, e)

    logger.debug(f"Archived {key} ({size} bytes)")
    return TransferOutcome.ok(key, size)
