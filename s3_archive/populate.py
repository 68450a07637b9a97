"""Upload the entries of an archive into a bucket."""

import logging
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from s3_archive.client import ObjectStoreClient
from s3_archive.container import open_for_read
from s3_archive.dump import DEFAULT_SPOOL_THRESHOLD
from s3_archive.exceptions import ArchiveCorruptError, ObjectStoreError
from s3_archive.models import PopulateResult, TransferOutcome

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[TransferOutcome], None]


def populate(
    store: ObjectStoreClient,
    archive_path: Union[str, Path],
    bucket: str,
    spool_threshold: int = DEFAULT_SPOOL_THRESHOLD,
    on_outcome: Optional[OutcomeCallback] = None,
) -> PopulateResult:
    """Upload each entry of ``archive_path`` to ``bucket`` under its entry name.

    Entries are uploaded in archive order. A failed upload is recorded and the
    run continues; duplicate names are uploaded in turn, so the last one wins.
    Directory members are skipped; other non-file members are recorded as
    failures.

    Raises:
        FileNotFoundError: the archive does not exist
        ArchiveFormatError: the file is not a tar archive; nothing is uploaded
        ArchiveCorruptError: the archive is damaged part way through; the
            outcomes gathered so far are attached to the exception
    """
    archive_path = Path(archive_path)
    result = PopulateResult(bucket=bucket, archive_path=archive_path)

    with open_for_read(archive_path) as reader:
        logger.info(f"Populating {bucket} from {archive_path}")
        try:
            for entry in reader.entries():
                if entry.is_dir:
                    logger.debug(f"Skipping directory entry {entry.name}")
                    continue

                if not entry.is_file:
                    outcome = TransferOutcome.failed(entry.name, 'not a regular file')
                else:
                    outcome = _populate_entry(store, bucket, reader, entry, spool_threshold)

                result.outcomes.append(outcome)
                if on_outcome:
                    on_outcome(outcome)
        except ArchiveCorruptError as e:
            logger.error(f"Populate of {bucket} stopped: {e}")
            e.outcomes = list(result.outcomes)
            raise

    logger.info(
        f"Populate of {bucket} finished: {len(result.succeeded)} ok, "
        f"{len(result.failed)} failed"
    )
    return result


def _populate_entry(store, bucket, reader, entry, spool_threshold) -> TransferOutcome:
    with tempfile.SpooledTemporaryFile(max_size=spool_threshold) as spool:
        # Read the whole entry first so a corrupt one never becomes a partial object.
        size = reader.read_entry(entry, spool)
        spool.seek(0)
        try:
            store.upload_fileobj(bucket, entry.name, spool)
        except ObjectStoreError as e:
            logger.warning(f"Upload of {entry.name} failed: {e}")
            return TransferOutcome.failed(entry.name, e.reason)

    logger.debug(f"Uploaded {entry.name} ({size} bytes)")
    return TransferOutcome.ok(entry.name, size)
