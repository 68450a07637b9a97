"""Single-object send, receive and list operations."""

import logging
from pathlib import Path, PurePosixPath
from typing import List, Union

from s3_archive.exceptions import GetError

logger = logging.getLogger(__name__)


def send_file(store, bucket: str, path: Union[str, Path]) -> str:
    """Upload a local file under its base name and return the key used."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    key = path.name
    store.upload_file(bucket, key, path)
    logger.info(f"Uploaded {path} to {bucket}/{key}")
    return key


def recv_file(store, bucket: str, key: str, dest_dir: Union[str, Path] = '.') -> Path:
    """Download ``key`` to ``dest_dir/<key>`` and return the local path.

    Keys containing ``/`` become nested directories. Keys that would land
    outside ``dest_dir`` are refused.
    """
    parts = PurePosixPath(key).parts
    if not parts or PurePosixPath(key).is_absolute() or '..' in parts:
        raise GetError(bucket, key, message='key cannot be stored as a local path')

    target = Path(dest_dir).joinpath(*parts)
    target.parent.mkdir(parents=True, exist_ok=True)
    store.download_file(bucket, key, target)
    logger.info(f"Downloaded {bucket}/{key} to {target}")
    return target


def list_objects(store, bucket: str) -> List[str]:
    return store.list_keys(bucket)
