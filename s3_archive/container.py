"""Single-file archive container for bucket dumps.

The container is an uncompressed GNU tar file, so dumps can be inspected and
unpacked with standard tar tooling. Entries are appended one at a time and
read back one at a time; a whole archive is never held in memory.
"""

import logging
import tarfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from s3_archive.exceptions import (
    ArchiveCorruptError,
    ArchiveError,
    ArchiveExistsError,
    ArchiveFormatError,
    EntryNameError,
)

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = '.tar'
ENTRY_MODE = 0o644
COPY_CHUNK_SIZE = 1024 * 1024

PathLike = Union[str, Path]


def copy_stream(src: BinaryIO, dst: BinaryIO, chunk_size: int = COPY_CHUNK_SIZE) -> int:
    """Copy ``src`` into ``dst`` chunk by chunk and return the byte count."""
    total = 0
    while True:
        chunk = src.read(chunk_size)
        if not chunk:
            return total
        dst.write(chunk)
        total += len(chunk)


@dataclass
class ArchiveEntry:
    """One member of an archive, as found in its header."""
    name: str
    size: int
    is_file: bool = True
    is_dir: bool = False
    member: Optional[tarfile.TarInfo] = field(default=None, repr=False, compare=False)


class ArchiveWriter:
    """Append-only writer for a new archive container.

    Use as a context manager: a clean exit finalizes the archive, an
    exception only closes the file handle, leaving whatever was written.
    """

    def __init__(self, path: PathLike, overwrite: bool = False):
        self.path = Path(path)
        self.entry_count = 0
        self._finalized = False

        try:
            self._file = open(self.path, 'wb' if overwrite else 'xb')
        except FileExistsError as e:
            raise ArchiveExistsError(f"Archive already exists: {self.path}") from e

        self._tar = tarfile.open(fileobj=self._file, mode='w',
                                 format=tarfile.GNU_FORMAT, encoding='utf-8')
        logger.debug(f"Opened archive for writing: {self.path}")

    def append(self, name: str, fileobj: BinaryIO, size: int) -> None:
        """Write one entry holding exactly ``size`` bytes read from ``fileobj``.

        Raises:
            EntryNameError: ``name`` cannot be stored; nothing was written.
            ArchiveError: the writer was already finalized.
        """
        if self._finalized:
            raise ArchiveError(f"Archive already finalized: {self.path}")

        info = _build_member(name, size, self._tar)
        self._tar.addfile(info, fileobj)
        self.entry_count += 1

    def finalize(self) -> None:
        """Write the end-of-archive marker and close the file."""
        if self._finalized:
            return
        self._finalized = True
        try:
            self._tar.close()
            self._file.flush()
        finally:
            self._file.close()
        logger.debug(f"Finalized archive {self.path} with {self.entry_count} entries")

    def abort(self) -> None:
        """Close the file without finalizing it."""
        if not self._finalized:
            self._finalized = True
            self._file.close()

    def __enter__(self) -> 'ArchiveWriter':
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.finalize()
        else:
            logger.warning(f"Archive left unfinalized after error: {self.path}")
            self.abort()
        return False


class ArchiveReader:
    """Sequential reader over an existing archive container."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self._iterated = False
        self._file = open(self.path, 'rb')
        try:
            self._tar = tarfile.open(fileobj=self._file, mode='r:', encoding='utf-8')
        except tarfile.TarError as e:
            self._file.close()
            raise ArchiveFormatError(f"Not a tar archive: {self.path} ({e})") from e

    def entries(self) -> Iterator[ArchiveEntry]:
        """Entries in on-disk order. A reader can only be iterated once."""
        if self._iterated:
            raise ArchiveError("Archive entries already consumed; open a new reader")
        self._iterated = True
        return self._iter_entries()

    def _iter_entries(self) -> Iterator[ArchiveEntry]:
        while True:
            try:
                member = self._tar.next()
            except tarfile.TarError as e:
                raise ArchiveCorruptError(f"Corrupt archive {self.path}: {e}") from e
            if member is None:
                break
            yield ArchiveEntry(
                name=member.name,
                size=member.size,
                is_file=member.isfile(),
                is_dir=member.isdir(),
                member=member,
            )
        self._check_trailer()

    def read_entry(self, entry: ArchiveEntry, fileobj: BinaryIO) -> int:
        """Copy an entry's payload into ``fileobj``.

        Raises:
            ArchiveCorruptError: fewer bytes are stored than the header declares.
        """
        if not entry.is_file or entry.member is None:
            raise ArchiveError(f"Entry is not a regular file: {entry.name}")

        try:
            src = self._tar.extractfile(entry.member)
            copied = copy_stream(src, fileobj)
        except tarfile.TarError as e:
            raise ArchiveCorruptError(f"Corrupt entry {entry.name!r} in {self.path}: {e}") from e

        if copied != entry.size:
            raise ArchiveCorruptError(
                f"Size mismatch for {entry.name!r} in {self.path}: "
                f"header says {entry.size} bytes, read {copied}"
            )
        return copied

    def _check_trailer(self) -> None:
        # tarfile stops quietly at the first bad header; only zero padding
        # may follow the last member.
        offset = self._tar.offset
        self._file.seek(offset)
        while True:
            chunk = self._file.read(tarfile.RECORDSIZE)
            if not chunk:
                return
            if chunk.strip(b'\0'):
                raise ArchiveCorruptError(
                    f"Unreadable data after offset {offset} in {self.path}"
                )

    def close(self) -> None:
        try:
            self._tar.close()
        finally:
            self._file.close()

    def __enter__(self) -> 'ArchiveReader':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def _build_member(name: str, size: int, tar: tarfile.TarFile) -> tarfile.TarInfo:
    if not name:
        raise EntryNameError("Entry name is empty")
    if '\0' in name:
        raise EntryNameError(f"Entry name contains NUL: {name!r}")

    info = tarfile.TarInfo(name)
    info.size = size
    info.mode = ENTRY_MODE
    info.mtime = int(time.time())
    info.type = tarfile.REGTYPE

    # Encode the header up front so a bad name fails before any bytes hit the file.
    try:
        info.tobuf(tar.format, tar.encoding, tar.errors)
    except (ValueError, UnicodeError) as e:
        raise EntryNameError(f"Cannot store entry name {name!r}: {e}") from e
    return info


def archive_name_for(bucket: str) -> str:
    """File name of the dump for ``bucket``."""
    return f"{bucket}_dump{ARCHIVE_EXTENSION}"


def open_for_write(path: PathLike, overwrite: bool = False) -> ArchiveWriter:
    return ArchiveWriter(path, overwrite=overwrite)


def open_for_read(path: PathLike) -> ArchiveReader:
    return ArchiveReader(path)
