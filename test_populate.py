"""Tests for populating a bucket from an archive, and dump/populate together."""

import io
import tarfile

import pytest

from conftest import FakeObjectStore
from s3_archive.container import open_for_write
from s3_archive.dump import dump
from s3_archive.exceptions import ArchiveCorruptError, ArchiveFormatError
from s3_archive.populate import populate


def make_archive(path, entries):
    with open_for_write(path) as writer:
        for name, data in entries:
            writer.append(name, io.BytesIO(data), len(data))
    return path


def test_populate_uploads_entries_in_archive_order(tmp_path):
    archive = make_archive(tmp_path / 'a.tar', [('z', b'26'), ('a', b'1')])
    store = FakeObjectStore()

    result = populate(store, archive, 'restored')

    assert store.buckets['restored'] == {'z': b'26', 'a': b'1'}
    assert [c[2] for c in store.calls if c[0] == 'put'] == ['z', 'a']
    assert [o.key for o in result.outcomes] == ['z', 'a']
    assert result.archive_path == archive


def test_failed_upload_does_not_stop_populate(tmp_path):
    archive = make_archive(tmp_path / 'a.tar', [('a', b'1'), ('b', b'2'), ('c', b'3')])
    store = FakeObjectStore()
    store.fail_put.add('b')

    result = populate(store, archive, 'restored')

    assert store.buckets['restored'] == {'a': b'1', 'c': b'3'}
    assert [(o.key, o.success) for o in result.outcomes] == [
        ('a', True), ('b', False), ('c', True)
    ]
    assert 'AccessDenied' in result.outcomes[1].error


def test_missing_archive_is_fatal(tmp_path):
    store = FakeObjectStore()

    with pytest.raises(FileNotFoundError):
        populate(store, tmp_path / 'missing.tar', 'restored')


def test_malformed_archive_is_fatal_and_uploads_nothing(tmp_path):
    path = tmp_path / 'junk.tar'
    path.write_bytes(b'this is not a tar file' * 100)
    store = FakeObjectStore()

    with pytest.raises(ArchiveFormatError):
        populate(store, path, 'restored')

    assert store.count('put') == 0


def test_truncated_archive_stops_with_partial_outcomes(tmp_path):
    archive = make_archive(tmp_path / 'a.tar', [('first', b'ok'), ('big', b'x' * 5000)])
    data = archive.read_bytes()
    archive.write_bytes(data[:3 * tarfile.BLOCKSIZE + 1000])
    store = FakeObjectStore()

    with pytest.raises(ArchiveCorruptError) as exc_info:
        populate(store, archive, 'restored')

    assert [o.key for o in exc_info.value.outcomes] == ['first']
    assert store.buckets['restored'] == {'first': b'ok'}


def test_directories_are_skipped_and_links_fail(tmp_path):
    path = tmp_path / 'mixed.tar'
    with tarfile.open(path, 'w') as tar:
        folder = tarfile.TarInfo('folder')
        folder.type = tarfile.DIRTYPE
        tar.addfile(folder)
        data = b'content'
        info = tarfile.TarInfo('folder/file.txt')
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))
        link = tarfile.TarInfo('folder/link')
        link.type = tarfile.SYMTYPE
        link.linkname = 'file.txt'
        tar.addfile(link)
    store = FakeObjectStore()

    result = populate(store, path, 'restored')

    assert store.buckets['restored'] == {'folder/file.txt': b'content'}
    assert [(o.key, o.success) for o in result.outcomes] == [
        ('folder/file.txt', True), ('folder/link', False)
    ]


def test_duplicate_entries_last_one_wins(tmp_path):
    archive = make_archive(tmp_path / 'a.tar', [('k', b'old'), ('k', b'new')])
    store = FakeObjectStore()

    result = populate(store, archive, 'restored')

    assert store.buckets['restored'] == {'k': b'new'}
    assert len(result.outcomes) == 2


def test_round_trip_reproduces_bucket(tmp_path):
    objects = {
        'readme.txt': b'hello',
        'empty': b'',
        'nested/dir/data.bin': bytes(range(256)) * 100,
        'big': b'\xab' * (300 * 1024),
    }
    source = FakeObjectStore({'photos': objects})
    result = dump(source, 'photos', output_dir=tmp_path, spool_threshold=64 * 1024)

    target = FakeObjectStore()
    populate(target, result.archive_path, 'photos', spool_threshold=64 * 1024)

    assert target.buckets['photos'] == objects
    assert list(target.buckets['photos']) == list(objects)


def test_empty_bucket_round_trip_makes_no_uploads(tmp_path):
    result = dump(FakeObjectStore({'photos': {}}), 'photos', output_dir=tmp_path)
    target = FakeObjectStore()

    populated = populate(target, result.archive_path, 'photos')

    assert populated.outcomes == []
    assert target.count('put') == 0


def test_populating_twice_gives_same_contents(tmp_path):
    archive = make_archive(tmp_path / 'a.tar', [('a', b'1'), ('b', b'2')])
    store = FakeObjectStore()

    populate(store, archive, 'restored')
    once = dict(store.buckets['restored'])
    populate(store, archive, 'restored')

    assert store.buckets['restored'] == once
