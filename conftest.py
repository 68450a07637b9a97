"""Shared pytest fixtures: an in-memory object store and config files."""

import json

import pytest

from s3_archive.exceptions import GetError, ListError, PutError


class FakeObjectStore:
    """In-memory stand-in for S3ObjectStore with failure injection."""

    def __init__(self, objects=None):
        self.buckets = {}
        self.fail_list = False
        self.fail_get = set()
        self.fail_put = set()
        self.calls = []
        if objects:
            for bucket, contents in objects.items():
                self.buckets[bucket] = dict(contents)

    def list_keys(self, bucket):
        self.calls.append(('list', bucket, None))
        if self.fail_list:
            raise ListError(bucket, message='listing refused')
        return list(self.buckets.get(bucket, {}))

    def download_fileobj(self, bucket, key, fileobj):
        self.calls.append(('get', bucket, key))
        if key in self.fail_get or key not in self.buckets.get(bucket, {}):
            raise GetError(bucket, key, message='NoSuchKey')
        data = self.buckets[bucket][key]
        fileobj.write(data)
        return len(data)

    def upload_fileobj(self, bucket, key, fileobj):
        self.calls.append(('put', bucket, key))
        if key in self.fail_put:
            raise PutError(bucket, key, message='AccessDenied')
        self.buckets.setdefault(bucket, {})[key] = fileobj.read()

    def upload_file(self, bucket, key, path):
        with open(path, 'rb') as f:
            self.upload_fileobj(bucket, key, f)

    def download_file(self, bucket, key, path):
        with open(path, 'wb') as f:
            self.download_fileobj(bucket, key, f)

    def head_bucket(self, bucket=None):
        self.calls.append(('head', bucket, None))

    def count(self, operation):
        return sum(1 for call in self.calls if call[0] == operation)


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def config_file(tmp_path):
    """A valid configuration file pointing logs and archives into tmp_path."""
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        "domain": "https://s3.test",
        "region": "us-east-1",
        "access_key": "AKIATEST",
        "secret_key": "secret",
        "bucket": "photos",
        "transfer": {"spool_threshold_mb": 1, "archive_dir": str(tmp_path / 'dumps')},
        "logging": {"file": str(tmp_path / 'logs' / 's3-cli.log')}
    }))
    (tmp_path / 'dumps').mkdir()
    return path
