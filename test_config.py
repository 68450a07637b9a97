"""Tests for configuration loading."""

import json

import pytest

from config import Config, create_default_config, load_config
from s3_archive.exceptions import ConfigError


def write_config(path, data):
    path.write_text(json.dumps(data))
    return path


BASE = {
    "domain": "https://s3.test",
    "region": "eu-west-1",
    "access_key": "AKIATEST",
    "secret_key": "secret",
    "bucket": "photos",
}


def test_minimal_config_gets_defaults(tmp_path):
    config = load_config(write_config(tmp_path / 'c.json', BASE))

    assert config.bucket == 'photos'
    assert config.transfer.spool_threshold == 8 * 1024 * 1024
    assert config.transfer.max_attempts == 3
    assert config.logging.level == 'INFO'


def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv('TEST_S3_SECRET', 'from-env')
    data = dict(BASE, secret_key='${TEST_S3_SECRET}')

    config = load_config(write_config(tmp_path / 'c.json', data))

    assert config.secret_key == 'from-env'


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / 'missing.json')


def test_invalid_json(tmp_path):
    path = tmp_path / 'c.json'
    path.write_text('{not json')

    with pytest.raises(ConfigError, match='Invalid JSON'):
        load_config(path)


def test_missing_required_field(tmp_path):
    data = dict(BASE)
    del data['bucket']

    with pytest.raises(ConfigError, match='bucket'):
        load_config(write_config(tmp_path / 'c.json', data))


def test_non_positive_spool_threshold_rejected(tmp_path):
    data = dict(BASE, transfer={"spool_threshold_mb": 0})

    with pytest.raises(ConfigError):
        load_config(write_config(tmp_path / 'c.json', data))


def test_default_config_round_trips(tmp_path, monkeypatch):
    monkeypatch.setenv('S3_SECRET_KEY', 'xyz')
    path = create_default_config(tmp_path / 'nested' / 'config.json')

    config = load_config(path)

    assert isinstance(config, Config)
    assert config.secret_key == 'xyz'
    assert config.bucket == 'your-bucket-name'
