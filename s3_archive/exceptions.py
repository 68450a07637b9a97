"""Error types raised by the S3 archive tools."""

from typing import List, Optional


class S3ArchiveError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(S3ArchiveError):
    """Configuration file could not be parsed or validated."""


class ObjectStoreError(S3ArchiveError):
    """A request against the object store failed."""

    operation = 'request'

    def __init__(self, bucket: str, key: Optional[str] = None, cause: Optional[BaseException] = None,
                 message: Optional[str] = None):
        self.bucket = bucket
        self.key = key
        self.cause = cause
        target = f"{bucket}/{key}" if key is not None else bucket
        if message is None:
            message = describe_error(cause) if cause is not None else 'unknown error'
        super().__init__(f"{self.operation} {target} failed: {message}")
        self.reason = message


class ListError(ObjectStoreError):
    operation = 'list'


class GetError(ObjectStoreError):
    operation = 'get'


class PutError(ObjectStoreError):
    operation = 'put'


class ArchiveError(S3ArchiveError):
    """Base class for archive container errors."""


class ArchiveExistsError(ArchiveError):
    """The dump target already exists and overwriting was not requested."""


class ArchiveFormatError(ArchiveError):
    """The file is not a readable tar container."""


class ArchiveCorruptError(ArchiveError):
    """The container is damaged past the current entry.

    ``outcomes`` holds whatever was transferred before the damage was found,
    so the caller can still report them.
    """

    def __init__(self, message: str, outcomes: Optional[List] = None):
        super().__init__(message)
        self.outcomes = list(outcomes or [])


class EntryNameError(ArchiveError):
    """An entry name cannot be stored in the container."""


def describe_error(error: BaseException) -> str:
    """Short human-readable description of a botocore (or any) exception."""
    response = getattr(error, 'response', None)
    if isinstance(response, dict):
        details = response.get('Error', {})
        code = details.get('Code')
        text = details.get('Message')
        if code and text:
            return f"{code}: {text}"
        if code:
            return str(code)
    return str(error) or error.__class__.__name__
