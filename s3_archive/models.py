"""Result types for dump and populate runs."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class TransferOutcome:
    """Result of moving one object between the store and an archive."""
    key: str
    success: bool
    size: int = 0
    error: Optional[str] = None

    @classmethod
    def ok(cls, key: str, size: int = 0) -> 'TransferOutcome':
        return cls(key=key, success=True, size=size)

    @classmethod
    def failed(cls, key: str, error) -> 'TransferOutcome':
        return cls(key=key, success=False, error=str(error))


@dataclass
class _RunResult:
    outcomes: List[TransferOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[TransferOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[TransferOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def total_bytes(self) -> int:
        return sum(o.size for o in self.outcomes if o.success)


@dataclass
class DumpResult(_RunResult):
    """Result of dumping a bucket into an archive."""
    bucket: str = ''
    archive_path: Optional[Path] = None


@dataclass
class PopulateResult(_RunResult):
    """Result of uploading an archive's entries into a bucket."""
    bucket: str = ''
    archive_path: Optional[Path] = None
