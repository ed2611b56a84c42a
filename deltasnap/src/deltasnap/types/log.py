"""Value types describing a table's transaction log files."""

from pydantic import ConfigDict, Field, model_validator

from deltasnap.constants import LogFileKind, MAX_PART_NUMBER, MAX_VERSION
from .base import DeltaSnapBaseModel


class LogDescriptor(DeltaSnapBaseModel):
    """A classified transaction log file.

    ``kind`` is the tag of a closed variant: a COMMIT is always a single
    part (sequence 1 of 1), while all CHECKPOINT_PART descriptors sharing a
    ``version`` together form one logical checkpoint.

    Attributes:
        path: Path of the log file exactly as it was listed
        kind: Commit or checkpoint part
        version: Commit number the file records, or snapshots up to
        part_sequence: 1-based position of a checkpoint part
        part_total: Number of parts the checkpoint declares
    """
    model_config = ConfigDict(frozen=True)

    path: str
    kind: LogFileKind
    version: int = Field(..., ge=0, le=MAX_VERSION)
    part_sequence: int = Field(default=1, ge=0, le=MAX_PART_NUMBER)
    part_total: int = Field(default=1, ge=0, le=MAX_PART_NUMBER)

    @model_validator(mode="after")
    def validate_commit_is_single_part(self) -> "LogDescriptor":
        if self.kind == LogFileKind.COMMIT and (self.part_sequence != 1 or self.part_total != 1):
            raise ValueError("A commit descriptor is always part 1 of 1")
        return self

    @classmethod
    def commit(cls, path: str, version: int) -> "LogDescriptor":
        """Create a descriptor for a JSON commit file."""
        return cls(path=path, kind=LogFileKind.COMMIT, version=version)

    @classmethod
    def checkpoint_part(
        cls,
        path: str,
        version: int,
        part_sequence: int = 1,
        part_total: int = 1,
    ) -> "LogDescriptor":
        """Create a descriptor for one Parquet checkpoint part."""
        return cls(
            path=path,
            kind=LogFileKind.CHECKPOINT_PART,
            version=version,
            part_sequence=part_sequence,
            part_total=part_total,
        )

    @property
    def is_commit(self) -> bool:
        return self.kind == LogFileKind.COMMIT

    @property
    def is_checkpoint(self) -> bool:
        return self.kind == LogFileKind.CHECKPOINT_PART


class LogEntry(DeltaSnapBaseModel):
    """An entry listed from a transaction log directory, before classification.

    Attributes:
        path: Path of the listed entry
        is_directory: True if the entry is a directory, False if it's a file
    """
    model_config = ConfigDict(frozen=True)

    path: str
    is_directory: bool = False
