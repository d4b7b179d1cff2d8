"""Dataclasses shared across davrestore layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class DavResponse:
    status: int
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class TrashProperties:
    """Property bag of one multistatus response item, before validation."""

    href: str
    original_filename: str | None
    original_location: str | None
    deleted_at_raw: str | None
    is_collection: bool
    content_length: int | None = None

    @property
    def has_trash_metadata(self) -> bool:
        return any(
            value
            for value in (
                self.original_filename,
                self.original_location,
                self.deleted_at_raw,
            )
        )


@dataclass(frozen=True)
class TrashEntry:
    source_ref: str
    destination_path: str
    is_directory: bool
    deleted_at: datetime
    display_name: str

    @property
    def depth(self) -> int:
        return len(self.destination_path.split("/"))

    @property
    def kind_label(self) -> str:
        return "DIR " if self.is_directory else "FILE"


@dataclass(frozen=True)
class CatalogWarning:
    source_ref: str
    message: str


@dataclass(frozen=True)
class ShardSelector:
    shard: int = 0
    total_shards: int = 1

    def __post_init__(self) -> None:
        if self.total_shards < 1:
            raise ValueError("total_shards must be at least 1.")
        if not 0 <= self.shard < self.total_shards:
            raise ValueError(
                f"shard must be in [0, {self.total_shards - 1}], got {self.shard}."
            )

    @property
    def is_partitioned(self) -> bool:
        return self.total_shards > 1


@dataclass(frozen=True)
class IndexRange:
    """Positional sub-range of the post-shard plan; `end` is inclusive."""

    start: int = 0
    end: int | None = None

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("Index range start must be non-negative.")
        if self.end is not None and self.end < 0:
            raise ValueError("Index range end must be non-negative.")

    @property
    def is_full(self) -> bool:
        return self.start == 0 and self.end is None


@dataclass(frozen=True)
class RestorePlan:
    entries: tuple[TrashEntry, ...]
    shard: ShardSelector
    index_range: IndexRange
    catalog_size: int

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def directory_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_directory)

    @property
    def file_count(self) -> int:
        return len(self.entries) - self.directory_count


class OutcomeKind(Enum):
    RESTORED = "restored"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    attempts: int = 0
    last_status: int | None = None
    reason: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.kind is not OutcomeKind.FAILED

    @classmethod
    def restored(cls, *, attempts: int, status: int) -> Outcome:
        return cls(OutcomeKind.RESTORED, attempts=attempts, last_status=status)

    @classmethod
    def already_present(cls, *, attempts: int, status: int) -> Outcome:
        return cls(OutcomeKind.ALREADY_PRESENT, attempts=attempts, last_status=status)

    @classmethod
    def failed(
        cls, *, attempts: int, status: int | None, reason: str | None = None
    ) -> Outcome:
        return cls(
            OutcomeKind.FAILED, attempts=attempts, last_status=status, reason=reason
        )


@dataclass(frozen=True)
class RunSummary:
    restored_count: int
    already_present_count: int
    failed_count: int

    @property
    def ok_count(self) -> int:
        return self.restored_count + self.already_present_count

    @property
    def total_count(self) -> int:
        return self.ok_count + self.failed_count
