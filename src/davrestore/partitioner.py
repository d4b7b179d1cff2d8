"""Deterministic ordering and partitioning of the restore workload.

Workers agree on shard membership without coordination: membership is
CRC-32 of the lower-cased destination path modulo the shard count, which is
identical across processes, hosts and interpreter runs.
"""

from __future__ import annotations

import zlib
from typing import Iterable

from .models import IndexRange, RestorePlan, ShardSelector, TrashEntry


def plan_sort_key(entry: TrashEntry) -> tuple[int, int, str, float, str]:
    """Same-path duplicates order newest deletion first, then by source."""
    return (
        0 if entry.is_directory else 1,
        entry.depth,
        entry.destination_path,
        -entry.deleted_at.timestamp(),
        entry.source_ref,
    )


def order_entries(entries: Iterable[TrashEntry]) -> list[TrashEntry]:
    """Directories first, then shallower paths, then lexicographic path."""
    return sorted(entries, key=plan_sort_key)


def shard_index(destination_path: str, total_shards: int) -> int:
    checksum = zlib.crc32(destination_path.lower().encode("utf-8")) & 0xFFFFFFFF
    return checksum % total_shards


def select_shard(entries: list[TrashEntry], selector: ShardSelector) -> list[TrashEntry]:
    if not selector.is_partitioned:
        return list(entries)
    return [
        entry
        for entry in entries
        if shard_index(entry.destination_path, selector.total_shards) == selector.shard
    ]


def slice_range(entries: list[TrashEntry], index_range: IndexRange) -> list[TrashEntry]:
    if index_range.start >= len(entries):
        return []
    last_index = len(entries) - 1
    if index_range.end is not None:
        last_index = min(index_range.end, last_index)
    if last_index < index_range.start:
        return []
    return entries[index_range.start : last_index + 1]


def build_restore_plan(
    entries: Iterable[TrashEntry],
    *,
    selector: ShardSelector = ShardSelector(),
    index_range: IndexRange = IndexRange(),
) -> RestorePlan:
    catalog = list(entries)
    ordered = order_entries(catalog)
    sharded = select_shard(ordered, selector)
    return RestorePlan(
        entries=tuple(slice_range(sharded, index_range)),
        shard=selector,
        index_range=index_range,
        catalog_size=len(catalog),
    )
