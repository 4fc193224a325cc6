"""Combine freshly translated entries with a destination document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from resources.values import ResourceEntry


@dataclass(slots=True)
class MergeResult:
    entries: List[ResourceEntry]
    added: List[str] = field(default_factory=list)
    preserved: List[str] = field(default_factory=list)


def existing_keys(existing: Sequence[ResourceEntry]) -> set[str]:
    return {entry.key for entry in existing}


def select_pending(
    entries: Sequence[ResourceEntry],
    existing: Sequence[ResourceEntry],
    *,
    overwrite_existing: bool,
) -> List[ResourceEntry]:
    """Entries whose translation would survive the merge."""
    if overwrite_existing:
        return list(entries)
    present = existing_keys(existing)
    return [entry for entry in entries if entry.key not in present]


def merge_entries(
    produced: Sequence[ResourceEntry],
    existing: Sequence[ResourceEntry],
    *,
    overwrite_existing: bool,
) -> MergeResult:
    """Merge by key.

    Overwriting replaces the destination with ``produced`` in source order.
    Otherwise destination entries are kept as they are and only entries with
    a key the destination lacks are appended. Duplicate keys are not removed.
    """
    if overwrite_existing:
        return MergeResult(entries=list(produced), added=[entry.key for entry in produced])

    present = existing_keys(existing)
    merged = list(existing)
    added: List[str] = []
    preserved: List[str] = []
    for entry in produced:
        if entry.key in present:
            preserved.append(entry.key)
            continue
        merged.append(entry)
        added.append(entry.key)
    return MergeResult(entries=merged, added=added, preserved=preserved)
