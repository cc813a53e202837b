"""Change statistics aggregation."""

from __future__ import annotations

from collections.abc import Iterable

from core.changes.models import ChangeRecord, ChangeStats


def collect_stats(records: Iterable[ChangeRecord]) -> ChangeStats:
    """Fold classified records into aggregate counts."""

    stats = ChangeStats()
    for record in records:
        stats.total_changes += 1
        if record.tag == "equal":
            stats.unchanged += 1
        elif record.tag == "insert":
            stats.insertions += 1
        elif record.tag == "delete":
            stats.deletions += 1
    return stats
