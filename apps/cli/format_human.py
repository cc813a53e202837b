"""Human-readable change and annotation report rendering for CLI output."""

from __future__ import annotations

from collections.abc import Sequence

from core.changes.models import ChangeRecord, ChangeStats
from core.orchestrator.models import CycleResult

_LABELS = {
    "equal": ("Unchanged", "Equal"),
    "delete": ("Removed", "Deletion"),
    "insert": ("Added", "Insertion"),
}


def render_change_details(records: Sequence[ChangeRecord]) -> str:
    """Render one line per classified record."""

    lines: list[str] = ["Detailed Change Analysis:"]
    for record in records:
        label, change_type = _LABELS.get(record.tag, ("Unknown", record.tag))
        lines.append(
            f"{label} at index {record.sequence_index}: "
            f"'{_escape(record.value)}' ({change_type})"
        )
    return "\n".join(lines)


def render_stats(stats: ChangeStats) -> str:
    lines = [
        "Change Statistics:",
        f"Total Changes: {stats.total_changes}",
        f"Unchanged Parts: {stats.unchanged}",
        f"Insertions: {stats.insertions}",
        f"Deletions: {stats.deletions}",
    ]
    return "\n".join(lines)


def render_annotation_summary(result: CycleResult) -> str:
    """Render old -> new positions for every tracked annotation."""

    source = result.source_index
    remapped = result.remapped_index
    if not len(source):
        return "Annotations: none"

    lines: list[str] = ["Annotations:"]
    for annotation_id in source.ids():
        old_positions = _positions_text(source.entries[annotation_id])
        anchor = _escape(source.anchor_text(annotation_id))
        new_positions = remapped.get(annotation_id)
        if new_positions is None:
            lines.append(f"{annotation_id}: {old_positions} -> lost (anchor='{anchor}')")
            continue
        kept = _escape(remapped.anchor_text(annotation_id))
        partial = " partial" if len(new_positions) < len(source.entries[annotation_id]) else ""
        lines.append(
            f"{annotation_id}: {old_positions} -> {_positions_text(new_positions)}"
            f"{partial} (anchor='{anchor}' kept='{kept}')"
        )
    return "\n".join(lines)


def render_cycle_header(cycle_number: int, cycle_count: int, result: CycleResult) -> str:
    return (
        f"cycle={cycle_number}/{cycle_count} "
        f"old_len={len(result.old_text)} new_len={len(result.new_text)}"
    )


def _positions_text(positions: Sequence[int]) -> str:
    if not positions:
        return "none"
    return ",".join(str(position) for position in positions)


def _escape(value: str) -> str:
    return repr(value)[1:-1]
