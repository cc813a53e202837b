"""Prefix-only re-anchoring of tracked positions onto a new text version.

Strategy:
- the anchor is the old-text characters at the tracked positions
- the start is the first equal record whose value begins with the anchor's
  first character
- following equal records are accepted while they are adjacent in the script
  and carry the next anchor character; the first mismatch ends the match

There is no backtracking. An interior edit drops everything after it even if
the remaining characters are still present in the new text.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.annotations.models import AnnotationIndex
from core.changes.classifier import equal_records
from core.changes.models import ChangeRecord
from core.utils.errors import InvariantViolation


def remap_positions(
    positions: Sequence[int],
    old_text: str,
    records: Sequence[ChangeRecord],
    *,
    annotation_id: str | None = None,
) -> tuple[int, ...]:
    """Return new-text positions for one tracked span, possibly empty."""

    anchor = _resolve_anchor(positions, old_text, annotation_id)
    if not anchor:
        return ()

    if all(record.tag == "equal" for record in records):
        return tuple(positions)

    equals = equal_records(records)
    start = _find_start(equals, anchor[0])
    if start is None:
        return ()

    accepted = [equals[start]]
    for record in equals[start + 1 :]:
        if len(accepted) == len(anchor):
            break
        previous = accepted[-1]
        if record.sequence_index != previous.sequence_index + 1:
            break
        if record.value != anchor[len(accepted)]:
            break
        accepted.append(record)

    return tuple(_new_position(record) for record in accepted)


def remap_index(
    index: AnnotationIndex, new_text: str, records: Sequence[ChangeRecord]
) -> AnnotationIndex:
    """Remap every entry of `index`; unrecoverable entries are left out."""

    remapped: dict[str, tuple[int, ...]] = {}
    for annotation_id, positions in index.entries.items():
        new_positions = remap_positions(
            positions, index.text, records, annotation_id=annotation_id
        )
        if new_positions:
            remapped[annotation_id] = new_positions
    return AnnotationIndex(text=new_text, entries=remapped)


def _resolve_anchor(
    positions: Sequence[int], old_text: str, annotation_id: str | None
) -> str:
    chars: list[str] = []
    for position in positions:
        if position < 0 or position >= len(old_text):
            raise InvariantViolation(
                f"Tracked position {position} is outside old text of length {len(old_text)}",
                annotation_id=annotation_id,
                position=position,
                text_length=len(old_text),
            )
        chars.append(old_text[position])
    return "".join(chars)


def _find_start(equals: Sequence[ChangeRecord], first_char: str) -> int | None:
    for offset, record in enumerate(equals):
        if record.value[:1] == first_char:
            return offset
    return None


def _new_position(record: ChangeRecord) -> int:
    if record.new_index is None:
        raise InvariantViolation(
            f"Equal record {record.sequence_index} has no new-text position",
            position=record.sequence_index,
        )
    return record.new_index
