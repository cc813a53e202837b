"""Single-pass classification of edit scripts."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from core.changes.models import ChangeRecord, EqualVariant
from core.diff.models import EditOp


class EqualVariantRule(Protocol):
    """Decides the sub-case of an equal record."""

    def variant_for(self, sequence_index: int, value: str) -> EqualVariant:
        """Return the equal variant for one equal op."""


class CodePointCoincidenceRule:
    """Marks equal ops whose script position equals their first code point.

    Report consumers still read this sub-case. The comparison mixes op
    position with character identity and has no domain meaning.
    TODO: drop once no report consumer reads `index_coincident`.
    """

    def variant_for(self, sequence_index: int, value: str) -> EqualVariant:
        if value and sequence_index == ord(value[0]):
            return "index_coincident"
        return "plain"


def classify_changes(
    ops: Iterable[EditOp], equal_rule: EqualVariantRule | None = None
) -> list[ChangeRecord]:
    """Assign sequence indexes, text positions and tags to every op, in script order.

    Old/new positions are counted from the script itself, so differs that only
    fill in tag and value still yield records pointing into both texts.
    """

    rule = equal_rule if equal_rule is not None else CodePointCoincidenceRule()
    records: list[ChangeRecord] = []
    old_cursor = 0
    new_cursor = 0

    for sequence_index, op in enumerate(ops):
        old_index = old_cursor if op.tag != "insert" else None
        new_index = new_cursor if op.tag != "delete" else None
        if op.tag != "insert":
            old_cursor += len(op.value)
        if op.tag != "delete":
            new_cursor += len(op.value)

        variant = rule.variant_for(sequence_index, op.value) if op.tag == "equal" else None
        records.append(
            ChangeRecord(
                tag=op.tag,
                sequence_index=sequence_index,
                value=op.value,
                old_index=old_index,
                new_index=new_index,
                equal_variant=variant,
            )
        )

    return records


def equal_records(records: Iterable[ChangeRecord]) -> list[ChangeRecord]:
    return [record for record in records if record.tag == "equal"]
