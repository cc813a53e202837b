"""Character-level differ producing ordered edit scripts.

Ops are emitted one per code point. Within a replaced region all deletions
precede all insertions, so `("abc", "axc")` yields
equal `a`, delete `b`, insert `x`, equal `c`.
"""

from __future__ import annotations

from collections.abc import Sequence
from difflib import SequenceMatcher
from typing import Protocol

from core.diff.models import EditOp


class Differ(Protocol):
    """Protocol for deterministic edit script producers."""

    def diff(self, old: str, new: str) -> list[EditOp]:
        """Return an edit script transforming `old` into `new`."""


class SequenceMatcherDiffer:
    """Default differ backed by `difflib.SequenceMatcher`."""

    def diff(self, old: str, new: str) -> list[EditOp]:
        matcher = SequenceMatcher(None, old, new, autojunk=False)
        ops: list[EditOp] = []

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                for offset in range(i2 - i1):
                    ops.append(
                        EditOp(
                            tag="equal",
                            sequence_index=len(ops),
                            value=old[i1 + offset],
                            old_index=i1 + offset,
                            new_index=j1 + offset,
                        )
                    )
                continue

            if tag in {"delete", "replace"}:
                for old_index in range(i1, i2):
                    ops.append(
                        EditOp(
                            tag="delete",
                            sequence_index=len(ops),
                            value=old[old_index],
                            old_index=old_index,
                        )
                    )
            if tag in {"insert", "replace"}:
                for new_index in range(j1, j2):
                    ops.append(
                        EditOp(
                            tag="insert",
                            sequence_index=len(ops),
                            value=new[new_index],
                            new_index=new_index,
                        )
                    )

        return ops


def diff_chars(old: str, new: str, differ: Differ | None = None) -> list[EditOp]:
    """Diff two texts character by character with the given or default differ."""

    selected = differ if differ is not None else SequenceMatcherDiffer()
    return selected.diff(old, new)


def old_text_of(ops: Sequence[EditOp]) -> str:
    """Rebuild the old text covered by an edit script."""

    return "".join(op.value for op in ops if op.tag != "insert")


def new_text_of(ops: Sequence[EditOp]) -> str:
    """Rebuild the new text covered by an edit script."""

    return "".join(op.value for op in ops if op.tag != "delete")
