"""Edit script data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChangeTag = Literal["equal", "insert", "delete"]


@dataclass(frozen=True)
class EditOp:
    """One operation of a character-level edit script.

    `sequence_index` is the op's position in the script, not in either text.
    `old_index` is set for equal/delete ops, `new_index` for equal/insert ops.
    Both are optional; classification recounts them from the script.
    """

    tag: ChangeTag
    sequence_index: int
    value: str
    old_index: int | None = None
    new_index: int | None = None
