"""Data models for classified changes and change statistics."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

EqualVariant = Literal["index_coincident", "plain"]


class ChangeRecord(BaseModel):
    """Classified edit operation handed to remapping and reporting."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tag: Literal["equal", "insert", "delete"]
    sequence_index: int
    value: str
    old_index: int | None = None
    new_index: int | None = None
    equal_variant: EqualVariant | None = None


class ChangeStats(BaseModel):
    """Aggregate counts over classified records.

    Rules:
    - total_changes == unchanged + insertions + deletions
    - unchanged counts both equal variants
    """

    model_config = ConfigDict(extra="forbid")

    total_changes: int = 0
    unchanged: int = 0
    insertions: int = 0
    deletions: int = 0
