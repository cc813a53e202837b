"""Remap cycle output models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, InstanceOf

from core.annotations.models import AnnotationIndex
from core.changes.models import ChangeRecord, ChangeStats


class CycleResult(BaseModel):
    """In-memory output of one `(old, new)` remap cycle."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    old_text: str
    new_text: str
    records: list[ChangeRecord] = Field(default_factory=list)
    stats: ChangeStats
    source_index: InstanceOf[AnnotationIndex]
    remapped_index: InstanceOf[AnnotationIndex]
    lost: list[str] = Field(default_factory=list)

    def annotation_payload(self) -> dict[str, object]:
        return {
            "source": self.source_index.to_payload(),
            "remapped": self.remapped_index.to_payload(),
            "lost": list(self.lost),
        }
