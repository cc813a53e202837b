"""Annotation index value object."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from core.utils.errors import InvariantViolation


@dataclass(frozen=True)
class AnnotationIndex:
    """Tracked positions per annotation id, bound to one text snapshot.

    Rules:
    - positions are strictly ascending and within `0 <= i < len(text)`
    - the value is never mutated; `with_entry`/`without` return new indexes
    """

    text: str
    entries: Mapping[str, tuple[int, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen: dict[str, tuple[int, ...]] = {}
        for annotation_id in sorted(self.entries):
            positions = tuple(self.entries[annotation_id])
            _check_positions(annotation_id, positions, len(self.text))
            frozen[annotation_id] = positions
        object.__setattr__(self, "entries", MappingProxyType(frozen))

    def __contains__(self, annotation_id: object) -> bool:
        return annotation_id in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, annotation_id: str) -> tuple[int, ...] | None:
        return self.entries.get(annotation_id)

    def ids(self) -> list[str]:
        return list(self.entries)

    def anchor_text(self, annotation_id: str) -> str:
        """Return the characters currently tracked by `annotation_id`."""

        return "".join(self.text[position] for position in self.entries[annotation_id])

    def with_entry(self, annotation_id: str, positions: Iterable[int]) -> AnnotationIndex:
        merged = dict(self.entries)
        merged[annotation_id] = tuple(positions)
        return AnnotationIndex(text=self.text, entries=merged)

    def without(self, annotation_id: str) -> AnnotationIndex:
        remaining = {key: value for key, value in self.entries.items() if key != annotation_id}
        return AnnotationIndex(text=self.text, entries=remaining)

    def to_payload(self) -> dict[str, list[int]]:
        return {annotation_id: list(positions) for annotation_id, positions in self.entries.items()}


def _check_positions(annotation_id: str, positions: tuple[int, ...], text_length: int) -> None:
    previous = -1
    for position in positions:
        if position < 0 or position >= text_length:
            raise InvariantViolation(
                f"Position {position} of annotation '{annotation_id}' is outside "
                f"reference text of length {text_length}",
                annotation_id=annotation_id,
                position=position,
                text_length=text_length,
            )
        if position <= previous:
            raise InvariantViolation(
                f"Positions of annotation '{annotation_id}' must be strictly ascending",
                annotation_id=annotation_id,
                position=position,
                text_length=text_length,
            )
        previous = position
