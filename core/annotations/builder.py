"""Build annotation indexes from literal patterns.

The scan is overlap-permissive: after a match at `p` the next search starts
at `p + 1`, so `"aa"` in `"aaa"` matches at 0 and 1.
"""

from __future__ import annotations

from collections.abc import Mapping

from core.annotations.models import AnnotationIndex
from core.utils.errors import ConfigurationError


def find_occurrences(text: str, pattern: str) -> list[int]:
    """Return start offsets of every (possibly overlapping) match of `pattern`."""

    if not pattern:
        raise ConfigurationError("Pattern must not be empty", field="pattern", value=pattern)

    starts: list[int] = []
    position = text.find(pattern)
    while position != -1:
        starts.append(position)
        position = text.find(pattern, position + 1)
    return starts


def build_index(reference_text: str, pattern: str, annotation_id: str) -> AnnotationIndex:
    """Track every character covered by any occurrence of `pattern`.

    Args:
        reference_text: Text snapshot the positions refer to.
        pattern: Literal, non-empty search pattern.
        annotation_id: Opaque, non-empty identifier for the tracked span.

    Returns:
        AnnotationIndex with one entry for `annotation_id`; the entry is empty
        when the pattern does not occur.
    """

    return build_index_from_patterns(reference_text, {annotation_id: pattern})


def build_index_from_patterns(
    reference_text: str, patterns: Mapping[str, str]
) -> AnnotationIndex:
    """Build one index tracking several annotation ids at once."""

    entries: dict[str, tuple[int, ...]] = {}
    for annotation_id, pattern in patterns.items():
        if not annotation_id:
            raise ConfigurationError(
                "Annotation id must not be empty", field="annotation_id", value=annotation_id
            )
        entries[annotation_id] = _positions_for(reference_text, pattern)
    return AnnotationIndex(text=reference_text, entries=entries)


def _positions_for(text: str, pattern: str) -> tuple[int, ...]:
    covered: set[int] = set()
    for start in find_occurrences(text, pattern):
        covered.update(range(start, start + len(pattern)))
    return tuple(sorted(covered))
