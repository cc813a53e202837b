"""Orchestration pipeline for annotation remap cycles."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from core.annotations.models import AnnotationIndex
from core.annotations.remapper import remap_index
from core.changes.classifier import EqualVariantRule, classify_changes
from core.changes.stats import collect_stats
from core.diff.engine import Differ, diff_chars
from core.orchestrator.models import CycleResult
from core.utils.errors import InvariantViolation

logger = logging.getLogger("anchorshift.pipeline")


def run_cycle(
    old_text: str,
    new_text: str,
    index: AnnotationIndex,
    differ: Differ | None = None,
    equal_rule: EqualVariantRule | None = None,
) -> CycleResult:
    """Execute diff -> classify -> stats -> remap for one text revision."""

    if index.text != old_text:
        raise InvariantViolation(
            "Annotation index was not built from the old text of this cycle",
            text_length=len(old_text),
        )

    ops = diff_chars(old_text, new_text, differ)
    records = classify_changes(ops, equal_rule)
    stats = collect_stats(records)
    remapped = remap_index(index, new_text, records)
    lost = [annotation_id for annotation_id in index.ids() if annotation_id not in remapped]

    _log_event(
        logging.INFO,
        "cycle",
        total_changes=stats.total_changes,
        unchanged=stats.unchanged,
        insertions=stats.insertions,
        deletions=stats.deletions,
        tracked=len(index),
        remapped=len(remapped),
        lost=lost,
    )
    for annotation_id in lost:
        _log_event(
            logging.WARNING,
            "annotation_lost",
            annotation_id=annotation_id,
            anchor=index.anchor_text(annotation_id),
        )

    return CycleResult(
        old_text=old_text,
        new_text=new_text,
        records=records,
        stats=stats,
        source_index=index,
        remapped_index=remapped,
        lost=lost,
    )


def run_revisions(
    index: AnnotationIndex,
    revisions: Iterable[str],
    differ: Differ | None = None,
    equal_rule: EqualVariantRule | None = None,
) -> list[CycleResult]:
    """Chain cycles over successive revisions of `index.text`.

    Each cycle's remapped index becomes the next cycle's source; earlier
    indexes are left untouched.
    """

    results: list[CycleResult] = []
    current = index
    for revision in revisions:
        result = run_cycle(current.text, revision, current, differ, equal_rule)
        results.append(result)
        current = result.remapped_index
    return results


def _log_event(level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(
        level, json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    )
