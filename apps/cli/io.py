"""CLI I/O helpers for atomic output writing."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.orchestrator.models import CycleResult


@dataclass(frozen=True)
class OutputPaths:
    """Fixed output artifact paths for single run."""

    changes: Path
    stats: Path
    annotations: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Build fixed output file paths under out_dir."""

    return OutputPaths(
        changes=out_dir / "out.changes.json",
        stats=out_dir / "out.stats.json",
        annotations=out_dir / "out.annotations.json",
    )


def existing_output_files(paths: OutputPaths) -> list[Path]:
    """Return existing output files among fixed artifact paths."""

    candidates = [paths.changes, paths.stats, paths.annotations]
    return [path for path in candidates if path.exists()]


def read_text_input(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_cycle_outputs_atomic(paths: OutputPaths, results: Sequence[CycleResult]) -> None:
    """Write three artifacts atomically using temporary files + replace.

    `out.changes.json` holds the records of the last cycle only; stats and
    annotations are written per cycle.
    """

    paths.changes.parent.mkdir(parents=True, exist_ok=True)
    last_records = results[-1].records if results else []
    _atomic_write_json(
        paths.changes,
        {"records": [record.model_dump(mode="json") for record in last_records]},
    )
    _atomic_write_json(
        paths.stats,
        {"cycles": [result.stats.model_dump(mode="json") for result in results]},
    )
    _atomic_write_json(
        paths.annotations,
        {"cycles": [result.annotation_payload() for result in results]},
    )


def write_fallback_json_atomic(
    paths: OutputPaths,
    *,
    error_type: str,
    error_message: str,
    stage: str,
) -> None:
    """Write fallback JSON reports with required error metadata."""

    error_block = {
        "error_type": error_type,
        "error_message": error_message,
        "stage": stage,
    }

    paths.changes.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(paths.changes, _with_error_block({"records": []}, error_block))
    _atomic_write_json(paths.stats, _with_error_block({"cycles": []}, error_block))
    _atomic_write_json(paths.annotations, _with_error_block({"cycles": []}, error_block))


def _with_error_block(payload: dict[str, Any], error_block: dict[str, Any]) -> dict[str, Any]:
    enriched = dict(payload)
    enriched["error"] = error_block
    return enriched


def _atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        json.dump(payload, tmp, ensure_ascii=False, sort_keys=True, separators=(",", ":"))

    tmp_path.replace(path)
