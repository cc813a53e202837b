"""Typer CLI entrypoint for anchorshift."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal, cast

import typer

from apps.cli.format_color import print_colored_diff
from apps.cli.format_human import (
    render_annotation_summary,
    render_change_details,
    render_cycle_header,
    render_stats,
)
from apps.cli.io import (
    OutputPaths,
    build_output_paths,
    existing_output_files,
    read_text_input,
    write_cycle_outputs_atomic,
    write_fallback_json_atomic,
)
from core.annotations.builder import build_index_from_patterns
from core.annotations.models import AnnotationIndex
from core.orchestrator.models import CycleResult
from core.orchestrator.pipeline import run_cycle, run_revisions
from core.render.models import Palette
from core.render.palette_loader import load_palette
from core.utils.errors import ConfigurationError, InvariantViolation

app = typer.Typer(help="Annotation remapping CLI", rich_markup_mode=None)
logger = logging.getLogger("anchorshift.cli")
FormatReportMode = Literal["human", "json", "both"]


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("diff")
def diff_command(
    old: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    new: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    palette: Annotated[Path | None, typer.Option()] = None,
    color: Annotated[bool, typer.Option("--color/--no-color")] = True,
    format_report: Annotated[str, typer.Option()] = "human",
    out_dir: Annotated[
        Path | None, typer.Option(help="Also write change and stats artifacts here.")
    ] = None,
) -> None:
    """Print the classified character diff of two text files."""

    paths = build_output_paths(out_dir) if out_dir is not None else None

    format_report_typed = _normalize_format_report(format_report)
    if format_report_typed is None:
        if paths is not None:
            _safe_write_exit1_fallback(
                paths, "ArgumentValidationError", "invalid format_report", "args"
            )
        raise typer.Exit(code=1)

    exit_code = 1
    failure_stage = "unknown"
    error: Exception | None = None

    try:
        failure_stage = "load_palette"
        palette_model = load_palette(palette)
        failure_stage = "load_texts"
        old_text = read_text_input(old)
        new_text = read_text_input(new)
        failure_stage = "pipeline"
        result = run_cycle(old_text, new_text, AnnotationIndex(text=old_text))
        exit_code = 0
    except ConfigurationError as exc:
        error = exc
        exit_code = 2
        typer.echo(f"ERROR: configuration: {exc}")
    except Exception as exc:  # noqa: BLE001
        error = exc
        exit_code = 1
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")

    if error is not None:
        _log_event(
            logging.ERROR,
            "error",
            error_type=type(error).__name__,
            failure_stage=failure_stage,
            exit_code=exit_code,
        )
        if paths is not None:
            _safe_write_exit1_fallback(paths, type(error).__name__, str(error), failure_stage)
        raise typer.Exit(code=exit_code)

    _emit_reports([result], palette_model, color=color, format_report=format_report_typed)

    if paths is not None:
        try:
            write_cycle_outputs_atomic(paths, [result])
        except Exception as write_exc:  # noqa: BLE001
            typer.echo(f"ERROR: write output failed: {write_exc}")
            raise typer.Exit(code=1) from write_exc

    raise typer.Exit(code=0)


@app.command("track")
def track_command(
    old: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    new: Annotated[
        list[Path],
        typer.Option(
            ...,
            exists=True,
            dir_okay=False,
            file_okay=True,
            help="Revised text; repeat to chain several revisions in order.",
        ),
    ],
    pattern: Annotated[
        list[str], typer.Option(..., help="Literal pattern to track; repeatable.")
    ],
    annotation_id: Annotated[
        list[str] | None,
        typer.Option("--id", help="Annotation id per --pattern, in the same order."),
    ] = None,
    out_dir: Annotated[Path, typer.Option()] = Path("."),
    palette: Annotated[Path | None, typer.Option()] = None,
    color: Annotated[bool, typer.Option("--color/--no-color")] = True,
    format_report: Annotated[str, typer.Option()] = "human",
    fail_on_loss: Annotated[
        bool,
        typer.Option("--fail-on-loss", help="Exit 4 when any annotation cannot be re-anchored."),
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite outputs when they already exist.")
    ] = False,
    no_overwrite: Annotated[
        bool,
        typer.Option(
            "--no-overwrite",
            help="Fail when outputs already exist.",
        ),
    ] = False,
) -> None:
    """Track pattern annotations across one or more text revisions."""

    paths = build_output_paths(out_dir)

    format_report_typed = _normalize_format_report(format_report)
    if format_report_typed is None:
        _safe_write_exit1_fallback(
            paths, "ArgumentValidationError", "invalid format_report", "args"
        )
        raise typer.Exit(code=1)

    ids = list(annotation_id) if annotation_id else _default_ids(len(pattern))
    if len(ids) != len(pattern):
        typer.echo("ERROR: --id must be given once per --pattern.")
        _safe_write_exit1_fallback(paths, "ArgumentValidationError", "id/pattern mismatch", "args")
        raise typer.Exit(code=1)
    if len(set(ids)) != len(ids):
        typer.echo("ERROR: --id values must be unique.")
        _safe_write_exit1_fallback(paths, "ArgumentValidationError", "duplicate ids", "args")
        raise typer.Exit(code=1)

    if force and no_overwrite:
        typer.echo("ERROR: --force and --no-overwrite cannot be used together.")
        _safe_write_exit1_fallback(paths, "ArgumentConflict", "conflicting overwrite flags", "args")
        raise typer.Exit(code=1)

    existing = existing_output_files(paths)
    if existing and no_overwrite:
        typer.echo("ERROR: outputs already exist and --no-overwrite is enabled.")
        raise typer.Exit(code=1)
    if existing:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}")

    results: list[CycleResult] = []
    palette_model: Palette | None = None
    exit_code = 1
    failure_stage = "unknown"
    error: Exception | None = None

    try:
        failure_stage = "load_palette"
        palette_model = load_palette(palette)
        failure_stage = "load_texts"
        old_text = read_text_input(old)
        revisions = [read_text_input(path) for path in new]
        failure_stage = "build_index"
        index = build_index_from_patterns(old_text, dict(zip(ids, pattern, strict=True)))
        failure_stage = "pipeline"
        results = run_revisions(index, revisions)
        exit_code = 0
    except ConfigurationError as exc:
        error = exc
        exit_code = 2
        typer.echo(f"ERROR: configuration: {exc}")
    except InvariantViolation as exc:
        error = exc
        exit_code = 3
        typer.echo(f"ERROR: invariant violation: {exc}")
    except Exception as exc:  # noqa: BLE001
        error = exc
        exit_code = 1
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")

    if error is not None:
        _log_event(
            logging.ERROR,
            "error",
            error_type=type(error).__name__,
            failure_stage=failure_stage,
            exit_code=exit_code,
        )
        _safe_write_exit1_fallback(paths, type(error).__name__, str(error), failure_stage)
        raise typer.Exit(code=exit_code)

    if palette_model is not None:
        _emit_reports(results, palette_model, color=color, format_report=format_report_typed)

    try:
        write_cycle_outputs_atomic(paths, results)
    except Exception as write_exc:  # noqa: BLE001
        typer.echo(f"ERROR: write output failed: {write_exc}")
        raise typer.Exit(code=1) from write_exc

    lost = sorted({annotation_id for result in results for annotation_id in result.lost})
    _log_event(logging.INFO, "done", cycles=len(results), lost=lost)
    if lost:
        typer.echo(f"WARNING(annotations): lost {', '.join(lost)}")
        if fail_on_loss:
            typer.echo("ERROR: annotations lost")
            raise typer.Exit(code=4)

    typer.echo("INFO: success")
    raise typer.Exit(code=0)


def _emit_reports(
    results: list[CycleResult],
    palette: Palette,
    *,
    color: bool,
    format_report: FormatReportMode,
) -> None:
    for cycle_number, result in enumerate(results, start=1):
        if format_report in {"human", "both"}:
            if len(results) > 1:
                typer.echo(render_cycle_header(cycle_number, len(results), result))
            typer.echo(render_change_details(result.records))
            print_colored_diff(result.records, palette, color=color)
            typer.echo(render_stats(result.stats))
            if len(result.source_index):
                typer.echo(render_annotation_summary(result))
        if format_report in {"json", "both"}:
            payload: dict[str, Any] = {
                "cycle": cycle_number,
                "stats": result.stats.model_dump(mode="json"),
                "annotations": result.annotation_payload(),
            }
            typer.echo(json.dumps(payload, ensure_ascii=False, sort_keys=True))


def _normalize_format_report(value: str) -> FormatReportMode | None:
    normalized = value.lower().strip()
    if normalized not in {"human", "json", "both"}:
        typer.echo("ERROR: --format-report must be one of: human, json, both.")
        return None
    return cast(FormatReportMode, normalized)


def _default_ids(count: int) -> list[str]:
    return [f"annotation-{number}" for number in range(1, count + 1)]


def _safe_write_exit1_fallback(
    paths: OutputPaths,
    error_type: str,
    error_message: str,
    stage: str,
) -> None:
    try:
        write_fallback_json_atomic(
            paths,
            error_type=error_type,
            error_message=error_message,
            stage=stage,
        )
    except Exception:  # noqa: BLE001
        pass


def _log_event(level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(
        level, json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    )


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
