from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from apps.cli.main import app

runner = CliRunner()


def _write_texts(root: Path, old: str, *revisions: str) -> tuple[Path, list[Path]]:
    old_path = root / "old.txt"
    old_path.write_text(old, encoding="utf-8")
    new_paths: list[Path] = []
    for number, revision in enumerate(revisions, start=1):
        path = root / f"new{number}.txt"
        path.write_text(revision, encoding="utf-8")
        new_paths.append(path)
    return old_path, new_paths


def _track_args(old: Path, news: list[Path], out_dir: Path, *extra: str) -> list[str]:
    args = ["track", "--old", str(old)]
    for path in news:
        args.extend(["--new", str(path)])
    args.extend(["--out-dir", str(out_dir), "--no-color"])
    args.extend(extra)
    return args


def test_cli_track_success_writes_three_outputs(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app, _track_args(old, news, out_dir, "--pattern", "ab", "--id", "note")
    )

    assert result.exit_code == 0
    assert "Removed at index 1: 'b' (Deletion)" in result.stdout
    assert "Added at index 2: 'x' (Insertion)" in result.stdout
    assert "Total Changes: 4" in result.stdout
    assert "note: 0,1 -> 0 partial" in result.stdout
    assert "abxc" in result.stdout
    assert "INFO: success" in result.stdout

    annotations = json.loads((out_dir / "out.annotations.json").read_text(encoding="utf-8"))
    assert annotations["cycles"][0]["source"] == {"note": [0, 1]}
    assert annotations["cycles"][0]["remapped"] == {"note": [0]}
    stats = json.loads((out_dir / "out.stats.json").read_text(encoding="utf-8"))
    assert stats["cycles"][0]["deletions"] == 1
    changes = json.loads((out_dir / "out.changes.json").read_text(encoding="utf-8"))
    assert [record["tag"] for record in changes["records"]] == [
        "equal",
        "delete",
        "insert",
        "equal",
    ]


def test_cli_track_chains_revisions(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "hello world", "hello, world", "say hello, world")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _track_args(old, news, out_dir, "--pattern", "world"))

    assert result.exit_code == 0
    assert "cycle=1/2" in result.stdout
    assert "cycle=2/2" in result.stdout
    annotations = json.loads((out_dir / "out.annotations.json").read_text(encoding="utf-8"))
    assert annotations["cycles"][1]["remapped"] == {"annotation-1": [11, 12, 13, 14, 15]}


def test_cli_track_empty_pattern_returns_2(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _track_args(old, news, out_dir, "--pattern", ""))

    assert result.exit_code == 2
    payload = json.loads((out_dir / "out.annotations.json").read_text(encoding="utf-8"))
    assert payload["error"]["error_type"] == "ConfigurationError"
    assert payload["error"]["stage"] == "build_index"


def test_cli_track_lost_annotation_warns_but_succeeds(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "xyz")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _track_args(old, news, out_dir, "--pattern", "b"))

    assert result.exit_code == 0
    assert "annotation-1: 1 -> lost" in result.stdout
    assert "WARNING(annotations): lost annotation-1" in result.stdout


def test_cli_track_fail_on_loss_returns_4(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "xyz")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app, _track_args(old, news, out_dir, "--pattern", "b", "--fail-on-loss")
    )

    assert result.exit_code == 4
    assert (out_dir / "out.annotations.json").exists()


def test_cli_track_id_count_mismatch_returns_1(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _track_args(old, news, out_dir, "--pattern", "a", "--pattern", "c", "--id", "only"),
    )

    assert result.exit_code == 1
    assert "--id must be given once per --pattern" in result.stdout


def test_cli_track_conflicting_overwrite_flags_return_1(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _track_args(old, news, out_dir, "--pattern", "a", "--force", "--no-overwrite"),
    )

    assert result.exit_code == 1
    assert "cannot be used together" in result.stdout


def test_cli_track_no_overwrite_refuses_existing_outputs(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"
    first = runner.invoke(app, _track_args(old, news, out_dir, "--pattern", "a"))
    assert first.exit_code == 0

    result = runner.invoke(
        app, _track_args(old, news, out_dir, "--pattern", "a", "--no-overwrite")
    )

    assert result.exit_code == 1
    assert "--no-overwrite is enabled" in result.stdout


def test_cli_track_json_report_prints_payload_only(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _track_args(old, news, out_dir, "--pattern", "ab", "--format-report", "json"),
    )

    assert result.exit_code == 0
    assert "Detailed Change Analysis:" not in result.stdout
    json_lines = [line for line in result.stdout.splitlines() if line.startswith("{")]
    assert len(json_lines) == 1
    payload = json.loads(json_lines[0])
    assert payload["cycle"] == 1
    assert payload["stats"]["insertions"] == 1
    assert payload["annotations"]["remapped"] == {"annotation-1": [0]}


def test_cli_track_invalid_format_report_returns_1(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        _track_args(old, news, out_dir, "--pattern", "a", "--format-report", "xml"),
    )

    assert result.exit_code == 1
    assert "--format-report must be one of" in result.stdout


def test_cli_track_invalid_palette_returns_2(tmp_path: Path) -> None:
    old, news = _write_texts(tmp_path, "abc", "axc")
    out_dir = tmp_path / "out"
    palette = tmp_path / "palette.yaml"
    palette.write_text("- not a mapping\n", encoding="utf-8")

    result = runner.invoke(
        app,
        _track_args(old, news, out_dir, "--pattern", "a", "--palette", str(palette)),
    )

    assert result.exit_code == 2
    payload = json.loads((out_dir / "out.stats.json").read_text(encoding="utf-8"))
    assert payload["error"]["stage"] == "load_palette"
