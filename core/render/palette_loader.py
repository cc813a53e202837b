"""Palette loading utilities for colorized diff rendering."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.render.models import Palette
from core.utils.errors import ConfigurationError

_COLOR_TOKEN_MAP: dict[str, list[int]] = {
    "DEFAULT_EQUAL_FG": [220, 220, 220],
    "DEFAULT_EQUAL_BG": [0, 0, 0],
    "DEFAULT_DELETE_FG": [255, 90, 90],
    "DEFAULT_DELETE_BG": [100, 20, 20],
    "DEFAULT_INSERT_FG": [100, 255, 100],
    "DEFAULT_INSERT_BG": [20, 70, 20],
}


def load_palette(path: Path | None = None) -> Palette:
    """Load and validate a diff palette from YAML."""

    palette_path = path or Path(__file__).with_name("palette.yaml")

    try:
        raw = yaml.safe_load(palette_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Palette file not found: {palette_path}", field="palette", value=str(palette_path)
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Invalid YAML in palette file: {palette_path}",
            field="palette",
            value=str(palette_path),
        ) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Palette file must contain a mapping: {palette_path}",
            field="palette",
            value=str(palette_path),
        )

    normalized = _normalize_palette_colors(raw, palette_path)

    try:
        return Palette.model_validate(normalized)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid palette schema: {palette_path}", field="palette", value=str(palette_path)
        ) from exc


def _normalize_palette_colors(
    raw: dict[object, object], palette_path: Path
) -> dict[object, object]:
    normalized: dict[object, object] = {}
    for tag, style in raw.items():
        if not isinstance(style, dict):
            normalized[tag] = style
            continue
        normalized_style = dict(style)
        for key in ("fg", "bg"):
            value = normalized_style.get(key)
            if isinstance(value, str):
                normalized_style[key] = _color_from_token(value, palette_path)
            elif isinstance(value, list) and len(value) == 3:
                normalized_style[key] = {"r": value[0], "g": value[1], "b": value[2]}
        normalized[tag] = normalized_style
    return normalized


def _color_from_token(token: str, palette_path: Path) -> dict[str, int]:
    if token not in _COLOR_TOKEN_MAP:
        raise ConfigurationError(
            f"Invalid palette color token '{token}' in {palette_path}. "
            "Use an [r, g, b] list or a supported default token.",
            field="palette",
            value=token,
        )
    r, g, b = _COLOR_TOKEN_MAP[token]
    return {"r": r, "g": g, "b": b}
