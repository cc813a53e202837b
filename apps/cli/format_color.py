"""Colorized diff rendering with rich."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.style import Style
from rich.text import Text

from core.changes.models import ChangeRecord
from core.render.models import Palette


def build_colored_diff(records: Sequence[ChangeRecord], palette: Palette) -> Text:
    """Build a rich Text with one styled segment per record."""

    text = Text()
    for record in records:
        tag_style = palette.style_for(record.tag)
        text.append(
            record.value,
            style=Style(color=tag_style.fg.to_hex(), bgcolor=tag_style.bg.to_hex()),
        )
    return text


def print_colored_diff(
    records: Sequence[ChangeRecord],
    palette: Palette,
    *,
    color: bool,
    console: Console | None = None,
) -> None:
    target = console if console is not None else Console(highlight=False, no_color=not color)
    target.print("Colored Diff Representation:")
    target.print(build_colored_diff(records, palette), soft_wrap=True)
