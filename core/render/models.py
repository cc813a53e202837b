"""Palette models for colorized diff rendering."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

Channel = Annotated[int, Field(ge=0, le=255)]


class RgbColor(BaseModel):
    """24-bit color."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    r: Channel
    g: Channel
    b: Channel

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class TagStyle(BaseModel):
    """Foreground/background pair for one change tag."""

    model_config = ConfigDict(extra="forbid")

    fg: RgbColor
    bg: RgbColor


class Palette(BaseModel):
    """Palette loaded from YAML."""

    model_config = ConfigDict(extra="forbid")

    equal: TagStyle
    delete: TagStyle
    insert: TagStyle

    def style_for(self, tag: str) -> TagStyle:
        if tag == "equal":
            return self.equal
        if tag == "delete":
            return self.delete
        if tag == "insert":
            return self.insert
        raise ValueError(f"Unsupported change tag: {tag}")
