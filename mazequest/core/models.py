"""Data models (Pydantic) for render snapshots."""

from typing import Literal

from pydantic import BaseModel, Field

from .rules import COLOR_SCHEMES


class Position(BaseModel):
    """Grid coordinate, x = column, y = row."""

    x: int = Field(..., ge=0, description="Column")
    y: int = Field(..., ge=0, description="Row")

    @classmethod
    def of(cls, pos: tuple[int, int]) -> "Position":
        return cls(x=pos[0], y=pos[1])


def positions(cells) -> list[Position]:
    return [Position.of(cell) for cell in cells]


class Palette(BaseModel):
    """Colour scheme for the current level."""

    name: str = Field(..., description="Scheme name")
    wall: tuple[int, int, int] = Field(..., description="Wall RGB")
    path: tuple[int, int, int] = Field(..., description="Path RGB")

    @classmethod
    def named(cls, name: str) -> "Palette":
        wall, path = COLOR_SCHEMES[name]
        return cls(name=name, wall=wall, path=path)


class SessionSnapshot(BaseModel):
    """HUD-level session state."""

    level: int = Field(..., ge=1, description="Current level (uncapped)")
    score: int = Field(..., ge=0, description="Total score")
    timer: int = Field(..., ge=0, description="Seconds since the level started")
    status: Literal["start", "playing", "level-complete", "game-complete", "game-over"]
    infinite: bool = Field(default=False, description="Playing past the final level")
    player: Position
    player_hit: bool = Field(default=False, description="Collision recovery in progress")
    can_teleport: bool = Field(default=True, description="Teleport debounce flag")
    muted: bool = Field(default=True, description="Audio muted")
    show_minimap: bool = Field(default=False, description="Minimap visible")


class MazeSnapshot(BaseModel):
    """Grid and entities for the renderer."""

    size: int = Field(..., ge=7, description="Side length of the square grid")
    rows: list[str] = Field(default_factory=list, description="One string per row: W, ' ', S, E")
    start: Position
    exit: Position
    enemies: list[Position] = Field(default_factory=list)
    stalkers: list[Position] = Field(default_factory=list)
    teleporters: list[Position] = Field(default_factory=list, description="Pairs by index (0-1, 2-3, ...)")
    regenerate_icons: list[Position] = Field(default_factory=list)
    palette: Palette


class GameSnapshot(BaseModel):
    """Everything a renderer needs after a transition."""

    revision: int = Field(default=0, ge=0, description="Increments on every published change")
    session: SessionSnapshot
    maze: MazeSnapshot
