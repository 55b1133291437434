"""Outline boxes and text tables for tracked doors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .models import FLOOR_Y, Door

__all__ = ["BoxOutline", "door_outlines", "format_door_table"]


@dataclass(frozen=True)
class BoxOutline:
    """A box outline for the host renderer, colour channels in ``0..1``."""

    x: float
    y: float
    z: float
    width: float
    height: float
    red: float
    green: float
    blue: float
    alpha: float = 1.0
    line_width: float = 2.0
    through_walls: bool = True


def door_outlines(
    doors: Sequence[Door], color: tuple[int, int, int], *, floor_y: int = FLOOR_Y
) -> List[BoxOutline]:
    red, green, blue = (channel / 255 for channel in color)
    return [
        BoxOutline(
            x=door.x + 0.5,
            y=floor_y,
            z=door.z + 0.5,
            width=3,
            height=4,
            red=red,
            green=green,
            blue=blue,
        )
        for door in doors
    ]


def format_door_table(doors: Sequence[Door]) -> str:
    if not doors:
        return "No doors tracked."
    header = f"{'#':>2}  {'TYPE':<8} {'DOOR':>12}  {'STAND':>16}  SIDE"
    lines = [header, "-" * len(header)]
    for index, door in enumerate(doors, start=1):
        location = f"{door.x},{door.z}"
        if door.standing is not None:
            stand = f"{door.standing.x},{door.standing.y},{door.standing.z}"
            side = door.standing.side
        else:
            stand, side = "-", "-"
        lines.append(f"{index:>2}  {str(door.type_label):<8} {location:>12}  {stand:>16}  {side}")
    return "\n".join(lines)
