"""Block clearance checks used to pick a standing cell next to a door."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .models import StandingPosition, WorldProbe

__all__ = ["SIDES", "find_standing_position", "open_sides"]

log = logging.getLogger(__name__)

# side -> (air check offset, standing cell offset) as (dx, dz) pairs
SIDES: Sequence[Tuple[str, Tuple[int, int], Tuple[int, int]]] = (
    ("north", (0, -2), (2, -3)),
    ("south", (0, 2), (-2, 3)),
    ("east", (2, 0), (3, -2)),
    ("west", (-2, 0), (-3, -2)),
)


def _is_air(world: WorldProbe, x: int, y: int, z: int) -> bool:
    try:
        return not world.is_block_solid(x, y, z)
    except Exception as exc:
        log.warning("Error checking block at %s,%s,%s: %s", x, y, z, exc)
        return False


def open_sides(world: WorldProbe, door_x: int, door_z: int, floor_y: int) -> List[str]:
    """Return the sides of the door whose floor and head cells are both clear."""

    sides: List[str] = []
    for side, (dx, dz), _ in SIDES:
        x, z = door_x + dx, door_z + dz
        if _is_air(world, x, floor_y, z) and _is_air(world, x, floor_y + 1, z):
            sides.append(side)
    return sides


def find_standing_position(
    world: WorldProbe,
    door_x: float,
    door_z: float,
    floor_y: int,
    observer: Optional[Tuple[float, float, float]] = None,
) -> Optional[StandingPosition]:
    """Choose where to stand to approach the door centred at ``door_x, door_z``.

    Returns ``None`` when no side of the door is open. With several open sides
    the candidate nearest to ``observer`` (the player's position when omitted)
    wins, the first one in north, south, east, west order on ties.
    """

    block_x = math.floor(door_x)
    block_z = math.floor(door_z)
    opened = set(open_sides(world, block_x, block_z, floor_y))

    candidates = [
        StandingPosition(block_x + sx, floor_y, block_z + sz, side)
        for side, _, (sx, sz) in SIDES
        if side in opened
    ]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    try:
        if observer is None:
            observer = world.player_position()
        obs_x = math.floor(observer[0])
        obs_z = math.floor(observer[2])
    except Exception as exc:
        log.warning(
            "Could not read observer position for door at %s,%s: %s; using %s side",
            block_x,
            block_z,
            exc,
            candidates[0].side,
        )
        return candidates[0]

    best: Optional[StandingPosition] = None
    best_distance = math.inf
    for candidate in candidates:
        dx = obs_x - candidate.x
        dz = obs_z - candidate.z
        distance = dx * dx + dz * dz
        if distance < best_distance:
            best_distance = distance
            best = candidate
    return best
