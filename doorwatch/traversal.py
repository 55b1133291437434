"""Depth-first search for unopened wither and blood doors."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from .models import (
    DOOR_TYPES_OF_INTEREST,
    FLOOR_Y,
    MAX_DOORS_PER_PATH,
    Door,
    Room,
    RoomGraph,
    StandingPosition,
    WorldProbe,
)
from .probe import find_standing_position

__all__ = ["search_doors"]

log = logging.getLogger(__name__)


def search_doors(
    room: Room,
    graph: RoomGraph,
    world: WorldProbe,
    *,
    floor_y: int = FLOOR_Y,
    observer: Optional[Tuple[float, float, float]] = None,
    types: Iterable[int] = DOOR_TYPES_OF_INTEREST,
    limit: int = MAX_DOORS_PER_PATH,
) -> List[Door]:
    """Collect doors of interest reachable from ``room``.

    At most ``limit`` doors are collected along any single path. Siblings are
    searched independently, so a room graph that is not a tree can yield the
    same door more than once.
    """

    found: List[Door] = []
    _walk(room, 0, found, graph, world, floor_y, observer, frozenset(types), limit)
    return found


def _walk(
    room: Room,
    doors_found: int,
    out: List[Door],
    graph: RoomGraph,
    world: WorldProbe,
    floor_y: int,
    observer: Optional[Tuple[float, float, float]],
    types: frozenset,
    limit: int,
) -> None:
    if doors_found >= limit:
        return
    children = getattr(room, "children", None)
    if not isinstance(children, list):
        return

    for child in children:
        if child is None or not getattr(child, "name", None):
            continue
        door = graph.get_door_between_rooms(room, child)
        if door is None or door.type not in types or door.opened:
            continue

        standing = find_standing_position(world, door.x, door.z, floor_y, observer)
        if standing is None:
            log.warning(
                "No open side found for door between %s and %s at (%s, %s); using door centre",
                room.name,
                child.name,
                door.x,
                door.z,
            )
            standing = StandingPosition(door.x, floor_y, door.z, "centre")

        out.append(replace(door, standing=standing))
        _walk(child, doors_found + 1, out, graph, world, floor_y, observer, types, limit)
