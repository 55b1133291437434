"""Value types and collaborator protocols for door tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Protocol, Tuple

__all__ = [
    "DOOR_TYPES_OF_INTEREST",
    "FLOOR_Y",
    "MAX_DOORS_PER_PATH",
    "Door",
    "DoorType",
    "DungeonState",
    "Room",
    "RoomGraph",
    "StandingPosition",
    "WorldProbe",
    "door_type_label",
]

FLOOR_Y = 69
MAX_DOORS_PER_PATH = 2


class DoorType(IntEnum):
    NORMAL = 0
    WITHER = 1
    BLOOD = 2
    ENTRANCE = 3


DOOR_TYPES_OF_INTEREST = frozenset({DoorType.WITHER, DoorType.BLOOD})


def door_type_label(value: object) -> object:
    """Return the readable name of ``value`` or the raw value if unknown."""

    try:
        return DoorType(value).name
    except ValueError:
        return value


@dataclass(frozen=True)
class StandingPosition:
    """A cell next to a door from which it can be approached."""

    x: int
    y: int
    z: int
    side: str

    @property
    def coords(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Door:
    """Connection between two rooms as reported by the room graph.

    ``standing`` is only populated on the copies produced by the door search.
    """

    x: int
    z: int
    type: int
    opened: bool = False
    standing: Optional[StandingPosition] = None

    @property
    def type_label(self) -> object:
        return door_type_label(self.type)

    def to_payload(self) -> dict:
        data = {
            "x": self.x,
            "z": self.z,
            "type": self.type_label,
            "opened": self.opened,
        }
        if self.standing is not None:
            data["footX"] = self.standing.x
            data["footY"] = self.standing.y
            data["footZ"] = self.standing.z
        return data


@dataclass
class Room:
    """Node of the dungeon room graph."""

    name: str
    children: List["Room"] = field(default_factory=list)


class RoomGraph(Protocol):
    def get_door_between_rooms(self, room: Room, other: Room) -> Optional[Door]:
        ...


class DungeonState(Protocol):
    @property
    def in_dungeon(self) -> bool:
        ...

    @property
    def boss_entry(self) -> bool:
        ...

    def get_current_room(self) -> Optional[Room]:
        ...


class WorldProbe(Protocol):
    def is_block_solid(self, x: int, y: int, z: int) -> bool:
        ...

    def player_position(self) -> Tuple[float, float, float]:
        ...
