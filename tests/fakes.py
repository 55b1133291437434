"""In-memory stand-ins for the dungeon, room graph, world and socket."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from doorwatch.models import Door, Room

Block = Tuple[int, int, int]


class FakeWorld:
    def __init__(
        self,
        solid: Iterable[Block] = (),
        *,
        player: Tuple[float, float, float] = (0.0, 69.0, 0.0),
        broken: Iterable[Block] = (),
    ) -> None:
        self.solid: Set[Block] = set(solid)
        self.broken: Set[Block] = set(broken)
        self.player = player

    def is_block_solid(self, x: int, y: int, z: int) -> bool:
        if (x, y, z) in self.broken:
            raise RuntimeError("chunk not loaded")
        return (x, y, z) in self.solid

    def player_position(self) -> Tuple[float, float, float]:
        return self.player


def wall_off(world: FakeWorld, door_x: int, door_z: int, sides: Iterable[str], floor_y: int = 69) -> None:
    """Make the floor cell on each of ``sides`` of the door solid."""

    offsets = {"north": (0, -2), "south": (0, 2), "east": (2, 0), "west": (-2, 0)}
    for side in sides:
        dx, dz = offsets[side]
        world.solid.add((door_x + dx, floor_y, door_z + dz))


class FakeGraph:
    def __init__(self) -> None:
        self.doors: Dict[FrozenSet[str], Door] = {}

    def connect(self, parent: Room, child: Room, door: Optional[Door]) -> Room:
        parent.children.append(child)
        if door is not None:
            self.doors[frozenset((parent.name, child.name))] = door
        return child

    def get_door_between_rooms(self, room: Room, other: Room) -> Optional[Door]:
        return self.doors.get(frozenset((room.name, other.name)))


class FakeDungeon:
    def __init__(self, room: Optional[Room], *, in_dungeon: bool = True, boss_entry: bool = False) -> None:
        self.room = room
        self.in_dungeon = in_dungeon
        self.boss_entry = boss_entry

    def get_current_room(self) -> Optional[Room]:
        return self.room


class RecordingSink:
    def __init__(self) -> None:
        self.messages: List[Mapping[str, object]] = []

    def send(self, message: Mapping[str, object]) -> bool:
        self.messages.append(message)
        return True

    def of_type(self, kind: str) -> List[Mapping[str, object]]:
        return [message for message in self.messages if message.get("type") == kind]
