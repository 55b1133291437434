"""Dungeon snapshot files exported by the game client.

A snapshot describes one moment of a dungeon run: where the player is, the
room graph with its doors, and the solid blocks around those doors. The
:class:`SnapshotHost` re-reads the file whenever it changes on disk and
exposes it through the collaborator protocols used by the door tracker.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, MutableMapping, Optional, Sequence, Tuple

import yaml

from .models import Door, DoorType, Room

__all__ = ["DungeonSnapshot", "SnapshotError", "SnapshotHost", "load_snapshot"]

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")

Block = Tuple[int, int, int]


class SnapshotError(RuntimeError):
    """Raised when a snapshot file could not be loaded."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} (source: {path})"
        super().__init__(message)
        self.path = path


def _coerce_sequence(name: str, value: object) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    raise SnapshotError(f"{name} must be a sequence")


def _coerce_block(name: str, value: object) -> Block:
    items = _coerce_sequence(name, value)
    if len(items) != 3:
        raise SnapshotError(f"{name} must have exactly three coordinates")
    try:
        return (int(items[0]), int(items[1]), int(items[2]))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        raise SnapshotError(f"{name} coordinates must be numbers") from None


def _parse_door_type(value: object) -> int:
    if isinstance(value, str):
        try:
            return DoorType[value.strip().upper()]
        except KeyError:
            raise SnapshotError(f"Unknown door type '{value}'") from None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise SnapshotError("Door type must be a name or an integer")


def _door_key(first: str, second: str) -> FrozenSet[str]:
    return frozenset((first, second))


@dataclass
class DungeonSnapshot:
    """Parsed contents of one snapshot file."""

    world: Optional[str] = None
    in_dungeon: bool = False
    boss_entry: bool = False
    current_room: Optional[str] = None
    player: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rooms: Dict[str, Room] = field(default_factory=dict)
    doors: Dict[FrozenSet[str], Door] = field(default_factory=dict)
    solid: FrozenSet[Block] = frozenset()

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "DungeonSnapshot":
        world = data.get("world")
        current_room = data.get("current_room")

        raw_player = data.get("player", (0, 0, 0))
        player_items = _coerce_sequence("player", raw_player)
        if len(player_items) != 3:
            raise SnapshotError("player must have exactly three coordinates")
        try:
            player = tuple(float(value) for value in player_items)  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            raise SnapshotError("player coordinates must be numbers") from None

        rooms: Dict[str, Room] = {}
        links: Dict[str, Sequence[object]] = {}
        for entry in _coerce_sequence("rooms", data.get("rooms", [])):
            if not isinstance(entry, Mapping) or not entry.get("name"):
                raise SnapshotError("rooms entries must be mappings with a name")
            name = str(entry["name"])
            rooms[name] = Room(name=name)
            links[name] = _coerce_sequence("children", entry.get("children", []))
        for name, child_names in links.items():
            for child_name in child_names:
                child = rooms.get(str(child_name))
                if child is None:
                    log.debug("Room %s lists unknown child %s", name, child_name)
                    continue
                rooms[name].children.append(child)

        doors: Dict[FrozenSet[str], Door] = {}
        for entry in _coerce_sequence("doors", data.get("doors", [])):
            if not isinstance(entry, Mapping):
                raise SnapshotError("doors entries must be mappings")
            pair = _coerce_sequence("door rooms", entry.get("rooms"))
            if len(pair) != 2:
                raise SnapshotError("door rooms must name exactly two rooms")
            try:
                x = int(entry["x"])  # type: ignore[arg-type]
                z = int(entry["z"])  # type: ignore[arg-type]
            except (KeyError, TypeError, ValueError, OverflowError):
                raise SnapshotError("doors must have integer x and z") from None
            door = Door(
                x=x,
                z=z,
                type=_parse_door_type(entry.get("type", DoorType.NORMAL)),
                opened=bool(entry.get("opened", False)),
            )
            doors[_door_key(str(pair[0]), str(pair[1]))] = door

        solid = frozenset(
            _coerce_block("solid block", block)
            for block in _coerce_sequence("solid", data.get("solid", []))
        )

        return cls(
            world=str(world) if world is not None else None,
            in_dungeon=bool(data.get("in_dungeon", False)),
            boss_entry=bool(data.get("boss_entry", False)),
            current_room=str(current_room) if current_room is not None else None,
            player=player,  # type: ignore[arg-type]
            rooms=rooms,
            doors=doors,
            solid=solid,
        )


def load_snapshot(path: Path) -> DungeonSnapshot:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise SnapshotError(f"Unsupported file extension '{path.suffix}' for snapshot", path=path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError("Unable to read snapshot file", path=path) from exc
    try:
        if suffix == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except Exception as exc:
        raise SnapshotError("Failed to parse snapshot", path=path) from exc
    if not isinstance(raw, MutableMapping):
        raise SnapshotError("Snapshot must contain a mapping", path=path)
    try:
        return DungeonSnapshot.from_mapping(raw)
    except SnapshotError as exc:
        raise SnapshotError(str(exc), path=path) from exc


class SnapshotHost:
    """Serve the latest snapshot on disk as the dungeon, room graph and world."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._snapshot: Optional[DungeonSnapshot] = None
        self._serial: Optional[tuple[int, int]] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def snapshot(self) -> Optional[DungeonSnapshot]:
        return self._snapshot

    def _current_serial(self) -> Optional[tuple[int, int]]:
        try:
            stat = self._path.stat()
        except OSError:
            return None
        return (stat.st_mtime_ns, stat.st_size)

    def refresh(self) -> bool:
        """Reload the snapshot if the file changed.

        Returns ``True`` when the previously loaded world went away, either
        because the file was removed or because it now describes another
        world.
        """

        serial = self._current_serial()
        if serial == self._serial:
            return False
        self._serial = serial
        previous = self._snapshot

        if serial is None:
            self._snapshot = None
            return previous is not None

        try:
            snapshot = load_snapshot(self._path)
        except SnapshotError as exc:
            log.warning("Keeping previous snapshot: %s", exc)
            return False
        self._snapshot = snapshot
        return previous is not None and previous.world != snapshot.world

    # -- DungeonState ------------------------------------------------------
    @property
    def in_dungeon(self) -> bool:
        return self._snapshot is not None and self._snapshot.in_dungeon

    @property
    def boss_entry(self) -> bool:
        return self._snapshot is not None and self._snapshot.boss_entry

    def get_current_room(self) -> Optional[Room]:
        if self._snapshot is None or self._snapshot.current_room is None:
            return None
        return self._snapshot.rooms.get(self._snapshot.current_room)

    # -- RoomGraph ---------------------------------------------------------
    def get_door_between_rooms(self, room: Room, other: Room) -> Optional[Door]:
        if self._snapshot is None:
            return None
        return self._snapshot.doors.get(_door_key(room.name, other.name))

    # -- WorldProbe --------------------------------------------------------
    def is_block_solid(self, x: int, y: int, z: int) -> bool:
        if self._snapshot is None:
            raise LookupError("No snapshot loaded")
        return (x, y, z) in self._snapshot.solid

    def player_position(self) -> Tuple[float, float, float]:
        if self._snapshot is None:
            return (0.0, 0.0, 0.0)
        return self._snapshot.player
