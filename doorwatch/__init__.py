"""Wither and blood door tracking with a WebSocket relay."""

from .config import ConfigError, Settings, load_settings
from .models import (
    DOOR_TYPES_OF_INTEREST,
    FLOOR_Y,
    MAX_DOORS_PER_PATH,
    Door,
    DoorType,
    Room,
    StandingPosition,
)
from .probe import find_standing_position
from .publisher import TrackerState, advance
from .snapshot import SnapshotError, SnapshotHost
from .tracker import DoorTracker
from .transport import SocketRelay
from .traversal import search_doors

__all__ = [
    "DOOR_TYPES_OF_INTEREST",
    "FLOOR_Y",
    "MAX_DOORS_PER_PATH",
    "ConfigError",
    "Door",
    "DoorTracker",
    "DoorType",
    "Room",
    "Settings",
    "SnapshotError",
    "SnapshotHost",
    "SocketRelay",
    "StandingPosition",
    "TrackerState",
    "advance",
    "find_standing_position",
    "load_settings",
    "search_doors",
]
