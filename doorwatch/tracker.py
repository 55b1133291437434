"""Per-tick door tracking session."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Protocol, Tuple

from .config import Settings
from .models import Door, DungeonState, RoomGraph, WorldProbe
from .publisher import Message, TrackerState, advance, toggle_auto_goto, world_unloaded
from .render import BoxOutline, door_outlines
from .traversal import search_doors

__all__ = ["DoorTracker", "MessageSink"]

log = logging.getLogger(__name__)


class MessageSink(Protocol):
    def send(self, message: Mapping[str, object]) -> bool:
        ...


class DoorTracker:
    """Owns the tracking state for one dungeon session.

    :meth:`tick` is meant to be called once per game tick and never raises.
    """

    def __init__(
        self,
        dungeon: DungeonState,
        graph: RoomGraph,
        world: WorldProbe,
        sink: MessageSink,
        settings: Optional[Settings] = None,
    ) -> None:
        self._dungeon = dungeon
        self._graph = graph
        self._world = world
        self._sink = sink
        self._settings = settings or Settings()
        self._state = TrackerState()

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def doors(self) -> Tuple[Door, ...]:
        return self._state.doors

    @property
    def auto_goto_enabled(self) -> bool:
        return self._state.auto_goto

    @property
    def settings(self) -> Settings:
        return self._settings

    def _collect(self) -> Optional[List[Door]]:
        if not self._settings.enabled:
            return None
        if not self._dungeon.in_dungeon or self._dungeon.boss_entry:
            return None
        room = self._dungeon.get_current_room()
        if room is None:
            return None
        return search_doors(room, self._graph, self._world, floor_y=self._settings.floor_y)

    def tick(self) -> List[Message]:
        try:
            doors = self._collect()
        except Exception:
            log.exception("Door search failed; keeping previous door state")
            return []
        self._state, emissions = advance(self._state, doors)
        for message in emissions:
            self._emit(message)
        return emissions

    def _emit(self, message: Message) -> None:
        try:
            self._sink.send(message)
        except Exception:
            log.exception("Failed to send %s message", message.get("type"))

    def toggle_auto_goto(self) -> bool:
        self._state = toggle_auto_goto(self._state)
        log.info("Auto GOTO to first door %s", "enabled" if self._state.auto_goto else "disabled")
        return self._state.auto_goto

    def on_world_unload(self) -> None:
        self._state = world_unloaded(self._state)

    def reset(self) -> None:
        """Forget tracked doors and sent snapshots, keeping the auto GOTO toggle."""

        self._state = TrackerState(auto_goto=self._state.auto_goto)

    def outlines(self) -> List[BoxOutline]:
        """Boxes the host should draw around the tracked doors this frame."""

        if not self._settings.enabled or not self._state.doors:
            return []
        return door_outlines(self._state.doors, self._settings.esp_color, floor_y=self._settings.floor_y)
