"""Change detection for door locations and auto-navigation targets.

All decisions live in :func:`advance`, which takes the previous
:class:`TrackerState` and this tick's doors and returns the next state along
with the messages that should be sent. Nothing in this module touches the
transport.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import Door

__all__ = [
    "TrackerState",
    "advance",
    "door_locations_message",
    "goto_message",
    "toggle_auto_goto",
    "world_unloaded",
]

GOTO_SENDER = "ChatTriggers"

Message = Dict[str, object]
Coords = Tuple[int, int, int]


@dataclass(frozen=True)
class TrackerState:
    """Everything the tracker remembers between ticks."""

    doors: Tuple[Door, ...] = ()
    last_sent_doors: Optional[str] = None
    auto_goto: bool = False
    last_goto: Optional[Coords] = None


def door_locations_message(doors: Sequence[Door]) -> Message:
    return {
        "type": "doorLocations",
        "doors": [door.to_payload() for door in doors],
    }


def goto_message(coords: Coords) -> Message:
    x, y, z = coords
    return {
        "type": "action",
        "action": "GOTO",
        "sender": GOTO_SENDER,
        "data": {"x": x, "y": y, "z": z},
    }


def _serialise(message: Mapping[str, object]) -> str:
    return json.dumps(message, separators=(",", ":"))


def _has_doors(serialised: Optional[str]) -> bool:
    if serialised is None:
        return False
    return bool(json.loads(serialised).get("doors"))


def advance(
    state: TrackerState, doors: Optional[Sequence[Door]]
) -> Tuple[TrackerState, List[Message]]:
    """Compute the next state and outgoing messages for one tick.

    ``doors`` is ``None`` when tracking is inactive for this tick.
    """

    emissions: List[Message] = []

    if doors is None:
        if _has_doors(state.last_sent_doors):
            emissions.append(door_locations_message(()))
        return replace(state, doors=(), last_sent_doors=None, last_goto=None), emissions

    tracked = tuple(door for door in doors if door.standing is not None)
    last_sent = state.last_sent_doors

    if tracked:
        message = door_locations_message(tracked)
        serialised = _serialise(message)
        if serialised != last_sent:
            emissions.append(message)
            last_sent = serialised
    elif last_sent is not None:
        message = door_locations_message(())
        serialised = _serialise(message)
        if serialised != last_sent:
            emissions.append(message)
            last_sent = serialised

    last_goto = state.last_goto
    if state.auto_goto:
        if tracked:
            coords = tracked[0].standing.coords
            if coords != last_goto:
                emissions.append(goto_message(coords))
                last_goto = coords
        else:
            last_goto = None

    new_state = replace(state, doors=tracked, last_sent_doors=last_sent, last_goto=last_goto)
    return new_state, emissions


def toggle_auto_goto(state: TrackerState) -> TrackerState:
    """Flip auto-navigation and forget the last target so it is re-sent."""

    return replace(state, auto_goto=not state.auto_goto, last_goto=None)


def world_unloaded(state: TrackerState) -> TrackerState:
    return TrackerState()
