import logging

import pytest

from doorwatch.models import Door, DoorType, Room
from doorwatch.traversal import search_doors

from fakes import FakeGraph, FakeWorld, wall_off


@pytest.fixture()
def graph() -> FakeGraph:
    return FakeGraph()


def wither(x: int, z: int, *, opened: bool = False) -> Door:
    return Door(x=x, z=z, type=DoorType.WITHER, opened=opened)


def test_wither_door_included_and_opened_blood_door_excluded(graph: FakeGraph) -> None:
    start = Room("Entrance")
    graph.connect(start, Room("Alpha"), wither(16, 0))
    graph.connect(start, Room("Beta"), Door(x=0, z=16, type=DoorType.BLOOD, opened=True))
    world = FakeWorld()
    wall_off(world, 16, 0, ["north", "south"])

    # equidistant from the east (19, -2) and west (13, -2) candidates
    doors = search_doors(start, graph, world, observer=(16, 69, -2))

    assert len(doors) == 1
    assert doors[0].x == 16 and doors[0].z == 0
    assert doors[0].standing is not None
    assert doors[0].standing.side == "east"
    assert doors[0].standing.coords == (19, 69, -2)


def test_source_doors_are_not_modified(graph: FakeGraph) -> None:
    start = Room("Entrance")
    original = wither(0, 0)
    graph.connect(start, Room("Alpha"), original)

    doors = search_doors(start, graph, FakeWorld())

    assert doors[0].standing is not None
    assert original.standing is None


def test_blocked_door_falls_back_to_centre(graph: FakeGraph, caplog) -> None:
    start = Room("Entrance")
    graph.connect(start, Room("Fairy"), Door(x=-32, z=48, type=DoorType.BLOOD))
    world = FakeWorld()
    wall_off(world, -32, 48, ["north", "south", "east", "west"])

    with caplog.at_level(logging.WARNING, logger="doorwatch.traversal"):
        doors = search_doors(start, graph, world)

    assert len(doors) == 1
    assert doors[0].standing is not None
    assert doors[0].standing.coords == (-32, 69, 48)
    assert "between Entrance and Fairy" in caplog.text


def test_uninteresting_and_missing_doors_are_skipped(graph: FakeGraph) -> None:
    start = Room("Entrance")
    normal = graph.connect(start, Room("Normal"), Door(x=0, z=16, type=DoorType.NORMAL))
    graph.connect(start, Room("Doorless"), None)
    graph.connect(normal, Room("Behind"), wither(0, 32))

    assert search_doors(start, graph, FakeWorld()) == []


def test_found_count_bounds_each_path(graph: FakeGraph) -> None:
    start = Room("Entrance")
    first = graph.connect(start, Room("One"), wither(0, 16))
    second = graph.connect(first, Room("Two"), wither(0, 32))
    graph.connect(second, Room("Three"), wither(0, 48))

    doors = search_doors(start, graph, FakeWorld())

    assert [(door.x, door.z) for door in doors] == [(0, 16), (0, 32)]


def test_siblings_keep_their_own_count(graph: FakeGraph) -> None:
    start = Room("Entrance")
    left = graph.connect(start, Room("Left"), wither(-16, 0))
    graph.connect(left, Room("LeftA"), wither(-32, 0))
    graph.connect(left, Room("LeftB"), wither(-16, 16))
    right = graph.connect(start, Room("Right"), wither(16, 0))
    deeper = graph.connect(right, Room("RightA"), wither(32, 0))
    graph.connect(deeper, Room("RightAA"), wither(48, 0))

    doors = search_doors(start, graph, FakeWorld())

    assert [(door.x, door.z) for door in doors] == [
        (-16, 0),
        (-32, 0),
        (-16, 16),
        (16, 0),
        (32, 0),
    ]


def test_room_reachable_twice_is_collected_twice(graph: FakeGraph) -> None:
    start = Room("Entrance")
    child = graph.connect(start, Room("Loop"), wither(0, 16))
    start.children.append(child)

    doors = search_doors(start, graph, FakeWorld())

    assert len(doors) == 2
    assert doors[0] == doors[1]


def test_malformed_rooms_contribute_nothing(graph: FakeGraph) -> None:
    start = Room("Entrance")
    start.children = None  # type: ignore[assignment]
    assert search_doors(start, graph, FakeWorld()) == []

    start = Room("Entrance")
    start.children = [None, Room(""), object()]  # type: ignore[list-item]
    assert search_doors(start, graph, FakeWorld()) == []

    assert search_doors(object(), graph, FakeWorld()) == []  # type: ignore[arg-type]
