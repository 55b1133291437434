import logging

from doorwatch.probe import find_standing_position, open_sides

from fakes import FakeWorld, wall_off


def test_all_sides_open_picks_candidate_nearest_observer() -> None:
    world = FakeWorld()

    standing = find_standing_position(world, 0, 0, 69, observer=(10, 69, -2))

    assert standing is not None
    assert standing.side == "east"
    assert standing.coords == (3, 69, -2)


def test_candidate_offsets_per_side() -> None:
    expected = {
        "north": (2, 69, -3),
        "south": (-2, 69, 3),
        "east": (3, 69, -2),
        "west": (-3, 69, -2),
    }
    for side, coords in expected.items():
        world = FakeWorld()
        wall_off(world, 0, 0, [other for other in expected if other != side])

        standing = find_standing_position(world, 0, 0, 69)

        assert standing is not None
        assert standing.side == side
        assert standing.coords == coords


def test_equal_distances_resolve_to_first_side_in_order() -> None:
    world = FakeWorld()

    # every candidate is 13 blocks squared away from the door centre
    standing = find_standing_position(world, 0, 0, 69, observer=(0, 69, 0))

    assert standing is not None
    assert standing.side == "north"


def test_single_open_side_ignores_observer() -> None:
    world = FakeWorld()
    wall_off(world, 40, 40, ["north", "south", "west"])

    standing = find_standing_position(world, 40, 40, 69, observer=(-500, 69, -500))

    assert standing is not None
    assert standing.side == "east"
    assert standing.coords == (43, 69, 38)


def test_no_open_side_returns_none() -> None:
    world = FakeWorld()
    wall_off(world, 0, 0, ["north", "south", "east", "west"])

    assert find_standing_position(world, 0, 0, 69, observer=(0, 69, 0)) is None


def test_head_height_block_closes_side() -> None:
    world = FakeWorld(solid=[(0, 70, -2)])

    assert open_sides(world, 0, 0, 69) == ["south", "east", "west"]


def test_lookup_failure_counts_as_solid(caplog) -> None:
    world = FakeWorld(broken=[(0, 69, -2), (0, 69, 2), (2, 69, 0)])

    with caplog.at_level(logging.WARNING, logger="doorwatch.probe"):
        standing = find_standing_position(world, 0, 0, 69, observer=(100, 69, 100))

    assert standing is not None
    assert standing.side == "west"
    assert "Error checking block at 0,69,-2" in caplog.text


def test_missing_observer_uses_player_position() -> None:
    world = FakeWorld(player=(-10.7, 69.0, 3.2))

    standing = find_standing_position(world, 0, 0, 69)

    assert standing is not None
    assert standing.side == "south"


def test_door_centre_is_floored() -> None:
    world = FakeWorld()
    wall_off(world, 0, -1, ["north", "east", "west"])

    standing = find_standing_position(world, 0.7, -0.2, 69)

    assert standing is not None
    assert standing.coords == (-2, 69, 2)


class BlindWorld(FakeWorld):
    def player_position(self):
        raise RuntimeError("player entity missing")


def test_unreadable_player_position_uses_first_open_side(caplog) -> None:
    world = BlindWorld()
    wall_off(world, 0, 0, ["north"])

    with caplog.at_level(logging.WARNING, logger="doorwatch.probe"):
        standing = find_standing_position(world, 0, 0, 69)

    assert standing is not None
    assert standing.side == "south"
    assert "Could not read observer position" in caplog.text
