from __future__ import annotations

import pytest

from modules.dungeon.gen.params import AlgorithmType, DungeonTheme, GenerationParameters
from modules.dungeon.gen.random import chance, get_rng, rand_choice, rand_int


def test_defaults_match_documented_values() -> None:
    params = GenerationParameters()
    assert params.map_bounds == (100, 100)
    assert (params.min_rooms, params.max_rooms) == (5, 50)
    assert params.min_room_size == (3, 3)
    assert params.max_room_size == (15, 15)
    assert params.density == 0.5
    assert params.special_room_ratio == 0.15
    assert params.corridor_width == 1
    assert params.seed == 0
    assert params.algorithm is AlgorithmType.BSP
    assert params.allow_loops is True
    assert params.branching == 0.3
    assert params.remove_dead_ends is False
    assert params.critical_path_length == 5
    assert params.theme is DungeonTheme.STONE_DUNGEON
    assert params.mark_doors is True


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"map_bounds": (0, 10)}, "map_bounds"),
        ({"min_room_size": (0, 3)}, "min_room_size"),
        ({"min_room_size": (9, 3), "max_room_size": (8, 8)}, "min_room_size"),
        ({"min_rooms": 10, "max_rooms": 5}, "min_rooms"),
        ({"min_rooms": -1}, "min_rooms"),
        ({"density": 1.5}, "density"),
        ({"special_room_ratio": -0.1}, "special_room_ratio"),
        ({"branching": 2.0}, "branching"),
        ({"corridor_width": 0}, "corridor_width"),
        ({"critical_path_length": -3}, "critical_path_length"),
    ],
)
def test_invalid_values_raise_value_error(overrides: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        GenerationParameters(**overrides)


def test_string_enums_are_coerced() -> None:
    params = GenerationParameters(algorithm="cellular_automata", theme="ice_cavern")
    assert params.algorithm is AlgorithmType.CELLULAR_AUTOMATA
    assert params.theme is DungeonTheme.ICE_CAVERN


def test_from_mapping_parses_plain_values() -> None:
    params = GenerationParameters.from_mapping(
        {
            "map_bounds": "60x40",
            "min_room_size": [4, 4],
            "max_room_size": "8,8",
            "algorithm": "ROOM_FIRST_GROWTH",
            "allow_loops": "no",
            "remove_dead_ends": "true",
            "branching": "0.25",
            "seed": "42",
            "theme": None,
        }
    )
    assert params.map_bounds == (60, 40)
    assert params.min_room_size == (4, 4)
    assert params.max_room_size == (8, 8)
    assert params.algorithm is AlgorithmType.ROOM_FIRST_GROWTH
    assert params.allow_loops is False
    assert params.remove_dead_ends is True
    assert params.branching == 0.25
    assert params.seed == 42
    assert params.theme is DungeonTheme.STONE_DUNGEON


@pytest.mark.parametrize(
    "data",
    [
        {"unknown_key": 1},
        {"algorithm": "spiral"},
        {"theme": "candy_land"},
        {"map_bounds": "40"},
        {"allow_loops": "maybe"},
    ],
)
def test_from_mapping_rejects_bad_input(data: dict) -> None:
    with pytest.raises(ValueError):
        GenerationParameters.from_mapping(data)


def test_to_dict_round_trips_through_from_mapping() -> None:
    params = GenerationParameters(
        map_bounds=(48, 32),
        algorithm=AlgorithmType.HYBRID_APPROACH,
        theme=DungeonTheme.TECH_FACILITY,
        seed=99,
        mark_doors=False,
    )
    assert GenerationParameters.from_mapping(params.to_dict()) == params


def test_with_seed_returns_copy() -> None:
    params = GenerationParameters(seed=1)
    other = params.with_seed(2)
    assert other.seed == 2
    assert params.seed == 1
    assert other.map_bounds == params.map_bounds


def test_rng_helpers_are_deterministic() -> None:
    first = get_rng(1234)
    second = get_rng(1234)
    values = [rand_int(first, 0, 100) for _ in range(10)]
    assert values == [rand_int(second, 0, 100) for _ in range(10)]
    assert all(0 <= value <= 100 for value in values)
    assert rand_choice(first, ["only"]) == "only"
    assert chance(first, 1.0) is True
    assert chance(first, 0.0) is False


def test_rand_choice_rejects_empty_sequence() -> None:
    with pytest.raises(IndexError):
        rand_choice(get_rng(0), [])
