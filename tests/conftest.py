"""Shared scenarios and helpers for the combat tests."""

from typing import Dict, List

import pytest

from skirmish.scenario import parse_grid


# The six classic battles: (map, outcome at 3/3, minimal lossless outcome)
EXAMPLE_BATTLES = {
    "example1": ("""
#######
#.G...#
#...EG#
#.#.#G#
#..G#E#
#.....#
#######
""", 27730, 4988),
    "example2": ("""
#######
#G..#E#
#E#E.E#
#G.##.#
#...#E#
#...E.#
#######
""", 36334, 29064),
    "example3": ("""
#######
#E..EG#
#.#G.E#
#E.##E#
#G..#.#
#..E#.#
#######
""", 39514, 31284),
    "example4": ("""
#######
#E.G#.#
#.#G..#
#G.#.G#
#G..#.#
#...E.#
#######
""", 27755, 3478),
    "example5": ("""
#######
#.E...#
#.#..G#
#.###.#
#E#G#G#
#...#G#
#######
""", 28944, 6474),
    "example6": ("""
#########
#G......#
#.E.#...#
#..##..G#
#...##..#
#...#...#
#.G...G.#
#.....G.#
#########
""", 18740, 1140),
}

# Elf two cells from a goblin on an open, unwalled 4x4 field
OPEN_FIELD_DUEL = """
....
E.G.
....
....
"""

# Goblin and elf already adjacent, goblin acts first
GOBLIN_FIRST_DUEL = """
....
.GE.
....
....
"""


class RecordingLogger:
    """Stand-in for CombatLogger that keeps round entries in memory."""

    def __init__(self):
        self.rounds: List[Dict] = []

    def log_round(self, round_idx, grid_dict, turns, complete=True):
        self.rounds.append({
            "round": round_idx,
            "grid": grid_dict,
            "turns": turns,
            "complete": complete,
        })


@pytest.fixture
def example1():
    return parse_grid(EXAMPLE_BATTLES["example1"][0])


@pytest.fixture
def open_field_duel():
    return parse_grid(OPEN_FIELD_DUEL)


@pytest.fixture
def goblin_first_duel():
    return parse_grid(GOBLIN_FIRST_DUEL)


@pytest.fixture
def recorder():
    return RecordingLogger()
