"""Tests for reachability search and target selection."""

import pytest

from skirmish.mechanics import (
    neighbors, enemy_in_range, find_nearest_target_cell,
    choose_step, choose_attack_target,
)
from skirmish.scenario import parse_grid
from skirmish.state import ELF, GOBLIN


def test_neighbors_priority_order():
    grid = parse_grid("...\n.E.\n...")
    assert list(neighbors(grid, (1, 1))) == [(0, 1), (1, 0), (1, 2), (2, 1)]


def test_neighbors_skip_off_grid_cells():
    grid = parse_grid("E.\n..")
    assert list(neighbors(grid, (0, 0))) == [(0, 1), (1, 0)]


def test_enemy_in_range():
    grid = parse_grid("#####\n#EG.#\n#..E#\n#####")
    assert enemy_in_range(grid, (1, 1), GOBLIN)
    assert not enemy_in_range(grid, (2, 3), GOBLIN)
    assert enemy_in_range(grid, (1, 3), ELF)


def test_search_from_blocked_origin():
    grid = parse_grid("#####\n#E.G#\n#####")
    assert find_nearest_target_cell(grid, (1, 1), GOBLIN) is None
    assert find_nearest_target_cell(grid, (0, 2), GOBLIN) is None


def test_search_origin_already_adjacent():
    grid = parse_grid("#####\n#E.G#\n#####")
    assert find_nearest_target_cell(grid, (1, 2), GOBLIN) == ((1, 2), 0)


def test_search_unreachable_target():
    grid = parse_grid("######\n#E.#G#\n######")
    assert find_nearest_target_cell(grid, (1, 2), GOBLIN) is None


def test_search_returns_first_dequeued_cell():
    # (1, 3), (2, 4) and (3, 1) all sit at depth 2; the search walks the
    # left branch before the right one, so (3, 1) is found first even
    # though (1, 3) comes earlier in reading order.
    grid = parse_grid("""
#######
#.#.G.#
#.....#
#.....#
#G....#
#######
""")
    assert find_nearest_target_cell(grid, (2, 2), GOBLIN) == ((3, 1), 2)


def test_search_does_not_walk_through_units():
    # the elf at (1, 2) seals the corridor between origin and goblin
    grid = parse_grid("""
######
#.E.G#
######
""")
    assert find_nearest_target_cell(grid, (1, 1), GOBLIN) is None
    assert find_nearest_target_cell(grid, (1, 3), GOBLIN) == ((1, 3), 0)


def test_step_through_only_opening():
    grid = parse_grid("""
#####
#.#.#
##E##
#..G#
#####
""")
    assert choose_step(grid, (2, 2), GOBLIN) == (3, 2)


def test_step_prefers_reading_order_target_over_direction():
    # left and right both reach a target cell at depth 1; the one via the
    # right step, (1, 5), comes first in reading order
    grid = parse_grid("""
#########
#####.G##
###.E.###
##G.#####
#########
""")
    assert choose_step(grid, (2, 4), GOBLIN) == (2, 5)


def test_step_prefers_shorter_path():
    grid = parse_grid("""
#########
#G.....E#
#.......#
#########
""")
    # up is a wall, left leads straight along the row
    assert choose_step(grid, (1, 7), GOBLIN) == (1, 6)


def test_step_tie_keeps_direction_priority():
    # up and left both end at target (1, 2) with depth 2
    grid = parse_grid("""
#####
#G..#
#...#
#..E#
#####
""")
    assert choose_step(grid, (3, 3), GOBLIN) == (2, 3)


def test_no_step_when_nothing_reachable():
    grid = parse_grid("""
#######
#E.#..#
#..#.G#
#######
""")
    assert choose_step(grid, (1, 1), GOBLIN) is None


def test_attack_target_reading_order_tie():
    grid = parse_grid("""
#####
#.G.#
#GEG#
#.G.#
#####
""")
    assert choose_attack_target(grid, (2, 2), GOBLIN) == (1, 2)


def test_attack_target_fewest_hit_points():
    grid = parse_grid("""
#####
#.G.#
#GEG#
#.G.#
#####
""")
    grid.apply_damage((2, 3), 10)
    assert choose_attack_target(grid, (2, 2), GOBLIN) == (2, 3)

    grid.apply_damage((3, 2), 20)
    grid.apply_damage((2, 1), 20)
    assert choose_attack_target(grid, (2, 2), GOBLIN) == (2, 1)


def test_attack_target_none_out_of_reach():
    grid = parse_grid("#####\n#E.G#\n#####")
    assert choose_attack_target(grid, (1, 1), GOBLIN) is None


@pytest.mark.parametrize("faction,enemy", [(ELF, GOBLIN), (GOBLIN, ELF)])
def test_attack_ignores_allies(faction, enemy):
    grid = parse_grid("#####\n#EEG#\n#GG.#\n#####")
    pos = (1, 2) if faction == ELF else (2, 2)
    target = choose_attack_target(grid, pos, enemy)
    assert grid.cell_at(target).kind == enemy
