"""
Scenario Decoding.

Turns a character map into a Grid and back. The combat engine never
imports this module; it only ever sees decoded grids.
"""

from pathlib import Path
from typing import Union

import numpy as np

from skirmish.state import Grid, ScenarioError, OPEN, WALL, ELF, GOBLIN, HIT_POINTS


CHAR_TO_KIND = {
    ".": OPEN,
    "#": WALL,
    "E": ELF,
    "G": GOBLIN,
}
KIND_TO_CHAR = {kind: ch for ch, kind in CHAR_TO_KIND.items()}


def parse_grid(text: str, hit_points: int = HIT_POINTS) -> Grid:
    """
    Parse a character map into a Grid.

    Every unit starts with the same hit points. Blank lines and trailing
    whitespace are ignored.
    """
    rows = [line.rstrip() for line in text.splitlines()]
    rows = [row for row in rows if row]
    if not rows:
        raise ScenarioError("Empty scenario")

    width = len(rows[0])
    for r, row in enumerate(rows):
        if len(row) != width:
            raise ScenarioError(
                f"Row {r} has width {len(row)}, expected {width}"
            )

    kinds = np.full((len(rows), width), OPEN, dtype=np.int8)
    for r, row in enumerate(rows):
        for c, ch in enumerate(row):
            if ch not in CHAR_TO_KIND:
                raise ScenarioError(f"Unknown cell {ch!r} at ({r}, {c})")
            kinds[r, c] = CHAR_TO_KIND[ch]

    hp = np.where(np.isin(kinds, (ELF, GOBLIN)), hit_points, 0)
    return Grid(kinds, hp)


def grid_to_text(grid: Grid) -> str:
    """Render the map layer of a grid (hit points are not included)."""
    return "\n".join(
        "".join(KIND_TO_CHAR[int(k)] for k in row)
        for row in grid.kinds
    )


def load_grid(path: Union[str, Path], hit_points: int = HIT_POINTS) -> Grid:
    """Read and parse a scenario file."""
    with open(path, "r") as f:
        return parse_grid(f.read(), hit_points=hit_points)
