"""
Grid Combat State Container.

This module defines the terrain and unit-occupancy state used by the
combat engine. Cells live in two numpy arrays (cell codes and hit points);
a unit has no identity apart from the coordinate it occupies.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np


# Cell codes
OPEN = 0
WALL = 1
ELF = 2
GOBLIN = 3

FACTIONS = (ELF, GOBLIN)
FACTION_NAMES = {ELF: "elf", GOBLIN: "goblin"}
FACTION_BY_NAME = {name: code for code, name in FACTION_NAMES.items()}

# Every unit of both factions starts with the same hit points
HIT_POINTS = 200
BASELINE_ATTACK_POWER = 3

# Safety valve for the minimal attack power search
MAX_ATTACK_POWER = 300

Pos = Tuple[int, int]


class ScenarioError(ValueError):
    """Raised for a malformed combat scenario."""


def enemy_of(faction: int) -> int:
    """Return the opposing faction code."""
    if faction == ELF:
        return GOBLIN
    if faction == GOBLIN:
        return ELF
    raise ValueError(f"Not a faction: {faction}")


@dataclass(frozen=True)
class Cell:
    """Value copy of a single grid cell."""
    kind: int = OPEN
    hp: int = 0

    @property
    def is_unit(self) -> bool:
        return self.kind in FACTIONS

    @property
    def is_open(self) -> bool:
        return self.kind == OPEN

    def to_dict(self) -> Dict:
        return {"kind": int(self.kind), "hp": int(self.hp)}


@dataclass
class SimulationConfig:
    """Attack power per faction, constant for the duration of one run."""
    elf_attack_power: int = BASELINE_ATTACK_POWER
    goblin_attack_power: int = BASELINE_ATTACK_POWER

    def attack_power(self, faction: int) -> int:
        if faction == ELF:
            return self.elf_attack_power
        if faction == GOBLIN:
            return self.goblin_attack_power
        raise ValueError(f"Not a faction: {faction}")

    def with_power(self, faction: int, power: int) -> "SimulationConfig":
        """Return a copy with one faction's attack power replaced."""
        if faction == ELF:
            return SimulationConfig(power, self.goblin_attack_power)
        if faction == GOBLIN:
            return SimulationConfig(self.elf_attack_power, power)
        raise ValueError(f"Not a faction: {faction}")

    def to_dict(self) -> Dict:
        return {
            "elf_attack_power": self.elf_attack_power,
            "goblin_attack_power": self.goblin_attack_power,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "SimulationConfig":
        return cls(
            elf_attack_power=int(d.get("elf_attack_power", BASELINE_ATTACK_POWER)),
            goblin_attack_power=int(d.get("goblin_attack_power", BASELINE_ATTACK_POWER)),
        )


@dataclass
class CombatResult:
    """Final state of one combat, produced once a faction is eliminated."""
    completed_rounds: int
    remaining_hp: int
    winner: Optional[str] = None
    config: SimulationConfig = field(default_factory=SimulationConfig)
    elf_losses: int = 0
    goblin_losses: int = 0

    @property
    def outcome(self) -> int:
        return self.completed_rounds * self.remaining_hp

    def losses(self, faction: int) -> int:
        return self.elf_losses if faction == ELF else self.goblin_losses

    def to_dict(self) -> Dict:
        return {
            "completed_rounds": self.completed_rounds,
            "remaining_hp": self.remaining_hp,
            "outcome": self.outcome,
            "winner": self.winner,
            "config": self.config.to_dict(),
            "elf_losses": self.elf_losses,
            "goblin_losses": self.goblin_losses,
        }


class Grid:
    """
    Combat grid.

    All reads and writes go through coordinates; callers never hold a
    reference into the underlying arrays.
    """

    def __init__(self, kinds: np.ndarray, hp: np.ndarray = None):
        kinds = np.asarray(kinds, dtype=np.int8)
        if kinds.ndim != 2:
            raise ScenarioError("Grid must be two-dimensional")
        if hp is None:
            hp = np.where(np.isin(kinds, FACTIONS), HIT_POINTS, 0)
        hp = np.asarray(hp, dtype=np.int64)
        if hp.shape != kinds.shape:
            raise ScenarioError(
                f"Hit point layer {hp.shape} does not match grid {kinds.shape}"
            )
        self.kinds = kinds
        self.hp = hp

    @property
    def height(self) -> int:
        return self.kinds.shape[0]

    @property
    def width(self) -> int:
        return self.kinds.shape[1]

    def in_bounds(self, pos: Pos) -> bool:
        r, c = pos
        return 0 <= r < self.height and 0 <= c < self.width

    def cell_at(self, pos: Pos) -> Cell:
        r, c = pos
        return Cell(kind=int(self.kinds[r, c]), hp=int(self.hp[r, c]))

    def kind_at(self, pos: Pos) -> int:
        return int(self.kinds[pos])

    def is_open(self, pos: Pos) -> bool:
        return self.kinds[pos] == OPEN

    def live_units(self) -> List[Pos]:
        """Positions of all live units in reading order."""
        # argwhere walks the array in row-major order
        rows_cols = np.argwhere(np.isin(self.kinds, FACTIONS))
        return [(int(r), int(c)) for r, c in rows_cols]

    def count_units(self, faction: int) -> int:
        return int(np.count_nonzero(self.kinds == faction))

    def total_hit_points(self) -> int:
        return int(self.hp[np.isin(self.kinds, FACTIONS)].sum())

    def move_unit(self, src: Pos, dst: Pos) -> None:
        """Move the occupant of src into the open cell dst."""
        if self.kinds[src] not in FACTIONS:
            raise ValueError(f"No unit at {src}")
        if self.kinds[dst] != OPEN:
            raise ValueError(f"Destination {dst} is not open")

        self.kinds[dst] = self.kinds[src]
        self.hp[dst] = self.hp[src]
        self.kinds[src] = OPEN
        self.hp[src] = 0

    def apply_damage(self, pos: Pos, amount: int) -> int:
        """
        Apply damage to the unit at pos, removing it if it drops to zero.

        Returns the hit points actually removed from the grid.
        """
        if self.kinds[pos] not in FACTIONS:
            raise ValueError(f"No unit at {pos}")

        old_hp = int(self.hp[pos])
        new_hp = old_hp - amount
        if new_hp <= 0:
            self.kinds[pos] = OPEN
            self.hp[pos] = 0
            return old_hp

        self.hp[pos] = new_hp
        return amount

    def copy(self) -> "Grid":
        """Create an independent copy of the grid."""
        return Grid(self.kinds.copy(), self.hp.copy())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            np.array_equal(self.kinds, other.kinds)
            and np.array_equal(self.hp, other.hp)
        )

    def to_dict(self) -> Dict:
        return {
            "width": self.width,
            "height": self.height,
            "kinds": self.kinds.tolist(),
            "hp": self.hp.tolist(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Grid":
        kinds = d.get("kinds", [])
        hp = d.get("hp")
        return cls(np.array(kinds), None if hp is None else np.array(hp))
