"""
Turn-Based Combat Engine.

Drives unit turns and full rounds over a single owned grid until one
faction has no units left.
"""

from typing import Dict, List, Optional

from skirmish.state import (
    Grid, Pos, SimulationConfig, CombatResult, ScenarioError,
    ELF, GOBLIN, FACTIONS, FACTION_NAMES, enemy_of,
)
from skirmish.mechanics import enemy_in_range, choose_step, choose_attack_target
from skirmish.logger import CombatLogger


# Turn phases
PHASE_IDLE = "idle"
PHASE_IN_RANGE = "in_range"
PHASE_MOVED = "moved"
PHASE_ATTACKED = "attacked"
PHASE_DONE = "done"


class CombatEngine:
    """
    Combat simulation over one grid.

    The engine copies the grid it is given, so the caller's grid is never
    mutated and repeated runs start from the same state.
    """

    def __init__(
        self,
        grid: Grid,
        config: SimulationConfig = None,
        logger: CombatLogger = None
    ):
        """
        Initialize combat engine.

        Args:
            grid: Initial grid; copied, not mutated
            config: Attack power per faction (baseline for both if omitted)
            logger: Optional JSONL combat logger, fed once per round
        """
        self.config = config or SimulationConfig()
        self.logger = logger
        self.grid = grid.copy()

        self.starting_units = {f: self.grid.count_units(f) for f in FACTIONS}
        missing = [FACTION_NAMES[f] for f, n in self.starting_units.items() if n == 0]
        if missing:
            raise ScenarioError(f"Scenario has no units of: {', '.join(missing)}")

        self.starting_hp = self.grid.total_hit_points()
        self.completed_rounds = 0
        self.hp_removed = 0
        self.kills = {ELF: 0, GOBLIN: 0}
        self.finished = False

    def take_turn(self, pos: Pos) -> Dict:
        """
        Play one unit's turn.

        Returns a turn report dict. When "combat_over" is set the acting
        unit found no enemies left and the current round is abandoned.
        """
        report = {
            "unit": pos,
            "faction": None,
            "phases": [PHASE_IDLE],
            "skipped": False,
            "combat_over": False,
            "moved_to": None,
            "target": None,
            "damage": 0,
            "killed": False,
        }
        phases = report["phases"]

        # A unit may have died earlier this round
        cell = self.grid.cell_at(pos)
        if not cell.is_unit:
            report["skipped"] = True
            phases.append(PHASE_DONE)
            return report

        faction = cell.kind
        enemy = enemy_of(faction)
        report["faction"] = FACTION_NAMES[faction]

        if self.grid.count_units(enemy) == 0:
            report["combat_over"] = True
            return report

        if enemy_in_range(self.grid, pos, enemy):
            phases.append(PHASE_IN_RANGE)
        else:
            step = choose_step(self.grid, pos, enemy)
            if step is not None:
                assert self.grid.in_bounds(step), f"Step {step} is off the grid"
                self.grid.move_unit(pos, step)
                pos = step
                report["moved_to"] = step
                phases.append(PHASE_MOVED)

        target = choose_attack_target(self.grid, pos, enemy)
        if target is not None:
            assert self.grid.in_bounds(target), f"Target {target} is off the grid"
            removed = self.grid.apply_damage(target, self.config.attack_power(faction))
            self.hp_removed += removed
            report["target"] = target
            report["damage"] = removed
            if self.grid.is_open(target):
                report["killed"] = True
                self.kills[faction] += 1
            phases.append(PHASE_ATTACKED)

        phases.append(PHASE_DONE)
        return report

    def play_round(self) -> bool:
        """
        Play one full round in reading order.

        Returns False if combat ended partway through; that round is not
        counted.
        """
        if self.finished:
            return False

        turns: List[Dict] = []
        for pos in self.grid.live_units():
            report = self.take_turn(pos)
            turns.append(report)
            if report["combat_over"]:
                self.finished = True
                self._log_round(turns)
                return False

        self.completed_rounds += 1
        self._log_round(turns)
        return True

    def run(self, max_rounds: int = None) -> CombatResult:
        """
        Play rounds until one faction is eliminated.

        Args:
            max_rounds: Optional guard; exceeding it raises RuntimeError
        """
        while self.play_round():
            if max_rounds is not None and self.completed_rounds > max_rounds:
                raise RuntimeError(
                    f"Combat still running after {max_rounds} rounds"
                )
        return self.result()

    def is_combat_over(self) -> bool:
        """Check if one faction has been eliminated."""
        return any(self.grid.count_units(f) == 0 for f in FACTIONS)

    def get_winner(self) -> Optional[str]:
        """Get combat winner. Returns 'elf', 'goblin', or None."""
        if not self.is_combat_over():
            return None
        for faction in FACTIONS:
            if self.grid.count_units(faction) > 0:
                return FACTION_NAMES[faction]
        return None

    def losses(self, faction: int) -> int:
        return self.starting_units[faction] - self.grid.count_units(faction)

    def result(self) -> CombatResult:
        if not self.finished:
            raise RuntimeError("Combat has not finished")
        return CombatResult(
            completed_rounds=self.completed_rounds,
            remaining_hp=self.grid.total_hit_points(),
            winner=self.get_winner(),
            config=self.config,
            elf_losses=self.losses(ELF),
            goblin_losses=self.losses(GOBLIN),
        )

    def _log_round(self, turns: List[Dict]) -> None:
        if self.logger is None:
            return
        self.logger.log_round(
            round_idx=self.completed_rounds,
            grid_dict=self.grid.to_dict(),
            turns=turns,
            complete=not self.finished,
        )
