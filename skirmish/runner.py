"""
Headless Combat Runner.

Runs full combats on fresh copies of an initial grid: a single
fixed-power run, the minimal attack power search, and power sweeps.
"""

from typing import Dict, Iterable, Tuple

import numpy as np

from skirmish.state import (
    Grid, SimulationConfig, CombatResult,
    ELF, FACTION_NAMES, BASELINE_ATTACK_POWER, MAX_ATTACK_POWER,
)
from skirmish.engine import CombatEngine
from skirmish.logger import CombatLogger


class NoSolutionError(RuntimeError):
    """Raised when no attack power up to the limit avoids all losses."""


def run_combat(
    grid: Grid,
    config: SimulationConfig = None,
    logger: CombatLogger = None,
    max_rounds: int = None
) -> CombatResult:
    """
    Run a single combat with fixed attack powers.

    Args:
        grid: Initial grid (left untouched)
        config: Attack powers, baseline for both factions if omitted
        logger: Optional combat logger
        max_rounds: Optional round guard passed to the engine

    Returns:
        CombatResult; its outcome is completed rounds times remaining hit points
    """
    config = config or SimulationConfig()

    if logger:
        logger.start_trial(config=config.to_dict())

    engine = CombatEngine(grid, config, logger=logger)
    result = engine.run(max_rounds=max_rounds)

    if logger:
        logger.end_trial(result.to_dict())

    return result


def find_minimal_attack_power(
    grid: Grid,
    faction: int = ELF,
    start_power: int = None,
    max_power: int = MAX_ATTACK_POWER,
    logger: CombatLogger = None,
    verbose: bool = False
) -> Tuple[int, CombatResult]:
    """
    Find the smallest attack power at which a faction loses no units.

    Powers are tried one at a time in increasing order starting one above
    baseline; the other faction stays at baseline. Losses are not assumed
    to be monotonic in power, so the search never skips values.

    Returns:
        (attack_power, result of the accepted run)

    Raises:
        NoSolutionError: if every power up to max_power loses a unit
    """
    if start_power is None:
        start_power = BASELINE_ATTACK_POWER + 1

    base = SimulationConfig()
    units_before = grid.count_units(faction)

    for power in range(start_power, max_power + 1):
        config = base.with_power(faction, power)
        result = run_combat(grid, config, logger=logger)
        units_after = units_before - result.losses(faction)

        if verbose:
            print(
                f"Power {power}: {FACTION_NAMES[faction]} units "
                f"{units_before} -> {units_after}, outcome {result.outcome}"
            )

        if units_after == units_before:
            return power, result

    raise NoSolutionError(
        f"No attack power in [{start_power}, {max_power}] keeps every "
        f"{FACTION_NAMES[faction]} alive"
    )


def run_power_sweep(
    grid: Grid,
    powers: Iterable[int],
    faction: int = ELF
) -> Dict:
    """
    Run one combat per attack power and aggregate statistics.

    Returns:
        Aggregated statistics dict
    """
    base = SimulationConfig()
    all_results = [
        run_combat(grid, base.with_power(faction, power))
        for power in powers
    ]
    if not all_results:
        raise ValueError("Power sweep needs at least one attack power")

    powers_arr = np.array([r.config.attack_power(faction) for r in all_results])
    losses = np.array([r.losses(faction) for r in all_results])
    outcomes = np.array([r.outcome for r in all_results])
    rounds = np.array([r.completed_rounds for r in all_results])

    lossless = powers_arr[losses == 0]

    return {
        "faction": FACTION_NAMES[faction],
        "powers": powers_arr.tolist(),
        "losses": losses.tolist(),
        "outcomes": outcomes.tolist(),
        "avg_rounds": float(np.mean(rounds)),
        "win_rate": float(np.mean([r.winner == FACTION_NAMES[faction] for r in all_results])),
        "losses_monotonic": bool(np.all(np.diff(losses[np.argsort(powers_arr)]) <= 0)),
        "min_lossless_power": int(lossless.min()) if lossless.size else None,
        "all_results": all_results,
    }
