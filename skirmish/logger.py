"""
JSONL Combat Logger.

Logs one line per round (grid snapshot + turn reports) and one line per
trial summary, so a combat can be replayed or inspected after the fact.
"""

import json
import os
from datetime import datetime
from typing import Dict, List, Any

import numpy as np


def convert_numpy(obj: Any) -> Any:
    """Convert numpy types to Python native types for JSON serialization."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, dict):
        return {k: convert_numpy(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy(v) for v in obj]
    return obj


class CombatLogger:
    """
    Logger for combat trials in JSONL format.
    """

    def __init__(self, log_dir: str = None, enabled: bool = True):
        """
        Initialize combat logger.

        Args:
            log_dir: Directory to write logs. Defaults to data/combat_logs/
            enabled: Whether logging is active
        """
        self.enabled = enabled

        if log_dir is None:
            base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            log_dir = os.path.join(base_path, "data", "combat_logs")

        self.log_dir = log_dir
        self.current_file = None
        self.current_trial_id = None
        self.config = None
        self.rounds_logged = 0

        if self.enabled:
            os.makedirs(self.log_dir, exist_ok=True)

    def start_trial(self, config: Dict = None, trial_id: str = None):
        """Start a new trial (one full combat run)."""
        if not self.enabled:
            return

        self.config = config or {}
        self.rounds_logged = 0

        if trial_id is None:
            trial_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.current_trial_id = trial_id

        if self.current_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.current_file = os.path.join(self.log_dir, f"combat_{timestamp}.jsonl")

    def log_round(
        self,
        round_idx: int,
        grid_dict: Dict,
        turns: List[Dict],
        complete: bool = True
    ):
        """
        Log the grid after a round.

        Args:
            round_idx: Number of rounds completed so far
            grid_dict: Grid.to_dict() snapshot
            turns: Turn reports from the engine, in acting order
            complete: False for the final, interrupted round
        """
        if not self.enabled or self.current_file is None:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "trial_id": self.current_trial_id,
            "type": "round",
            "round": int(round_idx),
            "complete": bool(complete),
            "config": convert_numpy(self.config),
            "grid": convert_numpy(grid_dict),
            "turns": convert_numpy(turns),
        }
        self._write(entry)
        self.rounds_logged += 1

    def end_trial(self, final_info: Dict = None):
        """End current trial."""
        if not self.enabled:
            return

        if final_info and self.current_file:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "trial_id": self.current_trial_id,
                "type": "trial_end",
                "rounds_logged": self.rounds_logged,
                "config": convert_numpy(self.config),
                "final_info": convert_numpy(final_info),
            }
            self._write(entry)

        self.current_trial_id = None
        self.rounds_logged = 0

    def _write(self, entry: Dict):
        try:
            with open(self.current_file, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            print(f"Warning: Failed to write combat log entry: {e}")
