# Grid combat simulation
# This module provides:
# - state.py: grid state container, config and result records
# - mechanics.py: reachability search and target selection
# - engine.py: turn and round engine
# - runner.py: fixed-power runs and minimal attack power search
# - scenario.py: character map decoding
# - logger.py: JSONL combat logging

__version__ = "0.1.0"
