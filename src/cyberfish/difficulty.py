"""
difficulty.py: Score-driven difficulty scaling.
"""

from .constants import (
    INITIAL_SPEED, SPEED_STEP, SPEED_STEP_SCORE,
    INITIAL_SPAWN_INTERVAL, SPAWN_INTERVAL_STEP, MIN_SPAWN_INTERVAL,
    INITIAL_GAP, GAP_STEP, GAP_STEP_SCORE
)
from .data_models import DifficultyState


def scale(score: int) -> DifficultyState:
    """
    Maps a score to speed, spawn interval and gap size.
    Always recomputed from the score, never accumulated.
    """
    score = max(int(score), 0)
    speed_steps = score // SPEED_STEP_SCORE
    gap_steps = score // GAP_STEP_SCORE

    return DifficultyState(
        speed=INITIAL_SPEED + speed_steps * SPEED_STEP,
        spawn_interval=max(
            INITIAL_SPAWN_INTERVAL - speed_steps * SPAWN_INTERVAL_STEP,
            MIN_SPAWN_INTERVAL),
        # Wider gaps keep it playable as speed rises
        gap_size=INITIAL_GAP + gap_steps * GAP_STEP,
    )
