"""
obstacles.py: Procedural obstacle spawning, scrolling and pruning.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from .constants import GAP_MARGIN, OBSTACLE_WIDTH, ENTITY_X
from .data_models import Obstacle, Playfield


@dataclass
class ObstacleGenerator:
    """
    Owns the obstacle lifecycle: creation on a spawn-interval boundary,
    leftward translation, and removal once fully off-screen.
    """
    rng: random.Random = field(default_factory=random.Random)
    margin: float = GAP_MARGIN
    width: float = OBSTACLE_WIDTH

    def gap_top_range(self, playfield_height: float, gap_size: float) -> tuple[float, float]:
        low = self.margin
        high = playfield_height - gap_size - self.margin
        # Playfields too short for the margins pin the gap to the top margin
        return low, max(low, high)

    def maybe_spawn(self, tick_counter: int, spawn_interval: int,
                    playfield: Playfield, gap_size: float) -> Optional[Obstacle]:
        """Generates a new obstacle off-screen to the right on interval ticks."""
        if spawn_interval <= 0 or tick_counter % spawn_interval != 0:
            return None

        low, high = self.gap_top_range(playfield.height, gap_size)
        gap_top = float(self.rng.randint(int(low), int(high)))
        return Obstacle(x=float(playfield.width), gap_top=gap_top,
                        gap_bottom=gap_top + gap_size, width=self.width)

    @staticmethod
    def translate(obstacles: Sequence[Obstacle], speed: float) -> Tuple[Obstacle, ...]:
        return tuple(replace(o, x=o.x - speed) for o in obstacles)

    @staticmethod
    def mark_passed(obstacles: Sequence[Obstacle],
                    entity_x: float = ENTITY_X) -> Tuple[Tuple[Obstacle, ...], int]:
        """
        Flags obstacles whose trailing edge has crossed the entity.
        Returns the updated obstacles and how many were newly passed.
        """
        updated = []
        newly_passed = 0
        for obstacle in obstacles:
            if not obstacle.passed and obstacle.trailing_edge < entity_x:
                obstacle = replace(obstacle, passed=True)
                newly_passed += 1
            updated.append(obstacle)
        return tuple(updated), newly_passed

    @staticmethod
    def prune(obstacles: Sequence[Obstacle]) -> Tuple[Obstacle, ...]:
        return tuple(o for o in obstacles if o.trailing_edge >= 0)

    def advance(self, obstacles: Sequence[Obstacle], speed: float,
                entity_x: float = ENTITY_X) -> Tuple[Tuple[Obstacle, ...], int]:
        """
        Scrolls obstacles left by `speed`, scores crossings, then drops the
        ones fully off the left edge. Crossings are counted before pruning.
        """
        moved = self.translate(obstacles, speed)
        marked, newly_passed = self.mark_passed(moved, entity_x)
        return self.prune(marked), newly_passed
