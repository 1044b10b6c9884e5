"""
data_models.py: Data structures for the game session and the score ledger.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from .constants import (
    ENTITY_SIZE, SMALL_ENTITY_SIZE, SMALL_DEVICE_WIDTH,
    INITIAL_SPEED, INITIAL_SPAWN_INTERVAL, INITIAL_GAP, OBSTACLE_WIDTH
)


class Phase(str, Enum):
    AWAITING_IDENTITY = "awaiting_identity"
    IDLE = "idle"
    PLAYING = "playing"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Playfield:
    width: float = 0.0
    height: float = 0.0

    @property
    def ready(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Entity:
    """The player-controlled body. `position` is the top edge."""
    position: float = 0.0
    velocity: float = 0.0
    width: float = ENTITY_SIZE[0]
    height: float = ENTITY_SIZE[1]
    last_impulse_at: Optional[float] = None   # Session clock of last jump

    @classmethod
    def for_playfield(cls, playfield: Playfield) -> "Entity":
        """Creates a centered, resting entity sized for the device class."""
        width, height = (
            SMALL_ENTITY_SIZE if playfield.width < SMALL_DEVICE_WIDTH else ENTITY_SIZE
        )
        return cls(position=playfield.height / 2 - height / 2,
                   width=width, height=height)

    def centered(self, playfield: Playfield) -> "Entity":
        return Entity(position=playfield.height / 2 - self.height / 2,
                      velocity=0.0, width=self.width, height=self.height,
                      last_impulse_at=self.last_impulse_at)


@dataclass(frozen=True)
class Obstacle:
    """A top/bottom barrier pair; only `x` and `passed` ever change."""
    x: float
    gap_top: float
    gap_bottom: float
    width: float = OBSTACLE_WIDTH
    passed: bool = False

    @property
    def gap_size(self) -> float:
        return self.gap_bottom - self.gap_top

    @property
    def trailing_edge(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class DifficultyState:
    speed: float = INITIAL_SPEED
    spawn_interval: int = INITIAL_SPAWN_INTERVAL
    gap_size: float = INITIAL_GAP


@dataclass(frozen=True)
class SessionState:
    """One game's complete state. Replaced, never mutated, by each transition."""
    phase: Phase = Phase.AWAITING_IDENTITY
    playfield: Playfield = field(default_factory=Playfield)
    entity: Entity = field(default_factory=Entity)
    obstacles: Tuple[Obstacle, ...] = ()
    difficulty: DifficultyState = field(default_factory=DifficultyState)
    player_name: str = ""
    score: int = 0
    best_score: int = 0
    tick_count: int = 0          # Playing ticks; drives spawning
    frame: int = 0               # All ticks; drives the idle hover
    clock: float = 0.0           # Seconds of session time
    arming: Optional[float] = None   # Remaining activation delay
    score_submitted: bool = False    # Submission latch


@dataclass(frozen=True)
class ScoreRecord:
    """A ledger entry: best score per player name."""
    name: str
    score: int
    date: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "date": self.date}

    @classmethod
    def from_dict(cls, data: dict) -> "ScoreRecord":
        return cls(name=str(data["name"]), score=int(data["score"]),
                   date=str(data.get("date", "")))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")
