import random
from dataclasses import replace

import pytest

from cyberfish.data_models import Entity, Phase, Playfield, SessionState
from cyberfish.difficulty import scale
from cyberfish.obstacles import ObstacleGenerator


@pytest.fixture
def playfield():
    return Playfield(800, 600)


@pytest.fixture
def generator():
    return ObstacleGenerator(rng=random.Random(1234))


@pytest.fixture
def playing(playfield):
    """Factory for a mid-game state; keyword overrides replace fields."""
    def make(**overrides):
        state = SessionState(
            phase=Phase.PLAYING,
            playfield=playfield,
            entity=Entity.for_playfield(playfield),
            difficulty=scale(0),
            player_name="Rex",
        )
        return replace(state, **overrides)
    return make
