"""
game_state.py: The session state machine as pure transitions.

Every function here takes a SessionState and returns a Transition holding
the next SessionState plus the side effects the caller should perform.
Nothing in this module does I/O, so any host loop (pygame, a fixed-step
test harness, a fuzzer) can drive it.
"""

from dataclasses import dataclass, replace
from typing import Iterable, NamedTuple, Tuple, Union

from .constants import ACTIVATION_DELAY
from .data_models import Entity, Phase, Playfield, SessionState
from .difficulty import scale
from .obstacles import ObstacleGenerator
from .physics_core import PhysicsCore, default_core


# ---------- Input events ----------

@dataclass(frozen=True)
class RegisterName:
    name: str


@dataclass(frozen=True)
class Activate:
    """Click, tap or space: start when idle, jump when playing."""


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Jump:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class ChangePlayer:
    pass


@dataclass(frozen=True)
class Resize:
    width: float
    height: float


@dataclass(frozen=True)
class RetrySubmit:
    pass


@dataclass(frozen=True)
class SubmitFailed:
    """Feedback from the leaderboard client; releases the latch of the game it names."""
    name: str
    score: int


Event = Union[RegisterName, Activate, Start, Jump, Reset, ChangePlayer,
              Resize, RetrySubmit, SubmitFailed]


# ---------- Effects ----------

@dataclass(frozen=True)
class SubmitScore:
    name: str
    score: int


class Transition(NamedTuple):
    state: SessionState
    effects: Tuple[SubmitScore, ...] = ()


# ---------- Construction ----------

def new_session(playfield: Playfield = Playfield(), player_name: str = "",
                best_score: int = 0) -> SessionState:
    """A fresh session; idle when a player name is already known."""
    return SessionState(
        phase=Phase.IDLE if player_name else Phase.AWAITING_IDENTITY,
        playfield=playfield,
        entity=Entity.for_playfield(playfield),
        difficulty=scale(0),
        player_name=player_name,
        best_score=best_score,
    )


def reset(state: SessionState) -> SessionState:
    """Re-creates the session, keeping only the player identity and best score."""
    return new_session(state.playfield, state.player_name, state.best_score)


# ---------- Inputs ----------

def _register(state: SessionState, event: RegisterName) -> Transition:
    name = event.name.strip()
    if state.phase is not Phase.AWAITING_IDENTITY or not name:
        return Transition(state)
    return Transition(replace(state, phase=Phase.IDLE, player_name=name))


def _start(state: SessionState) -> Transition:
    if state.phase is Phase.TERMINATED:
        state = reset(state)
    if state.phase is not Phase.IDLE or state.arming is not None:
        return Transition(state)
    # Pinned to center until the activation delay runs out
    return Transition(replace(
        state,
        arming=ACTIVATION_DELAY,
        entity=state.entity.centered(state.playfield),
    ))


def _jump(state: SessionState, physics: PhysicsCore) -> Transition:
    if state.phase is not Phase.PLAYING:
        return Transition(state)
    return Transition(replace(state, entity=physics.jump(state.entity, state.clock)))


def _resize(state: SessionState, event: Resize) -> Transition:
    playfield = Playfield(float(event.width), float(event.height))
    if state.phase is Phase.PLAYING:
        entity = state.entity.centered(playfield)
    else:
        entity = Entity.for_playfield(playfield)
    return Transition(replace(state, playfield=playfield, entity=entity))


def _submit(state: SessionState) -> Transition:
    """Emits the score submission once; the latch blocks repeats."""
    if state.score_submitted or state.score <= 0 or not state.player_name:
        return Transition(state)
    return Transition(
        replace(state, score_submitted=True),
        (SubmitScore(state.player_name, state.score),),
    )


def apply_input(state: SessionState, event: Event,
                physics: PhysicsCore = default_core) -> Transition:
    """Applies one input event. Inputs not valid in the current phase are no-ops."""
    if isinstance(event, Resize):
        return _resize(state, event)

    if isinstance(event, RegisterName):
        return _register(state, event)

    if isinstance(event, Activate):
        if not state.playfield.ready:
            return Transition(state)
        if state.phase is Phase.PLAYING:
            return _jump(state, physics)
        return _start(state)

    if isinstance(event, Start):
        return _start(state)

    if isinstance(event, Jump):
        return _jump(state, physics)

    if isinstance(event, Reset):
        if state.phase is Phase.TERMINATED:
            return Transition(reset(state))
        return Transition(state)

    if isinstance(event, ChangePlayer):
        if state.phase in (Phase.IDLE, Phase.TERMINATED):
            return Transition(new_session(state.playfield))
        return Transition(state)

    if isinstance(event, RetrySubmit):
        if state.phase is Phase.TERMINATED:
            return _submit(state)
        return Transition(state)

    if isinstance(event, SubmitFailed):
        if (state.phase is Phase.TERMINATED and state.score_submitted
                and (state.player_name, state.score) == (event.name, event.score)):
            return Transition(replace(state, score_submitted=False))
        return Transition(state)

    raise TypeError(f"Unknown event: {event!r}")


# ---------- Ticks ----------

def _tick_playing(state: SessionState, generator: ObstacleGenerator,
                  physics: PhysicsCore) -> Transition:
    tick_count = state.tick_count + 1
    difficulty = state.difficulty

    # 1. Spawn
    obstacles = state.obstacles
    spawned = generator.maybe_spawn(
        tick_count, difficulty.spawn_interval, state.playfield, difficulty.gap_size)
    if spawned is not None:
        obstacles = obstacles + (spawned,)

    # 2. Entity
    entity = physics.advance(state.entity, True, state.frame, state.playfield)

    # 3. Obstacles and score
    obstacles, newly_passed = generator.advance(
        obstacles, difficulty.speed, physics.entity_x)
    score = state.score + newly_passed

    state = replace(
        state,
        tick_count=tick_count,
        entity=entity,
        obstacles=obstacles,
        score=score,
        best_score=max(state.best_score, score),
        difficulty=scale(score) if newly_passed else difficulty,
    )

    # 4. Collision
    if physics.check_collision(entity, obstacles, state.playfield.height):
        state = replace(state, phase=Phase.TERMINATED,
                        entity=replace(entity, velocity=0.0))
        return _submit(state)

    return Transition(state)


def tick(state: SessionState, dt: float, generator: ObstacleGenerator,
         physics: PhysicsCore = default_core) -> Transition:
    """Advances the session by one frame lasting `dt` seconds."""
    state = replace(state, clock=state.clock + dt, frame=state.frame + 1)

    if state.phase is Phase.PLAYING:
        return _tick_playing(state, generator, physics)

    if state.phase is Phase.TERMINATED:
        return Transition(state)

    if state.arming is not None:
        arming = state.arming - dt
        entity = state.entity.centered(state.playfield)
        if arming <= 0:
            return Transition(replace(state, phase=Phase.PLAYING,
                                      arming=None, entity=entity))
        return Transition(replace(state, arming=arming, entity=entity))

    if not state.playfield.ready:
        return Transition(state)

    entity = physics.advance(state.entity, False, state.frame, state.playfield)
    return Transition(replace(state, entity=entity))


def advance(state: SessionState, inputs: Iterable[Event], dt: float,
            generator: ObstacleGenerator,
            physics: PhysicsCore = default_core) -> Transition:
    """Applies the frame's inputs in order, then runs one tick."""
    effects: Tuple[SubmitScore, ...] = ()
    for event in inputs:
        state, produced = apply_input(state, event, physics)
        effects += produced
    state, produced = tick(state, dt, generator, physics)
    return Transition(state, effects + produced)

