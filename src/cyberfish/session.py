"""
session.py: Binds the pure state machine to the leaderboard client.
"""

from __future__ import annotations

import asyncio
import random
from typing import Optional, Set

from .data_models import Phase, Playfield, SessionState
from .game_state import (
    Activate, ChangePlayer, Event, RegisterName, Reset, Resize, RetrySubmit,
    SubmitFailed, SubmitScore, Transition, advance, apply_input, new_session
)
from .leaderboard_client import LeaderboardClient, Outcome, Status
from .logger import get_logger
from .obstacles import ObstacleGenerator

logger = get_logger("session")

NAME_TAKEN = "Name already exists. Please choose a different name."
NAME_CHECK_FAILED = "Could not check name, please try again."
NAME_REQUIRED = "Please enter your name to start the game."
SAVE_FAILED = "Failed to save score"


class GameSession:
    """
    Owns the live SessionState for the host loop. Inputs are queued and
    applied at the start of the next frame; network effects run as
    background tasks so frame() never waits on I/O.
    """

    def __init__(self, client: LeaderboardClient, check_name: bool = True,
                 rng: Optional[random.Random] = None,
                 playfield: Playfield = Playfield()) -> None:
        self.client = client
        self.check_name = check_name
        self.generator = ObstacleGenerator(rng=rng or random.Random())
        self.state: SessionState = new_session(playfield)
        self.pending: list[Event] = []
        self.tasks: Set[asyncio.Task] = set()

        self.name_error = ""
        self.status_message = ""

    @property
    def phase(self) -> Phase:
        return self.state.phase

    # ---------- Inputs ----------

    def _apply(self, event: Event) -> None:
        self._dispatch(apply_input(self.state, event))

    def activate(self) -> None:
        if self.phase is Phase.AWAITING_IDENTITY:
            self.status_message = NAME_REQUIRED
            return
        self.pending.append(Activate())

    def reset(self) -> None:
        self.pending.append(Reset())

    def change_player(self) -> None:
        self.pending.append(ChangePlayer())

    def resize(self, width: float, height: float) -> None:
        self._apply(Resize(width, height))

    def retry_submit(self) -> None:
        self.pending.append(RetrySubmit())

    async def register(self, name: str) -> Outcome:
        """
        Registers the player name. When name checking is on, the name must
        not already be on the ledger; a failed check is reported, never
        treated as success or rejection.
        """
        if self.phase is not Phase.AWAITING_IDENTITY:
            return Outcome(Status.FAILED, "already registered")
        name = name.strip()
        if not name:
            self.name_error = NAME_REQUIRED
            return Outcome(Status.FAILED, "empty name")

        if self.check_name:
            outcome = await self.client.check_name(name)
            if outcome.status is Status.SUPERSEDED:
                return outcome
            if outcome.status is Status.TAKEN:
                self.name_error = NAME_TAKEN
                return outcome
            if not outcome.ok:
                self.name_error = NAME_CHECK_FAILED
                return outcome

        self._apply(RegisterName(name))
        self.name_error = ""
        self.status_message = ""
        logger.info("Player %r registered", name)
        return Outcome(Status.OK)

    # ---------- Frame ----------

    def frame(self, dt: float) -> SessionState:
        """Runs one tick with the queued inputs and returns the new state."""
        inputs, self.pending = self.pending, []
        before = self.phase
        self._dispatch(advance(self.state, inputs, dt, self.generator))
        if self.phase is not before:
            logger.debug("%s -> %s", before.value, self.phase.value,
                         extra={"data": {"player": self.state.player_name,
                                         "score": self.state.score}})
        return self.state

    def _dispatch(self, transition: Transition) -> None:
        self.state = transition.state
        for effect in transition.effects:
            self._spawn(self._submit(effect))

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    async def _submit(self, effect: SubmitScore) -> None:
        outcome = await self.client.submit_score(effect.name, effect.score)
        if outcome.ok:
            self.status_message = ""
            return
        logger.warning("Score not saved: %s", outcome.detail or outcome.status.value,
                       extra={"data": {"name": effect.name, "score": effect.score,
                                       "status": outcome.status.value}})
        self.status_message = SAVE_FAILED
        # Releases the latch only if this game is still the one on screen
        self._apply(SubmitFailed(effect.name, effect.score))

    async def drain(self) -> None:
        """Waits for outstanding network tasks."""
        while self.tasks:
            await asyncio.gather(*list(self.tasks))
