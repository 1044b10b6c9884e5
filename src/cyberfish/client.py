#!/usr/bin/env python3
"""
client.py

pygame host loop: mounts a GameSession, forwards input, draws each frame.
Runs inside asyncio so leaderboard calls progress between frames.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from .config import ClientConfig, load_config
from .constants import ENTITY_X
from .data_models import Phase, SessionState
from .leaderboard_client import LeaderboardClient
from .logger import get_logger, setup_logging
from .session import GameSession

logger = get_logger("client")

RENDER_FPS = 60
WINDOW_SIZE = (480, 800)
MAX_NAME_LENGTH = 16
LEADERBOARD_ROWS = 10


# ----------------- Input translation -----------------

@dataclass(frozen=True)
class Command:
    kind: str                 # activate | register | type | erase | change_player | retry | resize | quit
    text: str = ""
    size: tuple = (0, 0)


def translate_event(event: pygame.event.Event, phase: Phase) -> Optional[Command]:
    """Maps a pygame event to a session command for the current phase."""
    if event.type == pygame.QUIT:
        return Command("quit")
    if event.type == pygame.VIDEORESIZE:
        return Command("resize", size=(event.w, event.h))
    if event.type == pygame.MOUSEBUTTONDOWN:
        return Command("activate")
    if event.type != pygame.KEYDOWN:
        return None

    if event.key == pygame.K_ESCAPE:
        return Command("quit")

    if phase is Phase.AWAITING_IDENTITY:
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            return Command("register")
        if event.key == pygame.K_BACKSPACE:
            return Command("erase")
        if event.unicode and event.unicode.isprintable():
            return Command("type", text=event.unicode)
        return None

    if event.key == pygame.K_SPACE:
        return Command("activate")
    if event.key == pygame.K_c and phase in (Phase.IDLE, Phase.TERMINATED):
        return Command("change_player")
    if event.key == pygame.K_r and phase is Phase.TERMINATED:
        return Command("retry")
    return None


# ----------------- Leaderboard panel -----------------

def leaderboard_lines(board: LeaderboardClient, player_name: str,
                      limit: int = LEADERBOARD_ROWS) -> List[Tuple[str, bool]]:
    """
    Rows for the side panel as (text, is_player). When the player ranks
    below the top `limit`, their own row is appended after the cut.
    """
    if board.loading:
        return [("Loading scores...", False)]
    if board.error:
        return [(board.error, False)]
    if not board.scores:
        return [("No scores yet. Be the first!", False)]

    rank = board.rank_of(player_name) if player_name else None
    rows = [(f"{i}. {r.name} - {r.score}", i == rank)
            for i, r in enumerate(board.scores[:limit], start=1)]
    if rank is not None and rank > limit:
        record = board.scores[rank - 1]
        rows.append(("...", False))
        rows.append((f"{rank}. {record.name} - {record.score}", True))
    return rows


# ----------------- Game Client (rendering / input) -----------------

class FishClient:
    def __init__(self, config: ClientConfig):
        pygame.init()
        self.screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
        pygame.display.set_caption("Cyber Fish")

        self.leaderboard = LeaderboardClient(config.api_url, config.timeout_s)
        self.session = GameSession(self.leaderboard, check_name=config.check_name)
        self.session.resize(*self.screen.get_size())

        self.name_buffer = ""
        self.background: set = set()
        self.clock = pygame.time.Clock()
        self.large_font = pygame.font.Font(None, 40)
        self.font = pygame.font.Font(None, 24)

    async def run(self):
        """The main client execution loop."""
        refresh = asyncio.get_running_loop().create_task(self.leaderboard.refresh())
        running = True
        frame_budget = 1.0 / RENDER_FPS
        try:
            while running:
                started = pygame.time.get_ticks()
                dt = self.clock.tick() / 1000.0
                for event in pygame.event.get():
                    command = translate_event(event, self.session.phase)
                    if command is not None and not self._handle(command):
                        running = False

                state = self.session.frame(dt)
                self._draw(state)
                # Sleep off the rest of the frame; network tasks run meanwhile
                spent = (pygame.time.get_ticks() - started) / 1000.0
                await asyncio.sleep(max(0.0, frame_budget - spent))
        finally:
            refresh.cancel()
            await self.leaderboard.close()
            pygame.quit()

    def _handle(self, command: Command) -> bool:
        if command.kind == "quit":
            return False
        if command.kind == "resize":
            self.screen = pygame.display.set_mode(command.size, pygame.RESIZABLE)
            self.session.resize(*command.size)
        elif command.kind == "activate":
            self.session.activate()
        elif command.kind == "type" and len(self.name_buffer) < MAX_NAME_LENGTH:
            self.name_buffer += command.text
        elif command.kind == "erase":
            self.name_buffer = self.name_buffer[:-1]
        elif command.kind == "register":
            task = asyncio.get_running_loop().create_task(self.session.register(self.name_buffer))
            self.background.add(task)
            task.add_done_callback(self.background.discard)
        elif command.kind == "change_player":
            self.name_buffer = ""
            self.session.change_player()
        elif command.kind == "retry":
            self.session.retry_submit()
        return True

    def _draw(self, state: SessionState):
        screen = self.screen
        width, height = screen.get_size()
        white = (255, 255, 255)
        screen.fill((0, 0, 40))

        obstacle_color = (0, 220, 200)
        for obstacle in state.obstacles:
            pygame.draw.rect(screen, obstacle_color,
                             (obstacle.x, 0, obstacle.width, obstacle.gap_top))
            pygame.draw.rect(screen, obstacle_color,
                             (obstacle.x, obstacle.gap_bottom, obstacle.width,
                              height - obstacle.gap_bottom))

        entity = state.entity
        color = (255, 0, 255) if state.phase is not Phase.TERMINATED else (120, 120, 120)
        pygame.draw.rect(screen, color, (ENTITY_X, entity.position, entity.width, entity.height),
                         border_radius=8)

        # HUD
        score_text = self.large_font.render(
            f"Score: {state.score}  Best: {state.best_score}", True, white)
        screen.blit(score_text, (width // 2 - score_text.get_width() // 2, 20))

        if state.phase is Phase.AWAITING_IDENTITY:
            self._center(f"Name: {self.name_buffer}_", height // 2 - 20, white)
            self._center(self.session.name_error or "Type your name, Enter to confirm",
                         height // 2 + 20, (255, 80, 80) if self.session.name_error else white)
        elif state.phase is Phase.IDLE and state.arming is None:
            self._center(f"{state.player_name}: SPACE / CLICK to start", height // 2 + 60, white)
        elif state.phase is Phase.TERMINATED:
            self._center("Game over - SPACE / CLICK to play again", height // 2 - 20, (255, 80, 80))
            self._center("C = change player | R = retry save", height // 2 + 20, white)

        if self.session.status_message:
            self._center(self.session.status_message, height - 60, (255, 200, 0))

        # Leaderboard
        title = self.font.render("Top Fish", True, (0, 255, 255))
        screen.blit(title, (10, 10))
        rows = leaderboard_lines(self.leaderboard, state.player_name)
        for i, (line, is_player) in enumerate(rows):
            color = (255, 200, 0) if is_player else white
            screen.blit(self.font.render(line, True, color), (10, 35 + i * 22))

        pygame.display.flip()

    def _center(self, text: str, y: int, color):
        surf = self.font.render(text, True, color)
        self.screen.blit(surf, (self.screen.get_width() // 2 - surf.get_width() // 2, y))


def main():
    config = load_config()
    setup_logging(config.log_level, config.log_file)
    logger.info("Using leaderboard at %s", config.client.api_url)
    asyncio.run(FishClient(config.client).run())


if __name__ == "__main__":
    main()
