"""
physics_core.py: Per-tick kinematics and the collision predicate.
"""

import math
from dataclasses import dataclass, replace
from typing import Iterable

from .constants import (
    GRAVITY, JUMP_IMPULSE, JUMP_COOLDOWN, HOVER_AMPLITUDE, HOVER_FREQUENCY,
    HITBOX_REDUCTION, ENTITY_X
)
from .data_models import Entity, Obstacle, Playfield


@dataclass(frozen=True)
class PhysicsCore:
    """
    Deterministic physics shared by the session state machine and tests.
    All methods are pure: they return new entities and never mutate input.
    """
    gravity: float = GRAVITY
    jump_impulse: float = JUMP_IMPULSE
    jump_cooldown: float = JUMP_COOLDOWN
    hover_amplitude: float = HOVER_AMPLITUDE
    hover_frequency: float = HOVER_FREQUENCY
    hitbox_reduction: float = HITBOX_REDUCTION
    entity_x: float = ENTITY_X

    def hover(self, entity: Entity, playfield: Playfield, tick_phase: int) -> Entity:
        """Cosmetic idle motion around the playfield center."""
        center = playfield.height / 2 - entity.height / 2
        offset = math.sin(tick_phase * self.hover_frequency) * self.hover_amplitude
        return replace(entity, position=center + offset, velocity=0.0)

    def apply_gravity_and_movement(self, position: float, velocity: float) -> tuple[float, float]:
        """One Euler step; a tick is a rendered frame, not a fixed dt."""
        velocity += self.gravity
        position += velocity
        return position, velocity

    def advance(self, entity: Entity, is_controlled: bool,
                tick_phase: int, playfield: Playfield) -> Entity:
        if not is_controlled:
            return self.hover(entity, playfield, tick_phase)

        position, velocity = self.apply_gravity_and_movement(
            entity.position, entity.velocity)
        return replace(entity, position=position, velocity=velocity)

    def can_jump(self, entity: Entity, now: float) -> bool:
        if entity.last_impulse_at is None:
            return True
        return now - entity.last_impulse_at >= self.jump_cooldown

    def jump(self, entity: Entity, now: float) -> Entity:
        """Applies the jump impulse unless the cooldown window is still open."""
        if not self.can_jump(entity, now):
            return entity
        return replace(entity, velocity=self.jump_impulse, last_impulse_at=now)

    def hits_boundary(self, entity: Entity, playfield_height: float) -> bool:
        return (entity.position <= 0
                or entity.position + entity.height >= playfield_height)

    def hitbox(self, entity: Entity) -> tuple[float, float, float, float]:
        """Returns the shrunk (x, y, width, height) used against obstacles."""
        r = self.hitbox_reduction
        return (
            self.entity_x + entity.width * r,
            entity.position + entity.height * r / 2,
            entity.width * (1 - r),
            entity.height * (1 - r),
        )

    def hits_obstacle(self, entity: Entity, obstacle: Obstacle) -> bool:
        x, y, width, height = self.hitbox(entity)

        overlaps_horizontally = x < obstacle.trailing_edge and x + width > obstacle.x
        if not overlaps_horizontally:
            return False

        return y < obstacle.gap_top or y + height > obstacle.gap_bottom

    def check_collision(self, entity: Entity, obstacles: Iterable[Obstacle],
                        playfield_height: float) -> bool:
        """Checks for collisions with floor, ceiling, or any obstacle."""
        if self.hits_boundary(entity, playfield_height):
            return True
        return any(self.hits_obstacle(entity, o) for o in obstacles)


default_core = PhysicsCore()


def advance(entity: Entity, is_controlled: bool, tick_phase: int,
            playfield: Playfield) -> Entity:
    return default_core.advance(entity, is_controlled, tick_phase, playfield)


def collides(entity: Entity, obstacles: Iterable[Obstacle],
             playfield_height: float) -> bool:
    return default_core.check_collision(entity, obstacles, playfield_height)
