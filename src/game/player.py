# src/game/player.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Dict
from .config import (
    PLAYER_X, PLAYER_W, PLAYER_H, PLAYER_START_Y, GRAVITY, JUMP_POWER,
    SHIP_CLIMB_FACTOR
)
from .level import Box
from .modes import Mode


@dataclass
class Player:
    """
    Runner player at a fixed x; only y moves.
    - gravity > 0 pulls down, gravity < 0 pulls up (ball after a flip)
    - dy is per-tick vertical velocity, jump_power < 0 is an upward impulse
    """
    x: float = float(PLAYER_X)
    y: float = PLAYER_START_Y
    w: float = float(PLAYER_W)
    h: float = float(PLAYER_H)
    dy: float = 0.0
    gravity: float = GRAVITY
    jump_power: float = JUMP_POWER
    on_ground: bool = False
    mode: Mode = Mode.CUBE

    def __post_init__(self):
        if self.w <= 0 or self.h <= 0:
            raise ValueError(f"Player size must be positive, got {self.w}x{self.h}")
        if self.gravity == 0:
            raise ValueError("Player gravity must be non-zero")

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.w, self.h)

    def reset(self):
        """Restore launch values in place (object identity is kept)."""
        self.y = PLAYER_START_Y
        self.dy = 0.0
        self.gravity = GRAVITY
        self.on_ground = False
        self.mode = Mode.CUBE

    def update_physics(self, ground_y: float):
        """Integrate one tick under signed gravity and clamp to ground/ceiling."""
        self.dy += self.gravity
        self.y += self.dy

        # Ship flies free: no clamp, on_ground left as is
        if self.mode is Mode.SHIP:
            return

        if self.gravity > 0 and self.y + self.h >= ground_y:
            self.y = ground_y - self.h
            self.dy = 0.0
            self.on_ground = True
        elif self.gravity < 0 and self.y <= 0:
            self.y = 0.0
            self.dy = 0.0
            self.on_ground = True
        else:
            self.on_ground = False

    def jump(self, scroll_speed: float):
        """Apply the current mode's jump behavior (input is active this tick)."""
        JUMP_HANDLERS[self.mode](self, scroll_speed)

    def simple_jump(self):
        """Single-mode variant: impulse only from the ground."""
        if self.on_ground:
            self.dy = self.jump_power
            self.on_ground = False


# --- Per-mode jump handlers ---

def _jump_cube(p: Player, scroll_speed: float):
    if p.on_ground:
        p.dy = p.jump_power
        p.on_ground = False


def _jump_ball(p: Player, scroll_speed: float):
    # every active frame inverts gravity and launches along the new direction
    p.gravity *= -1
    p.dy = p.jump_power * math.copysign(1.0, p.gravity)


def _jump_ufo(p: Player, scroll_speed: float):
    if not p.on_ground:
        p.dy = p.jump_power / 2


def _jump_ship(p: Player, scroll_speed: float):
    # climb while held; gravity alone brings it down on release
    p.dy = -scroll_speed * SHIP_CLIMB_FACTOR


JUMP_HANDLERS: Dict[Mode, Callable[[Player, float], None]] = {
    Mode.CUBE: _jump_cube,
    Mode.SHIP: _jump_ship,
    Mode.BALL: _jump_ball,
    Mode.UFO: _jump_ufo,
}
assert set(JUMP_HANDLERS) == set(Mode), "every mode needs a jump handler"
