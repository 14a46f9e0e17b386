# src/game/sim.py
"""
Per-tick simulation of the runner.

All mutable game state lives in one `SimState`; `step()` advances it by one
frame in a fixed order:
    input -> physics -> scroll -> collision / out-of-bounds -> portals -> win
Once `game_over` or `level_complete` is set, `step()` is a no-op until
`reset_state()`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from .config import (
    WIDTH, HEIGHT, GROUND_BAND, SCROLL_SPEED, LEVEL_END_X, OOB_MARGIN,
    EVEN_HEIGHTS, CLASSIC_HEIGHTS
)
from .level import Level, LAYOUTS
from .modes import default_gravity
from .player import Player


@dataclass(frozen=True)
class RunConfig:
    """
    Variant + world constants for a run.
    - portals: modes variant (portals active, per-mode jump handlers)
    - hold_to_jump: level-sensitive input instead of one jump per press
    - layout / relayout: obstacle course at launch / after a restart
    - heights: obstacle height cycle of the evenly spaced course
    """
    portals: bool = True
    hold_to_jump: bool = True
    layout: str = "original"
    relayout: str = "original"
    heights: Tuple[int, ...] = EVEN_HEIGHTS
    scroll_speed: float = SCROLL_SPEED
    level_end_x: float = LEVEL_END_X
    width: int = WIDTH
    height: int = HEIGHT

    def __post_init__(self):
        if self.scroll_speed <= 0:
            raise ValueError(f"scroll_speed must be positive, got {self.scroll_speed}")
        if self.level_end_x <= 0:
            raise ValueError(f"level_end_x must be positive, got {self.level_end_x}")
        if self.width <= 0 or self.height <= GROUND_BAND:
            raise ValueError(f"Viewport too small: {self.width}x{self.height}")
        for name in (self.layout, self.relayout):
            if name not in LAYOUTS:
                raise ValueError(f"Unknown layout {name!r}, expected one of {LAYOUTS}")


CLASSIC = RunConfig(portals=False, hold_to_jump=False, layout="even", relayout="even",
                    heights=CLASSIC_HEIGHTS)
MODES = RunConfig()
VARIANTS: Dict[str, RunConfig] = {"classic": CLASSIC, "modes": MODES}


@dataclass
class SimState:
    config: RunConfig
    player: Player
    level: Level
    viewport_w: int = WIDTH
    viewport_h: int = HEIGHT
    game_over: bool = False
    level_complete: bool = False
    death_cause: Optional[str] = None   # "obstacle" | "oob" | None
    distance: float = 0.0               # total scrolled px
    ticks: int = 0
    events: list = field(default_factory=list)

    @property
    def ground_y(self) -> float:
        return float(self.viewport_h - GROUND_BAND)

    @property
    def terminal(self) -> bool:
        return self.game_over or self.level_complete

    @property
    def progress_x(self) -> float:
        """Player's position along the course (world space)."""
        return self.player.x + self.distance

    @property
    def progress(self) -> float:
        return max(0.0, min(1.0, self.progress_x / self.config.level_end_x))

    def resize(self, w: int, h: int):
        """Host resize; clamped so at least one row of air stays above the ground band."""
        self.viewport_w = max(1, int(w))
        self.viewport_h = max(GROUND_BAND + 1, int(h))


def new_state(config: RunConfig = MODES) -> SimState:
    return SimState(
        config=config,
        player=Player(),
        level=Level(config.layout, with_portals=config.portals, heights=config.heights),
        viewport_w=config.width,
        viewport_h=config.height,
    )


def reset_state(state: SimState) -> SimState:
    """Fresh course (per `relayout`), player reset in place, flags cleared."""
    state.level.reset(state.config.relayout)
    state.player.reset()
    state.game_over = False
    state.level_complete = False
    state.death_cause = None
    state.distance = 0.0
    state.ticks = 0
    state.events.clear()
    return state


def _out_of_bounds(state: SimState) -> bool:
    y = state.player.y
    return (y < -OOB_MARGIN) or (y > state.viewport_h + OOB_MARGIN)


def step(state: SimState, jump_active: bool) -> SimState:
    """Advance one tick. `jump_active` is the input latch read for this tick."""
    if state.terminal:
        return state

    cfg = state.config
    player = state.player
    speed = cfg.scroll_speed
    ground_y = state.ground_y

    # Input
    if jump_active:
        if cfg.portals:
            player.jump(speed)
        else:
            player.simple_jump()

    # Physics
    player.update_physics(ground_y)

    # Scroll
    state.level.scroll(speed)
    state.distance += speed
    state.ticks += 1

    # Collision (first overlap ends the run)
    if state.level.first_collision(player.box, ground_y) is not None:
        state.game_over = True
        state.death_cause = "obstacle"
    elif _out_of_bounds(state):
        state.game_over = True
        state.death_cause = "oob"
    if state.game_over:
        state.events.append("game_over")
        return state

    # Portals
    if cfg.portals:
        for portal in state.level.portals_in_reach(player.x, speed * 2):
            if player.mode is not portal.mode:
                state.events.append(f"portal:{portal.mode.value}")
            player.mode = portal.mode
            player.gravity = default_gravity(portal.mode)

    # Win
    if state.progress_x >= cfg.level_end_x:
        state.level_complete = True
        state.events.append("level_complete")

    return state
