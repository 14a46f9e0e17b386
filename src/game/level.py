# src/game/level.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple
from .config import (
    OBSTACLE_LAYOUT, PORTAL_LAYOUT,
    EVEN_START_X, EVEN_SPACING, EVEN_OBSTACLE_W, EVEN_HEIGHTS
)
from .modes import Mode

LAYOUTS = ("original", "even")


class Box(NamedTuple):
    """Float rect (x, y = top-left)."""
    x: float
    y: float
    w: float
    h: float


def is_colliding(a: Box, b: Box) -> bool:
    """Strict AABB overlap: touching edges do not count."""
    return (
        a.x < b.x + b.w and
        a.x + a.w > b.x and
        a.y < b.y + b.h and
        a.y + a.h > b.y
    )


@dataclass
class Obstacle:
    """Block standing on the ground line; only x moves."""
    x: float
    w: float
    h: float

    def __post_init__(self):
        if self.w <= 0 or self.h <= 0:
            raise ValueError(f"Obstacle size must be positive, got {self.w}x{self.h}")

    def box(self, ground_y: float) -> Box:
        return Box(self.x, ground_y - self.h, self.w, self.h)


@dataclass
class Portal:
    """Trigger that switches the player into `mode` when reached."""
    x: float
    mode: Mode


def original_layout() -> Tuple[List[Obstacle], List[Portal]]:
    obstacles = [Obstacle(float(x), float(w), float(h)) for x, w, h in OBSTACLE_LAYOUT]
    portals = [Portal(float(x), Mode(name)) for x, name in PORTAL_LAYOUT]
    return obstacles, portals


def even_layout(count: int = len(OBSTACLE_LAYOUT),
                start_x: float = EVEN_START_X,
                spacing: float = EVEN_SPACING,
                width: float = EVEN_OBSTACLE_W,
                heights: Iterable[int] = EVEN_HEIGHTS) -> Tuple[List[Obstacle], List[Portal]]:
    """
    Regenerated layout: `count` obstacles every `spacing` px, heights cycling
    through `heights`; one portal per mode change sits halfway between obstacles.
    """
    if count < 1 or spacing <= 0:
        raise ValueError(f"Bad even layout: count={count} spacing={spacing}")
    hs = list(heights)
    obstacles = [
        Obstacle(float(start_x + i * spacing), float(width), float(hs[i % len(hs)]))
        for i in range(count)
    ]
    modes = [Mode(name) for _, name in PORTAL_LAYOUT]
    stride = max(1, count // len(modes))
    portals = [
        Portal(float(start_x + (i * stride) * spacing + spacing / 2), m)
        for i, m in enumerate(modes)
    ]
    return obstacles, portals


class Level:
    """
    Static obstacle/portal course that scrolls left under a fixed-x player.
    `reset()` replaces the entity lists with fresh objects.
    """
    def __init__(self, layout: str = "original", with_portals: bool = True,
                 heights: Tuple[int, ...] = EVEN_HEIGHTS):
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {layout!r}, expected one of {LAYOUTS}")
        self.layout = layout
        self.with_portals = with_portals
        self.heights = tuple(heights)
        self.obstacles: List[Obstacle] = []
        self.portals: List[Portal] = []
        self.reset()

    def reset(self, layout: Optional[str] = None):
        if layout is not None:
            if layout not in LAYOUTS:
                raise ValueError(f"Unknown layout {layout!r}, expected one of {LAYOUTS}")
            self.layout = layout
        if self.layout == "even":
            obstacles, portals = even_layout(heights=self.heights)
        else:
            obstacles, portals = original_layout()
        self.obstacles = obstacles
        self.portals = portals if self.with_portals else []

    def scroll(self, dx: float):
        """Shift every obstacle and portal left by dx."""
        for ob in self.obstacles:
            ob.x -= dx
        for portal in self.portals:
            portal.x -= dx

    def first_collision(self, player_box: Box, ground_y: float) -> Optional[Obstacle]:
        for ob in self.obstacles:
            if is_colliding(player_box, ob.box(ground_y)):
                return ob
        return None

    def portals_in_reach(self, player_x: float, band: float) -> List[Portal]:
        return [p for p in self.portals if abs(player_x - p.x) < band]

    def next_obstacle(self, player_x: float) -> Optional[Obstacle]:
        """Nearest obstacle whose right edge is still ahead of player_x."""
        ahead = [ob for ob in self.obstacles if ob.x + ob.w > player_x]
        return min(ahead, key=lambda ob: ob.x, default=None)

    def next_portal(self, player_x: float) -> Optional[Portal]:
        ahead = [p for p in self.portals if p.x >= player_x]
        return min(ahead, key=lambda p: p.x, default=None)
