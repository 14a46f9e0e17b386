# src/game/render.py
from __future__ import annotations
from typing import Protocol, Tuple
import pygame
from .config import (
    GROUND_BAND, PORTAL_RADIUS, PORTAL_LIFT,
    COLOR_BG, COLOR_GROUND, COLOR_OBSTACLE, COLOR_FG, MODE_COLORS
)
from .sim import SimState

Color = Tuple[int, int, int]
PROGRESS_BAR_H = 3


class Surface(Protocol):
    """Drawing primitives the renderer needs from the host."""
    def clear(self, color: Color) -> None: ...
    def fill_rect(self, color: Color, x: float, y: float, w: float, h: float) -> None: ...
    def fill_circle(self, color: Color, cx: float, cy: float, r: float) -> None: ...
    def stroke_circle(self, color: Color, cx: float, cy: float, r: float) -> None: ...


class PygameSurface:
    """`Surface` over a pygame surface (window or offscreen)."""
    def __init__(self, surf: pygame.Surface):
        self.surf = surf

    def clear(self, color: Color) -> None:
        self.surf.fill(color)

    def fill_rect(self, color: Color, x: float, y: float, w: float, h: float) -> None:
        pygame.draw.rect(self.surf, color, pygame.Rect(int(x), int(y), int(w), int(h)))

    def fill_circle(self, color: Color, cx: float, cy: float, r: float) -> None:
        pygame.draw.circle(self.surf, color, (int(cx), int(cy)), int(r))

    def stroke_circle(self, color: Color, cx: float, cy: float, r: float) -> None:
        pygame.draw.circle(self.surf, color, (int(cx), int(cy)), int(r), width=1)


def draw_frame(surface: Surface, state: SimState):
    """Draw one frame: clear, ground, player, obstacles, portals, progress bar. Read-only."""
    w = state.viewport_w
    ground_y = state.ground_y

    surface.clear(COLOR_BG)

    # Ground
    surface.fill_rect(COLOR_GROUND, 0, ground_y, w, GROUND_BAND)

    # Player, colored by mode
    p = state.player
    surface.fill_rect(MODE_COLORS[p.mode.value], p.x, p.y, p.w, p.h)

    # Obstacles
    for ob in state.level.obstacles:
        b = ob.box(ground_y)
        surface.fill_rect(COLOR_OBSTACLE, b.x, b.y, b.w, b.h)

    # Portals
    for portal in state.level.portals:
        cy = ground_y - PORTAL_LIFT
        surface.fill_circle(MODE_COLORS[portal.mode.value], portal.x, cy, PORTAL_RADIUS)
        surface.stroke_circle(COLOR_FG, portal.x, cy, PORTAL_RADIUS)

    # Progress bar
    surface.fill_rect(COLOR_FG, 0, 0, state.progress * w, PROGRESS_BAR_H)
