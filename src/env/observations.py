# src/env/observations.py
from __future__ import annotations
import numpy as np
from ..game.config import WIDTH, JUMP_POWER
from ..game.modes import Mode
from ..game.sim import SimState

MODES = tuple(Mode)                 # one-hot order
OBS_SIZE = 5 + len(MODES) + 3
VY_SCALE = abs(JUMP_POWER) * 2      # |dy| at which vy_norm saturates
LOOKAHEAD = float(WIDTH)            # horizontal distances are normalised by this

def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)

def build_observation(state: SimState) -> np.ndarray:
    """
    Fixed-size float32 view of the state:
      [y_norm, vy_norm, grav_sign, cube, ship, ball, ufo,
       obst_dx, obst_h, portal_dx, portal_mode, progress]
    Distances are clamped to [0, 1] (1 = nothing within one screen).
    portal_mode is the portal's one-hot index / 3, or -1 when there is none.
    """
    p = state.player
    ground_y = state.ground_y
    obs = np.zeros(OBS_SIZE, dtype=np.float32)

    obs[0] = _clamp(p.y / max(1.0, ground_y - p.h), 0.0, 1.0)
    obs[1] = _clamp(p.dy / VY_SCALE, -1.0, 1.0)
    obs[2] = 1.0 if p.gravity > 0 else -1.0
    obs[3 + MODES.index(p.mode)] = 1.0

    b = 3 + len(MODES)
    ob = state.level.next_obstacle(p.x)
    if ob is None:
        obs[b], obs[b + 1] = 1.0, 0.0
    else:
        obs[b] = _clamp((ob.x - (p.x + p.w)) / LOOKAHEAD, 0.0, 1.0)
        obs[b + 1] = _clamp(ob.h / max(1.0, ground_y), 0.0, 1.0)

    portal = state.level.next_portal(p.x)
    if portal is None:
        obs[b + 2], obs[b + 3] = 1.0, -1.0
    else:
        obs[b + 2] = _clamp((portal.x - p.x) / LOOKAHEAD, 0.0, 1.0)
        obs[b + 3] = MODES.index(portal.mode) / (len(MODES) - 1)

    obs[b + 4] = state.progress
    return obs
