# src/game/modes.py
from __future__ import annotations
from enum import Enum
from .config import GRAVITY


class Mode(str, Enum):
    """Player shape / physics profile."""
    CUBE = "cube"
    SHIP = "ship"
    BALL = "ball"
    UFO = "ufo"


def default_gravity(mode: Mode) -> float:
    """Gravity a portal resets to when switching into `mode`."""
    return -GRAVITY if mode is Mode.BALL else GRAVITY
