# src/game/controls.py
from __future__ import annotations


class InputLatch:
    """
    Jump input as seen by the simulation, read once per tick via `active()`.
    - hold=True: level sensitive, active for every tick the button is down
    - hold=False: edge triggered, active for one tick per press
    """
    def __init__(self, hold: bool = True):
        self.hold = hold
        self._held = False
        self._pending = False

    @property
    def held(self) -> bool:
        return self._held

    def press(self):
        if not self._held:
            self._pending = True
        self._held = True

    def release(self):
        self._held = False

    def active(self) -> bool:
        if self.hold:
            self._pending = False
            return self._held
        fired = self._pending
        self._pending = False
        return fired

    def clear(self):
        self._held = False
        self._pending = False
