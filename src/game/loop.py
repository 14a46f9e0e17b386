# src/game/loop.py
from __future__ import annotations
from typing import Callable, Optional, Protocol
import pygame
from .config import FPS
from .controls import InputLatch
from .render import Surface, draw_frame
from .sim import SimState, step, reset_state

MSG_GAME_OVER = "Game Over!"
MSG_LEVEL_COMPLETE = "Level Complete!"


class Scheduler(Protocol):
    """Runs the next frame callback when the host is ready for it."""
    def schedule(self, callback: Callable[[], None]) -> None: ...
    def cancel(self) -> None: ...


class ManualScheduler:
    """Holds at most one pending callback; frames run only when asked."""
    def __init__(self):
        self._pending: Optional[Callable[[], None]] = None
        self.frames = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def run_pending(self) -> bool:
        cb, self._pending = self._pending, None
        if cb is None:
            return False
        self.frames += 1
        cb()
        return True

    def run(self, n: int) -> int:
        """Run up to n frames; stops early once nothing is scheduled."""
        done = 0
        while done < n and self.run_pending():
            done += 1
        return done


class ClockScheduler(ManualScheduler):
    """Frame pacing from pygame's clock; the window loop calls wait_frame() then run_pending()."""
    def __init__(self, fps: int = FPS):
        super().__init__()
        self.fps = fps
        self.clock = pygame.time.Clock()

    def wait_frame(self) -> float:
        return self.clock.tick(self.fps) / 1000.0


class GameLoop:
    """
    Lifecycle: Running -> {GameOver, LevelComplete} -> restart() -> Running.
    Each tick reads the latch once, steps the state, renders, and reschedules
    itself unless the run just ended.
    """
    def __init__(self,
                 state: SimState,
                 latch: InputLatch,
                 scheduler: Scheduler,
                 surface: Optional[Surface] = None,
                 on_terminal: Optional[Callable[[str], None]] = None,
                 on_restart: Optional[Callable[[], None]] = None):
        self.state = state
        self.latch = latch
        self.scheduler = scheduler
        self.surface = surface
        self.on_terminal = on_terminal
        self.on_restart = on_restart
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def message(self) -> Optional[str]:
        if self.state.game_over:
            return MSG_GAME_OVER
        if self.state.level_complete:
            return MSG_LEVEL_COMPLETE
        return None

    def start(self):
        if self._running or self.state.terminal:
            return
        self._running = True
        self.scheduler.schedule(self.tick)

    def stop(self):
        self._running = False
        self.scheduler.cancel()

    def tick(self):
        if not self._running:
            return
        was_terminal = self.state.terminal
        step(self.state, self.latch.active())
        self.render()

        if self.state.terminal:
            self.stop()
            if not was_terminal and self.on_terminal is not None:
                self.on_terminal(self.message)
        else:
            self.scheduler.schedule(self.tick)

    def render(self):
        if self.surface is not None:
            draw_frame(self.surface, self.state)

    def restart(self):
        self.stop()
        reset_state(self.state)
        self.latch.clear()
        if self.on_restart is not None:
            self.on_restart()
        self.start()
