# src/env/dash_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.game.config import FPS
from src.game.modes import Mode
from src.game.render import PygameSurface, draw_frame
from src.game.sim import RunConfig, MODES, SimState, new_state, step
from src.env.observations import build_observation, OBS_SIZE


class DashEnv(gym.Env):
    """
    Dash runner Gymnasium environment (vector observations).
    - One simulation tick per frame; the agent acts every `frame_skip` ticks.
    - Actions: 0 = release, 1 = hold / press jump.
    - Observation: shape (12,), float32 (see build_observation).
    The course is fixed, so `seed` only seeds gymnasium's RNG.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 config: RunConfig = MODES,
                 max_decisions: Optional[int] = 1000):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config
        self.max_decisions = max_decisions

        self.action_space = gym.spaces.Discrete(2)

        # [y, vy, grav, cube, ship, ball, ufo, obst_dx, obst_h, portal_dx, portal_mode, progress]
        low = np.array([0.0, -1.0, -1.0] + [0.0] * len(Mode) + [0.0, 0.0, 0.0, -1.0, 0.0], dtype=np.float32)
        high = np.array([1.0, 1.0, 1.0] + [1.0] * len(Mode) + [1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)
        assert low.shape == (OBS_SIZE,)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.state: Optional[SimState] = None
        self.timestep: int = 0  # decision steps elapsed

        # Rendering
        self.screen = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)
        self.state = new_state(self.config)
        self.timestep = 0
        return self._get_obs(), self._info()

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.state is not None, "Call reset() before step()"

        pressed = int(action) == 1
        for _ in range(self.frame_skip):
            step(self.state, pressed)
            if self.state.terminal:
                break

        if self.state.game_over:
            reward = -1.0
        elif self.state.level_complete:
            reward = 10.0
        else:
            reward = 1.0

        self.timestep += 1
        terminated = self.state.terminal
        truncated = (not terminated and self.max_decisions is not None
                     and self.timestep >= self.max_decisions)

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.state is not None
        return build_observation(self.state)

    def _info(self) -> Dict[str, Any]:
        s = self.state
        return {
            "distance": s.distance,
            "ticks": s.ticks,
            "timestep": self.timestep,
            "mode": s.player.mode.value,
            "death_cause": s.death_cause,
            "level_complete": s.level_complete,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.state is None:
            return None

        if self.screen is None:
            size = (self.state.viewport_w, self.state.viewport_h)
            if self.render_mode == "human":
                pygame.init()
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Dash Runner - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)

        draw_frame(PygameSurface(self.screen), self.state)

        if self.render_mode == "human":
            # Pump events so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
                pygame.quit()
            self.screen = None
            self.clock = None
