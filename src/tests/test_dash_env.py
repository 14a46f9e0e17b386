# src/tests/test_dash_env.py
"""
Quick tests for DashEnv (Gymnasium environment) and its observation builder.

Usage (from repo root):
  python -m pytest src/tests/test_dash_env.py
  python -m src.tests.test_dash_env --render
"""

from __future__ import annotations
import argparse
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Tuple

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
import numpy as np
from gymnasium.utils.env_checker import check_env

from src.env.dash_env import DashEnv
from src.env.observations import build_observation, OBS_SIZE
from src.game.level import Obstacle, Portal
from src.game.modes import Mode
from src.game.sim import CLASSIC, MODES, new_state


def test_api_check():
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = DashEnv()
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()

def test_smoke_random_rollout():
    """Random rollout: no crashes, obs in space, float rewards, proper terminations."""
    for config in (CLASSIC, MODES):
        env = DashEnv(config=config)
        try:
            obs, info = env.reset(seed=7)
            assert env.observation_space.contains(obs), "Initial observation not in space"
            env.action_space.seed(7)
            for t in range(400):
                obs, r, term, trunc, info = env.step(env.action_space.sample())
                assert isinstance(r, float), "Reward must be a float"
                assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
                if term or trunc:
                    break
        finally:
            env.close()

def test_noop_dies_on_first_obstacle():
    env = DashEnv(config=CLASSIC, frame_skip=4)
    try:
        env.reset()
        rewards = []
        term = False
        while not term:
            _, r, term, trunc, info = env.step(0)
            rewards.append(r)
            assert not trunc
        assert rewards[-1] == -1.0 and all(r == 1.0 for r in rewards[:-1])
        assert info["death_cause"] == "obstacle"
        assert info["ticks"] == 102
        assert len(rewards) == 26  # ceil(102 / 4)
    finally:
        env.close()

def test_truncation():
    env = DashEnv(config=MODES, max_decisions=3)
    try:
        env.reset()
        for _ in range(2):
            _, _, term, trunc, _ = env.step(0)
            assert not term and not trunc
        _, _, term, trunc, _ = env.step(0)
        assert trunc and not term
    finally:
        env.close()

def test_determinism():
    """Same action sequence => identical obs/reward/terminal flags."""
    def rollout(action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = DashEnv()
        traj = []
        try:
            env.reset(seed=1)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 2)) for _ in range(300)]
    t1, t2 = rollout(action_seq), rollout(action_seq)
    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        assert np.array_equal(o1, o2), f"Determinism: obs mismatch at step {i}"
        assert (r1, te1, tr1) == (r2, te2, tr2), f"Determinism: transition mismatch at step {i}"

def test_rgb_array_render():
    env = DashEnv(render_mode="rgb_array")
    try:
        env.reset()
        frame = env.render()
        assert frame.shape == (env.state.viewport_h, env.state.viewport_w, 3)
        assert frame.dtype == np.uint8
    finally:
        env.close()


# ------------------------ Observations ------------------------

def test_observation_layout():
    s = new_state(MODES)
    s.level.obstacles = [Obstacle(s.player.x + s.player.w + 96.0, 50.0, 100.0)]
    s.level.portals = [Portal(s.player.x + 480.0, Mode.BALL)]
    obs = build_observation(s)
    assert isinstance(obs, np.ndarray) and obs.dtype == np.float32 and obs.shape == (OBS_SIZE,)
    assert obs[0] == 0.0 and obs[2] == 1.0
    assert list(obs[3:7]) == [1.0, 0.0, 0.0, 0.0], "cube one-hot"
    assert np.isclose(obs[7], 0.1), "96 px ahead over a 960 px window"
    assert np.isclose(obs[8], 100.0 / s.ground_y)
    assert np.isclose(obs[9], 0.5)
    assert np.isclose(obs[10], 2 / 3), "ball is index 2 of 4"
    assert np.isclose(obs[11], s.progress)

def test_observation_empty_course():
    s = new_state(CLASSIC)
    s.level.obstacles = []
    obs = build_observation(s)
    assert obs[7] == 1.0 and obs[8] == 0.0
    assert obs[9] == 1.0 and obs[10] == -1.0


# ------------------------ Rollout tooling ------------------------

def test_rollout_trace_roundtrip():
    from experiments.sanity_rollout import run_one_episode
    from experiments.replay import find_trace, load_actions, read_meta

    with tempfile.TemporaryDirectory() as tmp:
        out_dir = Path(tmp)
        ep_len, ret, dist, term, trunc, cause = run_one_episode(
            policy_name="heuristic", seed=3, variant="classic", frame_skip=4,
            steps_limit=50, save_traces=True, out_dir=out_dir)
        assert 1 <= ep_len <= 50
        path = find_trace(out_dir, "classic", "heuristic", 3)
        actions = load_actions(path)
        assert actions.shape == (ep_len,)
        meta = read_meta(path)
        assert meta["frame_skip"] == "4" and meta["variant"] == "classic"


def render_demo(steps: int, frame_skip: int) -> None:
    """Open a window and run a short NOOP demo to eyeball scrolling and collisions."""
    env = DashEnv(render_mode="human", frame_skip=frame_skip)
    try:
        env.reset()
        for _ in range(steps):
            _, _, term, trunc, _ = env.step(0)
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Render demo finished")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--frame-skip", type=int, default=1)
    args = ap.parse_args()

    tests = [(name, fn) for name, fn in sorted(globals().items())
             if name.startswith("test_") and callable(fn)]
    failed = 0
    for name, fn in tests:
        try:
            fn()
            print(f"✓ {name}")
        except AssertionError as e:
            failed += 1
            print(f"✗ {name}: {e}", file=sys.stderr)
    if args.render:
        render_demo(steps=300, frame_skip=args.frame_skip)
    if failed:
        sys.exit(1)
    print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
