# experiments/replay.py
"""
Replay tool for DashEnv traces written by sanity_rollout.

# Typical usage (run from REPO ROOT so `src/...` imports work)

# Replay a HEURISTIC episode by seed (uses experiments/runs/traces/modes/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay a specific actions file
python -m experiments.replay --trace experiments/runs/traces/classic/random/112_actions.npy --variant classic

# Controls during replay
SPACE = pause/resume
N     = single step (when paused)
R     = restart episode
ESC   = quit

# Notes
- Deterministic: the course is fixed, so variant + frame_skip + actions reproduce the run.
- With --trace the meta sidecar is not read; pass --variant / --frame-skip if they differ.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pygame

from src.env.dash_env import DashEnv
from src.game.config import COLOR_FG
from src.game.sim import VARIANTS

DEFAULT_OUT_DIR = "experiments/runs"

def find_trace(out_dir: Path, variant: str, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / variant / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def read_meta(trace_path: Path) -> Dict[str, str]:
    """Parse the `<seed>_meta.txt` sidecar next to an actions file (empty if missing)."""
    seed = trace_path.stem.split("_")[0]
    meta_path = trace_path.with_name(f"{seed}_meta.txt")
    meta: Dict[str, str] = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def load_actions(trace_path: Path) -> np.ndarray:
    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")
    return actions.astype(np.int64)

def _draw_overlay(env: DashEnv, step_idx: int, action: Optional[int]):
    surf = pygame.display.get_surface()
    if surf is None or env.state is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 16)
    s = env.state
    lines = [
        f"Step={step_idx}  Action={'-' if action is None else ('HOLD' if action else 'RELEASE')}",
        f"Mode={s.player.mode.value}  Dist={s.distance:.0f}px  Cause={s.death_cause or '-'}",
    ]
    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, COLOR_FG), (12, 12 + i * 20))
    pygame.display.flip()

def replay_episode(actions: np.ndarray, variant: str, frame_skip: int, seed: Optional[int] = None):
    """
    Replays an episode with on-screen overlay.
    Controls:
      SPACE: pause/resume   N: single-step when paused
      R: restart episode    ESC: quit
    """
    env = DashEnv(render_mode="human", frame_skip=frame_skip, config=VARIANTS[variant],
                  max_decisions=None)
    env.reset(seed=seed)
    env.render()

    paused = False
    single = False
    step_idx = 0
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_n and paused:
                        single = True
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused and not single:
                env.render()
                _draw_overlay(env, step_idx, action=None)
                clock.tick(60)
                continue
            single = False

            action = int(actions[step_idx])
            _, _, term, trunc, _ = env.step(action)
            _draw_overlay(env, step_idx, action)
            step_idx += 1

            if term or trunc:
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main(argv=None):
    ap = argparse.ArgumentParser(description="Replay a recorded DashEnv episode.")
    ap.add_argument("--seed", type=int, help="Episode seed used to locate the trace")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic")
    ap.add_argument("--variant", type=str, default="modes", choices=sorted(VARIANTS))
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR)
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    args = ap.parse_args(argv)

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = find_trace(Path(args.out_dir), args.variant, args.policy, args.seed)

    actions = load_actions(trace_path)
    meta = read_meta(trace_path) if not args.trace else {}

    fs = args.frame_skip
    if fs < 0:
        fs = int(meta.get("frame_skip", 4))

    print(f"Replaying {trace_path}  variant={args.variant}  steps={len(actions)}  frame_skip={fs}")
    print("Controls: SPACE pause/resume | N step (when paused) | R restart | ESC quit")

    replay_episode(actions, variant=args.variant, frame_skip=fs, seed=args.seed)

if __name__ == "__main__":
    main()
