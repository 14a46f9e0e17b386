# /experiments/sanity_rollout.py
"""
Sanity rollouts for DashEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Saves per-episode action sequences for exact replay

Usage examples (from repo root):
  # Both policies over 10 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic on the classic variant:
  python -m experiments.sanity_rollout --policies heuristic --variant classic --seeds 1,2,3
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple, Optional

import numpy as np

from src.env.dash_env import DashEnv
from src.game.sim import VARIANTS


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, press_prob: float = 0.15):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.random_sample() < press_prob)
    return act

def tiny_heuristic_policy_init():
    """
    Very small rule per mode (one-hot at obs[3:7] = cube, ship, ball, ufo):
      - cube / ufo: press when the next obstacle is close
      - ship: hold while in the lower half of the playfield
      - ball: never press (flipping sends it to the ceiling)
    """
    def act(obs: np.ndarray) -> int:
        y_norm = obs[0]
        cube, ship, ball, ufo = obs[3:7]
        obst_dx = obs[7]
        if ship == 1.0:
            return int(y_norm > 0.5)
        if ball == 1.0:
            return 0
        return int(obst_dx < 0.08)
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    variant: str,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    out_dir: Path) -> Tuple[int, float, float, bool, bool, Optional[str]]:
    """
    Returns: (ep_len, ret_sum, distance, terminated, truncated, death_cause)
    Also writes the action trace to disk if requested.
    """
    env = DashEnv(frame_skip=frame_skip, config=VARIANTS[variant])

    if policy_name == "random":
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    actions: List[int] = []
    ret_sum = 0.0
    ep_len = 0
    term = trunc = False

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
        distance = float(info.get("distance", 0.0))
        death_cause = info.get("death_cause", None)
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / variant / policy_name
        ensure_dir(trace_dir)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        meta_lines = [
            f"seed={seed}",
            f"variant={variant}",
            f"frame_skip={frame_skip}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    return ep_len, ret_sum, distance, bool(term), bool(trunc), death_cause


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--variant", type=str, default="modes", choices=sorted(VARIANTS))
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 10 defaults: 101..110")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=2_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action sequences for replay")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 111))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "variant", "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "distance",
        "terminated", "truncated", "death_cause",
    ]

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds "
          f"(variant={args.variant}, frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv} and traces under {out_dir}/traces/")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, dist, terminated, truncated, death_cause = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                variant=args.variant,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                out_dir=out_dir
            )
            row = [
                "DashEnv", args.variant, policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", f"{dist:.1f}",
                int(terminated), int(truncated), (death_cause or ""),
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  dist={dist:.1f}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}  cause={death_cause}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
