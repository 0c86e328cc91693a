# scripts/enumerate_gridworld.py
from __future__ import annotations

import argparse
import csv
import json
import pathlib
import sys
import time
from datetime import datetime, timezone

import numpy as np
import pandas as pd

# allow "python scripts/enumerate_gridworld.py" from a source checkout
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tabularize import GridWorld, TabulatedDomainWrapper, four_rooms
from tabularize.metrics import avg_branching, transition_tensor


def positive_int(val: str) -> int:
    iv = int(val)
    if iv <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return iv


def probability(val: str) -> float:
    fv = float(val)
    if not 0.0 <= fv <= 1.0:
        raise argparse.ArgumentTypeError("must be in [0, 1]")
    return fv


def _ensure_parent(path: pathlib.Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _save_layer_sizes_csv(path: pathlib.Path, per_level: list[int]) -> None:
    _ensure_parent(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(["depth", "count"])
        for d, c in enumerate(per_level):
            w.writerow([d, c])


def _save_states_csv(path: pathlib.Path, wrapper: TabulatedDomainWrapper) -> None:
    _ensure_parent(path)
    enum = wrapper.enumerator
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(["id", "depth", "state"])
        for sid, st in enumerate(enum.states()):
            w.writerow([sid, enum.depth_of(sid), json.dumps(st, separators=(",", ":"))])


def _save_meta_json(path: pathlib.Path, args: argparse.Namespace, res: dict,
                    per_level: list[int], actions: list[str]) -> None:
    _ensure_parent(path)
    meta = {
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "params": {
            "width": args.width,
            "height": args.height,
            "four_rooms": args.four_rooms,
            "success_prob": args.success_prob,
            "seed": [args.x, args.y],
        },
        "summary": {
            "num_states": res["reachable_count"],
            "transitions": res["transitions"],
            "avg_branching": avg_branching(res["transitions"], res["reachable_count"]),
            "depths": len(per_level),
            "per_level": per_level,
            "actions": actions,
        },
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)


def _save_per_level_parquet(path: pathlib.Path, per_level: list[int]) -> bool:
    _ensure_parent(path)
    df = pd.DataFrame({"depth": list(range(len(per_level))), "count": per_level})
    try:
        df.to_parquet(path, index=False)
        return True
    except (ImportError, ValueError) as e:
        print(f"[warn] Failed to save Parquet ({e}); skip.")
        return False


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Enumerate a grid world and dump its tabulated form"
    )
    parser.add_argument("--width", type=positive_int, default=11)
    parser.add_argument("--height", type=positive_int, default=11)
    parser.add_argument(
        "--four-rooms", action="store_true",
        help="Use the four-rooms wall layout (needs a square grid)",
    )
    parser.add_argument("--success-prob", type=probability, default=0.8)
    parser.add_argument("-x", type=int, default=0, help="Seed cell x")
    parser.add_argument("-y", type=int, default=0, help="Seed cell y")
    parser.add_argument("--verbose", action="store_true", help="Show progress")
    parser.add_argument(
        "--out-prefix",
        type=str,
        default=None,
        help="Path prefix for outputs (*_per_level.csv, *_meta.json, *_T.npy). "
             "If omitted, a timestamped prefix under ./runs/ is used.",
    )
    parser.add_argument(
        "--dump-states", action="store_true",
        help="Additionally save every enumerated state with its id into a CSV.",
    )
    parser.add_argument(
        "--out-parquet", action="store_true",
        help="Additionally save per-level counts to Parquet (requires pyarrow).",
    )
    args = parser.parse_args()

    if args.four_rooms and args.width != args.height:
        parser.error("--four-rooms needs --width == --height")
    walls = four_rooms(args.width) if args.four_rooms else ()
    world = GridWorld(args.width, args.height, walls, args.success_prob)

    print(f"Running grid {args.width}x{args.height}  four_rooms={args.four_rooms}  "
          f"p={args.success_prob}  seed=({args.x}, {args.y})")

    wrapper = TabulatedDomainWrapper(world.generate_domain())
    t0 = time.perf_counter()
    res = wrapper.add_reachable_states_from(
        world.initial_state(args.x, args.y), verbose=args.verbose
    )
    tab_domain = wrapper.generate_domain()
    T = transition_tensor(tab_domain)
    t1 = time.perf_counter()

    depths = sorted(res["layers"].keys())
    per_level = [res["layer_sizes"].get(d, 0) for d in range(depths[0], depths[-1] + 1)]
    print("num_states     :", res["reachable_count"])
    print("transitions    :", res["transitions"])
    print("per_level      :", per_level)
    print(f"elapsed        : {t1 - t0:.2f}s")

    prefix = args.out_prefix
    if prefix is None:
        prefix = f"runs/grid{args.width}x{args.height}_{int(time.time())}"
        print(f"[info] --out-prefix not set; using default: {prefix}")
    base = pathlib.Path(prefix)

    csv_path = base.with_name(base.name + "_per_level.csv")
    meta_path = base.with_name(base.name + "_meta.json")
    tensor_path = base.with_name(base.name + "_T.npy")
    _save_layer_sizes_csv(csv_path, per_level)
    _save_meta_json(meta_path, args, res, per_level, tab_domain.action_names())
    _ensure_parent(tensor_path)
    np.save(str(tensor_path), T)
    for p in (csv_path, meta_path, tensor_path):
        print(f"[saved] {p}")

    if args.dump_states:
        states_csv = base.with_name(base.name + "_states.csv")
        _save_states_csv(states_csv, wrapper)
        print(f"[saved] {states_csv}")

    if args.out_parquet:
        per_level_parquet = base.with_name(base.name + "_per_level.parquet")
        if _save_per_level_parquet(per_level_parquet, per_level):
            print(f"[saved] {per_level_parquet}")


if __name__ == "__main__":
    main()
