# scripts/plot_layers.py
from __future__ import annotations

"""
Plot per-level state counts written by enumerate_gridworld.py.

Reads one or more *_per_level.csv files (columns: depth, count) and draws
them on one figure, labelled by file stem.

Usage:
  python -m scripts.plot_layers runs/grid11x11_*_per_level.csv --out runs/plots/layers.png
"""

import argparse
import pathlib
from typing import List, Optional

import matplotlib.pyplot as plt
import pandas as pd


def load_per_level(path: pathlib.Path) -> Optional[pd.DataFrame]:
    if not path.exists():
        print(f"[warn] not found: {path}")
        return None
    df = pd.read_csv(path)
    missing = {"depth", "count"} - set(df.columns)
    if missing:
        print(f"[skip] {path}: missing columns {sorted(missing)}")
        return None
    print(f"[load] {path}")
    return df.sort_values("depth")


def savefig(path: pathlib.Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=160)
    plt.close()
    print(f"[ok] wrote {path}")


def plot_layers(paths: List[pathlib.Path], out: pathlib.Path, cumulative: bool = False) -> int:
    plt.figure(figsize=(8, 4.5))
    found = 0
    for p in paths:
        df = load_per_level(p)
        if df is None:
            continue
        counts = df["count"].cumsum() if cumulative else df["count"]
        label = p.name.removesuffix("_per_level.csv")
        plt.plot(df["depth"], counts, marker="o", label=label)
        found += 1

    if not found:
        plt.close()
        print("[skip] nothing to plot")
        return 0

    plt.xlabel("Depth")
    plt.ylabel("States enumerated" if cumulative else "New states per level")
    plt.title("Reachability layers")
    plt.legend()
    savefig(out)
    return found


def main():
    parser = argparse.ArgumentParser(description="Plot per-level enumeration counts.")
    parser.add_argument("csv", nargs="+", help="*_per_level.csv files")
    parser.add_argument("--out", default="runs/plots/layers.png")
    parser.add_argument("--cumulative", action="store_true",
                        help="Plot running totals instead of per-level counts")
    args = parser.parse_args()

    plot_layers([pathlib.Path(c) for c in args.csv], pathlib.Path(args.out), args.cumulative)


if __name__ == "__main__":
    main()
