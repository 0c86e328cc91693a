# scripts/run_expectation.py
import argparse
import csv
import pathlib
import sys

import matplotlib.pyplot as plt

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tabularize import GridWorld, tabularize_domain
from tabularize.metrics import expected_length

parser = argparse.ArgumentParser(description="Expected random-walk length to the far corner")
parser.add_argument("--size", type=int, default=6)
parser.add_argument("--runs", type=int, default=2000)
parser.add_argument("--outdir", default="benchmarks")
args = parser.parse_args()

probs = [0.25, 0.4, 0.55, 0.7, 0.85, 1.0]
means = []

for p in probs:
    world = GridWorld(args.size, args.size, success_prob=p)
    wrapper, tab = tabularize_domain(world.generate_domain(), [world.initial_state(0, 0)])
    start = wrapper.get_tabularized_state(world.initial_state(0, 0)).id
    goal = wrapper.get_tabularized_state(world.initial_state(args.size - 1, args.size - 1)).id
    mu, _ = expected_length(tab, start, lambda s: s == goal, runs=args.runs, max_steps=10_000)
    means.append(mu)
    print(f"p={p:.2f}  E[length] = {mu:.2f}")

outdir = pathlib.Path(args.outdir)
outdir.mkdir(parents=True, exist_ok=True)

plt.plot(probs, means, marker="o")
plt.xlabel("Success probability")
plt.ylabel("Expected steps to goal")
plt.title(f"Random walk on {args.size}x{args.size} grid")
plt.tight_layout()
plt.savefig(outdir / f"expectation_grid{args.size}.png", dpi=300)

with open(outdir / f"expectation_grid{args.size}.csv", "w", newline="") as f:
    writer = csv.writer(f)
    writer.writerow(["success_prob", "mean_length"])
    for p, mu in zip(probs, means):
        writer.writerow([p, mu])

print(f"Finished. Plot and CSV saved in {outdir}/.")
