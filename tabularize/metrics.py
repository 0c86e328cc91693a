"""
Analysis helpers over a tabulated domain:
  • avg_branching      — average branching factor from enumeration stats
  • transition_tensor  — dense T[a, s, s'] array for tabular solvers
  • random_run / expected_length — Monte-Carlo episode length
"""

from __future__ import annotations
from statistics import mean, stdev
from typing import Callable, Optional, Tuple
import random

import numpy as np
from tqdm import trange

from .model import ATT_STATE, Domain, TabulatedState


def avg_branching(transitions: int, visited: int) -> float:
    """Rough branching factor: total explored edges / visited nodes."""
    return transitions / visited if visited else 0.0


def num_states(tab_domain: Domain) -> int:
    lower, upper = tab_domain.attributes[ATT_STATE].lims
    return int(upper) - int(lower) + 1


def transition_tensor(tab_domain: Domain) -> np.ndarray:
    """
    T[a, s, s'] = P(s' | s, a), actions in domain order.

    Rows of actions that are not applicable in s stay all-zero.
    """
    n = num_states(tab_domain)
    T = np.zeros((len(tab_domain.actions), n, n), dtype=float)
    for a, action in enumerate(tab_domain.actions):
        for s in range(n):
            ts = TabulatedState(s)
            if not action.applicable_in_state(ts):
                continue
            for tp in action.get_transitions(ts):
                T[a, s, tp.state.id] += tp.p
    return T


def random_run(tab_domain: Domain, start: int, is_terminal: Callable[[int], bool],
               max_steps: int = 1000, rng: Optional[random.Random] = None) -> int:
    """
    Follow uniformly random applicable actions from ``start`` until a terminal
    id or a dead end is reached. Return the number of steps used.
    """
    rng = rng or random.Random()
    state = TabulatedState(start)
    for step in range(max_steps):
        if is_terminal(state.id):
            return step
        actions = [a for a in tab_domain.actions if a.applicable_in_state(state)]
        if not actions:
            return step
        state = rng.choice(actions).perform_action(state, rng=rng)
    return max_steps


def expected_length(tab_domain: Domain, start: int, is_terminal: Callable[[int], bool],
                    runs: int = 10_000, max_steps: int = 1000,
                    seed: int = 42) -> Tuple[float, float]:
    rng = random.Random(seed)   # reproducible
    lengths = [random_run(tab_domain, start, is_terminal, max_steps, rng)
               for _ in trange(runs, desc=f"{tab_domain.name}", leave=False)]
    mu = mean(lengths)
    sigma = stdev(lengths) if len(lengths) > 1 else 0.0
    return mu, sigma
