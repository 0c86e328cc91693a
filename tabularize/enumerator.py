# tabularize/enumerator.py
from __future__ import annotations
from typing import Any, Iterable, List, Optional, Tuple

from .canonical import KeyFn, canonical_key
from .engine import StateEnumerator
from .model import Domain
from .wrapper import TabulatedDomainWrapper


def _run(domain: Domain, seed: Any, key_fn: KeyFn, max_depth: Optional[int]) -> dict:
    return StateEnumerator(domain, key_fn).find_reachable_states_and_enumerate(
        seed, max_depth=max_depth
    )


def count_reachable(domain: Domain, seed: Any, key_fn: KeyFn = canonical_key,
                    max_depth: Optional[int] = None) -> int:
    """Number of distinct states reachable from ``seed`` (seed included)."""
    return _run(domain, seed, key_fn, max_depth)["reachable_count"]


def per_level_counts(domain: Domain, seed: Any, key_fn: KeyFn = canonical_key,
                     max_depth: Optional[int] = None) -> List[int]:
    """States first discovered at each BFS depth, as a contiguous list from depth 0."""
    layers = _run(domain, seed, key_fn, max_depth)["layers"]
    if not layers:
        return [0]
    dmax = max(layers.keys())
    return [len(layers.get(d, [])) for d in range(0, dmax + 1)]


def tabularize_domain(domain: Domain, seeds: Iterable[Any], key_fn: KeyFn = canonical_key,
                      verbose: bool = False) -> Tuple[TabulatedDomainWrapper, Domain]:
    """Explore every seed, then generate the tabulated domain."""
    wrapper = TabulatedDomainWrapper(domain, key_fn)
    for seed in seeds:
        wrapper.add_reachable_states_from(seed, verbose=verbose)
    return wrapper, wrapper.generate_domain()
