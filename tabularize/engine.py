from __future__ import annotations

from collections import deque
from numbers import Integral
from typing import Any, Dict, Hashable, List, Optional, Set

from tqdm import tqdm

from .canonical import KeyFn, canonical_key
from .errors import NotEnumeratedError, OutOfRangeError
from .model import Domain


class StateEnumerator:
    """
    Assigns dense integer ids to the states reachable from seed states.

    Ids are handed out in first-discovery order starting at 0 and never
    change. Two states get the same id iff ``key_fn`` maps them to the same
    key. The table only grows, and only through ``enumerate_state`` and
    ``find_reachable_states_and_enumerate``.

    The search does not bound the reachable set on its own: a domain with an
    unbounded state space keeps it running until memory runs out, unless
    ``max_depth`` is given.
    """

    def __init__(self, domain: Domain, key_fn: KeyFn = canonical_key):
        self.domain = domain
        self.key_fn = key_fn
        self._key_to_id: Dict[Hashable, int] = {}
        self._states: List[Any] = []
        self._depth: List[int] = []
        self._expanded: Set[int] = set()   # ids whose successors are all in the table

    # ----------------------------- table -----------------------------
    def _add(self, key: Hashable, state: Any, depth: int) -> int:
        sid = len(self._states)
        self._key_to_id[key] = sid
        self._states.append(state)
        self._depth.append(depth)
        return sid

    def enumerate_state(self, state: Any) -> int:
        """Id of ``state``, assigning the next free one if it is new. No search."""
        key = self.key_fn(state)
        sid = self._key_to_id.get(key)
        if sid is None:
            sid = self._add(key, state, 0)
        return sid

    def num_states_enumerated(self) -> int:
        return len(self._states)

    def get_enumerated_id(self, state: Any) -> int:
        sid = self._key_to_id.get(self.key_fn(state))
        if sid is None:
            raise NotEnumeratedError(state)
        return sid

    def get_state_for_enumeration_id(self, sid: int) -> Any:
        n = len(self._states)
        if isinstance(sid, bool) or not isinstance(sid, Integral) or not 0 <= sid < n:
            raise OutOfRangeError(sid, n)
        return self._states[sid]

    def depth_of(self, sid: int) -> int:
        """BFS depth at which ``sid`` was found, relative to the seed of its pass."""
        self.get_state_for_enumeration_id(sid)
        return self._depth[sid]

    def states(self) -> List[Any]:
        return list(self._states)

    def __len__(self):
        return len(self._states)

    def __contains__(self, state: Any) -> bool:
        return self.key_fn(state) in self._key_to_id

    # ----------------------------- BFS -----------------------------
    def find_reachable_states_and_enumerate(
        self,
        seed: Any,
        max_depth: Optional[int] = None,
        verbose: bool = False,
    ) -> dict:
        """
        Breadth-first search from ``seed`` over every applicable action and
        every outcome of its transition distribution.

        States already in the table keep their id. States that an earlier pass
        has expanded are not expanded again; states that were only added
        (``enumerate_state``, or found at a ``max_depth`` bound) are expanded
        when this pass reaches them. States found at ``max_depth`` are
        enumerated but not expanded.
        """
        start_n = len(self._states)
        layers: Dict[int, List[int]] = {}
        transitions = 0

        seed_key = self.key_fn(seed)
        seed_id = self._key_to_id.get(seed_key)
        if seed_id is None:
            seed_id = self._add(seed_key, seed, 0)
            layers[0] = [seed_id]
        queue = deque()
        queued: Set[int] = set()
        if seed_id not in self._expanded:
            queue.append((seed_id, 0))
            queued.add(seed_id)

        bar = tqdm(desc="enumerate", unit="state", disable=not verbose)
        try:
            while queue:
                sid, depth = queue.popleft()
                bar.update(1)
                if max_depth is not None and depth >= max_depth:
                    continue
                state = self._states[sid]
                local_seen = set()
                for action in self.domain.actions:
                    for params in action.all_parameter_bindings(state):
                        if not action.applicable_in_state(state, params):
                            continue
                        for tp in action.get_transitions(state, params):
                            key = self.key_fn(tp.state)
                            if key in local_seen:
                                continue
                            local_seen.add(key)
                            transitions += 1
                            nid = self._key_to_id.get(key)
                            if nid is None:
                                nid = self._add(key, tp.state, depth + 1)
                                layers.setdefault(depth + 1, []).append(nid)
                            if nid not in self._expanded and nid not in queued:
                                queued.add(nid)
                                queue.append((nid, depth + 1))
                self._expanded.add(sid)
        finally:
            bar.close()

        new_states = len(self._states) - start_n
        if verbose:
            print(f"[enumerate] new={new_states}  total={len(self._states)}  "
                  f"transitions={transitions}", flush=True)

        return {
            "new_states": new_states,
            "reachable_count": len(self._states),
            "layers": layers,
            "layer_sizes": {d: len(ids) for d, ids in layers.items()},
            "transitions": transitions,
        }
