"""
Tabulated view of a factored domain.

Some algorithms, and most code living outside this package, can only work
with a fully enumerated state space in which every state is a plain integer.
``TabulatedDomainWrapper`` takes any domain without parameterized actions and
produces such a domain: its states carry a single int attribute ``"state"``
and each of its actions forwards to the matching source action.

Seed states must be explored with ``add_reachable_states_from`` before
``generate_domain`` is called; the generated attribute bounds are fixed at
generation time.
"""

from __future__ import annotations
from typing import Any, List, Optional
import random
import warnings

from .canonical import KeyFn, canonical_key
from .engine import StateEnumerator
from .errors import UnsupportedDomainError
from .model import (
    ATT_STATE, Action, Attribute, Domain, Params, TabulatedState,
    TransitionProbability,
)


class TabulatedDomainWrapper:

    def __init__(self, input_domain: Domain, key_fn: KeyFn = canonical_key):
        self.input_domain = input_domain
        self.enumerator = StateEnumerator(input_domain, key_fn)
        self.tabulated_domain: Optional[Domain] = None
        self._generated_size = 0

    def add_reachable_states_from(self, seed: Any, **kwargs) -> dict:
        """Enumerate every state reachable from ``seed``; see StateEnumerator."""
        res = self.enumerator.find_reachable_states_and_enumerate(seed, **kwargs)
        if self.tabulated_domain is not None and len(self.enumerator) > self._generated_size:
            warnings.warn(
                f"{len(self.enumerator) - self._generated_size} states enumerated after "
                f"generate_domain(); the '{ATT_STATE}' attribute bounds are stale",
                RuntimeWarning,
                stacklevel=2,
            )
        return res

    def generate_domain(self) -> Domain:
        for src in self.input_domain.actions:
            if src.is_parameterized:
                raise UnsupportedDomainError(
                    f"cannot tabulate parameterized action {src.name!r} "
                    f"(parameter classes {src.parameter_classes})"
                )

        n = self.enumerator.num_states_enumerated()
        tab = Domain(f"{self.input_domain.name}_tabulated")
        tab.add_attribute(Attribute(ATT_STATE, "int", 0, n - 1))
        for src in self.input_domain.actions:
            tab.add_action(ActionWrapper(self, src))

        self.tabulated_domain = tab
        self._generated_size = n
        return tab

    def get_state_id(self, s: TabulatedState) -> int:
        return s.get(ATT_STATE)

    def get_source_domain_state(self, s: TabulatedState) -> Any:
        return self.enumerator.get_state_for_enumeration_id(self.get_state_id(s))

    def get_tabularized_state(self, s: Any) -> TabulatedState:
        return TabulatedState(self.enumerator.get_enumerated_id(s))


class ActionWrapper(Action):
    """
    Source action seen through the tabulated domain: decode the id, run the
    source action, encode the resulting state(s) back to ids.
    """

    def __init__(self, wrapper: TabulatedDomainWrapper, src_action: Action):
        super().__init__(src_action.name)
        self.wrapper = wrapper
        self.src_action = src_action

    def applicable_in_state(self, s: TabulatedState, params: Params = ()) -> bool:
        src_state = self.wrapper.get_source_domain_state(s)
        return self.src_action.applicable_in_state(src_state, params)

    def perform_action(self, s: TabulatedState, params: Params = (),
                       rng: Optional[random.Random] = None) -> TabulatedState:
        src_state = self.wrapper.get_source_domain_state(s)
        if rng is None:
            src_next = self.src_action.perform_action(src_state, params)
        else:
            src_next = self.src_action.perform_action(src_state, params, rng=rng)
        return self.wrapper.get_tabularized_state(src_next)

    def get_transitions(self, s: TabulatedState, params: Params = ()) -> List[TransitionProbability]:
        src_state = self.wrapper.get_source_domain_state(s)
        return [
            TransitionProbability(self.wrapper.get_tabularized_state(tp.state), tp.p)
            for tp in self.src_action.get_transitions(src_state, params)
        ]
