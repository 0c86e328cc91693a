"""
tabularize: enumerate the reachable states of a factored domain and expose
it as a tabulated domain whose states are dense integer ids.

Usage:
    from tabularize import GridWorld, TabulatedDomainWrapper

    world = GridWorld(5, 5)
    wrapper = TabulatedDomainWrapper(world.generate_domain())
    wrapper.add_reachable_states_from(world.initial_state(0, 0))
    tab_domain = wrapper.generate_domain()
"""

from .errors import (
    TabularizeError, NotEnumeratedError, OutOfRangeError, UnsupportedDomainError,
)
from .model import (
    ATT_STATE, Action, Attribute, Domain, TabulatedState,
    TransitionProbability,
)
from .canonical import canonical_key, identity_key, masked_key
from .engine import StateEnumerator
from .wrapper import TabulatedDomainWrapper, ActionWrapper
from .enumerator import count_reachable, per_level_counts, tabularize_domain
from .gridworld import GridWorld, four_rooms

__all__ = [
    "TabularizeError", "NotEnumeratedError", "OutOfRangeError", "UnsupportedDomainError",
    "ATT_STATE", "Action", "Attribute", "Domain", "TabulatedState",
    "TransitionProbability",
    "canonical_key", "identity_key", "masked_key",
    "StateEnumerator",
    "TabulatedDomainWrapper", "ActionWrapper",
    "count_reachable", "per_level_counts", "tabularize_domain",
    "GridWorld", "four_rooms",
]
