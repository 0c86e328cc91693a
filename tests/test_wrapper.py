import random
from collections import Counter

import pytest

from tabularize.canonical import canonical_key, identity_key
from tabularize.enumerator import tabularize_domain
from tabularize.errors import NotEnumeratedError, OutOfRangeError, UnsupportedDomainError
from tabularize.gridworld import GridWorld
from tabularize.model import ATT_STATE, Action, Domain, TabulatedState, TransitionProbability
from tabularize.wrapper import ActionWrapper, TabulatedDomainWrapper


class TableAction(Action):

    def __init__(self, name, table, parameter_classes=()):
        super().__init__(name, parameter_classes)
        self.table = table

    def applicable_in_state(self, state, params=()):
        return state in self.table

    def get_transitions(self, state, params=()):
        return [TransitionProbability(s, p) for s, p in self.table[state]]


class BoundAction(TableAction):
    """Parameterized action: one binding per object of class 'block'."""

    def all_parameter_bindings(self, state):
        return [("b1",)]


def two_cycle_wrapper():
    d = Domain("cycle")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)], "S1": [("S0", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    w.add_reachable_states_from("S0")
    return w


def grid_wrapper(p=0.8):
    world = GridWorld(3, 3, success_prob=p)
    wrapper, tab = tabularize_domain(world.generate_domain(), [world.initial_state(0, 0)])
    return world, wrapper, tab


def test_generated_domain_shape():
    world, wrapper, tab = grid_wrapper()
    assert list(tab.attributes) == [ATT_STATE]
    assert tab.attributes[ATT_STATE].type == "int"
    assert tab.attributes[ATT_STATE].lims == (0, 8)
    assert tab.action_names() == wrapper.input_domain.action_names()
    assert all(isinstance(a, ActionWrapper) for a in tab.actions)
    assert not any(a.is_parameterized for a in tab.actions)
    assert wrapper.tabulated_domain is tab
    assert tab.name == "grid3x3_tabulated"


def test_wrappers_share_enumerator():
    _, wrapper, tab = grid_wrapper()
    for a in tab.actions:
        assert a.wrapper is wrapper
        assert a.wrapper.enumerator is wrapper.enumerator


def test_two_cycle_scenario():
    w = two_cycle_wrapper()
    tab = w.generate_domain()
    a = tab.get_action("A")
    s = TabulatedState(0)
    s1 = a.perform_action(s)
    assert s1 == TabulatedState(1)
    assert a.perform_action(s1) == TabulatedState(0)


def test_round_trip():
    world, wrapper, _ = grid_wrapper()
    for x in range(3):
        for y in range(3):
            s = world.initial_state(x, y)
            ts = wrapper.get_tabularized_state(s)
            assert canonical_key(wrapper.get_source_domain_state(ts)) == canonical_key(s)
            assert wrapper.get_state_id(ts) == ts.id


def test_get_tabularized_state_is_fresh():
    world, wrapper, _ = grid_wrapper()
    s = world.initial_state(1, 1)
    assert wrapper.get_tabularized_state(s) is not wrapper.get_tabularized_state(s)


def test_transition_fidelity():
    _, wrapper, tab = grid_wrapper()
    src_domain = wrapper.input_domain
    for sid in range(wrapper.enumerator.num_states_enumerated()):
        ts = TabulatedState(sid)
        src = wrapper.get_source_domain_state(ts)
        for a in tab.actions:
            got = Counter(
                (canonical_key(wrapper.get_source_domain_state(tp.state)), tp.p)
                for tp in a.get_transitions(ts)
            )
            want = Counter(
                (canonical_key(tp.state), tp.p)
                for tp in src_domain.get_action(a.name).get_transitions(src)
            )
            assert got == want


def test_applicability_is_delegated():
    d = Domain("partial")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    w.add_reachable_states_from("S0")
    a = w.generate_domain().get_action("A")
    assert a.applicable_in_state(TabulatedState(0))
    assert not a.applicable_in_state(TabulatedState(1))


def test_perform_action_samples_enumerated_outcome():
    _, wrapper, tab = grid_wrapper()
    rng = random.Random(7)
    a = tab.get_action("north")
    outcomes = {a.perform_action(TabulatedState(0), rng=rng).id for _ in range(50)}
    allowed = {tp.state.id for tp in a.get_transitions(TabulatedState(0))}
    assert outcomes <= allowed


def test_parameterized_domain_rejected_without_partial_domain():
    d = Domain("blocks")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)]}))
    d.add_action(BoundAction("stack", {"S1": [("S2", 1.0)]}, parameter_classes=("block",)))
    w = TabulatedDomainWrapper(d, identity_key)
    # enumeration itself still walks the parameter bindings
    w.add_reachable_states_from("S0")
    assert w.enumerator.num_states_enumerated() == 3
    with pytest.raises(UnsupportedDomainError):
        w.generate_domain()
    assert w.tabulated_domain is None


def test_unenumerated_successor_fails():
    d = Domain("cycle")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)], "S1": [("S0", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    w.add_reachable_states_from("S0", max_depth=0)
    a = w.generate_domain().get_action("A")
    with pytest.raises(NotEnumeratedError):
        a.perform_action(TabulatedState(0))
    with pytest.raises(NotEnumeratedError):
        a.get_transitions(TabulatedState(0))


def test_translation_errors_propagate():
    w = two_cycle_wrapper()
    w.generate_domain()
    with pytest.raises(OutOfRangeError):
        w.get_source_domain_state(TabulatedState(2))
    with pytest.raises(NotEnumeratedError):
        w.get_tabularized_state("S5")


def test_tabulated_state_single_attribute():
    ts = TabulatedState(4)
    assert ts.get(ATT_STATE) == 4
    with pytest.raises(KeyError):
        ts.get("x")


def test_growth_after_generation_warns():
    d = Domain("two")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)], "T0": [("T0", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    w.add_reachable_states_from("S0")
    tab = w.generate_domain()
    with pytest.warns(RuntimeWarning):
        w.add_reachable_states_from("T0")
    # the stale domain keeps its old bounds until regenerated
    assert tab.attributes[ATT_STATE].lims == (0, 1)
    assert w.generate_domain().attributes[ATT_STATE].lims == (0, 2)


def test_errors_are_standard_lookups():
    assert issubclass(NotEnumeratedError, LookupError)
    assert issubclass(OutOfRangeError, IndexError)
    assert issubclass(UnsupportedDomainError, ValueError)


def test_state_added_without_search_is_expanded_by_later_pass():
    d = Domain("cycle3")
    d.add_action(TableAction("A", {"S0": [("S1", 1.0)], "S1": [("S2", 1.0)], "S2": [("S0", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    assert w.enumerator.enumerate_state("S1") == 0
    w.add_reachable_states_from("S1")
    a = w.generate_domain().get_action("A")
    s = TabulatedState(0)
    for _ in range(3):
        s = a.perform_action(s)
    assert s == TabulatedState(0)
    assert w.get_source_domain_state(a.perform_action(TabulatedState(0))) == "S2"


class SampleOnlyAction(TableAction):
    """Source action whose sampler knows nothing about random generators."""

    def perform_action(self, state, params=()):
        return self.table[state][0][0]


def test_source_sampler_without_rng_parameter():
    d = Domain("plain")
    d.add_action(SampleOnlyAction("A", {"S0": [("S1", 1.0)], "S1": [("S0", 1.0)]}))
    w = TabulatedDomainWrapper(d, identity_key)
    w.add_reachable_states_from("S0")
    a = w.generate_domain().get_action("A")
    assert a.perform_action(TabulatedState(0)) == TabulatedState(1)


def test_parameterized_action_must_list_bindings():
    a = TableAction("stack", {"S0": [("S0", 1.0)]}, parameter_classes=("block",))
    with pytest.raises(NotImplementedError):
        a.all_parameter_bindings("S0")
    assert TableAction("A", {}).all_parameter_bindings("S0") == [()]
