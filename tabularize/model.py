from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import random

ATT_STATE = "state"    # the single attribute of a tabulated state

ATTRIBUTE_TYPES = ("int", "disc", "real")

Params = Tuple[str, ...]


@dataclass(frozen=True)
class Attribute:
    name: str
    type: str = "int"
    lower: Optional[float] = None
    upper: Optional[float] = None

    def __post_init__(self):
        if self.type not in ATTRIBUTE_TYPES:
            raise ValueError(f"Unknown attribute type: {self.type}")

    @property
    def lims(self) -> Tuple[Optional[float], Optional[float]]:
        return (self.lower, self.upper)


@dataclass(frozen=True)
class TransitionProbability:
    state: Any   # outcome state
    p: float     # probability of reaching it


@dataclass(frozen=True)
class TabulatedState:
    """A state of a tabulated domain: nothing but the id of a source state."""
    id: int

    def get(self, att: str) -> int:
        if att != ATT_STATE:
            raise KeyError(att)
        return self.id


class Action(ABC):
    """
    Capability interface every action of a domain implements.

    Only ``get_transitions`` is required; ``perform_action`` samples from the
    full distribution unless a subclass has a cheaper way to draw one outcome.
    """

    def __init__(self, name: str, parameter_classes: Tuple[str, ...] = ()):
        self.name = name
        self.parameter_classes = tuple(parameter_classes)

    @property
    def is_parameterized(self) -> bool:
        return len(self.parameter_classes) > 0

    def applicable_in_state(self, state, params: Params = ()) -> bool:
        return True

    @abstractmethod
    def get_transitions(self, state, params: Params = ()) -> List[TransitionProbability]:
        ...

    def perform_action(self, state, params: Params = (), rng: Optional[random.Random] = None):
        """Draw one outcome. Overrides only receive ``rng`` when a caller passes one."""
        tps = self.get_transitions(state, params)
        if not tps:
            raise ValueError(f"action {self.name!r} has no outcomes in {state!r}")
        r = (rng or random).random()
        acc = 0.0
        for tp in tps:
            acc += tp.p
            if r < acc:
                return tp.state
        return tps[-1].state

    def all_parameter_bindings(self, state) -> List[Params]:
        """
        Parameter tuples to try in ``state``; one empty binding when unparameterized.

        Subclasses with ``parameter_classes`` must override this.
        """
        if self.is_parameterized:
            raise NotImplementedError(
                f"parameterized action {self.name!r} must list its bindings"
            )
        return [()]

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Domain:
    """Named collection of attributes and actions."""

    def __init__(self, name: str = "domain"):
        self.name = name
        self.attributes: Dict[str, Attribute] = {}
        self.actions: List[Action] = []

    def add_attribute(self, att: Attribute) -> Attribute:
        self.attributes[att.name] = att
        return att

    def add_action(self, action: Action) -> Action:
        if any(a.name == action.name for a in self.actions):
            raise ValueError(f"duplicate action name: {action.name}")
        self.actions.append(action)
        return action

    def get_action(self, name: str) -> Action:
        for a in self.actions:
            if a.name == name:
                return a
        raise KeyError(name)

    def action_names(self) -> List[str]:
        return [a.name for a in self.actions]

    def __repr__(self):
        return f"Domain({self.name!r}, actions={self.action_names()})"
