from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .model import Action, Attribute, Domain, TransitionProbability

Cell = Tuple[int, int]

# name -> (dx, dy); order fixes the action order of the generated domain
DIRECTIONS: Dict[str, Cell] = {
    "north": (0, 1),
    "south": (0, -1),
    "east": (1, 0),
    "west": (-1, 0),
}


def four_rooms(size: int = 11) -> FrozenSet[Cell]:
    """Wall cells of the classic four-rooms layout on a ``size`` x ``size`` grid."""
    if size < 5:
        raise ValueError("four_rooms needs size >= 5")
    mid = size // 2
    walls = set()
    for i in range(size):
        walls.add((mid, i))
        walls.add((i, mid))
    # one doorway per wall segment
    for door in [(mid, mid // 2), (mid, mid + (size - mid) // 2),
                 (mid // 2, mid), (mid + (size - mid) // 2, mid)]:
        walls.discard(door)
    return frozenset(walls)


class GridWorld:
    """
    Stochastic grid world. States are dicts ``{"x": int, "y": int}``.

    A move goes in the intended direction with ``success_prob`` and in each
    of the other three directions with ``(1 - success_prob) / 3``. Moves into
    a wall or off the grid leave the agent in place.
    """

    def __init__(self, width: int, height: int, walls: Iterable[Cell] = (),
                 success_prob: float = 0.8):
        if width <= 0 or height <= 0:
            raise ValueError("grid dimensions must be positive")
        if not 0.0 <= success_prob <= 1.0:
            raise ValueError("success_prob must be in [0, 1]")
        self.width = width
        self.height = height
        self.walls = frozenset(walls)
        self.success_prob = success_prob

    def is_open(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and (x, y) not in self.walls

    def initial_state(self, x: int = 0, y: int = 0) -> dict:
        if not self.is_open(x, y):
            raise ValueError(f"cell ({x}, {y}) is blocked")
        return {"x": x, "y": y}

    def move(self, state: dict, direction: str) -> dict:
        dx, dy = DIRECTIONS[direction]
        nx, ny = state["x"] + dx, state["y"] + dy
        if not self.is_open(nx, ny):
            return {"x": state["x"], "y": state["y"]}
        return {"x": nx, "y": ny}

    def outcomes(self, state: dict, intended: str) -> List[TransitionProbability]:
        slip = (1.0 - self.success_prob) / (len(DIRECTIONS) - 1)
        merged: Dict[Cell, float] = {}
        for d in DIRECTIONS:
            p = self.success_prob if d == intended else slip
            if p == 0.0:
                continue
            ns = self.move(state, d)
            cell = (ns["x"], ns["y"])
            merged[cell] = merged.get(cell, 0.0) + p
        return [TransitionProbability({"x": x, "y": y}, p) for (x, y), p in merged.items()]

    def generate_domain(self) -> Domain:
        domain = Domain(f"grid{self.width}x{self.height}")
        domain.add_attribute(Attribute("x", "int", 0, self.width - 1))
        domain.add_attribute(Attribute("y", "int", 0, self.height - 1))
        for d in DIRECTIONS:
            domain.add_action(MoveAction(self, d))
        return domain


class MoveAction(Action):

    def __init__(self, world: GridWorld, direction: str):
        super().__init__(direction)
        self.world = world
        self.direction = direction

    def get_transitions(self, state, params=()):
        return self.world.outcomes(state, self.direction)
