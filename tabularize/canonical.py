from __future__ import annotations
from collections.abc import Mapping, Set as AbstractSet
from dataclasses import fields, is_dataclass
from typing import Any, Callable, Hashable, Iterable, Tuple

__all__ = ["canonical_key", "identity_key", "masked_key", "KeyFn"]

KeyFn = Callable[[Any], Hashable]


# ---------- helpers ----------
# every container is tagged, so no frozen container can equal a plain tuple
_MAP, _OBJ, _SEQ, _SET = "map", "obj", "seq", "set"


def _freeze(x: Any) -> Hashable:
    """Turn a nested state value into a hashable, order-independent structure."""
    if isinstance(x, Mapping):
        items = [(k, _freeze(v)) for k, v in x.items()]
        items.sort(key=lambda kv: repr(kv[0]))
        return (_MAP, tuple(items))
    if is_dataclass(x) and not isinstance(x, type):
        return (_OBJ, type(x),
                tuple((f.name, _freeze(getattr(x, f.name))) for f in fields(x)))
    if isinstance(x, (list, tuple)):
        return (_SEQ, tuple(_freeze(v) for v in x))
    if isinstance(x, AbstractSet):
        return (_SET, frozenset(_freeze(v) for v in x))
    try:
        hash(x)
    except TypeError:
        raise TypeError(
            f"canonical_key cannot hash value of type {type(x).__name__}"
        ) from None
    return x


def _lookup(state: Any, att: str) -> Any:
    if isinstance(state, Mapping):
        return state[att]
    return getattr(state, att)


# ---------- public ----------
def canonical_key(state: Any) -> Hashable:
    """
    Structural key used by default to decide whether two states are the same.

    Mappings compare by content regardless of insertion order, lists and
    tuples compare element-wise, sets as sets, dataclasses by their fields.
    Example: {"x": 1, "y": 2} and {"y": 2, "x": 1} -> same key
    """
    return _freeze(state)


def identity_key(state: Hashable) -> Hashable:
    """Use the (hashable) state itself as its key."""
    return state


def masked_key(attributes: Iterable[str]) -> KeyFn:
    """
    Key on a subset of attributes only.

    States that agree on ``attributes`` are treated as the same state, no
    matter what else they carry.
    """
    atts: Tuple[str, ...] = tuple(attributes)
    if not atts:
        raise ValueError("masked_key needs at least one attribute")

    def key(state: Any) -> Hashable:
        return tuple(_freeze(_lookup(state, a)) for a in atts)

    return key
