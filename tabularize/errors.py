"""
Exception types for state enumeration and tabulation.
"""


class TabularizeError(Exception):
    """Base class for every error raised by this package."""
    pass


class NotEnumeratedError(TabularizeError, LookupError):
    """Raised when a state was never discovered by a reachability pass."""

    def __init__(self, state):
        self.state = state
        super().__init__(f"state has not been enumerated: {state!r}")


class OutOfRangeError(TabularizeError, IndexError):
    """Raised when a state id lies outside [0, N)."""

    def __init__(self, state_id, num_states: int):
        self.state_id = state_id
        self.num_states = num_states
        super().__init__(
            f"state id {state_id!r} out of range [0, {num_states})"
        )


class UnsupportedDomainError(TabularizeError, ValueError):
    """Raised when a domain with parameterized actions is tabulated."""
    pass
