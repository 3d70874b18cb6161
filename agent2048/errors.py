"""Exceptions raised by the simulation and search core."""


class InvalidSnapshotError(ValueError):
    """The board snapshot handed over by the live game is malformed."""


class InvariantViolation(RuntimeError):
    """The simulator broke one of its own grid invariants (a bug, never recovered)."""
