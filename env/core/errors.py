"""
Errors surfaced to callers of the engine.

Recoverable situations (unreachable routes, dead targets, sides without a
legal move) are not errors and never raise.
"""


class SnapshotError(ValueError):
    """A host snapshot violates a state invariant and cannot be searched."""
