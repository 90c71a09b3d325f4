from __future__ import annotations


class LockedBoxError(Exception):
    """Base class for errors raised while opening a box."""

    pass


class InvalidDimensions(LockedBoxError, ValueError):
    """Raised when a grid is empty or exceeds the supported cell count."""

    pass


class StructuralAssumptionViolation(LockedBoxError):
    """Raised in strict mode when the toggle system has no solution."""

    pass
