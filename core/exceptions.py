"""Exceptions raised by the simulation engine."""


class IntakeHorizonError(IndexError):
    """Raised when a tabulated intake does not cover the requested day."""
    pass


class DegeneratePartitionError(ZeroDivisionError):
    """Raised when the energy partition fraction is undefined (C + FM == 0)."""
    pass
