"""
Error Types
===========
Every failure raised by the engine derives from ``BallisticsError``.

- ``InvalidInputError``         — a field is out of range or malformed
- ``NumericalInstabilityError`` — the integrator or the zeroing pre-pass diverged
- ``SolverStateError``          — a single-use solver was asked to solve twice

Hitting a range, time or ground bound is *not* an error: the solver reports
it as a normal ``TerminationReason``.
"""


class BallisticsError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(BallisticsError, ValueError):
    """
    Raised when an input field violates its bound.

    Examples:
        - Ballistic coefficient <= 0
        - Pressure <= 0
        - Humidity outside [0, 100]
    """

    def __init__(self, field: str, value, requirement: str):
        self.field = field
        self.value = value
        self.requirement = requirement
        super().__init__(f"{field} must be {requirement} (got {value!r})")


class NumericalInstabilityError(BallisticsError, ArithmeticError):
    """
    Raised when a non-finite value appears during integration, or when the
    zero-distance sighting adjustment fails to converge.
    """


class SolverStateError(BallisticsError, RuntimeError):
    """Raised when ``TrajectorySolver.solve`` is called more than once."""
