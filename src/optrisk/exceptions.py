"""Error types raised by the pricing and risk engines.

Every error subclasses :class:`ValueError`, so callers that already guard
pricing calls with ``except ValueError`` keep working.
"""


class InvalidParameterError(ValueError):
    """Raised when a contract, lattice or simulation parameter is out of range.

    Covers non-positive strike, volatility, time-to-expiry or lattice depth,
    unknown side / exercise tags, and scenario counts too small for the
    tail index of a Monte Carlo risk run.
    """


class NumericalDomainError(ValueError):
    """Raised when a valuation is requested at a spot outside ``(0, inf)``.

    The closed-form and lattice formulas take ``log(spot)``; a non-positive
    spot would otherwise surface as NaN or ``-inf`` instead of an error.
    """


class DegenerateSimulationError(InvalidParameterError):
    """Raised when the loss tail of a simulation would contain no samples."""
