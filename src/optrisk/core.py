from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from math import isfinite

from . import black_scholes
from .binomial import crr_lattice
from .config import DEFAULT_PRICING
from .exceptions import InvalidParameterError, NumericalDomainError

CALL = "call"
PUT = "put"
EUROPEAN = "european"
AMERICAN = "american"

_VARIANTS = {
    (EUROPEAN, CALL): "EuropeanCall",
    (EUROPEAN, PUT): "EuropeanPut",
    (AMERICAN, CALL): "AmericanCall",
    (AMERICAN, PUT): "AmericanPut",
}


def _check_spot(spot) -> None:
    s = np.asarray(spot, dtype=float)
    if not np.all(np.isfinite(s)) or np.any(s <= 0):
        raise NumericalDomainError(f"spot must be positive and finite, got {spot!r}")


# ---------------------------------------------------------------------------
# Instrument: one closed record for all four vanilla variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Instrument:
    """A vanilla option contract.

    Exercise style and payoff side are independent tags: ``exercise``
    selects the pricer (closed form for European, CRR lattice for
    American), ``side`` selects the intrinsic-value function.

    Parameters
    ----------
    strike : float
        Strike price, > 0.
    volatility : float
        Annualised volatility, > 0.
    time_to_expiry : float
        Years to expiry, > 0.
    risk_free_rate : float
        Continuously-compounded risk-free rate.
    side : str
        ``"call"`` or ``"put"``.
    exercise : str
        ``"european"`` (default) or ``"american"``.
    default_depth : int
        Lattice depth used when a valuation call passes no depth.
    """
    strike: float
    volatility: float
    time_to_expiry: float
    risk_free_rate: float
    side: str = CALL
    exercise: str = EUROPEAN
    default_depth: int = DEFAULT_PRICING.default_depth

    def __post_init__(self):
        if not self.strike > 0:
            raise InvalidParameterError(f"strike must be positive, got {self.strike}")
        if not self.volatility > 0:
            raise InvalidParameterError(f"volatility must be positive, got {self.volatility}")
        if not self.time_to_expiry > 0:
            raise InvalidParameterError(
                f"time_to_expiry must be positive, got {self.time_to_expiry}"
            )
        if not isfinite(self.risk_free_rate):
            raise InvalidParameterError(
                f"risk_free_rate must be finite, got {self.risk_free_rate}"
            )
        if self.side not in (CALL, PUT):
            raise InvalidParameterError(f"side must be 'call' or 'put', got {self.side!r}")
        if self.exercise not in (EUROPEAN, AMERICAN):
            raise InvalidParameterError(
                f"exercise must be 'european' or 'american', got {self.exercise!r}"
            )
        if self.default_depth < 1:
            raise InvalidParameterError(
                f"default_depth must be >= 1, got {self.default_depth}"
            )

    @property
    def variant(self) -> str:
        """``"EuropeanCall"``, ``"EuropeanPut"``, ``"AmericanCall"`` or ``"AmericanPut"``."""
        return _VARIANTS[(self.exercise, self.side)]

    @property
    def is_american(self) -> bool:
        return self.exercise == AMERICAN

    # -- payoff policy ------------------------------------------------------
    def intrinsic_value(self, spot):
        """Immediate exercise payoff; element-wise for arrays."""
        if self.side == CALL:
            payoff = np.maximum(np.asarray(spot, dtype=float) - self.strike, 0.0)
        else:
            payoff = np.maximum(self.strike - np.asarray(spot, dtype=float), 0.0)
        return float(payoff) if payoff.ndim == 0 else payoff

    def exercise_value(self, spot, t: float):
        """Payoff available at a lattice node at time ``t``.

        European contracts pay only at ``t == time_to_expiry``; American
        contracts may be exercised at any node.
        """
        if self.is_american or t == self.time_to_expiry:
            return self.intrinsic_value(spot)
        zero = np.zeros_like(np.asarray(spot, dtype=float))
        return float(zero) if zero.ndim == 0 else zero

    # -- valuation ----------------------------------------------------------
    def closed_form_value(self, spot):
        """Black-Scholes value for this side.

        Same formula for European and American contracts; for American ones
        this is a reference figure only, never the priced value.
        """
        _check_spot(spot)
        return black_scholes.price(
            self.side, spot, self.strike, self.time_to_expiry,
            self.risk_free_rate, self.volatility,
        )

    def lattice_value(self, spot, depth: int | None = None):
        depth = self._depth(depth)
        _check_spot(spot)
        return crr_lattice(
            spot, self.time_to_expiry, self.risk_free_rate, self.volatility,
            self.exercise_value, depth,
        )

    def value(self, spot: float, depth: int | None = None) -> float:
        """Authoritative price: closed form for European, lattice for American."""
        return float(self.values(spot, depth))

    def values(self, spots, depth: int | None = None):
        """Vectorised :meth:`value` over an array of spots."""
        depth = self._depth(depth)
        if self.is_american:
            return self.lattice_value(spots, depth)
        return self.closed_form_value(spots)

    def delta(self, spot: float, depth: int | None = None,
              bump: float | None = None) -> float:
        """Value change for a relative spot bump (default 1%), not divided by the bump."""
        if bump is None:
            bump = DEFAULT_PRICING.delta_bump
        elif not bump > 0:
            raise InvalidParameterError(f"bump must be positive, got {bump}")
        bumped = (1.0 + bump) * spot
        return self.value(bumped, depth) - self.value(spot, depth)

    def _depth(self, depth: int | None) -> int:
        if depth is None:
            return self.default_depth
        if depth < 1:
            raise InvalidParameterError(f"lattice depth must be >= 1, got {depth}")
        return int(depth)


# ---------------------------------------------------------------------------
# Variant constructors
# ---------------------------------------------------------------------------
def european_call(strike, volatility, time_to_expiry, risk_free_rate,
                  default_depth: int = DEFAULT_PRICING.default_depth) -> Instrument:
    return Instrument(strike, volatility, time_to_expiry, risk_free_rate,
                      CALL, EUROPEAN, default_depth)


def european_put(strike, volatility, time_to_expiry, risk_free_rate,
                 default_depth: int = DEFAULT_PRICING.default_depth) -> Instrument:
    return Instrument(strike, volatility, time_to_expiry, risk_free_rate,
                      PUT, EUROPEAN, default_depth)


def american_call(strike, volatility, time_to_expiry, risk_free_rate,
                  default_depth: int = DEFAULT_PRICING.default_depth) -> Instrument:
    return Instrument(strike, volatility, time_to_expiry, risk_free_rate,
                      CALL, AMERICAN, default_depth)


def american_put(strike, volatility, time_to_expiry, risk_free_rate,
                 default_depth: int = DEFAULT_PRICING.default_depth) -> Instrument:
    return Instrument(strike, volatility, time_to_expiry, risk_free_rate,
                      PUT, AMERICAN, default_depth)
