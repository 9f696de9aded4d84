"""Weighted positions in option contracts.

Portfolio value and delta are linear combinations of per-position figures
and are recomputed on every query; nothing is cached.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Iterator, Optional

from .config import DEFAULT_PRICING, PricingConfig, RiskConfig
from .core import Instrument
from .exceptions import InvalidParameterError
from .rng import NormalSource

__all__ = ["Position", "Portfolio"]


@dataclass(frozen=True)
class Position:
    """``weight`` units of ``instrument``; negative weight is a short."""
    weight: float
    instrument: Instrument


class Portfolio:
    """Append-only, ordered collection of :class:`Position`.

    Parameters
    ----------
    depth : int, optional
        Lattice depth applied to every position on valuation, whatever its
        exercise style (European positions ignore it).  Defaults to
        ``pricing.default_depth``.
    pricing : PricingConfig
        Supplies the default depth and the relative spot bump used by
        :meth:`delta`.
    """

    def __init__(self, positions=(), *, depth: Optional[int] = None,
                 pricing: PricingConfig = DEFAULT_PRICING):
        self.pricing = pricing
        if depth is None:
            depth = pricing.default_depth
        if depth < 1:
            raise InvalidParameterError(f"depth must be >= 1, got {depth}")
        self.depth = int(depth)
        self._positions: list[Position] = []
        for pos in positions:
            self.add_position(pos)

    def add_position(self, weight, instrument: Optional[Instrument] = None) -> Position:
        """Append a position.  Accepts ``(weight, instrument)`` or a ``Position``."""
        if isinstance(weight, Position):
            pos = weight
        else:
            pos = Position(float(weight), instrument)
        self._positions.append(pos)
        return pos

    @property
    def positions(self) -> tuple[Position, ...]:
        return tuple(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    # -- valuation ----------------------------------------------------------
    def value(self, spot: float) -> float:
        total = 0.0
        for pos in self._positions:
            total += pos.weight * pos.instrument.value(spot, self.depth)
        return total

    def values(self, spots) -> np.ndarray:
        """Portfolio value at each spot in ``spots``."""
        spots = np.asarray(spots, dtype=float)
        total = np.zeros(spots.shape)
        for pos in self._positions:
            total += pos.weight * pos.instrument.values(spots, self.depth)
        return total

    def delta(self, spot: float) -> float:
        total = 0.0
        for pos in self._positions:
            total += pos.weight * pos.instrument.delta(spot, self.depth, self.pricing.delta_bump)
        return total

    # -- risk ---------------------------------------------------------------
    def value_at_risk(self, spot: float, sigma: float, r: float, n_scenarios: int,
                      *, source: Optional[NormalSource] = None,
                      config: Optional[RiskConfig] = None) -> float:
        """One-day 95% VaR from ``n_scenarios`` simulated spots."""
        from .risk import value_at_risk
        return value_at_risk(self, spot, sigma, r, n_scenarios,
                             source=source, config=config)

    def expected_shortfall(self, spot: float, sigma: float, r: float, n_scenarios: int,
                           *, source: Optional[NormalSource] = None,
                           config: Optional[RiskConfig] = None) -> float:
        """One-day 95% Expected Shortfall from ``n_scenarios`` simulated spots."""
        from .risk import expected_shortfall
        return expected_shortfall(self, spot, sigma, r, n_scenarios,
                                  source=source, config=config)

    def risk_report(self, spot: float, sigma: float, r: float, n_scenarios: int,
                    *, source: Optional[NormalSource] = None,
                    config: Optional[RiskConfig] = None):
        """VaR and ES from a single simulation (see :func:`optrisk.risk.risk_report`)."""
        from .risk import risk_report
        return risk_report(self, spot, sigma, r, n_scenarios,
                           source=source, config=config)
