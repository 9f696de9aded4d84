"""Monte Carlo market-risk engine.

Simulates one-day moves of the underlying under geometric Brownian motion,
revalues a portfolio at every scenario spot, and reads Value-at-Risk and
Expected Shortfall off the sorted value distribution.
"""

from __future__ import annotations

import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .config import DEFAULT_RISK, DEFAULT_SEED, RiskConfig
from .exceptions import (
    DegenerateSimulationError, InvalidParameterError, NumericalDomainError,
)
from .rng import NormalSource, default_source

if TYPE_CHECKING:
    from .portfolio import Portfolio

__all__ = [
    "RiskReport",
    "simulate_scenario_spots",
    "revalue_scenarios",
    "tail_size",
    "value_at_risk",
    "expected_shortfall",
    "risk_report",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskReport:
    """Result of one simulation run.

    ``scenario_values`` is sorted ascending; ``scenario_spots`` keeps draw
    order.  ``var`` and ``es`` are losses relative to ``base_value``
    (positive means a loss).
    """
    base_value: float
    var: float
    es: float
    tail_size: int
    scenario_spots: np.ndarray
    scenario_values: np.ndarray


# ---------------------------------------------------------------------------
# Scenario generation
# ---------------------------------------------------------------------------

def simulate_scenario_spots(
    spot: float, sigma: float, r: float, n_scenarios: int,
    *, source: Optional[NormalSource] = None, dt: float = DEFAULT_RISK.dt,
) -> np.ndarray:
    """Draw ``n_scenarios`` spots one step ``dt`` ahead under GBM.

        vol   = sigma * sqrt(dt)
        drift = dt * (r - vol^2 / 2)
        S'    = S * exp(drift + vol * Z)
    """
    if not (math.isfinite(spot) and spot > 0):
        raise NumericalDomainError(f"spot must be positive and finite, got {spot}")
    if not sigma > 0:
        raise InvalidParameterError(f"sigma must be positive, got {sigma}")
    if n_scenarios < 1:
        raise InvalidParameterError(f"n_scenarios must be >= 1, got {n_scenarios}")
    if source is None:
        source = default_source()

    vol = sigma * math.sqrt(dt)
    drift = dt * (r - 0.5 * vol * vol)
    Z = source.draw(n_scenarios)
    return spot * np.exp(drift + vol * Z)


def revalue_scenarios(
    portfolio: "Portfolio", spots: np.ndarray, *, chunk_size: int = DEFAULT_RISK.chunk_size,
) -> np.ndarray:
    """Portfolio value at every scenario spot, in batches of ``chunk_size``."""
    spots = np.asarray(spots, dtype=float)
    out = np.empty(spots.shape[0])
    for start in range(0, spots.shape[0], chunk_size):
        stop = start + chunk_size
        out[start:stop] = portfolio.values(spots[start:stop])
    return out


def tail_size(n_scenarios: int, tail_fraction: float = DEFAULT_RISK.tail_fraction) -> int:
    """Number of worst outcomes in the loss tail: ``floor(tail_fraction * N)``."""
    if n_scenarios < 1:
        raise InvalidParameterError(f"n_scenarios must be >= 1, got {n_scenarios}")
    # 1 - confidence is inexact (1 - 0.9 < 0.1); round before flooring
    k = int(math.floor(round(tail_fraction * n_scenarios, 9)))
    if k < 1:
        raise DegenerateSimulationError(
            f"{n_scenarios} scenarios leave an empty {tail_fraction:.0%} tail; "
            f"need at least {math.ceil(round(1.0 / tail_fraction, 9))}"
        )
    return k


# ---------------------------------------------------------------------------
# VaR / ES
# ---------------------------------------------------------------------------

def _simulate(portfolio, spot, sigma, r, n_scenarios, source, config) -> RiskReport:
    config = config or DEFAULT_RISK
    if source is None and config.seed != DEFAULT_SEED:
        # a non-default seed gets its own stream, fresh per run
        source = NormalSource(config.seed)
    k = tail_size(n_scenarios, config.tail_fraction)
    logger.debug(
        "risk run: spot=%s sigma=%s r=%s N=%d tail=%d positions=%d",
        spot, sigma, r, n_scenarios, k, len(portfolio),
    )

    spots = simulate_scenario_spots(spot, sigma, r, n_scenarios,
                                    source=source, dt=config.dt)
    values = np.sort(revalue_scenarios(portfolio, spots, chunk_size=config.chunk_size))
    base = portfolio.value(spot)

    var = base - float(values[k - 1])
    es = base - float(values[:k].mean())
    logger.info("risk run complete: N=%d VaR=%.6f ES=%.6f", n_scenarios, var, es)
    return RiskReport(
        base_value=base, var=var, es=es, tail_size=k,
        scenario_spots=spots, scenario_values=values,
    )


def value_at_risk(
    portfolio: "Portfolio", spot: float, sigma: float, r: float, n_scenarios: int,
    *, source: Optional[NormalSource] = None, config: Optional[RiskConfig] = None,
) -> float:
    """Loss at the boundary of the worst ``1 - confidence`` tail.

    ``VaR = V(spot) - sorted[k - 1]`` with ``k = floor(0.05 N)``.  Runs its
    own simulation, so it advances ``source``.
    """
    return _simulate(portfolio, spot, sigma, r, n_scenarios, source, config).var


def expected_shortfall(
    portfolio: "Portfolio", spot: float, sigma: float, r: float, n_scenarios: int,
    *, source: Optional[NormalSource] = None, config: Optional[RiskConfig] = None,
) -> float:
    """Loss relative to the mean of the worst ``k = floor(0.05 N)`` outcomes."""
    return _simulate(portfolio, spot, sigma, r, n_scenarios, source, config).es


def risk_report(
    portfolio: "Portfolio", spot: float, sigma: float, r: float, n_scenarios: int,
    *, source: Optional[NormalSource] = None, config: Optional[RiskConfig] = None,
) -> RiskReport:
    """VaR and ES from one shared simulation; ``es >= var`` always holds."""
    return _simulate(portfolio, spot, sigma, r, n_scenarios, source, config)
