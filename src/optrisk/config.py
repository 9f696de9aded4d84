from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidParameterError

DEFAULT_SEED = 122345
TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True, slots=True)
class PricingConfig:
    default_depth: int = 500     # lattice steps used by portfolios
    delta_bump: float = 0.01     # relative spot bump for delta

    def __post_init__(self) -> None:
        if self.default_depth < 1:
            raise InvalidParameterError("default_depth must be >= 1")
        if self.delta_bump <= 0:
            raise InvalidParameterError("delta_bump must be > 0")


@dataclass(frozen=True, slots=True)
class RiskConfig:
    confidence: float = 0.95
    dt: float = 1.0 / TRADING_DAYS_PER_YEAR
    seed: int = DEFAULT_SEED
    chunk_size: int = 1024       # scenarios revalued per batch

    def __post_init__(self) -> None:
        if not (0.0 < self.confidence < 1.0):
            raise InvalidParameterError("confidence must be in (0, 1)")
        if self.dt <= 0:
            raise InvalidParameterError("dt must be > 0")
        if self.chunk_size < 1:
            raise InvalidParameterError("chunk_size must be >= 1")

    @property
    def tail_fraction(self) -> float:
        return 1.0 - self.confidence


DEFAULT_PRICING = PricingConfig()
DEFAULT_RISK = RiskConfig()
