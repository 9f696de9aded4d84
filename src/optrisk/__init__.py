# optrisk - option valuation and portfolio risk engine
# Public API

# Instrument model
from .core import (
    Instrument, CALL, PUT, EUROPEAN, AMERICAN,
    european_call, european_put, american_call, american_put,
)

# Pricers
from .black_scholes import price as bs_price, norm_cdf
from .binomial import crr_lattice

# Portfolio & risk
from .portfolio import Position, Portfolio
from .risk import RiskReport, value_at_risk, expected_shortfall, risk_report
from .rng import NormalSource, default_source, reset_default_source

# Configuration & errors
from .config import PricingConfig, RiskConfig, DEFAULT_PRICING, DEFAULT_RISK
from .exceptions import (
    InvalidParameterError, NumericalDomainError, DegenerateSimulationError,
)

__all__ = [
    # Instruments
    "Instrument", "CALL", "PUT", "EUROPEAN", "AMERICAN",
    "european_call", "european_put", "american_call", "american_put",
    # Pricers
    "bs_price", "norm_cdf", "crr_lattice",
    # Portfolio & risk
    "Position", "Portfolio",
    "RiskReport", "value_at_risk", "expected_shortfall", "risk_report",
    "NormalSource", "default_source", "reset_default_source",
    # Config & errors
    "PricingConfig", "RiskConfig", "DEFAULT_PRICING", "DEFAULT_RISK",
    "InvalidParameterError", "NumericalDomainError", "DegenerateSimulationError",
]

__version__ = "0.1.0"
