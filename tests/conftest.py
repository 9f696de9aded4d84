"""Shared fixtures for the optrisk test-suite."""

import pytest

from optrisk import european_call, european_put, american_call, american_put


@pytest.fixture
def atm_params():
    """ATM contract used across tests: K=100, sigma=0.2, T=1, r=0.05."""
    return {"strike": 100.0, "volatility": 0.2, "time_to_expiry": 1.0,
            "risk_free_rate": 0.05}


@pytest.fixture
def four_variants(atm_params):
    """One instrument of each variant, keyed by variant tag."""
    p = atm_params
    args = (p["strike"], p["volatility"], p["time_to_expiry"], p["risk_free_rate"])
    return {
        "EuropeanCall": european_call(*args, default_depth=200),
        "EuropeanPut": european_put(*args, default_depth=200),
        "AmericanCall": american_call(*args, default_depth=200),
        "AmericanPut": american_put(*args, default_depth=200),
    }
