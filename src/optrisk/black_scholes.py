# black_scholes.py
# Closed-form Black-Scholes prices (no dividends).
# Spot may be a scalar or a NumPy array; contract parameters are scalars.

from __future__ import annotations

import numpy as np
from math import exp, sqrt
from scipy.special import erfc

from .exceptions import InvalidParameterError, NumericalDomainError

__all__ = ["norm_cdf", "d1_d2", "call_price", "put_price", "price"]

_SQRT2 = sqrt(2.0)


def norm_cdf(x):
    """Standard normal CDF via ``erfc(-x / sqrt(2)) / 2``.

    The complementary error function keeps full relative precision deep in
    the lower tail, where ``1 - erf`` would cancel to zero.
    """
    return 0.5 * erfc(-np.asarray(x, dtype=float) / _SQRT2)


def _check(S, K, T, sigma):
    if K <= 0 or T <= 0 or sigma <= 0:
        raise InvalidParameterError("K, T, sigma must be positive.")
    S = np.asarray(S, dtype=float)
    if not np.all(np.isfinite(S)) or np.any(S <= 0):
        raise NumericalDomainError("spot must be positive and finite.")
    return S


def d1_d2(S, K: float, T: float, r: float, sigma: float):
    S = _check(S, K, T, sigma)
    rt = sigma * sqrt(T)
    d1 = (np.log(S / K) + (r + 0.5 * sigma * sigma) * T) / rt
    d2 = d1 - rt
    return d1, d2


def _out(S, px):
    return float(px) if np.ndim(S) == 0 else px


def call_price(S, K: float, T: float, r: float, sigma: float):
    d1, d2 = d1_d2(S, K, T, r, sigma)
    px = norm_cdf(d1) * np.asarray(S, dtype=float) - norm_cdf(d2) * K * exp(-r * T)
    return _out(S, px)


def put_price(S, K: float, T: float, r: float, sigma: float):
    d1, d2 = d1_d2(S, K, T, r, sigma)
    px = norm_cdf(-d2) * K * exp(-r * T) - norm_cdf(-d1) * np.asarray(S, dtype=float)
    return _out(S, px)


def price(kind: str, S, K: float, T: float, r: float, sigma: float):
    """Black-Scholes price for ``kind`` in ``{"call", "put"}``."""
    if kind == "call":
        return call_price(S, K, T, r, sigma)
    elif kind == "put":
        return put_price(S, K, T, r, sigma)
    else:
        raise InvalidParameterError("kind must be 'call' or 'put'")
