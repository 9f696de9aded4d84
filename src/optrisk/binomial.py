import numpy as np
from math import exp, log, sqrt
from typing import Callable

from .exceptions import InvalidParameterError, NumericalDomainError

__all__ = ["crr_lattice", "ExerciseFunc"]

# exercise_value(node_spots, t) -> payoff array, same shape as node_spots
ExerciseFunc = Callable[[np.ndarray, float], np.ndarray]


def crr_lattice(
    S0, T: float, r: float, sigma: float,
    exercise_value: ExerciseFunc, N: int = 500,
):
    """Cox-Ross-Rubinstein tree with a caller-supplied exercise policy.

    At every node the value is ``max(exercise_value(S, t), continuation)``.
    A policy that returns 0 before expiry gives the European price; one that
    returns the intrinsic value everywhere gives the American price.  The
    tree itself knows nothing about calls, puts or exercise style.

    Parameters
    ----------
    S0 : float or array-like
        Spot(s).  An array builds one tree per spot in a single backward
        pass (same ``T, r, sigma, N``).
    T, r, sigma : float
        Expiry in years, continuously-compounded rate, volatility.
    exercise_value : callable
        ``exercise_value(spots, t)``.  Called with ``t == T`` exactly on the
        terminal layer and ``t = j * dt`` on layer ``j``.
    N : int
        Number of time steps (tree depth).

    Returns
    -------
    float or np.ndarray
        Float for scalar ``S0``, otherwise an array shaped like ``S0``.
    """
    if N < 1:
        raise InvalidParameterError(f"lattice depth must be >= 1, got {N}")
    if T <= 0 or sigma <= 0:
        raise InvalidParameterError("T and sigma must be positive.")

    S = np.asarray(S0, dtype=float)
    shape = S.shape
    S = S.reshape(-1)
    if not np.all(np.isfinite(S)) or np.any(S <= 0):
        raise NumericalDomainError("spot must be positive and finite.")

    dt = T / N
    u = exp(sigma * sqrt(dt))
    d = 1.0 / u
    disc = exp(-r * dt)
    p = (exp(r * dt) - d) / (u - d)
    if not (0.0 <= p <= 1.0):
        raise InvalidParameterError(
            "Risk-neutral prob p out of [0,1]; try larger N or different params."
        )

    # Terminal layer: node i sits at S * u^(2i - N)
    j = np.arange(N + 1)
    S_k = S[:, np.newaxis] * np.exp((2 * j - N) * log(u))[np.newaxis, :]
    V = np.array(np.broadcast_to(exercise_value(S_k, T), S_k.shape), dtype=float)

    # Backward induction; layer k nodes are layer k+1 nodes 1..k+1 stepped down once
    for k in range(N - 1, -1, -1):
        S_k = S_k[:, 1:] * d
        V = disc * (p * V[:, 1:] + (1.0 - p) * V[:, :-1])
        V = np.maximum(V, exercise_value(S_k, k * dt))

    out = V[:, 0].reshape(shape)
    return float(out) if out.ndim == 0 else out
