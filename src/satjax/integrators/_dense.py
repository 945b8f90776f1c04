"""Dense output for integrated trajectories.

Piecewise cubic Hermite interpolation between accepted samples, using the
state and the right-hand side stored at each sample.  On the interval
:math:`[t_i, t_{i+1}]` with :math:`h = t_{i+1} - t_i` and
:math:`s = (t - t_i) / h`:

.. math::

    y(t) = h_{00}(s) y_i + h_{10}(s) h f_i + h_{01}(s) y_{i+1}
        + h_{11}(s) h f_{i+1}

The interpolant matches the state and its derivative at both ends of every
step, so it is continuous with a continuous first derivative.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array


def _locate(t: Array, t_query: Array) -> tuple[Array, Array, Array]:
    """Return interval indices, interval widths and normalized positions."""
    idx = jnp.searchsorted(t, t_query, side="right") - 1
    idx = jnp.clip(idx, 0, t.shape[0] - 2)
    h = t[idx + 1] - t[idx]
    s = (t_query - t[idx]) / h
    return idx, h, s


def hermite_interpolate(t: Array, states: Array, derivatives: Array, t_query: Array) -> Array:
    """Interpolate states at *t_query*.

    Args:
        t: Sample times, shape ``(N,)``, strictly increasing.
        states: States, shape ``(N, n)``.
        derivatives: Derivatives, shape ``(N, n)``.
        t_query: Scalar or 1-D array of query times.

    Returns:
        jax.Array: Interpolated states, shape ``(n,)`` or ``(M, n)``.
    """
    scalar = jnp.ndim(t_query) == 0
    t_query = jnp.atleast_1d(t_query)

    if t.shape[0] == 1:
        out = jnp.broadcast_to(states[0], (t_query.shape[0], states.shape[1]))
        return out[0] if scalar else out

    idx, h, s = _locate(t, t_query)
    s = s[:, None]
    h = h[:, None]
    s2 = s * s
    s3 = s2 * s

    h00 = 2.0 * s3 - 3.0 * s2 + 1.0
    h10 = s3 - 2.0 * s2 + s
    h01 = -2.0 * s3 + 3.0 * s2
    h11 = s3 - s2

    out = (
        h00 * states[idx]
        + h10 * h * derivatives[idx]
        + h01 * states[idx + 1]
        + h11 * h * derivatives[idx + 1]
    )
    return out[0] if scalar else out


def hermite_derivative(t: Array, states: Array, derivatives: Array, t_query: Array) -> Array:
    """Time derivative of the Hermite interpolant at *t_query*.

    Args:
        t: Sample times, shape ``(N,)``, strictly increasing.
        states: States, shape ``(N, n)``.
        derivatives: Derivatives, shape ``(N, n)``.
        t_query: Scalar or 1-D array of query times.

    Returns:
        jax.Array: Interpolated derivatives, shape ``(n,)`` or ``(M, n)``.
    """
    scalar = jnp.ndim(t_query) == 0
    t_query = jnp.atleast_1d(t_query)

    if t.shape[0] == 1:
        out = jnp.broadcast_to(derivatives[0], (t_query.shape[0], derivatives.shape[1]))
        return out[0] if scalar else out

    idx, h, s = _locate(t, t_query)
    s = s[:, None]
    h = h[:, None]
    s2 = s * s

    dh00 = 6.0 * s2 - 6.0 * s
    dh10 = 3.0 * s2 - 4.0 * s + 1.0
    dh01 = -6.0 * s2 + 6.0 * s
    dh11 = 3.0 * s2 - 2.0 * s

    out = (
        dh00 * states[idx] / h
        + dh10 * derivatives[idx]
        + dh01 * states[idx + 1] / h
        + dh11 * derivatives[idx + 1]
    )
    return out[0] if scalar else out
