"""Adaptive step-size control utilities for embedded Runge-Kutta methods.

Provides the error-norm computation and step-size adjustment logic used by
the RKF45 integrator. The algorithms follow the standard embedded
Runge-Kutta error control approach:

1. Compute a normalized error using mixed absolute/relative tolerances.
2. Accept the step if the normalized error is <= 1.0.
3. Predict the next step size using the error and the method order.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype


def compute_error_norm(
    error_vec: ArrayLike,
    state_new: ArrayLike,
    state_old: ArrayLike,
    abs_tol: float,
    rel_tol: float,
) -> Array:
    """Compute the normalized error norm for adaptive step-size control.

    Uses a mixed absolute/relative tolerance per component with the infinity
    norm (maximum over components). The step is accepted when the returned
    value is <= 1.0.

    The per-component tolerance is:

    .. math::

        \\text{tol}_i = \\text{abs\\_tol} + \\text{rel\\_tol}
            \\cdot \\max(|y^{\\text{new}}_i|, |y^{\\text{old}}_i|)

    Each component is therefore held to its own scale, so a state mixing
    positions of order 1e5 km with velocities of order 10 km/s is
    controlled consistently.

    Args:
        error_vec: Difference between high-order and low-order solutions.
        state_new: High-order solution (candidate state).
        state_old: State at the beginning of the step.
        abs_tol: Absolute error tolerance.
        rel_tol: Relative error tolerance.

    Returns:
        jax.Array: Scalar normalized error. Step is accepted if <= 1.0.
    """
    error_vec = jnp.asarray(error_vec, dtype=get_dtype())
    state_new = jnp.asarray(state_new, dtype=get_dtype())
    state_old = jnp.asarray(state_old, dtype=get_dtype())

    scale = abs_tol + rel_tol * jnp.maximum(jnp.abs(state_new), jnp.abs(state_old))
    return jnp.max(jnp.abs(error_vec) / scale)


def compute_step_scale(
    error: ArrayLike,
    order: float,
    safety_factor: float,
    min_scale_factor: float,
    max_scale_factor: float,
) -> Array:
    """Compute the step-size scale factor from a normalized error.

    .. math::

        s = S \\cdot \\left(\\frac{1}{\\text{error}}\\right)^{1/(p+1)}

    clamped to ``[min_scale_factor, max_scale_factor]``.  A zero error gives
    the maximum factor and a non-finite error gives the minimum factor.

    Args:
        error: Normalized error from :func:`compute_error_norm`.
        order: Order of the error estimator (4.0 for RKF45).
        safety_factor: Multiplicative safety factor.
        min_scale_factor: Minimum allowed ratio ``h_next / h``.
        max_scale_factor: Maximum allowed ratio ``h_next / h``.

    Returns:
        jax.Array: Scalar scale factor.
    """
    error = jnp.asarray(error, dtype=get_dtype())

    exponent = 1.0 / (order + 1.0)
    safe_error = jnp.where(error > 0.0, error, 1.0)
    scale = jnp.clip(
        safety_factor * jnp.power(1.0 / safe_error, exponent),
        min_scale_factor,
        max_scale_factor,
    )
    scale = jnp.where(error > 0.0, scale, max_scale_factor)

    return jnp.where(jnp.isfinite(error), scale, min_scale_factor)


def compute_next_step_size(
    error: ArrayLike,
    h: ArrayLike,
    order: float,
    safety_factor: float,
    min_scale_factor: float,
    max_scale_factor: float,
    min_step: float,
    max_step: float,
) -> Array:
    """Compute the next step size based on the current error estimate.

    Scales ``|h|`` by :func:`compute_step_scale` and clamps the result to
    ``[min_step, max_step]``. The sign of ``h`` is preserved.

    Args:
        error: Normalized error from :func:`compute_error_norm`.
        h: Current step size.
        order: Order of the error estimator (4.0 for RKF45).
        safety_factor: Multiplicative safety factor.
        min_scale_factor: Minimum allowed ratio ``|h_next| / |h|``.
        max_scale_factor: Maximum allowed ratio ``|h_next| / |h|``.
        min_step: Absolute minimum step size.
        max_step: Absolute maximum step size.

    Returns:
        jax.Array: Suggested next step size with same sign as ``h``.
    """
    h = jnp.asarray(h, dtype=get_dtype())

    scale = compute_step_scale(error, order, safety_factor, min_scale_factor, max_scale_factor)
    abs_h_next = jnp.clip(jnp.abs(h) * scale, min_step, max_step)

    return jnp.sign(h) * abs_h_next
