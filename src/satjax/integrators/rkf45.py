"""Runge-Kutta-Fehlberg 4(5) embedded step (RKF45).

Implements the Fehlberg embedded Runge-Kutta method with a 5th-order solution
for propagation and a 4th-order solution for error estimation. Both share
the same 6 stage evaluations of the right-hand side.

:func:`rkf45_step` performs a single trial step and reports whether it meets
the tolerance together with a suggested next step size. The accept/reject
loop lives in :func:`~satjax.integrators.integrate`.

The Butcher tableau coefficients are taken from the standard Fehlberg
formulation:

- Nodes (c): [0, 1/4, 3/8, 12/13, 1, 1/2]
- 5th-order weights (b_high): [16/135, 0, 6656/12825, 28561/56430, -9/50, 2/55]
- 4th-order weights (b_low): [25/216, 0, 1408/2565, 2197/4104, -1/5, 0]
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.integrators._adaptive import compute_error_norm, compute_next_step_size
from satjax.integrators._types import AdaptiveConfig, StepResult

# Error estimator order used for step-size prediction
RKF45_ERROR_ORDER = 4.0

# Nodes
_C = (0.0, 1.0 / 4.0, 3.0 / 8.0, 12.0 / 13.0, 1.0, 1.0 / 2.0)

# Coupling coefficients (lower-triangular rows, one per stage)
_A = (
    (),
    (1.0 / 4.0,),
    (3.0 / 32.0, 9.0 / 32.0),
    (1932.0 / 2197.0, -7200.0 / 2197.0, 7296.0 / 2197.0),
    (439.0 / 216.0, -8.0, 3680.0 / 513.0, -845.0 / 4104.0),
    (-8.0 / 27.0, 2.0, -3544.0 / 2565.0, 1859.0 / 4104.0, -11.0 / 40.0),
)

# 5th-order weights (primary solution)
_B_HIGH = (16.0 / 135.0, 0.0, 6656.0 / 12825.0, 28561.0 / 56430.0, -9.0 / 50.0, 2.0 / 55.0)

# 4th-order weights (error estimation)
_B_LOW = (25.0 / 216.0, 0.0, 1408.0 / 2565.0, 2197.0 / 4104.0, -1.0 / 5.0, 0.0)


def _combine(weights: tuple[float, ...], ks: list[Array]) -> Array:
    """Weighted sum of stage derivatives, skipping zero weights."""
    terms = [w * k for w, k in zip(weights, ks) if w != 0.0]
    out = terms[0]
    for term in terms[1:]:
        out = out + term
    return out


def rkf45_step(
    dynamics: Callable[[ArrayLike, ArrayLike], Array],
    t: ArrayLike,
    state: ArrayLike,
    dt: ArrayLike,
    config: AdaptiveConfig | None = None,
) -> StepResult:
    """Perform a single RKF45 trial step.

    Evaluates the six Fehlberg stages from ``(t, state)`` with step ``dt``,
    forms the 5th- and 4th-order solutions, and measures their difference
    with :func:`~satjax.integrators._adaptive.compute_error_norm`.  The
    trial is accepted when the normalized error is <= 1.0.  Whether accepted
    or not, ``dt_next`` is the step predicted by the error estimate:
    ``0.84 * (1/err)^(1/5) * dt`` with the default configuration, clamped to
    the scale-factor and step-size bounds.

    Compatible with ``jax.jit`` and ``jax.vmap``.

    Args:
        dynamics: ODE right-hand side function ``f(t, x) -> dx/dt``.
        t: Current time.
        state: Current state vector.
        dt: Trial timestep.
        config: Adaptive step-size configuration. Uses default
            :class:`AdaptiveConfig` if ``None``.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: 5th-order state at ``t + dt``.
            - ``dt_used``: The trial timestep.
            - ``error_estimate``: Normalized error of the trial.
            - ``dt_next``: Suggested timestep for the next trial.
            - ``accepted``: ``error_estimate <= 1.0``.
            - ``derivative``: ``f(t, state)``.

    Examples:
        ```python
        import jax.numpy as jnp
        from satjax.integrators import rkf45_step
        def harmonic(t, x):
            return jnp.array([x[1], -x[0]])
        result = rkf45_step(harmonic, 0.0, jnp.array([1.0, 0.0]), 0.1)
        result.state  # ~[cos(0.1), -sin(0.1)]
        ```
    """
    if config is None:
        config = AdaptiveConfig()

    dtype = get_dtype()
    t = jnp.asarray(t, dtype=dtype)
    state = jnp.asarray(state, dtype=dtype)
    h = jnp.asarray(dt, dtype=dtype)

    ks = []
    for c, a_row in zip(_C, _A):
        stage_state = state + h * _combine(a_row, ks) if a_row else state
        ks.append(dynamics(t + c * h, stage_state))

    state_high = state + h * _combine(_B_HIGH, ks)
    state_low = state + h * _combine(_B_LOW, ks)

    error = compute_error_norm(
        state_high - state_low, state_high, state, config.abs_tol, config.rel_tol
    )
    dt_next = compute_next_step_size(
        error,
        h,
        RKF45_ERROR_ORDER,
        config.safety_factor,
        config.min_scale_factor,
        config.max_scale_factor,
        config.min_step,
        config.max_step,
    )

    return StepResult(
        state=state_high,
        dt_used=h,
        error_estimate=error,
        dt_next=dt_next,
        accepted=error <= 1.0,
        derivative=ks[0],
    )
