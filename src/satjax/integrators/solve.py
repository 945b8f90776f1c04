"""Adaptive RKF45 integration over a time span.

:func:`integrate` drives :func:`~satjax.integrators.rkf45_step` from ``t0``
to ``tf``, accepting and rejecting trial steps until the final time is
reached exactly, and returns the accepted samples as a
:class:`~satjax.integrators.Trajectory`.

The trial step is compiled once per call with ``jax.jit``; the
accept/reject loop itself runs in Python because each decision depends on
the outcome of the previous trial and the number of samples is not known in
advance.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from functools import partial

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.errors import (
    InvalidConfigurationError,
    SingularConfigurationError,
    StepBudgetExceededError,
    StepSizeUnderflowError,
)
from satjax.integrators._types import AdaptiveConfig, Trajectory
from satjax.integrators.rkf45 import rkf45_step

logger = logging.getLogger(__name__)

# Number of right-hand-side evaluations per RKF45 trial
_STAGES = 6

# Multiple of the floating-point spacing of t below which a step cannot advance time
_TIME_RESOLUTION_ULPS = 16.0


def _step_floor(t: float, min_step: float) -> float:
    return max(min_step, _TIME_RESOLUTION_ULPS * float(np.spacing(abs(t))))


def _is_finite(x: Array) -> bool:
    return bool(jnp.all(jnp.isfinite(x)))


def _singular(t: float, y: Array) -> SingularConfigurationError:
    return SingularConfigurationError(
        f"Right-hand side is not finite at t={t}: the state is singular "
        f"(e.g. a separation reached zero)",
        t=t,
        state=y,
    )


def _validate_inputs(t0: float, tf: float, y0: Array) -> None:
    if not (math.isfinite(t0) and math.isfinite(tf)):
        raise InvalidConfigurationError(
            f"t0 and tf must be finite, got t0={t0}, tf={tf}"
        )
    if tf < t0:
        raise InvalidConfigurationError(
            f"tf must not precede t0, got t0={t0}, tf={tf}"
        )
    if y0.ndim != 1 or y0.shape[0] == 0:
        raise InvalidConfigurationError(
            f"y0 must be a non-empty 1-D state vector, got shape {y0.shape}"
        )
    if not _is_finite(y0):
        raise InvalidConfigurationError("y0 must contain only finite values")


def integrate(
    dynamics: Callable[[ArrayLike, ArrayLike], Array],
    t0: float,
    tf: float,
    y0: ArrayLike,
    config: AdaptiveConfig | None = None,
) -> Trajectory:
    """Integrate ``dy/dt = dynamics(t, y)`` from *t0* to *tf* with adaptive RKF45.

    Starting from a trial step of ``config.initial_step`` (or 1/100 of the
    span), each trial is accepted when its normalized error is <= 1.0:
    time advances, the 5th-order state becomes the new sample and the step
    is rescaled by the error estimate.  A rejected trial leaves the sample
    unchanged and retries with the smaller predicted step.  The last step is
    shortened so the final sample lies exactly on *tf*.

    Args:
        dynamics: ODE right-hand side ``f(t, y) -> dy/dt``.  Must be
            traceable by ``jax.jit``.
        t0: Initial time.
        tf: Final time (``tf >= t0``).  ``tf == t0`` returns the single
            sample ``(t0, y0)`` without stepping.
        y0: Initial state vector, shape ``(n,)``.
        config: Adaptive step-size configuration. Uses default
            :class:`AdaptiveConfig` if ``None``.

    Returns:
        Trajectory: Accepted samples from *t0* to *tf*.

    Raises:
        InvalidConfigurationError: If the time span, the initial state or
            ``config.max_step`` (below the time resolution of the span) is invalid.
        SingularConfigurationError: If the right-hand side is not finite at a
            sample.
        StepSizeUnderflowError: If a trial at the step floor is rejected.
        StepBudgetExceededError: If ``config.max_steps`` accepted steps do not
            reach *tf*.

    Examples:
        ```python
        import jax.numpy as jnp
        from satjax.integrators import integrate
        def harmonic(t, x):
            return jnp.array([x[1], -x[0]])
        traj = integrate(harmonic, 0.0, 10.0, jnp.array([1.0, 0.0]))
        traj.final_state  # ~[cos(10), -sin(10)]
        ```
    """
    if config is None:
        config = AdaptiveConfig()

    t0 = float(t0)
    tf = float(tf)
    y0 = jnp.asarray(y0, dtype=get_dtype())
    _validate_inputs(t0, tf, y0)

    rhs = jax.jit(dynamics)
    trial = jax.jit(partial(rkf45_step, dynamics, config=config))

    if tf == t0:
        dy0 = rhs(t0, y0)
        if not _is_finite(dy0):
            raise _singular(t0, y0)
        return Trajectory(
            t=jnp.asarray([t0], dtype=get_dtype()),
            states=y0[None, :],
            derivatives=jnp.asarray(dy0, dtype=get_dtype())[None, :],
            step_sizes=jnp.zeros((0,), dtype=get_dtype()),
            error_estimates=jnp.zeros((0,), dtype=get_dtype()),
            n_rejected=0,
            n_evaluations=1,
        )

    # Largest step floor over the span
    span_floor = _step_floor(max(abs(t0), abs(tf)), config.min_step)
    if config.max_step < span_floor:
        raise InvalidConfigurationError(
            f"max_step={config.max_step} is below the time resolution {span_floor} "
            f"of the span [{t0}, {tf}]; no step of that size can advance t"
        )

    h = config.initial_step if config.initial_step is not None else (tf - t0) / 100.0
    h = min(max(h, _step_floor(t0, config.min_step)), config.max_step)

    logger.info(
        "Integrating %d-dimensional system from t=%g to t=%g (abs_tol=%g, rel_tol=%g)",
        y0.shape[0],
        t0,
        tf,
        config.abs_tol,
        config.rel_tol,
    )

    times = [t0]
    states = [y0]
    derivatives = []
    step_sizes = []
    errors = []
    n_rejected = 0
    n_evaluations = 0

    def _build(derivs: list[Array]) -> Trajectory:
        return Trajectory(
            t=jnp.asarray(times, dtype=get_dtype()),
            states=jnp.stack(states),
            derivatives=jnp.stack(derivs),
            step_sizes=jnp.asarray(step_sizes, dtype=get_dtype()),
            error_estimates=jnp.asarray(errors, dtype=get_dtype()),
            n_rejected=n_rejected,
            n_evaluations=n_evaluations,
        )

    t = t0
    y = y0
    while t < tf:
        remaining = tf - t
        h_try = min(h, remaining)
        lands_on_tf = h_try >= remaining

        result = trial(t, y, h_try)
        n_evaluations += _STAGES

        # The first stage is f(t, y) at the current sample
        if len(derivatives) < len(states):
            if not _is_finite(result.derivative):
                raise _singular(t, y)
            derivatives.append(result.derivative)

        if bool(result.accepted):
            t = tf if lands_on_tf else min(t + h_try, tf)
            y = result.state
            times.append(t)
            states.append(y)
            step_sizes.append(h_try)
            errors.append(float(result.error_estimate))

            if t < tf and len(step_sizes) >= config.max_steps:
                dy = rhs(t, y)
                n_evaluations += 1
                raise StepBudgetExceededError(
                    f"Step budget of {config.max_steps} accepted steps exhausted at "
                    f"t={t} before reaching tf={tf}",
                    trajectory=_build(derivatives + [dy]),
                    max_steps=config.max_steps,
                )

            h = min(max(float(result.dt_next), _step_floor(t, config.min_step)), config.max_step)
        else:
            n_rejected += 1
            floor = _step_floor(t, config.min_step)
            logger.debug(
                "Rejected step h=%g at t=%g (error estimate %g)",
                h_try,
                t,
                float(result.error_estimate),
            )
            if h_try <= floor:
                raise StepSizeUnderflowError(
                    f"Step size underflow at t={t}: step h={h_try} at the floor "
                    f"{floor} still exceeds the tolerance "
                    f"(abs_tol={config.abs_tol}, rel_tol={config.rel_tol})",
                    t=t,
                    state=y,
                    h=h_try,
                    min_step=floor,
                    abs_tol=config.abs_tol,
                    rel_tol=config.rel_tol,
                )
            h = min(max(float(result.dt_next), floor), config.max_step)

    dy_final = rhs(t, y)
    n_evaluations += 1
    if not _is_finite(dy_final):
        raise _singular(t, y)
    derivatives.append(dy_final)

    trajectory = _build(derivatives)
    logger.info(
        "Integration reached t=%g: %d accepted steps, %d rejected, %d evaluations",
        tf,
        trajectory.n_accepted,
        n_rejected,
        n_evaluations,
    )
    return trajectory
