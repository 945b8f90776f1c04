"""Type definitions for numerical integrators.

Provides the core data types used by the RKF45 integrator:

- :class:`StepResult`: Output of a single trial step, containing the
  candidate state, timestep used, error estimate, suggested next timestep
  and whether the trial met the tolerance.
- :class:`AdaptiveConfig`: Configuration for adaptive step-size control.
- :class:`Trajectory`: The time series produced by
  :func:`~satjax.integrators.integrate`.

:class:`StepResult` is a :class:`~typing.NamedTuple`, which JAX treats as a
pytree automatically, so it can be returned from ``jax.jit``-compiled code.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np
import polars as pl
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.errors import InvalidConfigurationError
from satjax.integrators._dense import hermite_derivative, hermite_interpolate


class StepResult(NamedTuple):
    """Result of a single RKF45 trial step.

    Attributes:
        state: 5th-order state at time ``t + dt_used``.  Only meaningful
            when ``accepted`` is ``True``.
        dt_used: Timestep of the trial.
        error_estimate: Normalized error estimate. A value <= 1.0 means the
            step met the tolerance.
        dt_next: Suggested timestep for the next trial, computed from the
            error estimate and clamped to the configured bounds.
        accepted: Boolean scalar, ``error_estimate <= 1.0``.
        derivative: Right-hand side evaluated at the start of the step
            (the first stage).
    """

    state: Array
    dt_used: Array
    error_estimate: Array
    dt_next: Array
    accepted: Array
    derivative: Array


@dataclass(frozen=True)
class AdaptiveConfig:
    """Configuration for adaptive step-size control.

    Default values are chosen for the satellite-pair problem (positions of
    order 1e5 km, velocities of order 10-100 km/s, spans of order 1e5 s).

    The error of a trial step is measured with a mixed absolute/relative
    infinity norm (see
    :func:`~satjax.integrators._adaptive.compute_error_norm`): each
    component is compared against ``abs_tol + rel_tol * |y_i|``.

    Args:
        abs_tol: Absolute error tolerance per component. Components with
            magnitude near zero are controlled by this tolerance.
        rel_tol: Relative error tolerance per component. Components with
            large magnitude are controlled by this tolerance.
        safety_factor: Multiplicative safety factor applied to step-size
            predictions (0.84 is the classical Fehlberg value).
        min_scale_factor: Minimum allowed ratio ``dt_next / dt_used``.
        max_scale_factor: Maximum allowed ratio ``dt_next / dt_used``.
        min_step: Absolute minimum step size. A trial rejected at this size
            raises :class:`~satjax.errors.StepSizeUnderflowError`.
        max_step: Absolute maximum step size.
        max_steps: Maximum number of accepted steps before
            :class:`~satjax.errors.StepBudgetExceededError` is raised.
        initial_step: First trial step. ``None`` uses 1/100 of the span.

    Raises:
        InvalidConfigurationError: If a tolerance or step bound is invalid.

    Examples:
        ```python
        from satjax.integrators import AdaptiveConfig
        config = AdaptiveConfig(abs_tol=1e-12, rel_tol=1e-10, max_step=60.0)
        ```
    """

    abs_tol: float = 1e-10
    rel_tol: float = 1e-8
    safety_factor: float = 0.84
    min_scale_factor: float = 0.1
    max_scale_factor: float = 4.0
    min_step: float = 1e-10
    max_step: float = math.inf
    max_steps: int = 100_000
    initial_step: float | None = None

    def __post_init__(self) -> None:
        for name in ("abs_tol", "rel_tol"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0.0:
                raise InvalidConfigurationError(
                    f"{name} must be a finite non-negative number, got {value}"
                )
        if self.abs_tol == 0.0 and self.rel_tol == 0.0:
            raise InvalidConfigurationError(
                "At least one of abs_tol and rel_tol must be positive"
            )
        if not 0.0 < self.safety_factor <= 1.0:
            raise InvalidConfigurationError(
                f"safety_factor must be in (0, 1], got {self.safety_factor}"
            )
        if not 0.0 < self.min_scale_factor < 1.0 < self.max_scale_factor:
            raise InvalidConfigurationError(
                "Scale factor bounds must satisfy 0 < min_scale_factor < 1 "
                f"< max_scale_factor, got [{self.min_scale_factor}, "
                f"{self.max_scale_factor}]"
            )
        if self.min_step < 0.0:
            raise InvalidConfigurationError(
                f"min_step must be non-negative, got {self.min_step}"
            )
        if self.max_step <= 0.0:
            raise InvalidConfigurationError(
                f"max_step must be positive, got {self.max_step}"
            )
        if self.min_step > self.max_step:
            raise InvalidConfigurationError(
                f"min_step ({self.min_step}) must not exceed max_step ({self.max_step})"
            )
        if self.max_steps < 1:
            raise InvalidConfigurationError(
                f"max_steps must be at least 1, got {self.max_steps}"
            )
        if self.initial_step is not None and not (
            math.isfinite(self.initial_step) and self.initial_step > 0.0
        ):
            raise InvalidConfigurationError(
                f"initial_step must be a positive finite number, got {self.initial_step}"
            )

    @staticmethod
    def from_tolerance(tol: float, **kwargs) -> AdaptiveConfig:
        """Preset: one combined tolerance used for both ``abs_tol`` and ``rel_tol``.

        Args:
            tol: Combined tolerance.
            **kwargs: Any other :class:`AdaptiveConfig` field.

        Returns:
            AdaptiveConfig: Configuration with ``abs_tol == rel_tol == tol``.

        Examples:
            ```python
            config = AdaptiveConfig.from_tolerance(1e-8)
            config.rel_tol
            ```
        """
        return AdaptiveConfig(abs_tol=tol, rel_tol=tol, **kwargs)


@dataclass(frozen=True)
class Trajectory:
    """Time series of states produced by an integration.

    Samples are ordered by strictly increasing time, starting at ``t0`` and
    ending exactly at ``tf``.  Sample spacing follows the accepted adaptive
    steps; use :meth:`resample` for a uniform grid.

    Attributes:
        t: Sample times, shape ``(N,)``.
        states: States at the sample times, shape ``(N, n)``.
        derivatives: Right-hand side at each sample, shape ``(N, n)``.
        step_sizes: Accepted step sizes, shape ``(N - 1,)``.
        error_estimates: Normalized error of each accepted step,
            shape ``(N - 1,)``. Every entry is <= 1.0.
        n_rejected: Number of rejected trial steps.
        n_evaluations: Number of right-hand-side evaluations.
    """

    t: Array
    states: Array
    derivatives: Array
    step_sizes: Array
    error_estimates: Array
    n_rejected: int = 0
    n_evaluations: int = 0

    @property
    def n_samples(self) -> int:
        """Number of ``(t, state)`` samples."""
        return int(self.t.shape[0])

    @property
    def n_accepted(self) -> int:
        """Number of accepted steps."""
        return self.n_samples - 1

    @property
    def final_state(self) -> Array:
        """State at the last sample."""
        return self.states[-1]

    def sample(self, t_query: ArrayLike) -> Array:
        """Evaluate the trajectory at arbitrary times by dense output.

        Uses piecewise cubic Hermite interpolation between accepted samples,
        built from the stored states and derivatives.

        Args:
            t_query: Scalar or 1-D array of times within ``[t[0], t[-1]]``.

        Returns:
            jax.Array: States, shape ``(n,)`` for a scalar query or
            ``(M, n)`` for ``M`` query times.

        Raises:
            ValueError: If a query time lies outside the integrated span.
        """
        t_query = jnp.asarray(t_query, dtype=get_dtype())
        self._check_span(t_query)
        return hermite_interpolate(self.t, self.states, self.derivatives, t_query)

    def resample(self, num: int) -> Trajectory:
        """Re-sample onto a uniform grid of *num* times from ``t0`` to ``tf``.

        Step diagnostics (``step_sizes``, ``error_estimates`` and counters)
        describe the original integration and are carried over unchanged.

        Args:
            num: Number of output samples (>= 2, or 1 for a zero-length span).

        Returns:
            Trajectory: Uniformly sampled trajectory.
        """
        if num < 1:
            raise ValueError(f"num must be at least 1, got {num}")
        t0 = float(self.t[0])
        tf = float(self.t[-1])
        if num == 1 and t0 != tf:
            raise ValueError("num must be at least 2 for a non-empty time span")

        t_grid = jnp.linspace(t0, tf, num, dtype=get_dtype())
        # Pin the grid ends to the exact integration bounds
        t_grid = t_grid.at[0].set(t0).at[-1].set(tf)
        return Trajectory(
            t=t_grid,
            states=hermite_interpolate(self.t, self.states, self.derivatives, t_grid),
            derivatives=hermite_derivative(self.t, self.states, self.derivatives, t_grid),
            step_sizes=self.step_sizes,
            error_estimates=self.error_estimates,
            n_rejected=self.n_rejected,
            n_evaluations=self.n_evaluations,
        )

    def to_polars(self, columns: Sequence[str] | None = None) -> pl.DataFrame:
        """Convert the samples to a table with one time column and one column per state component.

        Args:
            columns: Names of the state columns. Defaults to
                ``y0, y1, ..., y{n-1}``.

        Returns:
            polars.DataFrame: Columns ``t`` followed by the state columns,
            one row per sample, in time order.
        """
        states = np.asarray(self.states)
        n = states.shape[1]
        if columns is None:
            columns = [f"y{i}" for i in range(n)]
        if len(columns) != n:
            raise ValueError(
                f"Expected {n} column names, got {len(columns)}"
            )
        data = {"t": pl.Series(np.asarray(self.t), dtype=pl.Float64)}
        for i, name in enumerate(columns):
            data[name] = pl.Series(states[:, i], dtype=pl.Float64)
        return pl.DataFrame(data)

    def _check_span(self, t_query: Array) -> None:
        t0 = float(self.t[0])
        tf = float(self.t[-1])
        if bool(jnp.any(t_query < t0)) or bool(jnp.any(t_query > tf)):
            raise ValueError(
                f"Query times must lie within the integrated span [{t0}, {tf}]"
            )
