"""Propagation of the satellite-pair model.

Glue between the satellite-pair dynamics and the adaptive integrator, plus
conversion of the resulting trajectory into a table and the Keplerian
diagnostics used to check conservation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax.numpy as jnp
import polars as pl

from satjax.errors import SingularConfigurationError
from satjax.integrators import AdaptiveConfig, Trajectory, integrate
from satjax.orbits import specific_angular_momentum, specific_energy
from satjax.three_body.dynamics import check_separations, create_three_body_dynamics
from satjax.three_body.state import STATE_COLUMNS, ThreeBodyState

if TYPE_CHECKING:
    from satjax.three_body.config import ThreeBodyParams

logger = logging.getLogger(__name__)


def propagate_three_body(
    params: ThreeBodyParams,
    initial_state: ThreeBodyState,
    t0: float,
    tf: float,
    config: AdaptiveConfig | None = None,
) -> Trajectory:
    """Integrate the satellite-pair equations of motion from *t0* to *tf*.

    Args:
        params: Masses and gravitational constant.
        initial_state: State at *t0*.  A flat 12-vector is also accepted.
        t0: Initial time [s].
        tf: Final time [s].
        config: Adaptive step-size configuration. Uses default
            :class:`~satjax.integrators.AdaptiveConfig` if ``None``.

    Returns:
        Trajectory: Samples of ``[r1, r2, v1, v2]`` from *t0* to *tf*.

    Raises:
        InvalidConfigurationError: If the inputs are invalid.
        SingularConfigurationError: If a separation reaches zero.  The
            message lists the three separations at the offending sample.
        StepSizeUnderflowError: If the step size collapses.
        StepBudgetExceededError: If the step budget is exhausted.
    """
    if not isinstance(initial_state, ThreeBodyState):
        initial_state = ThreeBodyState.from_array(initial_state)

    dynamics = create_three_body_dynamics(params)
    logger.info(
        "Propagating satellite pair (m_center=%g kg, m1=%g kg, m2=%g kg) over [%g, %g] s",
        params.mass_center,
        params.mass_body1,
        params.mass_body2,
        t0,
        tf,
    )

    try:
        return integrate(dynamics, t0, tf, initial_state.to_array(), config)
    except SingularConfigurationError as exc:
        r1, r2, s = check_separations(exc.state)
        raise SingularConfigurationError(
            f"Singular satellite-pair configuration at t={exc.t}: "
            f"|r1|={r1:g} km, |r2|={r2:g} km, |r2 - r1|={s:g} km",
            t=exc.t,
            state=exc.state,
        ) from exc


def trajectory_to_dataframe(trajectory: Trajectory) -> pl.DataFrame:
    """Convert a satellite-pair trajectory to a 13-column table.

    Args:
        trajectory: Result of :func:`propagate_three_body`.

    Returns:
        polars.DataFrame: Columns ``t, x1, y1, z1, x2, y2, z2, vx1, vy1,
        vz1, vx2, vy2, vz2``, one row per sample.
    """
    return trajectory.to_polars(columns=STATE_COLUMNS)


def system_diagnostics(trajectory: Trajectory, params: ThreeBodyParams) -> pl.DataFrame:
    """Keplerian energy and angular momentum of each satellite at every sample.

    Each satellite is treated as a two-body orbit about its combined mass
    (``params.gm1`` or ``params.gm2``).  With the other satellite massless
    these quantities are constants of motion.

    Args:
        trajectory: Result of :func:`propagate_three_body`.
        params: Parameters used for the propagation.

    Returns:
        polars.DataFrame: Columns ``t, energy1, energy2, h1, h2`` where
        ``energy*`` is the specific energy [km^2/s^2] and ``h*`` the
        magnitude of the specific angular momentum [km^2/s].
    """
    x = ThreeBodyState.from_states(trajectory.states)
    body1 = x.body1()
    body2 = x.body2()

    return pl.DataFrame(
        {
            "t": pl.Series(trajectory.t.tolist(), dtype=pl.Float64),
            "energy1": pl.Series(specific_energy(body1, params.gm1).tolist(), dtype=pl.Float64),
            "energy2": pl.Series(specific_energy(body2, params.gm2).tolist(), dtype=pl.Float64),
            "h1": pl.Series(
                jnp.linalg.norm(specific_angular_momentum(body1), axis=-1).tolist(),
                dtype=pl.Float64,
            ),
            "h2": pl.Series(
                jnp.linalg.norm(specific_angular_momentum(body2), axis=-1).tolist(),
                dtype=pl.Float64,
            ),
        }
    )
