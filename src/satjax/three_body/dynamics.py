"""Equations of motion of two satellites about a dominant central mass.

The central body is fixed at the origin.  Each satellite is attracted by
the central body, with the central and satellite masses combined as in the
relative two-body problem, and by the other satellite:

.. math::

    \\ddot{r}_1 = -\\frac{G (m_c + m_1)}{r_1^3} r_1
        + \\frac{G m_2}{s^3} (r_2 - r_1)

    \\ddot{r}_2 = -\\frac{G (m_c + m_2)}{r_2^3} r_2
        - \\frac{G m_1}{s^3} (r_2 - r_1)

with :math:`s = |r_2 - r_1|`.  Units are km, kg and s.

A zero separation makes the equations singular; JAX does not trap the
division, the result is non-finite and
:func:`~satjax.integrators.integrate` reports it as
:class:`~satjax.errors.SingularConfigurationError`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.three_body.state import ThreeBodyState

if TYPE_CHECKING:
    from satjax.three_body.config import ThreeBodyParams


def accel_three_body(
    r1: ArrayLike,
    r2: ArrayLike,
    params: ThreeBodyParams,
) -> tuple[Array, Array]:
    """Accelerations of both satellites.

    Args:
        r1: Position of satellite 1 relative to the central body [km].
            Shape ``(3,)``.
        r2: Position of satellite 2 relative to the central body [km].
            Shape ``(3,)``.
        params: Masses and gravitational constant.

    Returns:
        Tuple ``(a1, a2)`` of acceleration vectors [km/s^2], each shape ``(3,)``.

    Examples:
        ```python
        import jax.numpy as jnp
        from satjax.three_body import ThreeBodyParams, accel_three_body
        params = ThreeBodyParams.satellite_pair()
        a1, a2 = accel_three_body(
            jnp.array([500000.0, 0, 0]), jnp.array([600000.0, 0, 0]), params
        )
        ```
    """
    _float = get_dtype()
    r1 = jnp.asarray(r1, dtype=_float)
    r2 = jnp.asarray(r2, dtype=_float)

    r1_norm = jnp.linalg.norm(r1)
    r2_norm = jnp.linalg.norm(r2)
    sep = r2 - r1
    sep_norm = jnp.linalg.norm(sep)

    a1 = -params.gm1 * r1 / r1_norm**3 + params.gm_body2 * sep / sep_norm**3
    a2 = -params.gm2 * r2 / r2_norm**3 - params.gm_body1 * sep / sep_norm**3
    return a1, a2


def three_body_rates(t: ArrayLike, state: ArrayLike, params: ThreeBodyParams) -> Array:
    """Time derivative of the 12-component satellite-pair state.

    Args:
        t: Time [s].  The dynamics are autonomous; *t* is unused.
        state: ``[r1, r2, v1, v2]`` [km, km/s], shape ``(12,)``.
        params: Masses and gravitational constant.

    Returns:
        jax.Array: ``[v1, v2, a1, a2]`` [km/s, km/s^2], shape ``(12,)``.
    """
    x = ThreeBodyState.from_array(state)
    a1, a2 = accel_three_body(x.r1, x.r2, params)
    return jnp.concatenate([x.v1, x.v2, a1, a2])


def create_three_body_dynamics(
    params: ThreeBodyParams,
) -> Callable[[ArrayLike, ArrayLike], Array]:
    """Create the satellite-pair dynamics function.

    Returns a closure ``dynamics(t, state) -> derivative`` bound to
    *params*, compatible with :func:`~satjax.integrators.rkf45_step` and
    :func:`~satjax.integrators.integrate`.

    Args:
        params: Masses and gravitational constant.

    Returns:
        A callable ``dynamics(t, state) -> derivative`` where:

        - *t*: time [s] (scalar).
        - *state*: ``[r1, r2, v1, v2]`` [km, km/s].
        - *derivative*: ``[v1, v2, a1, a2]`` [km/s, km/s^2].

    Examples:
        ```python
        from satjax.integrators import integrate
        from satjax.three_body import create_three_body_dynamics, satellite_pair_scenario
        scenario = satellite_pair_scenario()
        dynamics = create_three_body_dynamics(scenario.params)
        traj = integrate(dynamics, 0.0, 600.0, scenario.initial_state.to_array())
        ```
    """

    def dynamics(t: ArrayLike, state: ArrayLike) -> Array:
        return three_body_rates(t, state, params)

    return dynamics


def check_separations(state: ArrayLike) -> tuple[float, float, float]:
    """Return the separations ``(|r1|, |r2|, |r2 - r1|)`` of a state as floats.

    Args:
        state: ``[r1, r2, v1, v2]``, shape ``(12,)``.

    Returns:
        Tuple of the body-1, body-2 and body-to-body distances [km].
    """
    x = ThreeBodyState.from_array(state)
    return (
        float(jnp.linalg.norm(x.r1)),
        float(jnp.linalg.norm(x.r2)),
        float(jnp.linalg.norm(x.r2 - x.r1)),
    )
