"""Keplerian two-body quantities for an arbitrary central gravitational parameter.

Used to check the satellite-pair model against its Keplerian reduction: with
one satellite massless, the other moves on a two-body orbit about the
combined mass ``G * (m_center + m_body)``.

All functions use JAX operations and are compatible with ``jax.jit``,
``jax.vmap``, and ``jax.grad``. Inputs are coerced to the configured
float dtype (see :func:`satjax.config.set_dtype`).  States are 6-vectors
``[x, y, z, vx, vy, vz]``, or stacks of them with shape ``(N, 6)``.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype


def specific_energy(state: ArrayLike, gm: float) -> Array:
    """Specific mechanical energy ``v^2/2 - gm/r``.

    Args:
        state: State ``[r, v]``, shape ``(6,)`` or ``(N, 6)``.
        gm: Gravitational parameter of the central mass. Units: *km^3/s^2*

    Returns:
        Specific energy. Units: *km^2/s^2*

    Examples:
        ```python
        import jax.numpy as jnp
        from satjax.orbits import specific_energy
        eps = specific_energy(jnp.array([7000.0, 0, 0, 0, 7.5, 0]), 398600.4418)
        ```
    """
    state = jnp.asarray(state, dtype=get_dtype())
    r = jnp.linalg.norm(state[..., :3], axis=-1)
    v_sq = jnp.sum(state[..., 3:6] ** 2, axis=-1)
    return 0.5 * v_sq - gm / r


def specific_angular_momentum(state: ArrayLike) -> Array:
    """Specific angular momentum vector ``r x v``.

    Args:
        state: State ``[r, v]``, shape ``(6,)`` or ``(N, 6)``.

    Returns:
        Angular momentum vector, shape ``(3,)`` or ``(N, 3)``. Units: *km^2/s*
    """
    state = jnp.asarray(state, dtype=get_dtype())
    return jnp.cross(state[..., :3], state[..., 3:6])


def semimajor_axis_from_state(state: ArrayLike, gm: float) -> Array:
    """Semi-major axis from the vis-viva equation, ``a = -gm / (2 eps)``.

    Args:
        state: State ``[r, v]``, shape ``(6,)`` or ``(N, 6)``.
        gm: Gravitational parameter of the central mass. Units: *km^3/s^2*

    Returns:
        Semi-major axis. Units: *km*
    """
    return -gm / (2.0 * specific_energy(state, gm))


def orbital_period(a: ArrayLike, gm: float) -> Array:
    """Orbital period of an elliptical orbit.

    Args:
        a: Semi-major axis. Units: *km*
        gm: Gravitational parameter of the central mass. Units: *km^3/s^2*

    Returns:
        Orbital period. Units: *s*
    """
    a = jnp.asarray(a, dtype=get_dtype())
    return 2.0 * jnp.pi * jnp.sqrt(a**3 / gm)


def orbital_period_from_state(state: ArrayLike, gm: float) -> Array:
    """Orbital period from a state vector using the vis-viva equation.

    Args:
        state: State ``[r, v]``, shape ``(6,)``.
        gm: Gravitational parameter of the central mass. Units: *km^3/s^2*

    Returns:
        Orbital period. Units: *s*
    """
    return orbital_period(semimajor_axis_from_state(state, gm), gm)
