"""Typed view of the 12-component satellite-pair state vector.

The flat state vector used by the integrator is ordered::

    [r1 (3), r2 (3), v1 (3), v2 (3)]

i.e. both positions followed by both velocities.  The derivative returned
by the dynamics has the same layout: ``[v1, v2, a1, a2]``.
:class:`ThreeBodyState` gives these blocks names without changing the
ordering.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.errors import InvalidConfigurationError

STATE_SIZE = 12

"""
Column names of the flat state vector, in order.
"""
STATE_COLUMNS = (
    "x1", "y1", "z1",
    "x2", "y2", "z2",
    "vx1", "vy1", "vz1",
    "vx2", "vy2", "vz2",
)


class ThreeBodyState(NamedTuple):
    """Positions and velocities of both satellites relative to the central body.

    A :class:`~typing.NamedTuple`, so JAX treats it as a pytree.

    Attributes:
        r1: Position of body 1 [km], shape ``(3,)``.
        r2: Position of body 2 [km], shape ``(3,)``.
        v1: Velocity of body 1 [km/s], shape ``(3,)``.
        v2: Velocity of body 2 [km/s], shape ``(3,)``.
    """

    r1: Array
    r2: Array
    v1: Array
    v2: Array

    @classmethod
    def from_vectors(
        cls,
        r1: ArrayLike,
        r2: ArrayLike,
        v1: ArrayLike,
        v2: ArrayLike,
    ) -> ThreeBodyState:
        """Build a state from four 3-vectors.

        Raises:
            InvalidConfigurationError: If any block is not a 3-vector.

        Examples:
            ```python
            from satjax.three_body import ThreeBodyState
            x0 = ThreeBodyState.from_vectors(
                [500000.0, 0, 0], [600000.0, 0, 0], [0, 45.0, 5.0], [0, 72.0, 10.0]
            )
            ```
        """
        dtype = get_dtype()
        blocks = [jnp.asarray(b, dtype=dtype) for b in (r1, r2, v1, v2)]
        for name, block in zip(cls._fields, blocks):
            if block.shape != (3,):
                raise InvalidConfigurationError(
                    f"{name} must have shape (3,), got {block.shape}"
                )
        return cls(*blocks)

    @classmethod
    def from_array(cls, y: ArrayLike) -> ThreeBodyState:
        """Split a flat 12-vector ``[r1, r2, v1, v2]`` into named blocks."""
        y = jnp.asarray(y, dtype=get_dtype())
        if y.shape != (STATE_SIZE,):
            raise InvalidConfigurationError(
                f"Three-body state must have shape ({STATE_SIZE},), got {y.shape}"
            )
        return cls(y[0:3], y[3:6], y[6:9], y[9:12])

    @classmethod
    def from_states(cls, states: ArrayLike) -> ThreeBodyState:
        """Split a stack of 12-vectors, shape ``(N, 12)``, into named blocks.

        Each block of the result has shape ``(N, 3)``; :meth:`body1`,
        :meth:`body2` and :meth:`to_array` work on the stacked view as well.

        Examples:
            ```python
            x = ThreeBodyState.from_states(trajectory.states)
            jnp.linalg.norm(x.r1, axis=-1)
            ```
        """
        return jax.vmap(cls.from_array)(jnp.asarray(states, dtype=get_dtype()))

    def to_array(self) -> Array:
        """Flatten to the 12-vector ``[r1, r2, v1, v2]``."""
        return jnp.concatenate([self.r1, self.r2, self.v1, self.v2], axis=-1)

    def body1(self) -> Array:
        """Two-body state ``[r1, v1]`` of body 1."""
        return jnp.concatenate([self.r1, self.v1], axis=-1)

    def body2(self) -> Array:
        """Two-body state ``[r2, v2]`` of body 2."""
        return jnp.concatenate([self.r2, self.v2], axis=-1)
