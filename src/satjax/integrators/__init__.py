"""Numerical ODE integration with adaptive step-size control.

Provides the Runge-Kutta-Fehlberg 4(5) method implemented in JAX:

- :func:`rkf45_step` -- one RKF45 trial step with error estimate
  (compatible with ``jax.jit`` and ``jax.vmap``)
- :func:`integrate` -- adaptive integration from ``t0`` to ``tf``
  returning a :class:`Trajectory`

The right-hand side follows the common interface::

    dynamics(t, x) -> dx

where ``x`` is a 1-D state vector.
"""

from satjax.integrators._types import AdaptiveConfig, StepResult, Trajectory
from satjax.integrators.rkf45 import rkf45_step
from satjax.integrators.solve import integrate

__all__ = [
    "AdaptiveConfig",
    "StepResult",
    "Trajectory",
    "rkf45_step",
    "integrate",
]
