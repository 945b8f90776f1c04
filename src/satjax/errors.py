"""Exceptions raised by satjax integrations.

All failures of :func:`~satjax.integrators.integrate` are reported by
raising one of the classes below; a trajectory cut short by a failure is
never returned silently.

- :class:`InvalidConfigurationError`: rejected input, raised before any
  integration work is done.  Also a :class:`ValueError`.
- :class:`SingularConfigurationError`: the right-hand side returned a
  non-finite derivative at a sample (e.g. a separation reached zero).
- :class:`StepSizeUnderflowError`: no step above the step floor satisfies
  the tolerance.
- :class:`StepBudgetExceededError`: ``max_steps`` accepted steps did not
  reach the final time.  Carries the partial trajectory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from satjax.integrators._types import Trajectory


class IntegrationError(Exception):
    """Base class for integration failures.

    Args:
        message: Human-readable description.
        t: Time of the last valid sample, if known.
        state: State of the last valid sample, if known.
    """

    def __init__(self, message: str, t: float | None = None, state=None):
        super().__init__(message)
        self.t = t
        self.state = None if state is None else np.asarray(state)


class InvalidConfigurationError(IntegrationError, ValueError):
    """Raised when masses, time span, tolerances or step bounds are invalid."""


class SingularConfigurationError(IntegrationError):
    """Raised when the dynamics evaluate to a non-finite derivative.

    For the three-body model this happens when a body-to-center or
    body-to-body separation reaches zero.  ``t`` and ``state`` identify the
    offending sample.
    """


class StepSizeUnderflowError(IntegrationError):
    """Raised when a step at the step-size floor still exceeds the tolerance.

    Attributes:
        h: Rejected step size.
        min_step: Effective step floor at the failure time.
        abs_tol: Absolute tolerance in use.
        rel_tol: Relative tolerance in use.
    """

    def __init__(
        self,
        message: str,
        t: float,
        state,
        h: float,
        min_step: float,
        abs_tol: float,
        rel_tol: float,
    ):
        super().__init__(message, t=t, state=state)
        self.h = h
        self.min_step = min_step
        self.abs_tol = abs_tol
        self.rel_tol = rel_tol


class StepBudgetExceededError(IntegrationError):
    """Raised when ``max_steps`` accepted steps do not reach the final time.

    Attributes:
        trajectory: Partial :class:`~satjax.integrators.Trajectory` up to and
            including the last accepted sample.
        max_steps: The exhausted step budget.
    """

    def __init__(self, message: str, trajectory: Trajectory, max_steps: int):
        super().__init__(
            message,
            t=float(trajectory.t[-1]),
            state=trajectory.states[-1],
        )
        self.trajectory = trajectory
        self.max_steps = max_steps
