"""Two satellites orbiting a dominant central mass.

Provides the coupled equations of motion of the satellite pair and their
propagation with the adaptive RKF45 integrator:

- **State**: typed view of the ``[r1, r2, v1, v2]`` state vector
- **Config**: masses, gravitational constant and the reference scenario
- **Dynamics**: accelerations and the ``dynamics(t, state)`` closure
- **Propagate**: integration, tabular output and conservation diagnostics
"""

from .config import ThreeBodyParams, ThreeBodyScenario, satellite_pair_scenario
from .dynamics import (
    accel_three_body,
    check_separations,
    create_three_body_dynamics,
    three_body_rates,
)
from .propagate import propagate_three_body, system_diagnostics, trajectory_to_dataframe
from .state import STATE_COLUMNS, STATE_SIZE, ThreeBodyState

__all__ = [
    "STATE_COLUMNS",
    "STATE_SIZE",
    "ThreeBodyState",
    "ThreeBodyParams",
    "ThreeBodyScenario",
    "satellite_pair_scenario",
    "accel_three_body",
    "three_body_rates",
    "create_three_body_dynamics",
    "check_separations",
    "propagate_three_body",
    "trajectory_to_dataframe",
    "system_diagnostics",
]
