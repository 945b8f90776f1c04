"""
satjax propagates two satellites about a dominant central mass with an adaptive RKF45 integrator implemented in JAX.
"""

from .constants import (
    G_KM,
    G_SI,
    M_CENTRAL_REF,
    M_BODY1_REF,
    M_BODY2_REF,
)

from .config import set_dtype, get_dtype

from .errors import (
    IntegrationError,
    InvalidConfigurationError,
    SingularConfigurationError,
    StepSizeUnderflowError,
    StepBudgetExceededError,
)

from .orbits import (
    specific_energy,
    specific_angular_momentum,
    semimajor_axis_from_state,
    orbital_period,
    orbital_period_from_state,
)

from .integrators import (
    AdaptiveConfig,
    StepResult,
    Trajectory,
    rkf45_step,
    integrate,
)

from .three_body import (
    ThreeBodyState,
    ThreeBodyParams,
    ThreeBodyScenario,
    satellite_pair_scenario,
    accel_three_body,
    three_body_rates,
    create_three_body_dynamics,
    propagate_three_body,
    trajectory_to_dataframe,
    system_diagnostics,
)

__all__ = [
    # Constants
    "G_KM",
    "G_SI",
    "M_CENTRAL_REF",
    "M_BODY1_REF",
    "M_BODY2_REF",
    # Config
    "set_dtype",
    "get_dtype",
    # Errors
    "IntegrationError",
    "InvalidConfigurationError",
    "SingularConfigurationError",
    "StepSizeUnderflowError",
    "StepBudgetExceededError",
    # Orbits
    "specific_energy",
    "specific_angular_momentum",
    "semimajor_axis_from_state",
    "orbital_period",
    "orbital_period_from_state",
    # Integrators
    "AdaptiveConfig",
    "StepResult",
    "Trajectory",
    "rkf45_step",
    "integrate",
    # Three-body
    "ThreeBodyState",
    "ThreeBodyParams",
    "ThreeBodyScenario",
    "satellite_pair_scenario",
    "accel_three_body",
    "three_body_rates",
    "create_three_body_dynamics",
    "propagate_three_body",
    "trajectory_to_dataframe",
    "system_diagnostics",
]
