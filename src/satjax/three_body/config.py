"""Configuration dataclasses for the satellite-pair model.

Provides :class:`ThreeBodyParams` for the gravitational constant and the
three masses, and :class:`ThreeBodyScenario` bundling the parameters with
an initial state and a time span.  Both are immutable; the parameters are
captured by the dynamics closure built for a propagation, so nothing is
shared through module-level state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from satjax.constants import G_KM, M_BODY1_REF, M_BODY2_REF, M_CENTRAL_REF
from satjax.errors import InvalidConfigurationError
from satjax.integrators import AdaptiveConfig, Trajectory
from satjax.three_body.propagate import propagate_three_body
from satjax.three_body.state import ThreeBodyState


@dataclass(frozen=True)
class ThreeBodyParams:
    """Masses and gravitational constant of the satellite-pair system.

    The central body sits at the origin.  Satellite masses may be zero, in
    which case that satellite is a test particle and the other one follows
    a Keplerian orbit.

    Args:
        mass_center: Mass of the central body [kg].  Must be positive.
        mass_body1: Mass of satellite 1 [kg].  Must be non-negative.
        mass_body2: Mass of satellite 2 [kg].  Must be non-negative.
        gravitational_constant: Gravitational constant [km^3/(kg s^2)].

    Raises:
        InvalidConfigurationError: If a mass or the gravitational constant is
            out of range.

    Examples:
        ```python
        from satjax.three_body import ThreeBodyParams
        params = ThreeBodyParams(mass_center=1e29, mass_body1=2e27, mass_body2=1e26)
        params.gm1
        ```
    """

    mass_center: float
    mass_body1: float
    mass_body2: float
    gravitational_constant: float = G_KM

    def __post_init__(self) -> None:
        if not (math.isfinite(self.gravitational_constant) and self.gravitational_constant > 0.0):
            raise InvalidConfigurationError(
                f"gravitational_constant must be positive, got {self.gravitational_constant}"
            )
        if not (math.isfinite(self.mass_center) and self.mass_center > 0.0):
            raise InvalidConfigurationError(
                f"mass_center must be positive, got {self.mass_center}"
            )
        for name in ("mass_body1", "mass_body2"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0.0):
                raise InvalidConfigurationError(
                    f"{name} must be non-negative, got {value}"
                )

    @property
    def gm_center(self) -> float:
        """Gravitational parameter of the central body [km^3/s^2]."""
        return self.gravitational_constant * self.mass_center

    @property
    def gm_body1(self) -> float:
        """Gravitational parameter of satellite 1 [km^3/s^2]."""
        return self.gravitational_constant * self.mass_body1

    @property
    def gm_body2(self) -> float:
        """Gravitational parameter of satellite 2 [km^3/s^2]."""
        return self.gravitational_constant * self.mass_body2

    @property
    def gm1(self) -> float:
        """Combined parameter ``G * (mass_center + mass_body1)`` [km^3/s^2]."""
        return self.gravitational_constant * (self.mass_center + self.mass_body1)

    @property
    def gm2(self) -> float:
        """Combined parameter ``G * (mass_center + mass_body2)`` [km^3/s^2]."""
        return self.gravitational_constant * (self.mass_center + self.mass_body2)

    @staticmethod
    def satellite_pair() -> ThreeBodyParams:
        """Preset: the reference satellite-pair masses.

        Returns:
            ThreeBodyParams: Central mass 1e29 kg, satellites 2e27 kg and 1e26 kg.
        """
        return ThreeBodyParams(
            mass_center=M_CENTRAL_REF,
            mass_body1=M_BODY1_REF,
            mass_body2=M_BODY2_REF,
        )


@dataclass(frozen=True)
class ThreeBodyScenario:
    """Initial value problem for the satellite-pair model.

    Args:
        params: Masses and gravitational constant.
        initial_state: State at *t0*.
        t0: Initial time [s].
        tf: Final time [s].
    """

    params: ThreeBodyParams
    initial_state: ThreeBodyState
    t0: float
    tf: float

    def propagate(self, config: AdaptiveConfig | None = None) -> Trajectory:
        """Integrate the scenario with :func:`~satjax.three_body.propagate_three_body`."""
        return propagate_three_body(self.params, self.initial_state, self.t0, self.tf, config)


def satellite_pair_scenario() -> ThreeBodyScenario:
    """Reference scenario: two satellites launched from 500000 km and 600000 km.

    Body 1 starts at ``(500000, 0, 0)`` km with velocity ``(0, 45, 5)`` km/s
    and body 2 at ``(600000, 0, 0)`` km with velocity ``(0, 72, 10)`` km/s,
    integrated over ``[0, 100000]`` s.  Both velocities are below escape
    speed for the reference masses.

    Returns:
        ThreeBodyScenario: The reference scenario.
    """
    return ThreeBodyScenario(
        params=ThreeBodyParams.satellite_pair(),
        initial_state=ThreeBodyState.from_vectors(
            [500000.0, 0.0, 0.0],
            [600000.0, 0.0, 0.0],
            [0.0, 45.0, 5.0],
            [0.0, 72.0, 10.0],
        ),
        t0=0.0,
        tf=100000.0,
    )
