# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "satjax"]
#
# [tool.uv.sources]
# satjax = { path = ".." }
# ///
"""Propagate two satellites about a dominant central mass with adaptive RKF45.

Integrates the reference satellite-pair scenario (central mass 1e29 kg,
satellites of 2e27 kg and 1e26 kg launched from 500000 km and 600000 km),
reports step statistics and orbital extents, and optionally writes the
13-column trajectory table to CSV for plotting elsewhere.

Requires satjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/threebody3d.py [OPTIONS]

Examples:
    # Reference scenario with the default tolerance
    uv run examples/threebody3d.py

    # Looser tolerance, shorter span, uniform 1000-point CSV output
    uv run examples/threebody3d.py --tol 1e-6 --tf 20000 --samples 1000 --csv pair.csv

    # Make satellite 2 massless (Keplerian orbit for satellite 1)
    uv run examples/threebody3d.py --mass-body2 0
"""

import logging
import sys
import time
from pathlib import Path
from typing import Annotated

import jax.numpy as jnp
import typer

from satjax.errors import IntegrationError, StepBudgetExceededError
from satjax.integrators import AdaptiveConfig
from satjax.three_body import (
    ThreeBodyParams,
    ThreeBodyScenario,
    ThreeBodyState,
    satellite_pair_scenario,
    trajectory_to_dataframe,
)


def main(
    tol: Annotated[float, typer.Option(help="Combined absolute/relative tolerance")] = 1e-8,
    t0: Annotated[float, typer.Option(help="Initial time in seconds")] = 0.0,
    tf: Annotated[float, typer.Option(help="Final time in seconds")] = 100000.0,
    mass_body1: Annotated[float, typer.Option(help="Mass of satellite 1 in kg")] = 2e27,
    mass_body2: Annotated[float, typer.Option(help="Mass of satellite 2 in kg")] = 1e26,
    max_steps: Annotated[int, typer.Option(help="Maximum number of accepted steps")] = 100_000,
    samples: Annotated[
        int | None, typer.Option(help="Re-sample onto a uniform grid of this many points")
    ] = None,
    csv: Annotated[Path | None, typer.Option(help="Write the trajectory table to this CSV file")] = None,
    verbose: Annotated[bool, typer.Option(help="Log integrator progress")] = False,
) -> None:
    """Propagate the reference satellite pair and summarize the result."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    reference = satellite_pair_scenario()
    scenario = ThreeBodyScenario(
        params=ThreeBodyParams(
            mass_center=reference.params.mass_center,
            mass_body1=mass_body1,
            mass_body2=mass_body2,
        ),
        initial_state=reference.initial_state,
        t0=t0,
        tf=tf,
    )
    config = AdaptiveConfig.from_tolerance(tol, max_steps=max_steps)

    print(f"── Propagating satellite pair over [{t0:g}, {tf:g}] s (tol={tol:g}) ──")
    start = time.perf_counter()
    try:
        trajectory = scenario.propagate(config)
    except StepBudgetExceededError as exc:
        print(f"ERROR: {exc}")
        print(f"  Partial trajectory ends at t={float(exc.trajectory.t[-1]):g} s")
        sys.exit(1)
    except IntegrationError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    elapsed = time.perf_counter() - start

    print(
        f"  {trajectory.n_accepted} accepted steps, {trajectory.n_rejected} rejected, "
        f"{trajectory.n_evaluations} evaluations in {elapsed:.1f}s"
    )
    print(
        f"  Step size: min={float(jnp.min(trajectory.step_sizes)):.3g} s, "
        f"max={float(jnp.max(trajectory.step_sizes)):.3g} s"
    )

    x = ThreeBodyState.from_states(trajectory.states)
    r1 = jnp.linalg.norm(x.r1, axis=1)
    r2 = jnp.linalg.norm(x.r2, axis=1)
    sep = jnp.linalg.norm(x.r2 - x.r1, axis=1)
    print(f"  |r1|: min={float(jnp.min(r1)):.0f} km, max={float(jnp.max(r1)):.0f} km")
    print(f"  |r2|: min={float(jnp.min(r2)):.0f} km, max={float(jnp.max(r2)):.0f} km")
    print(f"  Closest approach between satellites: {float(jnp.min(sep)):.0f} km")

    if samples is not None:
        trajectory = trajectory.resample(samples)

    if csv is not None:
        df = trajectory_to_dataframe(trajectory)
        df.write_csv(csv)
        print(f"  Wrote {df.height} rows to {csv}")

    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)
