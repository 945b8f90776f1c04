"""Tests for Trajectory dense output, re-sampling and tabular export."""

import jax.numpy as jnp
import polars as pl
import pytest

from satjax.integrators import AdaptiveConfig, Trajectory, integrate
from satjax.integrators._dense import hermite_derivative, hermite_interpolate


def _harmonic_oscillator(t, x):
    return jnp.array([x[1], -x[0]])


def _harmonic_exact(t):
    t = jnp.asarray(t)
    return jnp.stack([jnp.cos(t), -jnp.sin(t)], axis=-1)


@pytest.fixture
def oscillator_traj():
    config = AdaptiveConfig(abs_tol=1e-12, rel_tol=1e-12, max_step=0.1)
    return integrate(_harmonic_oscillator, 0.0, 2.0 * jnp.pi, jnp.array([1.0, 0.0]), config)


# ──────────────────────────────────────────────
# Hermite interpolation
# ──────────────────────────────────────────────

class TestHermite:
    def test_exact_at_nodes(self):
        t = jnp.array([0.0, 1.0, 3.0])
        states = jnp.array([[1.0], [2.0], [-1.0]])
        derivatives = jnp.array([[0.5], [0.0], [2.0]])
        out = hermite_interpolate(t, states, derivatives, t)
        assert jnp.allclose(out, states)

    def test_reproduces_cubic(self):
        """A cubic is reproduced exactly from its values and slopes."""
        t = jnp.array([0.0, 1.0, 2.5])
        f = lambda x: x**3 - 2.0 * x + 1.0  # noqa: E731
        df = lambda x: 3.0 * x**2 - 2.0  # noqa: E731
        states = f(t)[:, None]
        derivatives = df(t)[:, None]
        tq = jnp.array([0.3, 0.9, 1.7, 2.4])
        assert jnp.allclose(hermite_interpolate(t, states, derivatives, tq)[:, 0], f(tq))
        assert jnp.allclose(hermite_derivative(t, states, derivatives, tq)[:, 0], df(tq))

    def test_scalar_query_shape(self):
        t = jnp.array([0.0, 1.0])
        states = jnp.array([[0.0, 1.0], [1.0, 2.0]])
        derivatives = jnp.ones((2, 2))
        assert hermite_interpolate(t, states, derivatives, 0.5).shape == (2,)


# ──────────────────────────────────────────────
# Trajectory.sample
# ──────────────────────────────────────────────

class TestSample:
    def test_sample_at_nodes_returns_states(self, oscillator_traj):
        out = oscillator_traj.sample(oscillator_traj.t)
        assert jnp.allclose(out, oscillator_traj.states, atol=1e-14)

    def test_sample_between_nodes(self, oscillator_traj):
        tq = jnp.linspace(0.05, 6.2, 57)
        out = oscillator_traj.sample(tq)
        assert out.shape == (57, 2)
        assert jnp.allclose(out, _harmonic_exact(tq), atol=1e-5)

    def test_scalar_query(self, oscillator_traj):
        out = oscillator_traj.sample(1.0)
        assert out.shape == (2,)
        assert jnp.allclose(out, _harmonic_exact(1.0), atol=1e-5)

    def test_endpoints(self, oscillator_traj):
        assert jnp.allclose(oscillator_traj.sample(0.0), jnp.array([1.0, 0.0]))
        tf = float(oscillator_traj.t[-1])
        assert jnp.allclose(oscillator_traj.sample(tf), oscillator_traj.final_state)

    def test_outside_span_raises(self, oscillator_traj):
        with pytest.raises(ValueError, match="integrated span"):
            oscillator_traj.sample(-0.1)
        with pytest.raises(ValueError, match="integrated span"):
            oscillator_traj.sample(jnp.array([1.0, 7.0]))


# ──────────────────────────────────────────────
# Trajectory.resample
# ──────────────────────────────────────────────

class TestResample:
    def test_uniform_grid(self, oscillator_traj):
        uniform = oscillator_traj.resample(101)
        assert uniform.n_samples == 101
        assert uniform.states.shape == (101, 2)
        assert uniform.derivatives.shape == (101, 2)
        assert float(uniform.t[0]) == 0.0
        assert float(uniform.t[-1]) == float(oscillator_traj.t[-1])
        spacing = jnp.diff(uniform.t)
        assert jnp.allclose(spacing, spacing[0])

    def test_resampled_states_accurate(self, oscillator_traj):
        uniform = oscillator_traj.resample(64)
        assert jnp.allclose(uniform.states, _harmonic_exact(uniform.t), atol=1e-5)

    def test_resampled_derivatives_accurate(self, oscillator_traj):
        uniform = oscillator_traj.resample(64)
        expected = jnp.stack([-jnp.sin(uniform.t), -jnp.cos(uniform.t)], axis=-1)
        assert jnp.allclose(uniform.derivatives, expected, atol=1e-4)

    def test_diagnostics_carried_over(self, oscillator_traj):
        uniform = oscillator_traj.resample(10)
        assert uniform.n_rejected == oscillator_traj.n_rejected
        assert uniform.n_evaluations == oscillator_traj.n_evaluations
        assert jnp.array_equal(uniform.step_sizes, oscillator_traj.step_sizes)

    def test_single_sample_of_zero_span(self):
        traj = integrate(_harmonic_oscillator, 1.0, 1.0, jnp.array([1.0, 0.0]))
        single = traj.resample(1)
        assert single.n_samples == 1
        assert jnp.allclose(single.states[0], jnp.array([1.0, 0.0]))

    def test_invalid_num_raises(self, oscillator_traj):
        with pytest.raises(ValueError):
            oscillator_traj.resample(0)
        with pytest.raises(ValueError):
            oscillator_traj.resample(1)


# ──────────────────────────────────────────────
# Trajectory.to_polars
# ──────────────────────────────────────────────

class TestToPolars:
    def test_default_columns(self, oscillator_traj):
        df = oscillator_traj.to_polars()
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["t", "y0", "y1"]
        assert df.height == oscillator_traj.n_samples
        assert df["t"].dtype == pl.Float64

    def test_named_columns(self, oscillator_traj):
        df = oscillator_traj.to_polars(columns=["x", "v"])
        assert df.columns == ["t", "x", "v"]
        assert df["x"][0] == pytest.approx(1.0)
        assert df["t"][-1] == pytest.approx(float(oscillator_traj.t[-1]))

    def test_rows_in_time_order(self, oscillator_traj):
        df = oscillator_traj.to_polars()
        assert df["t"].is_sorted()

    def test_wrong_column_count_raises(self, oscillator_traj):
        with pytest.raises(ValueError, match="Expected 2 column names"):
            oscillator_traj.to_polars(columns=["x"])

    def test_constructed_directly(self):
        traj = Trajectory(
            t=jnp.array([0.0, 1.0]),
            states=jnp.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]),
            derivatives=jnp.zeros((2, 3)),
            step_sizes=jnp.array([1.0]),
            error_estimates=jnp.array([0.5]),
        )
        df = traj.to_polars()
        assert df.shape == (2, 4)
        assert df["y2"].to_list() == [3.0, 6.0]
