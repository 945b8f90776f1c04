"""Tests for the satjax.config module."""

import jax
import jax.numpy as jnp
import pytest

from satjax.config import get_dtype, set_dtype
from satjax.integrators import integrate, rkf45_step
from satjax.orbits import orbital_period

pytestmark = pytest.mark.order("first")


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 before and after each test."""
    set_dtype(jnp.float64)
    yield
    set_dtype(jnp.float64)


def _harmonic_oscillator(t, x):
    return jnp.array([x[1], -x[0]])


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_x64_enabled_on_import(self):
        assert jax.config.jax_enable_x64 is True

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_half_precision_rejected(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")


class TestDtypeSwitchingOutputs:
    """Verify that output dtypes match the configured dtype."""

    def test_orbital_period_dtype_float64(self):
        T = orbital_period(500000.0, 6.8e9)
        assert T.dtype == jnp.float64

    def test_orbital_period_dtype_float32(self):
        set_dtype(jnp.float32)
        T = orbital_period(500000.0, 6.8e9)
        assert T.dtype == jnp.float32

    def test_rkf45_step_dtype_float64(self):
        result = rkf45_step(_harmonic_oscillator, 0.0, jnp.array([1.0, 0.0]), 0.1)
        assert result.state.dtype == jnp.float64
        assert result.error_estimate.dtype == jnp.float64

    def test_trajectory_dtype_float64(self):
        traj = integrate(_harmonic_oscillator, 0.0, 1.0, jnp.array([1.0, 0.0]))
        assert traj.t.dtype == jnp.float64
        assert traj.states.dtype == jnp.float64
