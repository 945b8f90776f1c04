import jax.numpy as jnp
import pytest

from satjax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that switch the dtype (e.g. test_config.py) must not leak their
    setting into later tests, with or without pytest-xdist.
    """
    set_dtype(jnp.float64)
