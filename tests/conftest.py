import logging

import jax.numpy as jnp
import pytest

from odejax.config import set_dtype


@pytest.fixture(autouse=True)
def _double_precision():
    """Run every test in float64.

    Accuracy checks compare against exact solutions to 1e-10 and need 64-bit
    arithmetic. The dtype is set per test because some tests switch it;
    test_config.py overrides this with its own float32 fixture.
    """
    set_dtype(jnp.float64)


@pytest.fixture
def odejax_debug_log(caplog):
    """Capture DEBUG records emitted by the odejax loggers."""
    caplog.set_level(logging.DEBUG, logger="odejax")
    return caplog
