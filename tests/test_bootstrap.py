"""Tests for seeding a multistep history with a Runge-Kutta integrator."""

import jax
import jax.numpy as jnp
import pytest

from odejax.config import get_complex_dtype, get_dtype, set_dtype
from odejax.integrators import create_rk_workspace, rk4_step, rk5_step
from odejax.multistep import (
    advance_history,
    bootstrap_history,
    create_multistep_workspace,
    general_multistep,
)


def _polynomial_rhs(x, y):
    """dy/dx = y - x^2 + 1. Solution with y(0) = 0.5: (x + 1)^2 - 0.5 e^x."""
    return y - x**2 + 1.0


def _harmonic_oscillator(x, y):
    return jnp.array([y[1], -y[0]])


def _rotation(x, y):
    return 1j * y


# Trapezoid corrector on an order-2 history
_TRAPEZOID_A = (1.0, -1.0, 0.0)
_TRAPEZOID_B = (0.5, 0.5, 0.0)


def _manual_rk(step, order, f, x0, y0, h, n_steps):
    """States after 0..n_steps Runge-Kutta steps, oldest first."""
    ws = create_rk_workspace(y0.shape[0], order=order)
    y = y0
    states = [y]
    for i in range(n_steps):
        y, ws = step(f, x0 + i * h, y, h, ws)
        states.append(y)
    return states


class TestBootstrap:
    def test_chunks_match_manual_rk4(self):
        """Chunk m-1-i holds the RK4 solution after i steps."""
        m, h, x0 = 4, 0.1, 0.0
        y0 = jnp.array([0.5])
        ws = bootstrap_history(
            _polynomial_rhs, x0, y0, h, create_multistep_workspace(1, m), rk_order=4
        )
        manual = _manual_rk(rk4_step, 4, _polynomial_rhs, x0, y0, h, m - 1)
        for i in range(m):
            assert jnp.allclose(ws.states[m - 1 - i], manual[i], atol=1e-15)

    def test_chunks_match_manual_rk5(self):
        m, h, x0 = 6, 0.05, 0.3
        y0 = jnp.array([1.0, 0.0])
        ws = bootstrap_history(
            _harmonic_oscillator, x0, y0, h, create_multistep_workspace(2, m), rk_order=5
        )
        manual = _manual_rk(rk5_step, 5, _harmonic_oscillator, x0, y0, h, m - 1)
        for i in range(m):
            assert jnp.allclose(ws.states[m - 1 - i], manual[i], atol=1e-15)

    def test_derivatives_at_grid_points(self):
        """Derivative chunk m-1-i is f(x0 + i h, state chunk m-1-i)."""
        m, h, x0 = 4, 0.1, 2.0
        ws = bootstrap_history(
            _polynomial_rhs, x0, jnp.array([0.5]), h, create_multistep_workspace(1, m)
        )
        for i in range(m):
            j = m - 1 - i
            expected = _polynomial_rhs(x0 + i * h, ws.states[j])
            assert jnp.allclose(ws.derivatives[j], expected, atol=1e-14)

    def test_oldest_chunk_is_initial_condition(self):
        y0 = jnp.array([0.5])
        ws = bootstrap_history(
            _polynomial_rhs, 0.0, y0, 0.1, create_multistep_workspace(1, 4)
        )
        assert jnp.array_equal(ws.states[3], y0)
        assert jnp.array_equal(ws.derivatives[3], _polynomial_rhs(0.0, y0))

    def test_accuracy(self):
        """Seeded states agree with the exact solution to RK4 accuracy."""
        h = 0.01
        ws = bootstrap_history(
            _polynomial_rhs, 0.0, jnp.array([0.5]), h, create_multistep_workspace(1, 4)
        )
        for i in range(4):
            x = i * h
            exact = (x + 1.0) ** 2 - 0.5 * jnp.exp(x)
            assert float(ws.states[3 - i, 0]) == pytest.approx(float(exact), abs=1e-11)

    def test_reserved_chunk_untouched(self):
        ws = bootstrap_history(
            _polynomial_rhs, 0.0, jnp.array([0.5]), 0.1, create_multistep_workspace(1, 4)
        )
        assert float(ws.derivatives[4, 0]) == 0.0

    def test_order_one_only_stores_initial_condition(self):
        y0 = jnp.array([0.5])
        ws = bootstrap_history(
            _polynomial_rhs, 1.0, y0, 0.1, create_multistep_workspace(1, 1)
        )
        assert jnp.array_equal(ws.states[0], y0)
        assert float(ws.derivatives[0, 0]) == pytest.approx(0.5)

    def test_args_forwarded(self):
        def decay(x, y, rate):
            return -rate * y

        ws = bootstrap_history(
            decay, 0.0, jnp.array([1.0]), 0.1, create_multistep_workspace(1, 2),
            args=(2.0,),
        )
        assert float(ws.states[0, 0]) == pytest.approx(float(jnp.exp(-0.2)), abs=1e-5)
        assert float(ws.derivatives[1, 0]) == pytest.approx(-2.0)

    def test_jit(self):
        y0 = jnp.array([0.5])
        ws = create_multistep_workspace(1, 4)

        @jax.jit
        def seed(x0, y0, h, ws):
            return bootstrap_history(_polynomial_rhs, x0, y0, h, ws)

        eager = bootstrap_history(_polynomial_rhs, 0.0, y0, 0.1, ws)
        compiled = seed(0.0, y0, 0.1, ws)
        assert jnp.allclose(compiled.states, eager.states, atol=1e-14)
        assert jnp.allclose(compiled.derivatives, eager.derivatives, atol=1e-14)


class TestBootstrapErrors:
    def test_unsupported_rk_order(self):
        with pytest.raises(ValueError, match="Unsupported Runge-Kutta order"):
            bootstrap_history(
                _polynomial_rhs, 0.0, jnp.array([0.5]), 0.1,
                create_multistep_workspace(1, 4), rk_order=3,
            )

    def test_state_size_mismatch(self):
        with pytest.raises(ValueError, match="y0 has shape"):
            bootstrap_history(
                _polynomial_rhs, 0.0, jnp.array([0.5, 1.0]), 0.1,
                create_multistep_workspace(1, 4),
            )

    def test_stale_history_raises(self):
        """A history created before a precision switch is rejected everywhere."""
        set_dtype(jnp.float32)
        ws = create_multistep_workspace(1, 2)
        set_dtype(jnp.float64)
        y = jnp.array([0.5])
        with pytest.raises(ValueError, match="configured precision"):
            bootstrap_history(_polynomial_rhs, 0.0, y, 0.1, ws, rk_order=2)
        with pytest.raises(ValueError, match="configured precision"):
            general_multistep(
                _polynomial_rhs, 0.1, ws, 0.1, _TRAPEZOID_A, _TRAPEZOID_B,
                iterations=2, prediction=y,
            )
        with pytest.raises(ValueError, match="configured precision"):
            advance_history(_polynomial_rhs, 0.2, ws, y)


# ──────────────────────────────────────────────
# Single precision
# ──────────────────────────────────────────────

class TestSinglePrecision:
    @pytest.fixture(autouse=True)
    def _single_precision(self):
        set_dtype(jnp.float32)
        yield
        set_dtype(jnp.float64)

    def test_real_bootstrap_and_corrector(self):
        ws = create_multistep_workspace(1, 2, dtype=get_dtype())
        y0 = jnp.array([0.5], dtype=jnp.float32)
        ws = bootstrap_history(_polynomial_rhs, 0.0, y0, 0.1, ws, rk_order=4)
        assert ws.states.dtype == jnp.float32

        result = general_multistep(
            _polynomial_rhs, 0.1, ws, 0.1, _TRAPEZOID_A, _TRAPEZOID_B,
            iterations=2, prediction=ws.states[0],
        )
        assert result.state.dtype == jnp.float32
        assert result.workspace.derivatives.dtype == jnp.float32
        assert jnp.all(jnp.isfinite(result.state))
        # (x + 1)^2 - 0.5 e^x at x = 0.2
        assert abs(float(result.state[0]) - 0.829298621) < 5e-3

        advanced = advance_history(_polynomial_rhs, 0.2, result.workspace, result.state)
        assert advanced.states.dtype == jnp.float32

    def test_complex_bootstrap_and_corrector(self):
        ws = create_multistep_workspace(1, 2, dtype=get_complex_dtype())
        assert ws.states.dtype == jnp.complex64
        y0 = jnp.array([1.0 + 0.0j], dtype=jnp.complex64)
        ws = bootstrap_history(_rotation, 0.0, y0, 0.01, ws, rk_order=5)

        result = general_multistep(
            _rotation, 0.01, ws, 0.01, _TRAPEZOID_A, _TRAPEZOID_B,
            iterations=2, prediction=ws.states[0],
        )
        assert result.state.dtype == jnp.complex64
        assert abs(complex(result.state[0]) - complex(jnp.exp(0.02j))) < 1e-4

    def test_double_history_raises(self):
        with pytest.raises(ValueError, match="does not match the configured precision"):
            create_multistep_workspace(1, 2, dtype=jnp.float64)
