"""Fixed-grid drivers built on the step functions.

Runs a step function repeatedly over a uniform grid
``x0, x0 + h, ..., x0 + n_steps * h`` with ``jax.lax.scan`` and returns the
whole trajectory. The workspace is created once and carried through the
scan, so every step reuses the same buffers.

These are conveniences around the step API: the grid is uniform, the step
size is the caller's, and there is no error control.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from odejax.config import get_dtype, state_dtype
from odejax.integrators import create_rk_workspace, get_rk_step
from odejax.integrators._types import DerivativeFn
from odejax.multistep._types import PredictorCorrector
from odejax.multistep.adams import get_predictor_corrector, predictor_corrector_step
from odejax.multistep.bootstrap import bootstrap_history
from odejax.multistep.history import advance_history
from odejax.multistep.workspace import create_multistep_workspace

logger = logging.getLogger(__name__)


class Trajectory(NamedTuple):
    """Solution sampled on a uniform grid.

    Attributes:
        x: Grid points of shape ``(n_steps + 1,)``, starting at ``x0``.
        states: States of shape ``(n_steps + 1, n)``; row 0 is ``y0``.
    """

    x: Array
    states: Array


def _prepare(x0, y0, h, n_steps):
    if n_steps < 0:
        raise ValueError(f"n_steps must be non-negative, got {n_steps}")
    dtype = get_dtype()
    x0 = jnp.asarray(x0, dtype=dtype)
    h = jnp.asarray(h, dtype=dtype)
    y0 = jnp.asarray(y0, dtype=state_dtype(y0))
    if y0.ndim != 1:
        raise ValueError(f"y0 must be a 1-D vector, got shape {y0.shape}")
    grid = x0 + h * jnp.arange(n_steps + 1, dtype=dtype)
    return x0, y0, h, grid


def propagate_rk(
    derivative: DerivativeFn,
    x0: ArrayLike,
    y0: ArrayLike,
    h: ArrayLike,
    n_steps: int,
    order: int = 4,
    args: tuple = (),
) -> Trajectory:
    """Integrate ``n_steps`` fixed steps with a Runge-Kutta method.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x0: Initial grid point.
        y0: Initial state.
        h: Step size.
        n_steps: Number of steps (Python int).
        order: Runge-Kutta order (2, 4 or 5).
        args: Extra arguments forwarded to *derivative*.

    Returns:
        Trajectory: Grid points and states, ``n_steps + 1`` rows each.

    Raises:
        ValueError: If *n_steps* is negative or *order* unsupported.

    Examples:
        ```python
        import jax.numpy as jnp
        from odejax.propagate import propagate_rk
        traj = propagate_rk(lambda x, y: y, 0.0, jnp.array([1.0]), 0.1, 10)
        traj.states[-1]  # ~[e]
        ```
    """
    step = get_rk_step(order)
    x0, y0, h, grid = _prepare(x0, y0, h, n_steps)
    logger.debug("Propagating %d steps with RK%d", n_steps, order)
    workspace = create_rk_workspace(y0.shape[0], order=order, dtype=y0.dtype)

    def body(carry, x):
        y, ws = carry
        y, ws = step(derivative, x, y, h, ws, args)
        return (y, ws), y

    _, ys = jax.lax.scan(body, (y0, workspace), grid[:-1])
    return Trajectory(x=grid, states=jnp.concatenate([y0[None, :], ys]))


def propagate_multistep(
    derivative: DerivativeFn,
    x0: ArrayLike,
    y0: ArrayLike,
    h: ArrayLike,
    n_steps: int,
    method: str | PredictorCorrector = "adams4",
    iterations: int = 1,
    rk_order: int | None = None,
    args: tuple = (),
) -> Trajectory:
    """Integrate ``n_steps`` fixed steps with a predictor-corrector method.

    The first ``m - 1`` steps come from the bootstrap Runge-Kutta method;
    every later step runs the predictor, *iterations* corrector passes, and
    one history advance.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x0: Initial grid point.
        y0: Initial state.
        h: Step size.
        n_steps: Number of steps, at least ``m - 1``.
        method: Preset name (``"adams4"``, ``"adams6"``) or a
            :class:`~odejax.multistep.PredictorCorrector`.
        iterations: Corrector passes per step.
        rk_order: Bootstrap Runge-Kutta order; defaults to the method's
            ``bootstrap_order``.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        Trajectory: Grid points and states, ``n_steps + 1`` rows each.

    Raises:
        ValueError: If *method* is unknown, *n_steps* is smaller than
            ``m - 1``, or *iterations* is negative.
    """
    if isinstance(method, str):
        method = get_predictor_corrector(method)
    m = method.order
    if n_steps < m - 1:
        raise ValueError(
            f"{method.name} needs at least {m - 1} steps to fill its history, "
            f"got n_steps={n_steps}"
        )
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    if rk_order is None:
        rk_order = method.bootstrap_order
    x0, y0, h, grid = _prepare(x0, y0, h, n_steps)
    logger.debug(
        "Propagating %d steps with %s (iterations=%d, bootstrap RK%d)",
        n_steps, method.name, iterations, rk_order,
    )

    workspace = create_multistep_workspace(y0.shape[0], m, dtype=y0.dtype)
    seeded = bootstrap_history(derivative, x0, y0, h, workspace, rk_order, args)

    def body(ws, x):
        result = predictor_corrector_step(method, derivative, x, ws, h, iterations, args)
        ws = advance_history(derivative, x + h, result.workspace, result.state, args)
        return ws, result.state

    _, ys = jax.lax.scan(body, seeded, grid[m - 1 : -1])
    return Trajectory(x=grid, states=jnp.concatenate([seeded.states[::-1], ys]))
