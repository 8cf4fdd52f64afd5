"""Seed a multistep history from a single initial condition.

Multistep methods are not self-starting: an order-``m`` method needs ``m``
known steps. The bootstrap fills them with a Runge-Kutta integrator:

- chunk ``m - 1`` (oldest) gets ``y0`` and ``f(x0, y0)``,
- each following Runge-Kutta step from the previous state fills the next
  more recent chunk, down to chunk 0 at ``x0 + (m - 1) h``.

Afterwards chunk ``m - 1 - i`` holds exactly the Runge-Kutta solution after
``i`` steps, and the next multistep call is made with
``x = x0 + (m - 1) h``.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
from jax.typing import ArrayLike

from odejax.config import get_dtype
from odejax.integrators import create_rk_workspace, get_rk_step
from odejax.integrators._types import DerivativeFn
from odejax.integrators.workspace import check_precision
from odejax.multistep._types import MultistepWorkspace
from odejax.multistep.history import set_chunk

logger = logging.getLogger(__name__)


def bootstrap_history(
    derivative: DerivativeFn,
    x0: ArrayLike,
    y0: ArrayLike,
    h: ArrayLike,
    workspace: MultistepWorkspace,
    rk_order: int = 4,
    args: tuple = (),
) -> MultistepWorkspace:
    """Fill the history of *workspace* starting from ``y(x0) = y0``.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x0: Initial grid point.
        y0: Initial state.
        h: Step size, the same one the multistep method will use.
        workspace: History to fill; its order ``m`` sets how many steps are
            generated.
        rk_order: Order of the Runge-Kutta integrator used (2, 4 or 5).
        args: Extra arguments forwarded to *derivative*.

    Returns:
        MultistepWorkspace: History with all ``m`` chunks valid, chunk 0 at
        ``x0 + (m - 1) h``. The reserved corrector chunk is untouched.

    Raises:
        ValueError: If *rk_order* is not supported, *y0* does not match
            the workspace, or the history dtype does not match the configured
            precision.

    Examples:
        ```python
        import jax.numpy as jnp
        from odejax.multistep import bootstrap_history, create_multistep_workspace
        ws = create_multistep_workspace(1, order=4)
        ws = bootstrap_history(lambda x, y: -y, 0.0, jnp.array([1.0]), 0.1, ws)
        ws.states[:, 0]  # ~[exp(-0.3), exp(-0.2), exp(-0.1), 1.0]
        ```
    """
    step = get_rk_step(rk_order)
    m = workspace.order
    dtype = workspace.states.dtype
    check_precision(dtype, "History")
    y = jnp.asarray(y0, dtype=dtype)
    if y.shape != (workspace.system_size,):
        raise ValueError(
            f"y0 has shape {y.shape}, workspace expects ({workspace.system_size},)"
        )
    x0 = jnp.asarray(x0, dtype=get_dtype())
    h = jnp.asarray(h, dtype=get_dtype())

    logger.debug(
        "Bootstrapping order-%d history with RK%d (system_size=%d)",
        m, rk_order, workspace.system_size,
    )
    rk_ws = create_rk_workspace(workspace.system_size, order=rk_order, dtype=dtype)

    workspace = set_chunk(workspace, m - 1, y, derivative(x0, y, *args))
    for i in range(1, m):
        x = x0 + (i - 1) * h
        y, rk_ws = step(derivative, x, y, h, rk_ws, args)
        workspace = set_chunk(workspace, m - 1 - i, y, derivative(x0 + i * h, y, *args))
    return workspace
