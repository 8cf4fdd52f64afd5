"""Explicit single-step (Runge-Kutta) integrators.

Provides fixed-step Runge-Kutta integrators of orders 2, 4 and 5, all
implemented in JAX for compatibility with ``jax.jit``, ``jax.vmap``, and
``jax.lax`` control flow.

Available integrators:

- :func:`rk2_step` -- 2nd-order Runge-Kutta (Heun)
- :func:`rk4_step` -- Classic 4th-order Runge-Kutta
- :func:`rk5_step` -- Six-stage 5th-order Runge-Kutta (Butcher)

All step functions share a common interface::

    result = step_fn(derivative, x, y, h, workspace, args=())

where ``derivative(x, y, *args) -> dy`` defines the ODE right-hand side,
``workspace`` comes from :func:`create_rk_workspace`, and the result is a
:class:`StepResult` named tuple carrying the new state and the workspace
for the next call.
"""

from __future__ import annotations

from collections.abc import Callable

from odejax.integrators._tableau import ButcherTableau
from odejax.integrators._types import DerivativeFn, RKWorkspace, StepResult
from odejax.integrators.rk2 import RK2_TABLEAU, rk2_step
from odejax.integrators.rk4 import RK4_TABLEAU, rk4_step
from odejax.integrators.rk5 import RK5_TABLEAU, rk5_step
from odejax.integrators.workspace import (
    RK_STAGES,
    create_rk_workspace,
    destroy_rk_workspace,
)

_RK_STEPS: dict[int, Callable[..., StepResult]] = {
    2: rk2_step,
    4: rk4_step,
    5: rk5_step,
}


def get_rk_step(order: int) -> Callable[..., StepResult]:
    """Return the Runge-Kutta step function of the given order.

    Args:
        order: 2, 4 or 5.

    Returns:
        The matching ``rk*_step`` function.

    Raises:
        ValueError: If *order* is not supported.
    """
    try:
        return _RK_STEPS[order]
    except KeyError:
        raise ValueError(
            f"Unsupported Runge-Kutta order {order}. "
            f"Must be one of: {sorted(_RK_STEPS)}"
        ) from None


__all__ = [
    "ButcherTableau",
    "DerivativeFn",
    "RKWorkspace",
    "RK_STAGES",
    "RK2_TABLEAU",
    "RK4_TABLEAU",
    "RK5_TABLEAU",
    "StepResult",
    "create_rk_workspace",
    "destroy_rk_workspace",
    "get_rk_step",
    "rk2_step",
    "rk4_step",
    "rk5_step",
]
