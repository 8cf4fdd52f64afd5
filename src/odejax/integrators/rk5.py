"""Six-stage 5th-order Runge-Kutta integrator (RK5).

Uses the 5th-order scheme of Butcher (Numerical Methods for Ordinary
Differential Equations, table 236a):

- Nodes (c): [0, 1/4, 1/4, 1/2, 3/4, 1]
- Weights (b): [7, 0, 32, 12, 32, 7] / 90

No error estimate is produced; the scheme is provided as a higher accuracy
fixed-step option and as the bootstrap driver for 6th-order Adams methods.
"""

from __future__ import annotations

from jax.typing import ArrayLike

from odejax.integrators._tableau import ButcherTableau, explicit_rk_step
from odejax.integrators._types import DerivativeFn, RKWorkspace, StepResult

RK5_TABLEAU = ButcherTableau(
    name="rk5",
    order=5,
    c=(0.0, 0.25, 0.25, 0.5, 0.75, 1.0),
    a=(
        (1.0 / 4.0,),
        (1.0 / 8.0, 1.0 / 8.0),
        (0.0, 0.0, 1.0 / 2.0),
        (3.0 / 16.0, -3.0 / 8.0, 3.0 / 8.0, 9.0 / 16.0),
        (-3.0 / 7.0, 8.0 / 7.0, 6.0 / 7.0, -12.0 / 7.0, 8.0 / 7.0),
    ),
    b=(7.0 / 90.0, 0.0, 32.0 / 90.0, 12.0 / 90.0, 32.0 / 90.0, 7.0 / 90.0),
)


def rk5_step(
    derivative: DerivativeFn,
    x: ArrayLike,
    y: ArrayLike,
    h: ArrayLike,
    workspace: RKWorkspace,
    args: tuple = (),
) -> StepResult:
    """Perform a single RK5 integration step.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x: Current grid point.
        y: State vector at ``x``.
        h: Step size.
        workspace: Workspace with 6 stage buffers, from
            ``create_rk_workspace(n, order=5)``.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        StepResult: State at ``x + h`` and the updated workspace.

    Raises:
        ValueError: If the workspace does not match the state or was sized
            for a lower order.
    """
    return explicit_rk_step(RK5_TABLEAU, derivative, x, y, h, workspace, args)
