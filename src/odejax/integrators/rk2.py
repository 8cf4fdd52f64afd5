"""Simple 2nd-order Runge-Kutta integrator (RK2, Heun's method).

Two derivative evaluations per step: one at the start of the step and one
at the Euler-predicted end point, averaged with equal weights. The local
truncation error is :math:`O(h^3)`.
"""

from __future__ import annotations

from jax.typing import ArrayLike

from odejax.integrators._tableau import ButcherTableau, explicit_rk_step
from odejax.integrators._types import DerivativeFn, RKWorkspace, StepResult

RK2_TABLEAU = ButcherTableau(
    name="rk2",
    order=2,
    c=(0.0, 1.0),
    a=((1.0,),),
    b=(0.5, 0.5),
)


def rk2_step(
    derivative: DerivativeFn,
    x: ArrayLike,
    y: ArrayLike,
    h: ArrayLike,
    workspace: RKWorkspace,
    args: tuple = (),
) -> StepResult:
    """Perform a single RK2 integration step.

    Computes ``k1 = f(x, y)``, ``k2 = f(x + h, y + h k1)`` and returns
    ``y + h/2 (k1 + k2)``.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x: Current grid point.
        y: State vector at ``x``.
        h: Step size.
        workspace: Workspace with at least 2 stage buffers.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        StepResult: State at ``x + h`` and the updated workspace.
    """
    return explicit_rk_step(RK2_TABLEAU, derivative, x, y, h, workspace, args)
