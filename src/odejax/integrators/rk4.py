"""Classic 4th-order Runge-Kutta integrator (RK4).

Implements the standard four-stage, 4th-order explicit Runge-Kutta method
for numerical integration of ordinary differential equations. This is a
fixed-step method with no adaptive step-size control.

The Butcher tableau for RK4 is:

.. math::

    \\begin{array}{c|cccc}
    0   &     &     &     &   \\\\
    1/2 & 1/2 &     &     &   \\\\
    1/2 &  0  & 1/2 &     &   \\\\
    1   &  0  &  0  &  1  &   \\\\
    \\hline
        & 1/6 & 1/3 & 1/3 & 1/6
    \\end{array}

The method achieves 4th-order accuracy, meaning the local truncation error
is :math:`O(h^5)` and the global error is :math:`O(h^4)`.
"""

from __future__ import annotations

from jax.typing import ArrayLike

from odejax.integrators._tableau import ButcherTableau, explicit_rk_step
from odejax.integrators._types import DerivativeFn, RKWorkspace, StepResult

RK4_TABLEAU = ButcherTableau(
    name="rk4",
    order=4,
    c=(0.0, 0.5, 0.5, 1.0),
    a=(
        (0.5,),
        (0.0, 0.5),
        (0.0, 0.0, 1.0),
    ),
    b=(1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0),
)


def rk4_step(
    derivative: DerivativeFn,
    x: ArrayLike,
    y: ArrayLike,
    h: ArrayLike,
    workspace: RKWorkspace,
    args: tuple = (),
) -> StepResult:
    """Perform a single RK4 integration step.

    Advances the state from grid point ``x`` to ``x + h`` using the classic
    4th-order Runge-Kutta method. Compatible with ``jax.jit`` and
    ``jax.vmap``.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x: Current grid point.
        y: State vector at ``x``, real or complex.
        h: Step size. May be negative for backward integration.
        workspace: Workspace with at least 4 stage buffers, from
            ``create_rk_workspace(n, order=4)``.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: State at ``x + h``.
            - ``workspace``: Workspace holding the four stage derivatives.

    Raises:
        ValueError: If the workspace does not match the state.

    Examples:
        ```python
        import jax.numpy as jnp
        from odejax.integrators import create_rk_workspace, rk4_step
        def harmonic(x, y):
            return jnp.array([y[1], -y[0]])
        ws = create_rk_workspace(2, order=4)
        result = rk4_step(harmonic, 0.0, jnp.array([1.0, 0.0]), 0.01, ws)
        result.state  # ~[cos(0.01), -sin(0.01)]
        ```
    """
    return explicit_rk_step(RK4_TABLEAU, derivative, x, y, h, workspace, args)
