"""Butcher tableau descriptor and the shared explicit Runge-Kutta kernel.

Every fixed-step method in :mod:`odejax.integrators` is a
:class:`ButcherTableau` constant plus a thin public wrapper around
:func:`explicit_rk_step`. Coefficients are stored as Python tuples and
cast at call time, so zero couplings are skipped while tracing and never
reach the compiled program.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax.typing import ArrayLike

from odejax.config import get_dtype, state_dtype
from odejax.integrators._types import DerivativeFn, RKWorkspace, StepResult
from odejax.integrators.workspace import check_rk_workspace


class ButcherTableau(NamedTuple):
    """Coefficients of an explicit Runge-Kutta method.

    Attributes:
        name: Method identifier used in error messages.
        order: Formal order of accuracy.
        c: Nodes, one per stage, in units of the step size.
        a: Strictly lower triangular coupling rows; row ``i`` has ``i``
            entries and defines the argument of stage ``i + 1``.
        b: Weights combining the stage derivatives into the solution.
    """

    name: str
    order: int
    c: tuple[float, ...]
    a: tuple[tuple[float, ...], ...]
    b: tuple[float, ...]

    @property
    def stages(self) -> int:
        return len(self.b)


def _combine(y, h, weights, k):
    acc = None
    for w, ki in zip(weights, k):
        if w == 0.0:
            continue
        term = w * ki
        acc = term if acc is None else acc + term
    if acc is None:
        return y
    return y + h * acc


def explicit_rk_step(
    tableau: ButcherTableau,
    derivative: DerivativeFn,
    x: ArrayLike,
    y: ArrayLike,
    h: ArrayLike,
    workspace: RKWorkspace,
    args: tuple = (),
) -> StepResult:
    """Advance *y* from ``x`` to ``x + h`` with the method in *tableau*.

    Stages are evaluated in order. Before each evaluation the stage argument
    is written into ``workspace.stage``; the resulting derivative is written
    into row ``i`` of ``workspace.k``.
    """
    dtype = get_dtype()
    x = jnp.asarray(x, dtype=dtype)
    h = jnp.asarray(h, dtype=dtype)
    y = jnp.asarray(y, dtype=state_dtype(y))
    check_rk_workspace(workspace, y, tableau.stages, tableau.name)

    k_buf = workspace.k
    stage = workspace.stage
    k = []
    for i in range(tableau.stages):
        stage = y if i == 0 else _combine(y, h, tableau.a[i - 1], k)
        ki = derivative(x + tableau.c[i] * h, stage, *args)
        k_buf = k_buf.at[i].set(ki)
        k.append(k_buf[i])

    y_next = _combine(y, h, tableau.b, k)
    return StepResult(state=y_next, workspace=RKWorkspace(k=k_buf, stage=stage))
