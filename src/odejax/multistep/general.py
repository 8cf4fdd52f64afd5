"""Generic linear multistep step, explicit or implicit.

A linear multistep method of order ``m`` relates the unknown state
:math:`y_{j+1}` to the ``m`` known steps through

.. math::

    y_{j+1} + \\sum_{k=1}^{m} a_k y_{j+1-k}
        = h \\sum_{k=0}^{m} b_k y'_{j+1-k}

with the normalization :math:`a_0 = 1`. When :math:`b_0 = 0` the formula is
explicit. Otherwise it is implicit and is solved by fixed-point (Picard)
iteration starting from a caller-supplied prediction. No residual is
checked and there is no early exit: every requested pass runs, and
convergence is controlled by the caller through the iteration count.

Running the explicit formula with one table and then the implicit formula
with another composes any predictor-corrector pair without changes to the
engine; see :mod:`odejax.multistep.adams` for the Adams presets.

References:
    D. Quinney, *An Introduction to the Numerical Solution of Differential
    Equations*, rev. ed., 1987, ch. 2.

    A. Iserles, *A First Course in the Numerical Analysis of Differential
    Equations*, 2nd ed., ch. 2-3.
"""

from __future__ import annotations

from collections.abc import Sequence

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from odejax.config import get_dtype
from odejax.integrators._types import DerivativeFn, StepResult
from odejax.integrators.workspace import check_precision
from odejax.multistep._types import MultistepWorkspace


def _check_coefficients(name: str, coeffs: Sequence[float], m: int) -> None:
    if len(coeffs) != m + 1:
        raise ValueError(
            f"Coefficient vector {name!r} has {len(coeffs)} entries, "
            f"order-{m} history needs {m + 1}"
        )


def _known_part(workspace: MultistepWorkspace, h: Array, a, b) -> Array:
    """Return ``-sum a[k] y_{j+1-k} + h sum b[k] y'_{j+1-k}`` over the history."""
    m = workspace.order
    a_known = jnp.asarray(a[1:], dtype=get_dtype())
    b_known = jnp.asarray(b[1:], dtype=get_dtype())
    known = h * (b_known @ workspace.derivatives[:m]) - a_known @ workspace.states
    return known.astype(workspace.states.dtype)


def general_multistep(
    derivative: DerivativeFn,
    x: ArrayLike,
    workspace: MultistepWorkspace,
    h: ArrayLike,
    a: Sequence[float],
    b: Sequence[float],
    iterations: int = 0,
    prediction: ArrayLike | None = None,
    args: tuple = (),
) -> StepResult:
    """Solve one step of a general linear multistep formula.

    Explicit mode (``iterations == 0``)::

        y_next = -sum_{k=1..m} a[k] y_{j+1-k} + h sum_{k=1..m} b[k] y'_{j+1-k}

    ``b[0]`` is ignored.

    Implicit mode (``iterations > 0``): starting from *prediction*, each
    pass evaluates ``f(x + h, y_next)`` into the reserved derivative chunk
    and recomputes::

        y_next = h b[0] f(x + h, y_next) + <explicit sum above>

    Compatible with ``jax.jit``, ``jax.vmap`` and ``jax.lax.scan``.
    *iterations* must be a Python integer (static under jit).

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x: Grid point of history chunk 0 (the most recent known step).
        workspace: History holding ``m`` valid chunks, newest first. It
            is the caller's responsibility to fill it (normally with
            ``bootstrap_history``) before the first call; this is not
            checked.
        h: Step size.
        a: Left-hand side weights, ``m + 1`` entries (``a[0]`` unused).
        b: Right-hand side weights, ``m + 1`` entries.
        iterations: Number of corrector passes. 0 selects the explicit
            formula.
        prediction: Initial guess for the implicit formula. Required when
            *iterations* > 0, ignored otherwise.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: Solution at ``x + h``.
            - ``workspace``: History with the reserved chunk updated by the
              last corrector pass (unchanged in explicit mode).

    Raises:
        ValueError: If *a* or *b* do not have ``m + 1`` entries, if
            *iterations* is negative, if the history dtype does not match
            the configured precision, or if the implicit mode is requested
            without a *prediction* of matching shape.

    Examples:
        ```python
        import jax.numpy as jnp
        from odejax.multistep import (
            bootstrap_history, create_multistep_workspace, general_multistep,
        )
        def f(x, y):
            return y**2
        ws = create_multistep_workspace(1, order=2)
        ws = bootstrap_history(f, 0.0, jnp.array([1.0]), 0.1, ws)
        pred = general_multistep(f, 0.1, ws, 0.1, (1.0, -1.0, 0.0), (0.0, 1.5, -0.5))
        corr = general_multistep(
            f, 0.1, pred.workspace, 0.1, (1.0, -1.0, 0.0), (0.5, 0.5, 0.0),
            iterations=10, prediction=pred.state,
        )
        ```
    """
    m = workspace.order
    _check_coefficients("a", a, m)
    _check_coefficients("b", b, m)
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    check_precision(workspace.states.dtype, "History")

    dtype = get_dtype()
    x = jnp.asarray(x, dtype=dtype)
    h = jnp.asarray(h, dtype=dtype)
    known = _known_part(workspace, h, a, b)

    if iterations == 0:
        return StepResult(state=known, workspace=workspace)

    if prediction is None:
        raise ValueError("Implicit multistep step (iterations > 0) requires a prediction")
    y_next = jnp.asarray(prediction, dtype=workspace.states.dtype)
    if y_next.shape != known.shape:
        raise ValueError(
            f"prediction has shape {y_next.shape}, history holds {known.shape} chunks"
        )

    x_next = x + h
    hb0 = h * b[0]

    def corrector_pass(_, carry):
        y_it, derivatives = carry
        derivatives = derivatives.at[m].set(derivative(x_next, y_it, *args))
        return hb0 * derivatives[m] + known, derivatives

    y_next, derivatives = jax.lax.fori_loop(
        0, iterations, corrector_pass, (y_next, workspace.derivatives)
    )
    return StepResult(
        state=y_next,
        workspace=MultistepWorkspace(states=workspace.states, derivatives=derivatives),
    )
