"""History buffer accessors and the window advance operation.

The history of an order-``m`` method is a fixed-capacity window of ``m``
state/derivative pairs ordered newest first. Chunks are addressed by index
through the accessors below rather than by slicing the buffers directly;
indices are Python integers and are bounds checked at trace time.

After a step is accepted, :func:`advance_history` moves the window forward
by one grid point. The contract is **shift, then write, then evaluate**:

1. chunk ``j`` takes chunk ``j - 1`` for ``j = m-1 .. 1``,
2. the accepted state is written into state chunk 0,
3. the derivative at the new point is evaluated into derivative chunk 0.

It must be called exactly once per accepted step. A second call for the
same step silently duplicates the newest entry.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from odejax.config import get_dtype
from odejax.integrators._types import DerivativeFn
from odejax.integrators.workspace import check_precision
from odejax.multistep._types import MultistepWorkspace


def _check_index(j: int, upper: int, what: str) -> None:
    if not 0 <= j < upper:
        raise IndexError(f"{what} chunk index {j} out of range [0, {upper - 1}]")


def state_chunk(workspace: MultistepWorkspace, j: int) -> Array:
    """Return state chunk *j* (0 = most recent).

    Raises:
        IndexError: If *j* is outside ``[0, m - 1]``.
    """
    _check_index(j, workspace.order, "State")
    return workspace.states[j]


def derivative_chunk(workspace: MultistepWorkspace, j: int) -> Array:
    """Return derivative chunk *j*.

    Index ``m`` addresses the reserved corrector chunk.

    Raises:
        IndexError: If *j* is outside ``[0, m]``.
    """
    _check_index(j, workspace.order + 1, "Derivative")
    return workspace.derivatives[j]


def set_chunk(
    workspace: MultistepWorkspace,
    j: int,
    state: ArrayLike,
    derivative: ArrayLike,
) -> MultistepWorkspace:
    """Return a workspace with chunk *j* replaced by ``(state, derivative)``.

    Used to seed a history from known values instead of bootstrapping.

    Raises:
        IndexError: If *j* is outside ``[0, m - 1]``.
        ValueError: If *state* or *derivative* does not have shape ``(n,)``.
    """
    _check_index(j, workspace.order, "State")
    expected = (workspace.system_size,)
    for name, value in (("state", state), ("derivative", derivative)):
        if jnp.shape(value) != expected:
            raise ValueError(f"{name} has shape {jnp.shape(value)}, expected {expected}")
    return MultistepWorkspace(
        states=workspace.states.at[j].set(state),
        derivatives=workspace.derivatives.at[j].set(derivative),
    )


def concatenated_states(workspace: MultistepWorkspace) -> Array:
    """Return the state history as one flat array ``[y_j, y_{j-1}, ...]``."""
    return workspace.states.reshape(-1)


def concatenated_derivatives(workspace: MultistepWorkspace) -> Array:
    """Return the derivative history, reserved chunk included, as one flat array."""
    return workspace.derivatives.reshape(-1)


def advance_history(
    derivative: DerivativeFn,
    x_next: ArrayLike,
    workspace: MultistepWorkspace,
    y_next: ArrayLike,
    args: tuple = (),
) -> MultistepWorkspace:
    """Shift the history window forward by one accepted step.

    Args:
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x_next: Grid point of the accepted state (``x + h``).
        workspace: History before the step.
        y_next: Accepted state at *x_next*.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        MultistepWorkspace: History whose chunk ``j`` is the previous chunk
        ``j - 1``, with *y_next* and ``f(x_next, y_next)`` in chunk 0. The
        reserved corrector chunk is left as it was.

    Raises:
        ValueError: If *y_next* does not match the history's system size
            or the history dtype does not match the configured precision.
    """
    m = workspace.order
    check_precision(workspace.states.dtype, "History")
    y_next = jnp.asarray(y_next, dtype=workspace.states.dtype)
    if y_next.shape != (workspace.system_size,):
        raise ValueError(
            f"y_next has shape {y_next.shape}, history holds "
            f"({workspace.system_size},) chunks"
        )
    x_next = jnp.asarray(x_next, dtype=get_dtype())

    states = workspace.states
    derivatives = workspace.derivatives
    if m > 1:
        states = states.at[1:].set(states[: m - 1])
        derivatives = derivatives.at[1:m].set(derivatives[: m - 1])
    states = states.at[0].set(y_next)
    derivatives = derivatives.at[0].set(derivative(x_next, y_next, *args))
    return MultistepWorkspace(states=states, derivatives=derivatives)
