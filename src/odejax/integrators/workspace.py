"""Lifecycle of Runge-Kutta workspaces.

A workspace is created once per ``(system_size, order)`` pair, passed to
every step call, and destroyed when the integration is over. Creation sizes
the stage buffers for the requested order; destruction deletes the
underlying device buffers.
"""

from __future__ import annotations

import logging

import jax
import jax.numpy as jnp
from jax import Array

from odejax.config import get_complex_dtype, get_dtype, is_complex_dtype
from odejax.integrators._types import RKWorkspace

logger = logging.getLogger(__name__)

RK_STAGES: dict[int, int] = {2: 2, 4: 4, 5: 6}
"""Number of stage derivatives needed by each supported Runge-Kutta order."""


def resolve_workspace_dtype(dtype):
    """Return the workspace element dtype, defaulting to the configured float.

    Only the configured float dtype and its paired complex dtype are
    accepted, since every step casts its state to one of the two.

    Raises:
        ValueError: If *dtype* is not floating or complex, or does not
            match the configured precision.
    """
    if dtype is None:
        return jnp.dtype(get_dtype())
    dtype = jnp.dtype(dtype)
    if not (jnp.issubdtype(dtype, jnp.floating) or is_complex_dtype(dtype)):
        raise ValueError(f"Workspace dtype must be floating or complex, got {dtype}")
    check_precision(dtype, "Workspace")
    return dtype


def check_precision(dtype, what: str) -> None:
    """Raise if *dtype* is neither the configured float dtype nor its complex pair."""
    allowed = (jnp.dtype(get_dtype()), jnp.dtype(get_complex_dtype()))
    if jnp.dtype(dtype) not in allowed:
        raise ValueError(
            f"{what} dtype {jnp.dtype(dtype)} does not match the configured "
            f"precision; expected one of: {[str(d) for d in allowed]}"
        )


def create_rk_workspace(system_size: int, order: int = 4, dtype=None) -> RKWorkspace:
    """Allocate the stage buffers for a Runge-Kutta method.

    Args:
        system_size: Number of equations ``n`` in the ODE system.
        order: Runge-Kutta order the workspace serves (2, 4 or 5). Order 5
            needs six stage buffers, the others one per order.
        dtype: Element type. ``None`` uses the configured float dtype; pass
            a complex dtype (e.g. ``jnp.complex128``) for complex systems.

    Returns:
        RKWorkspace: Zero-filled workspace with ``k`` of shape
        ``(stages, system_size)`` and ``stage`` of shape ``(system_size,)``.

    Raises:
        ValueError: If *system_size* is not positive, *order* is not
            supported, or *dtype* is not the configured float dtype or
            its complex pair.

    Examples:
        ```python
        from odejax.integrators import create_rk_workspace
        ws = create_rk_workspace(3, order=5)
        ws.k.shape  # (6, 3)
        ```
    """
    if system_size < 1:
        raise ValueError(f"system_size must be positive, got {system_size}")
    if order not in RK_STAGES:
        raise ValueError(
            f"Unsupported Runge-Kutta order {order}. "
            f"Must be one of: {sorted(RK_STAGES)}"
        )
    dtype = resolve_workspace_dtype(dtype)
    stages = RK_STAGES[order]

    logger.debug(
        "Creating RK%d workspace: system_size=%d, stages=%d, dtype=%s",
        order, system_size, stages, dtype,
    )
    return RKWorkspace(
        k=jnp.zeros((stages, system_size), dtype=dtype),
        stage=jnp.zeros((system_size,), dtype=dtype),
    )


def destroy_rk_workspace(workspace: RKWorkspace) -> None:
    """Release the device buffers held by *workspace*.

    Any later use of the workspace raises JAX's deleted-buffer error.
    """
    logger.debug(
        "Destroying RK workspace: system_size=%d, stages=%d",
        workspace.system_size, workspace.stages,
    )
    delete_buffers(workspace)


def delete_buffers(tree) -> None:
    """Delete every live array leaf of a workspace pytree."""
    for leaf in jax.tree_util.tree_leaves(tree):
        if isinstance(leaf, jax.Array) and not leaf.is_deleted():
            leaf.delete()


def check_rk_workspace(workspace: RKWorkspace, y: Array, stages: int, method: str) -> None:
    """Validate that *workspace* can hold the stages of *method* for state *y*.

    All checks use static shape and dtype information, so they cost nothing
    under ``jax.jit``.

    Raises:
        ValueError: On a system-size, stage-count or dtype mismatch.
    """
    if y.ndim != 1:
        raise ValueError(f"{method}: state must be a 1-D vector, got shape {y.shape}")
    if workspace.stage.shape != y.shape or workspace.k.shape[1:] != y.shape:
        raise ValueError(
            f"{method}: workspace system size {workspace.stage.shape[0]} "
            f"!= state size {y.shape[0]}"
        )
    if workspace.stages < stages:
        raise ValueError(
            f"{method}: workspace has {workspace.stages} stage buffers, "
            f"method needs {stages}"
        )
    if jnp.dtype(workspace.k.dtype) != jnp.dtype(y.dtype):
        raise ValueError(
            f"{method}: workspace dtype {workspace.k.dtype} != state dtype {y.dtype}"
        )
