"""Lifecycle of multistep workspaces (history buffers)."""

from __future__ import annotations

import logging

import jax.numpy as jnp

from odejax.integrators.workspace import delete_buffers, resolve_workspace_dtype
from odejax.multistep._types import MultistepWorkspace

logger = logging.getLogger(__name__)


def create_multistep_workspace(system_size: int, order: int, dtype=None) -> MultistepWorkspace:
    """Allocate the history buffer of an order-``m`` multistep method.

    Args:
        system_size: Number of equations ``n``.
        order: Number of previous steps ``m`` the method consumes.
        dtype: Element type; ``None`` uses the configured float dtype. Pass
            ``get_complex_dtype()`` for complex systems.

    Returns:
        MultistepWorkspace: Zero-filled ``states`` of shape ``(m, n)`` and
        ``derivatives`` of shape ``(m + 1, n)``. The history must be filled
        (normally by ``bootstrap_history``) before the first step.

    Raises:
        ValueError: If *system_size* or *order* is not positive, or *dtype*
            is not the configured float dtype or its complex pair.
    """
    if system_size < 1:
        raise ValueError(f"system_size must be positive, got {system_size}")
    if order < 1:
        raise ValueError(f"Multistep order must be positive, got {order}")
    dtype = resolve_workspace_dtype(dtype)

    logger.debug(
        "Creating multistep workspace: system_size=%d, order=%d, dtype=%s",
        system_size, order, dtype,
    )
    return MultistepWorkspace(
        states=jnp.zeros((order, system_size), dtype=dtype),
        derivatives=jnp.zeros((order + 1, system_size), dtype=dtype),
    )


def destroy_multistep_workspace(workspace: MultistepWorkspace) -> None:
    """Release the device buffers held by *workspace*."""
    logger.debug(
        "Destroying multistep workspace: system_size=%d, order=%d",
        workspace.system_size, workspace.order,
    )
    delete_buffers(workspace)
