"""Type definitions for single-step integrators.

Provides the core data types used across all Runge-Kutta implementations:

- :data:`DerivativeFn`: The derivative contract ``f(x, y, *args) -> dy``.
- :class:`RKWorkspace`: Preallocated stage buffers reused across steps.
- :class:`StepResult`: Output of every step function, containing the new
  state and the workspace to pass to the next call.

Both classes are :class:`~typing.NamedTuple` instances, which JAX treats as
pytrees automatically. This means they work seamlessly with ``jax.jit``,
``jax.vmap``, and ``jax.lax`` control flow primitives.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from jax import Array

DerivativeFn = Callable[..., Array]
"""Right-hand side ``f(x, y, *args) -> dy/dx`` of the ODE system.

``x`` is the scalar grid point, ``y`` the state vector and ``args`` the
caller's extra arguments, forwarded untouched by every integrator. The
result must have the same shape as ``y``.
"""


class RKWorkspace(NamedTuple):
    """Scratch buffers for explicit Runge-Kutta steps.

    Created once per ``(system_size, order)`` pair by
    :func:`~odejax.integrators.workspace.create_rk_workspace` and threaded
    through every step call. Each step returns an updated workspace with
    identical shapes and dtype, so inside ``jax.lax.scan`` or under
    ``jax.jit`` with buffer donation the buffers are reused in place.

    Attributes:
        k: Stage derivatives of shape ``(stages, n)``. After a step, row
            ``i`` holds the derivative evaluated at stage ``i + 1``; row 0
            is ``f(x, y)`` at the start of the step.
        stage: Staging buffer of shape ``(n,)`` holding the argument vector
            of the most recent stage evaluation.
    """

    k: Array
    stage: Array

    @property
    def system_size(self) -> int:
        """Number of equations the workspace was created for."""
        return self.stage.shape[0]

    @property
    def stages(self) -> int:
        """Number of stage derivative rows available."""
        return self.k.shape[0]


class StepResult(NamedTuple):
    """Result of a single integrator step.

    Returned by every step function, single-step and multistep alike.

    Attributes:
        state: State vector at the next grid point ``x + h``.
        workspace: Updated workspace. Pass it to the next call in place of
            the one that was given.
    """

    state: Array
    workspace: Any

