"""Type definitions for multistep methods.

- :class:`MultistepWorkspace`: The history buffer of previous states and
  derivatives, newest first, plus the reserved corrector chunk.
- :class:`PredictorCorrector`: Immutable descriptor of a predictor-corrector
  pair of coefficient tables.

:class:`MultistepWorkspace` is a :class:`~typing.NamedTuple` and therefore
a JAX pytree; it can be carried through ``jax.lax.scan`` and returned from
jitted functions.
"""

from __future__ import annotations

from typing import NamedTuple

from jax import Array


class MultistepWorkspace(NamedTuple):
    """Sliding window of known steps for an order-``m`` multistep method.

    Chunk ``j`` (row ``j``) holds the value at grid point
    ``x_current - j * h``; chunk 0 is the most recent step. The ordering is
    established by :func:`~odejax.multistep.bootstrap.bootstrap_history`
    and preserved by :func:`~odejax.multistep.history.advance_history`.

    Attributes:
        states: Previous states of shape ``(m, n)``.
        derivatives: Previous derivatives of shape ``(m + 1, n)``. Rows
            ``0..m-1`` pair with ``states``; row ``m`` is reserved for the
            corrector's derivative at the unknown point ``x + h``.
    """

    states: Array
    derivatives: Array

    @property
    def order(self) -> int:
        """Multistep order ``m``: number of previous steps held."""
        return self.states.shape[0]

    @property
    def system_size(self) -> int:
        """Number of equations ``n``."""
        return self.states.shape[1]


class PredictorCorrector(NamedTuple):
    """Coefficient tables of a predictor-corrector multistep scheme.

    Both formulas share the left-hand side weights ``a`` (``a[0] = 1`` is
    implied). Tables have ``order + 1`` entries.

    Attributes:
        name: Identifier used by the registry.
        order: Number of previous steps ``m``.
        a: Left-hand side (state) weights.
        predictor: Explicit right-hand side (derivative) weights; ``[0]``
            is unused.
        corrector: Implicit right-hand side weights; ``[0]`` multiplies the
            derivative at the unknown point.
        bootstrap_order: Runge-Kutta order used to seed the history.
    """

    name: str
    order: int
    a: tuple[float, ...]
    predictor: tuple[float, ...]
    corrector: tuple[float, ...]
    bootstrap_order: int
