"""Adams-Bashforth-Moulton predictor-corrector presets.

Each preset pairs an explicit Adams-Bashforth predictor with an implicit
Adams-Moulton corrector of matching order and runs them through
:func:`~odejax.multistep.general.general_multistep`:

1. predictor with ``iterations=0`` seeds the next state,
2. corrector with the requested iteration count refines it.

One corrector iteration gives the classical PECE scheme once the caller
follows up with :func:`~odejax.multistep.history.advance_history`.

Presets do not check that the history holds valid data; that is
established by :func:`~odejax.multistep.bootstrap.bootstrap_history`.
"""

from __future__ import annotations

from jax.typing import ArrayLike

from odejax.integrators._types import DerivativeFn, StepResult
from odejax.multistep._types import MultistepWorkspace, PredictorCorrector
from odejax.multistep.general import general_multistep

ADAMS4 = PredictorCorrector(
    name="adams4",
    order=4,
    a=(1.0, -1.0, 0.0, 0.0, 0.0),
    predictor=(0.0, 55.0 / 24.0, -59.0 / 24.0, 37.0 / 24.0, -9.0 / 24.0),
    corrector=(9.0 / 24.0, 19.0 / 24.0, -5.0 / 24.0, 1.0 / 24.0, 0.0),
    bootstrap_order=4,
)
"""4th-order Adams-Bashforth predictor with Adams-Moulton corrector."""

ADAMS6 = PredictorCorrector(
    name="adams6",
    order=6,
    a=(1.0, -1.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    predictor=(
        0.0,
        4277.0 / 1440.0,
        -7923.0 / 1440.0,
        9982.0 / 1440.0,
        -7298.0 / 1440.0,
        2877.0 / 1440.0,
        -475.0 / 1440.0,
    ),
    corrector=(
        475.0 / 1440.0,
        1427.0 / 1440.0,
        -798.0 / 1440.0,
        482.0 / 1440.0,
        -173.0 / 1440.0,
        27.0 / 1440.0,
        0.0,
    ),
    bootstrap_order=5,
)
"""6th-order Adams-Bashforth predictor with Adams-Moulton corrector."""

PREDICTOR_CORRECTORS: dict[str, PredictorCorrector] = {
    ADAMS4.name: ADAMS4,
    ADAMS6.name: ADAMS6,
}


def get_predictor_corrector(name: str) -> PredictorCorrector:
    """Look up a predictor-corrector preset by name.

    Args:
        name: ``"adams4"`` or ``"adams6"``.

    Raises:
        ValueError: If *name* is not a known preset.
    """
    try:
        return PREDICTOR_CORRECTORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown predictor-corrector {name!r}. "
            f"Must be one of: {sorted(PREDICTOR_CORRECTORS)}"
        ) from None


def predictor_corrector_step(
    method: PredictorCorrector,
    derivative: DerivativeFn,
    x: ArrayLike,
    workspace: MultistepWorkspace,
    h: ArrayLike,
    iterations: int = 1,
    args: tuple = (),
) -> StepResult:
    """Advance one step with a predictor-corrector pair.

    Args:
        method: Coefficient tables, e.g. :data:`ADAMS4`.
        derivative: ODE right-hand side ``f(x, y, *args) -> dy/dx``.
        x: Grid point of history chunk 0.
        workspace: History of order ``method.order``.
        h: Step size.
        iterations: Corrector passes; 0 returns the predictor alone.
        args: Extra arguments forwarded to *derivative*.

    Returns:
        StepResult: Solution at ``x + h`` and the workspace to hand to
        ``advance_history``.
    """
    predicted = general_multistep(
        derivative, x, workspace, h, method.a, method.predictor, 0, args=args
    )
    if iterations == 0:
        return predicted
    return general_multistep(
        derivative,
        x,
        predicted.workspace,
        h,
        method.a,
        method.corrector,
        iterations,
        prediction=predicted.state,
        args=args,
    )


def adams4_step(
    derivative: DerivativeFn,
    x: ArrayLike,
    workspace: MultistepWorkspace,
    h: ArrayLike,
    iterations: int = 1,
    args: tuple = (),
) -> StepResult:
    """4th-order Adams predictor-corrector step. See :func:`predictor_corrector_step`."""
    return predictor_corrector_step(ADAMS4, derivative, x, workspace, h, iterations, args)


def adams6_step(
    derivative: DerivativeFn,
    x: ArrayLike,
    workspace: MultistepWorkspace,
    h: ArrayLike,
    iterations: int = 1,
    args: tuple = (),
) -> StepResult:
    """6th-order Adams predictor-corrector step. See :func:`predictor_corrector_step`."""
    return predictor_corrector_step(ADAMS6, derivative, x, workspace, h, iterations, args)
