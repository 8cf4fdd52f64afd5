"""Linear multistep methods with predictor-corrector iteration.

Multistep methods compute the next step from several previous ones held in
a fixed-capacity history buffer (:class:`MultistepWorkspace`). A typical
integration loop::

    ws = create_multistep_workspace(n, order=4)
    ws = bootstrap_history(f, x0, y0, h, ws, rk_order=4)
    x = x0 + 3 * h
    for _ in range(n_steps):
        result = adams4_step(f, x, ws, h, iterations=1)
        ws = advance_history(f, x + h, result.workspace, result.state)
        x = x + h

Provided operations:

- :func:`general_multistep` -- explicit or implicit step with caller
  coefficient tables
- :func:`predictor_corrector_step`, :func:`adams4_step`,
  :func:`adams6_step` -- Adams-Bashforth-Moulton presets
- :func:`bootstrap_history` -- seed the history with a Runge-Kutta method
- :func:`advance_history` -- shift the window after an accepted step
"""

from odejax.multistep._types import MultistepWorkspace, PredictorCorrector
from odejax.multistep.adams import (
    ADAMS4,
    ADAMS6,
    PREDICTOR_CORRECTORS,
    adams4_step,
    adams6_step,
    get_predictor_corrector,
    predictor_corrector_step,
)
from odejax.multistep.bootstrap import bootstrap_history
from odejax.multistep.general import general_multistep
from odejax.multistep.history import (
    advance_history,
    concatenated_derivatives,
    concatenated_states,
    derivative_chunk,
    set_chunk,
    state_chunk,
)
from odejax.multistep.workspace import (
    create_multistep_workspace,
    destroy_multistep_workspace,
)

__all__ = [
    "ADAMS4",
    "ADAMS6",
    "MultistepWorkspace",
    "PREDICTOR_CORRECTORS",
    "PredictorCorrector",
    "adams4_step",
    "adams6_step",
    "advance_history",
    "bootstrap_history",
    "concatenated_derivatives",
    "concatenated_states",
    "create_multistep_workspace",
    "derivative_chunk",
    "destroy_multistep_workspace",
    "general_multistep",
    "get_predictor_corrector",
    "predictor_corrector_step",
    "set_chunk",
    "state_chunk",
]
