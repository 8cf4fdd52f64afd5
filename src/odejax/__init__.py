"""
odejax is a fixed-step ODE stepping engine implemented in JAX: explicit
Runge-Kutta integrators, a generic linear multistep engine with
predictor-corrector iteration, and the history-buffer bookkeeping between
them.
"""

from .config import set_dtype, get_dtype, get_complex_dtype

from .integrators import (
    RKWorkspace,
    StepResult,
    create_rk_workspace,
    destroy_rk_workspace,
    get_rk_step,
    rk2_step,
    rk4_step,
    rk5_step,
)

from .multistep import (
    ADAMS4,
    ADAMS6,
    MultistepWorkspace,
    PredictorCorrector,
    adams4_step,
    adams6_step,
    advance_history,
    bootstrap_history,
    create_multistep_workspace,
    destroy_multistep_workspace,
    general_multistep,
    get_predictor_corrector,
    predictor_corrector_step,
)

from .propagate import Trajectory, propagate_multistep, propagate_rk

__all__ = [
    "set_dtype",
    "get_dtype",
    "get_complex_dtype",
    "RKWorkspace",
    "StepResult",
    "create_rk_workspace",
    "destroy_rk_workspace",
    "get_rk_step",
    "rk2_step",
    "rk4_step",
    "rk5_step",
    "ADAMS4",
    "ADAMS6",
    "MultistepWorkspace",
    "PredictorCorrector",
    "adams4_step",
    "adams6_step",
    "advance_history",
    "bootstrap_history",
    "create_multistep_workspace",
    "destroy_multistep_workspace",
    "general_multistep",
    "get_predictor_corrector",
    "predictor_corrector_step",
    "Trajectory",
    "propagate_multistep",
    "propagate_rk",
]
