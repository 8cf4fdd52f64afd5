"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for grid points, step sizes, workspaces and real-valued states throughout
odejax.  The default is ``jnp.float32`` for GPU/TPU compatibility.
Switching to ``jnp.float64`` automatically enables JAX's 64-bit mode
(``jax_enable_x64``).

Complex-valued systems use the complex dtype paired with the configured
float dtype (see :func:`get_complex_dtype`).  A single implementation of
every integrator serves both cases; :func:`state_dtype` picks the dtype an
input state is cast to.

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for odejax.

    Must be called **before** any ``jax.jit`` compilation.  In eager mode
    the change takes effect immediately.  Under JIT, ``get_dtype()`` runs
    during tracing and its value is baked into the compiled program.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is automatically
    enabled via ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float32``).
    """
    return _dtype


def get_complex_dtype():
    """Return the complex dtype paired with the configured float dtype.

    - ``float64``: ``complex128``
    - ``float32``, ``float16``, ``bfloat16``: ``complex64``

    Returns:
        The complex dtype used for complex-valued states.
    """
    if _dtype == jnp.float64:
        return jnp.complex128
    return jnp.complex64


def state_dtype(y: ArrayLike):
    """Return the dtype a state vector is cast to by the integrators.

    Complex inputs map to :func:`get_complex_dtype`, everything else to
    :func:`get_dtype`.

    Args:
        y: State vector (array or array-like).

    Returns:
        The float or complex dtype for *y*.
    """
    if jnp.iscomplexobj(y):
        return get_complex_dtype()
    return _dtype


def is_complex_dtype(dtype) -> bool:
    """Return ``True`` if *dtype* is a complex floating type."""
    return jnp.issubdtype(dtype, jnp.complexfloating)
