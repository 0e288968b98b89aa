"""
Dense linear solve for the nodal system, JIT-compiled.

Gauss-Jordan elimination with partial pivoting on the augmented [A|b]
matrix. A column whose best pivot is below PIVOT_EPS makes the whole
result zero instead of raising: a degenerate grid reads as de-energized.

The solve runs in float64. A capacitor closes a fraction G_net/(G_net+G_cap)
of its remaining gap each tick, and in float32 that step falls below one
ulp near 12V long before the node reaches its steady value.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array

# 64-bit precision for the nodal solve
jax.config.update("jax_enable_x64", True)

PIVOT_EPS = 1e-12


@jax.jit
def _gauss_jordan(A: Array, b: Array) -> tuple[Array, Array]:
    n = b.shape[0]
    M = jnp.concatenate([A, b[:, None]], axis=1)
    rows = jnp.arange(n)

    def eliminate(col, carry):
        M, singular = carry

        # Partial pivot: largest magnitude at or below the diagonal
        mags = jnp.where(rows >= col, jnp.abs(M[:, col]), -1.0)
        pivot = jnp.argmax(mags)
        singular = singular | (mags[pivot] < PIVOT_EPS)

        row_col = M[col]
        row_pivot = M[pivot]
        M = M.at[col].set(row_pivot).at[pivot].set(row_col)

        # Keep the loop finite once singular; the result is discarded anyway
        div = jnp.where(jnp.abs(M[col, col]) < PIVOT_EPS, 1.0, M[col, col])
        pivot_row = M[col] / div
        M = M.at[col].set(pivot_row)

        factors = M[:, col].at[col].set(0.0)
        M = M - factors[:, None] * pivot_row[None, :]
        return M, singular

    M, singular = jax.lax.fori_loop(0, n, eliminate, (M, jnp.array(False)))
    return M[:, n], singular


def solve_linear(A: Array, b: Array) -> tuple[Array, bool]:
    """
    Solve A x = b.

    Args:
        A: (n, n) conductance matrix
        b: (n,) current vector

    Returns:
        (x, singular). When singular is True, x is all zeros.

    A grid built from positive resistances gives a diagonally dominant
    matrix, so singular only shows up when conductances are tiny enough to
    put every candidate pivot of a column under PIVOT_EPS.
    """
    A = jnp.asarray(A, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    n = b.shape[0]
    if n == 0:
        return jnp.zeros(0, dtype=jnp.float64), False

    x, singular = _gauss_jordan(A, b)
    singular = bool(singular)
    if singular:
        x = jnp.zeros(n, dtype=jnp.float64)
    return x, singular
