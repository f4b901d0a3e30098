"""Defines the membership function kernels."""
from __future__ import annotations

import jax.numpy as jnp

from ..utils.types import Array, ScalarLike


def _as_float(x: ScalarLike) -> Array:
    return jnp.asarray(x, dtype=jnp.result_type(float))


def triangle(x: ScalarLike, a: float, b: float, c: float) -> Array:
    x = _as_float(x)

    # Degenerate edges (a == b or b == c) become vertical steps
    rise = jnp.where(x < b, (x - a) / jnp.where(b > a, b - a, 1.0), 1.0)
    fall = jnp.where(x > b, (c - x) / jnp.where(c > b, c - b, 1.0), 1.0)

    y = jnp.minimum(rise, fall)
    y = jnp.where((x < a) | (x > c), 0.0, y)

    return jnp.clip(y, 0.0, 1.0)

def trapezoid(x: ScalarLike, a: float, b: float, c: float, d: float) -> Array:
    x = _as_float(x)

    rise = jnp.where(x < b, (x - a) / jnp.where(b > a, b - a, 1.0), 1.0)
    fall = jnp.where(x > c, (d - x) / jnp.where(d > c, d - c, 1.0), 1.0)

    y = jnp.minimum(rise, fall)
    y = jnp.where((x < a) | (x > d), 0.0, y)

    return jnp.clip(y, 0.0, 1.0)

def gaussian(x: ScalarLike, mean: float, sigma: float) -> Array:
    x = _as_float(x)

    y = jnp.exp(-0.5*((x - mean) / sigma)**2)

    # exp underflows far from the mean; keep the tails strictly positive
    return jnp.clip(y, jnp.finfo(y.dtype).tiny, 1.0)
