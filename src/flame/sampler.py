"""Defines the output domain sampler."""
from __future__ import annotations

import math

import jax.numpy as jnp
import equinox as eqx

from .errors import InvalidParameters
from .utils.types import Array


class UniformSampler(eqx.Module):
    """Evenly spaced grid of ``n`` points over a closed interval."""
    DEFAULT_N = 101

    n: int = eqx.field(static=True, default=DEFAULT_N)

    def __check_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n < 2:
            raise InvalidParameters(f"n must be an integer >= 2, got {self.n!r}.", owner="UniformSampler")

    def sample(self, minval: float, maxval: float) -> Array:
        """Returns ``n`` points from ``minval`` to ``maxval``, both included.

        Raises
        ------
        InvalidParameters
            Bounds are not finite or ``minval >= maxval``.
        """
        if not (math.isfinite(minval) and math.isfinite(maxval)):
            raise InvalidParameters(f"bounds must be finite, got [{minval}, {maxval}].", owner="UniformSampler")

        if not minval < maxval:
            raise InvalidParameters(f"minval must be < maxval, got [{minval}, {maxval}].", owner="UniformSampler")

        xs = jnp.linspace(minval, maxval, self.n)

        # last point is exactly maxval regardless of rounding in the step
        return xs.at[-1].set(maxval)

    def step(self, minval: float, maxval: float) -> float:
        return (maxval - minval) / (self.n - 1)
