"""Defines Gaussian Membership Function Class."""
from __future__ import annotations

from .base_mf import BaseMF
from .functions import gaussian

import equinox as eqx

from ..errors import InvalidParameters
from ..utils.types import Array, ScalarLike


class Gaussian(BaseMF):
    mean: float = eqx.field(converter=float)
    sigma: float = eqx.field(converter=float)
    name: str = eqx.field(static=True, default="gauss", kw_only=True)

    def __call__(self, x: ScalarLike) -> Array:
        return gaussian(x, self.mean, self.sigma)

    @property
    def params(self) -> tuple[float, ...]:
        return (self.mean, self.sigma)

    def validate(self) -> None:
        if self.sigma <= 0.0:
            raise InvalidParameters(
                f"sigma must be > 0.0, got {self.sigma}.",
                owner="Gaussian",
            )

    def support(self) -> tuple[float, float]:
        # Never exactly zero; 4 sigma holds all but ~3e-4 of the peak
        s = 4.0 * self.sigma
        return (self.mean - s, self.mean + s)
