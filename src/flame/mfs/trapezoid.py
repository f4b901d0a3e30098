"""Defines Trapezoidal Membership Function Class."""
from __future__ import annotations

from .base_mf import BaseMF
from .functions import trapezoid

import equinox as eqx

from ..errors import InvalidParameters
from ..utils.types import Array, ScalarLike


class Trapezoidal(BaseMF):
    left: float = eqx.field(converter=float)
    left_top: float = eqx.field(converter=float)
    right_top: float = eqx.field(converter=float)
    right: float = eqx.field(converter=float)
    name: str = eqx.field(static=True, default="trap", kw_only=True)

    def __call__(self, x: ScalarLike) -> Array:
        return trapezoid(x, self.left, self.left_top, self.right_top, self.right)

    @property
    def params(self) -> tuple[float, ...]:
        return (self.left, self.left_top, self.right_top, self.right)

    def validate(self) -> None:
        if not self.left <= self.left_top <= self.right_top <= self.right:
            raise InvalidParameters(
                f"left <= left_top <= right_top <= right required, got {self.params}.",
                owner="Trapezoidal",
            )
