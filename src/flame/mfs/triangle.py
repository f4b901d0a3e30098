"""Defines Triangular Membership Function Class."""
from __future__ import annotations

from .base_mf import BaseMF
from .functions import triangle

import equinox as eqx

from ..errors import InvalidParameters
from ..utils.types import Array, ScalarLike


class Triangular(BaseMF):
    """Triangle rising on [left, center] and falling on [center, right].

    ``left == center`` (or ``center == right``) gives a vertical edge: the
    degree jumps straight to 1 at ``center``.
    """
    left: float = eqx.field(converter=float)
    center: float = eqx.field(converter=float)
    right: float = eqx.field(converter=float)
    name: str = eqx.field(static=True, default="tri", kw_only=True)

    def __call__(self, x: ScalarLike) -> Array:
        return triangle(x, self.left, self.center, self.right)

    @property
    def params(self) -> tuple[float, ...]:
        return (self.left, self.center, self.right)

    def validate(self) -> None:
        if not self.left <= self.center <= self.right:
            raise InvalidParameters(
                f"left <= center <= right required, got {self.params}.",
                owner="Triangular",
            )
