"""Define Base Membership Function Class."""
from __future__ import annotations

import abc
import math

import equinox as eqx

from ..errors import InvalidParameters
from ..utils.types import Array, ScalarLike


class BaseMF(eqx.Module, abc.ABC):
    """Membership function interface.

    A membership function doubles as a term: ``name`` is the term label it is
    known by inside its variable. Parameters are validated once, when the
    module is constructed, and never change afterwards.
    """
    name: str = eqx.field(static=True, default="", kw_only=True)

    def __check_init__(self) -> None:
        if not all(math.isfinite(p) for p in self.params):
            raise InvalidParameters(
                f"parameters must be finite, got {self.params}.",
                owner=type(self).__name__,
            )
        self.validate()

    @abc.abstractmethod
    def __call__(self, x: ScalarLike) -> Array:
        raise NotImplementedError("__call__ is not implemented for base MF class.")

    @property
    @abc.abstractmethod
    def params(self) -> tuple[float, ...]:
        raise NotImplementedError("params is not implemented for base MF class.")

    @abc.abstractmethod
    def validate(self) -> None:
        raise NotImplementedError("validate is not implemented for base MF class.")

    def support(self) -> tuple[float, float]:
        """Interval outside of which the degree is (effectively) zero."""
        p = self.params
        return (p[0], p[-1])
