"""Defines fuzzy variable class."""
from __future__ import annotations

import dataclasses
import math
from typing import Dict, Mapping, Sequence, Tuple, Type

import jax.numpy as jnp
import equinox as eqx

from .errors import DomainViolation, InvalidParameters, UnknownTerm
from .mfs import BaseMF, Gaussian, Trapezoidal, Triangular
from .utils.types import Array, ScalarLike


# maps str name to corresponding class
MF_DICT: Dict[str, Type[BaseMF]] = {
    "triangle": Triangular,
    "trapezoid": Trapezoidal,
    "gaussian": Gaussian,
}


class FuzzyVariable(eqx.Module):
    """Linguistic variable: a named domain partitioned into labelled terms.

    Each entry of ``mfs`` is a membership function whose ``name`` is the term
    label. Labels must be unique and non-empty.
    """
    mfs: Tuple[BaseMF, ...] = eqx.field(converter=tuple)
    minval: float = eqx.field(converter=float, default=0.0)
    maxval: float = eqx.field(converter=float, default=1.0)
    name: str = eqx.field(static=True, default="x")

    def __check_init__(self) -> None:
        owner = f"FuzzyVariable \"{self.name}\""

        if not self.name:
            raise InvalidParameters("variable name must be non-empty.")

        if not (math.isfinite(self.minval) and math.isfinite(self.maxval)):
            raise InvalidParameters(
                f"domain bounds must be finite, got [{self.minval}, {self.maxval}].",
                owner=owner,
            )

        if not self.minval < self.maxval:
            raise InvalidParameters(
                f"minval must be < maxval, got [{self.minval}, {self.maxval}].",
                owner=owner,
            )

        if any(not isinstance(mf, BaseMF) for mf in self.mfs):
            raise InvalidParameters("every term must be a membership function.", owner=owner)

        labels = [mf.name for mf in self.mfs]
        if any(not label for label in labels):
            raise InvalidParameters("term labels must be non-empty.", owner=owner)

        dupes = sorted({label for label in labels if labels.count(label) > 1})
        if dupes:
            raise InvalidParameters(f"duplicate term labels {dupes}.", owner=owner)

    @classmethod
    def from_terms(
        cls,
        name: str,
        minval: float,
        maxval: float,
        terms: Mapping[str, BaseMF],
    ) -> "FuzzyVariable":
        """Builds a variable from a ``{label: membership function}`` mapping.

        Parameters
        ----------
        name : str
            Variable name.
        minval, maxval : float
            Domain bounds, ``minval < maxval``.
        terms : Mapping[str, BaseMF]
            Membership functions keyed by term label; each one is relabelled.

        Returns
        -------
        FuzzyVariable
            Validated variable.
        """
        mfs = tuple(dataclasses.replace(mf, name=label) for label, mf in terms.items())
        return cls(mfs, minval, maxval, name)

    @classmethod
    def manual(
        cls,
        mfs: Sequence[str],
        params: Sequence[Sequence[float]],
        *,
        minval: float = 0.0,
        maxval: float = 1.0,
        name: str = "x",
        mf_names: Sequence[str] | None = None,
    ) -> "FuzzyVariable":
        # Sanity checks
        if any(mf not in MF_DICT for mf in mfs):
            raise InvalidParameters(
                "Invalid MF type specified. Must be \"triangle\", \"trapezoid\", or \"gaussian\"."
            )

        if len(params) != len(mfs):
            raise InvalidParameters(f"expected {len(mfs)} parameter sets, got {len(params)}.")

        if mf_names is None:
            mf_names = [f"mf_{i+1}" for i in range(len(mfs))]

        if len(mf_names) != len(mfs):
            raise InvalidParameters(f"expected {len(mfs)} mf_names, got {len(mf_names)}.")

        _mfs = []
        for kind, p, label in zip(mfs, params, mf_names):
            try:
                _mfs.append(MF_DICT[kind](*p, name=label))
            except TypeError as e:
                raise InvalidParameters(f"wrong number of parameters for {kind}: {tuple(p)}.") from e

        return cls(tuple(_mfs), minval, maxval, name)

    def __call__(self, x: ScalarLike) -> Array:
        """Degrees of every term, of shape (..., n_mfs)."""
        x = jnp.asarray(x)

        if not self.mfs:
            return jnp.zeros((*x.shape, 0))

        mus = [mf(x) for mf in self.mfs]
        return jnp.stack(mus, axis=-1)

    def term(self, label: str) -> BaseMF:
        for mf in self.mfs:
            if mf.name == label:
                return mf

        raise UnknownTerm(self.name, label)

    def has_term(self, label: str) -> bool:
        return any(mf.name == label for mf in self.mfs)

    def eval(self, label: str, x: ScalarLike, *, strict: bool = False) -> Array:
        """Evaluates a single term at ``x``.

        With ``strict=True`` a scalar ``x`` outside ``[minval, maxval]`` raises
        :class:`DomainViolation`; otherwise the membership function is
        evaluated as is.
        """
        mf = self.term(label)

        if strict:
            self.check(x, strict=True)

        return mf(x)

    def check(self, x: float, *, strict: bool = False) -> float:
        """Validates one crisp input and returns it as a float."""
        try:
            value = float(x)
        except (TypeError, ValueError) as e:
            raise DomainViolation(self.name, x) from e

        if not math.isfinite(value):
            raise DomainViolation(self.name, value)

        if strict and not self.contains(value):
            raise DomainViolation(self.name, value, self.domain)

        return value

    def fuzzify(self, x: float) -> Dict[str, float]:
        mus = self(x)
        return {mf.name: float(mu) for mf, mu in zip(self.mfs, mus)}

    def contains(self, x: float) -> bool:
        return self.minval <= x <= self.maxval

    @property
    def domain(self) -> tuple[float, float]:
        return (self.minval, self.maxval)

    @property
    def midpoint(self) -> float:
        return 0.5*(self.minval + self.maxval)

    @property
    def n_mfs(self) -> int:
        return len(self.mfs)

    @property
    def mf_names(self) -> list[str]:
        return [mf.name for mf in self.mfs]

    @property
    def mf_params(self) -> list[tuple[float, ...]]:
        return [mf.params for mf in self.mfs]
