"""Defines implication and cross-rule aggregation."""
from __future__ import annotations

import jax.numpy as jnp
import equinox as eqx
import numpy as np

from .rule_base import RuleBase
from ..fuzzy_variable import FuzzyVariable
from ..mfs import BaseMF
from ..ops import Operators
from ..utils.types import Array


class AggregatedSet(eqx.Module):
    """Sampled fuzzy set of one output variable for one evaluation."""
    xs: Array
    mus: Array
    var: str = eqx.field(static=True, default="y")

    @property
    def area(self) -> float:
        step = float(self.xs[1] - self.xs[0])
        return float(jnp.sum(self.mus)) * step

    @property
    def height(self) -> float:
        return float(jnp.max(self.mus))

    @property
    def is_empty(self) -> bool:
        return not bool(jnp.any(self.mus > 0.0))

    @property
    def midpoint(self) -> float:
        return 0.5*(float(self.xs[0]) + float(self.xs[-1]))

    def pairs(self) -> list[tuple[float, float]]:
        return list(zip(np.asarray(self.xs).tolist(), np.asarray(self.mus).tolist()))

    def __len__(self) -> int:
        return int(self.xs.shape[0])


def implicate(
    alpha: Array,
    term: BaseMF,
    xs: Array,
    ops: Operators,
    eps: float = 0.0,
) -> Array:
    """Contribution of one consequent over the grid.

    Parameters
    ----------
    alpha : Array
        Weighted firing strength, shape (...,). Clipped to [0, 1].
    term : BaseMF
        Consequent membership function.
    xs : Array
        Grid of the output variable, shape (N,).
    ops : Operators
        Operator policy providing the implication.
    eps : float, optional
        Degrees below ``eps`` are set to 0, by default 0.0.

    Returns
    -------
    Array
        Contribution of shape (..., N).
    """
    alpha = jnp.clip(jnp.asarray(alpha), 0.0, 1.0)[..., None]

    c = ops.implicate(alpha, term(xs))
    return jnp.where(c < eps, 0.0, c)

def aggregate(
    ovar: FuzzyVariable,
    xs: Array,
    strengths: Array,
    rb: RuleBase,
    ops: Operators,
    eps: float = 0.0,
) -> Array:
    """S-norm of all contributions to ``ovar``, shape (..., N).

    Starts from the all-zero set, so an output no rule fires for stays zero.
    Both S-norms are commutative and associative, so rule order is irrelevant.
    """
    agg = jnp.zeros((*strengths.shape[:-1], xs.shape[0]))

    for i, c in rb.targets(ovar.name):
        contribution = implicate(strengths[..., i]*c.weight, ovar.term(c.term), xs, ops, eps)
        agg = ops.or_(agg, contribution)

    return agg
