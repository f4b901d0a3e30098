"""Defines fuzzy operator families (AND, OR, NOT, implication)."""
from __future__ import annotations

from typing import Callable, Dict, Literal

import jax.numpy as jnp
import equinox as eqx

from .errors import InvalidParameters
from .utils.types import Array, ScalarLike


BinaryOp = Callable[[ScalarLike, ScalarLike], Array]


# --- T-norms ---
def t_min(a: ScalarLike, b: ScalarLike) -> Array:
    return jnp.minimum(a, b)

def t_prod(a: ScalarLike, b: ScalarLike) -> Array:
    return jnp.multiply(a, b)

def t_lukasiewicz(a: ScalarLike, b: ScalarLike) -> Array:
    return jnp.maximum(jnp.add(a, b) - 1.0, 0.0)

# --- S-norms ---
def s_max(a: ScalarLike, b: ScalarLike) -> Array:
    return jnp.maximum(a, b)

def s_prob(a: ScalarLike, b: ScalarLike) -> Array:
    a = jnp.asarray(a)
    return jnp.clip(a + b - a*b, 0.0, 1.0)

def s_lukasiewicz(a: ScalarLike, b: ScalarLike) -> Array:
    return jnp.minimum(jnp.add(a, b), 1.0)

# --- complement ---
def complement(a: ScalarLike) -> Array:
    # clip absorbs drift from inputs a hair outside [0, 1]
    return jnp.clip(1.0 - jnp.asarray(a), 0.0, 1.0)

# --- implication: (alpha, consequent degree) -> contribution ---
def imp_min(alpha: ScalarLike, mu: ScalarLike) -> Array:
    return jnp.minimum(alpha, mu)

def imp_prod(alpha: ScalarLike, mu: ScalarLike) -> Array:
    return jnp.multiply(alpha, mu)


TNORMS: Dict[str, BinaryOp] = {
    "min": t_min,
    "prod": t_prod,
    "lukasiewicz": t_lukasiewicz,
}
SNORMS: Dict[str, BinaryOp] = {
    "max": s_max,
    "prob": s_prob,
    "lukasiewicz": s_lukasiewicz,
}
IMPLICATIONS: Dict[str, BinaryOp] = {
    "min": imp_min,
    "prod": imp_prod,
}


def _lookup(table: Dict[str, BinaryOp], key: str, what: str) -> BinaryOp:
    try:
        return table[key]
    except KeyError:
        raise InvalidParameters(
            f"Unknown {what} \"{key}\". Must be one of {sorted(table)}."
        ) from None


class Operators(eqx.Module):
    """Operator policy of one system, resolved once when the system is built."""
    tnorm: BinaryOp = eqx.field(static=True)
    snorm: BinaryOp = eqx.field(static=True)
    implication: BinaryOp = eqx.field(static=True)
    names: tuple[str, str, str] = eqx.field(static=True)

    @classmethod
    def init(
        cls,
        *,
        tnorm: Literal["min", "prod", "lukasiewicz"] = "min",
        snorm: Literal["max", "prob", "lukasiewicz"] = "max",
        implication: Literal["min", "prod"] = "min",
    ) -> "Operators":
        return cls(
            tnorm=_lookup(TNORMS, tnorm, "tnorm"),
            snorm=_lookup(SNORMS, snorm, "snorm"),
            implication=_lookup(IMPLICATIONS, implication, "implication"),
            names=(tnorm, snorm, implication),
        )

    def and_(self, a: ScalarLike, b: ScalarLike) -> Array:
        return self.tnorm(a, b)

    def or_(self, a: ScalarLike, b: ScalarLike) -> Array:
        return self.snorm(a, b)

    def not_(self, a: ScalarLike) -> Array:
        return complement(a)

    def implicate(self, alpha: ScalarLike, mu: ScalarLike) -> Array:
        return self.implication(alpha, mu)
