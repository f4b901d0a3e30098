"""Defines defuzzification strategies.

Every strategy maps a sampled fuzzy set, given as grid points ``xs`` of shape
(N,) and degrees ``mus`` of shape (..., N), to crisp values of shape (...,).
A set whose degrees are all zero has no area and no meaningful maximum; each
strategy then returns ``fallback`` (the domain midpoint unless the caller
says otherwise) instead of NaN.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, Literal

import jax.numpy as jnp

from .errors import InvalidParameters, ZeroArea
from .utils.types import Array, ScalarLike

if TYPE_CHECKING:
    from .fiss.aggregate import AggregatedSet


logger = logging.getLogger(__name__)

Method = Literal["centroid", "bisector", "mom", "som", "lom"]
Defuzzifier = Callable[[Array, Array, ScalarLike], Array]

# degrees within this distance of the peak count as attaining it
MAX_TOL = 1e-6


def centroid(xs: Array, mus: Array, fallback: ScalarLike) -> Array:
    area = jnp.sum(mus, axis=-1)
    num = jnp.sum(xs*mus, axis=-1)

    safe = jnp.where(area > 0.0, area, 1.0)
    return jnp.where(area > 0.0, num / safe, fallback)

def bisector(xs: Array, mus: Array, fallback: ScalarLike) -> Array:
    total = jnp.sum(mus, axis=-1)
    running = jnp.cumsum(mus, axis=-1)

    # first grid index where the running area reaches half of the total
    crossed = running >= 0.5*total[..., None]
    idx = jnp.argmax(crossed, axis=-1)

    return jnp.where(total > 0.0, xs[idx], fallback)

def _maxima(mus: Array) -> tuple[Array, Array]:
    height = jnp.max(mus, axis=-1)
    mask = mus >= (height[..., None] - MAX_TOL)
    return height, mask

def mean_of_maxima(xs: Array, mus: Array, fallback: ScalarLike) -> Array:
    height, mask = _maxima(mus)

    count = jnp.sum(mask, axis=-1)
    mean = jnp.sum(jnp.where(mask, xs, 0.0), axis=-1) / jnp.maximum(count, 1)

    return jnp.where(height > 0.0, mean, fallback)

def smallest_of_maxima(xs: Array, mus: Array, fallback: ScalarLike) -> Array:
    height, mask = _maxima(mus)
    idx = jnp.argmax(mask, axis=-1)

    return jnp.where(height > 0.0, xs[idx], fallback)

def largest_of_maxima(xs: Array, mus: Array, fallback: ScalarLike) -> Array:
    height, mask = _maxima(mus)
    idx = mask.shape[-1] - 1 - jnp.argmax(mask[..., ::-1], axis=-1)

    return jnp.where(height > 0.0, xs[idx], fallback)


DEFUZZ_DICT: Dict[str, Defuzzifier] = {
    "centroid": centroid,
    "bisector": bisector,
    "mom": mean_of_maxima,
    "som": smallest_of_maxima,
    "lom": largest_of_maxima,
}


def get_defuzzifier(method: str) -> Defuzzifier:
    try:
        return DEFUZZ_DICT[method]
    except KeyError:
        raise InvalidParameters(
            f"Unknown defuzzification method \"{method}\". Must be one of {sorted(DEFUZZ_DICT)}."
        ) from None


def defuzzify(
    agg: "AggregatedSet",
    method: Method = "centroid",
    *,
    fallback: float | None = None,
    strict: bool = False,
) -> float:
    """Collapses one aggregated set into a crisp value.

    Parameters
    ----------
    agg : AggregatedSet
        Sampled fuzzy set of a single output variable.
    method : str, optional
        One of "centroid", "bisector", "mom", "som" or "lom", by default
        "centroid".
    fallback : float | None, optional
        Value returned for a zero-area set, by default the grid midpoint.
    strict : bool, optional
        Raise :class:`ZeroArea` instead of returning ``fallback``.

    Returns
    -------
    float
        Crisp value.
    """
    fn = get_defuzzifier(method)

    if fallback is None:
        fallback = agg.midpoint

    if agg.is_empty:
        if strict:
            raise ZeroArea(agg.var)
        logger.debug("Zero-area set for %s, using fallback %.6g.", agg.var, fallback)

    return float(fn(agg.xs, agg.mus, fallback))
