"""Defines types used throughout FLAME."""
from __future__ import annotations

from typing import Mapping, Union

import jax.numpy as jnp

Array = jnp.ndarray
ScalarLike = Union[float, int, Array]
Inputs = Mapping[str, ScalarLike]
