"""Defines base FIS class."""
from __future__ import annotations

import abc
import logging
from typing import Any, Dict, Literal, Mapping, Sequence

import jax.numpy as jnp
import equinox as eqx
import numpy as np

from .rule_base import Rule, RuleBase
from ..errors import DomainViolation, InvalidParameters, MissingInput
from ..fuzzy_variable import FuzzyVariable
from ..ops import Operators
from ..utils.types import Array, Inputs


logger = logging.getLogger(__name__)


class BaseFIS(eqx.Module, abc.ABC):
    """Shared state of an inference system: input variables, rules, operators.

    Systems are frozen once built. Evaluation only reads them, so one system
    can serve many threads at once.
    """
    input_vars: tuple[FuzzyVariable, ...]
    rb: RuleBase
    ops: Operators

    name: str = eqx.field(static=True, default="fis", kw_only=True)
    eps: float = eqx.field(static=True, default=1e-6, kw_only=True)
    strict_domain: bool = eqx.field(static=True, default=False, kw_only=True)

    @staticmethod
    def _build_base(
        input_vars: Sequence[FuzzyVariable],
        rules: Sequence[Rule] | RuleBase,
        *,
        tnorm: Literal["min", "prod", "lukasiewicz"] = "min",
        snorm: Literal["max", "prob", "lukasiewicz"] = "max",
        implication: Literal["min", "prod"] = "min",
    ) -> tuple[tuple[FuzzyVariable, ...], RuleBase, Operators]:
        input_vars = tuple(input_vars)
        if len(input_vars) == 0:
            raise InvalidParameters("at least one input variable is required.")

        if any(not isinstance(v, FuzzyVariable) for v in input_vars):
            raise InvalidParameters("input variables must be FuzzyVariable instances.")

        rb = rules if isinstance(rules, RuleBase) else RuleBase(tuple(rules))
        if rb.n_rules == 0:
            raise InvalidParameters("at least one rule is required.")

        ops = Operators.init(tnorm=tnorm, snorm=snorm, implication=implication)

        return input_vars, rb, ops

    @staticmethod
    def _index(variables: Sequence[FuzzyVariable]) -> Dict[str, FuzzyVariable]:
        index: Dict[str, FuzzyVariable] = {}
        for v in variables:
            if v.name in index:
                raise InvalidParameters(f"duplicate variable name \"{v.name}\".")
            index[v.name] = v
        return index

    def check_inputs(self, inputs: Inputs) -> Dict[str, Array]:
        """Validates one row of crisp inputs.

        Every variable read by an enabled rule must be present. Supplied
        values must be finite numbers and, with ``strict_domain``, lie inside
        their variable's domain. Unknown keys are ignored.

        Raises
        ------
        MissingInput
            A variable read by an enabled rule has no value.
        DomainViolation
            A value is NaN, infinite, not a number, or out of domain in strict
            mode.
        """
        missing = sorted(self.rb.referenced_inputs() - set(inputs))
        if missing:
            raise MissingInput(missing[0])

        unknown = set(inputs) - set(self.input_map)
        if unknown:
            logger.debug("%s ignores unknown inputs %s.", self.name, sorted(unknown))

        values: Dict[str, Array] = {}
        for var in self.input_vars:
            if var.name in inputs:
                x = var.check(inputs[var.name], strict=self.strict_domain)
                values[var.name] = jnp.asarray(x)

        return values

    def check_array(self, x: Array) -> Array:
        """Host-side checks for the vectorised path; ``x`` is (..., n_inps)."""
        x = jnp.asarray(x)

        if x.ndim < 1 or x.shape[-1] != self.n_inps:
            raise InvalidParameters(f"x last dimension must be {self.n_inps}, got shape {x.shape}.")

        host = np.asarray(x)
        for i, var in enumerate(self.input_vars):
            col = host[..., i]

            bad = ~np.isfinite(col)
            if bad.any():
                raise DomainViolation(var.name, float(col[bad][0]))

            if self.strict_domain:
                out = (col < var.minval) | (col > var.maxval)
                if out.any():
                    raise DomainViolation(var.name, float(col[out][0]), var.domain)

        return x

    def fire(self, values: Mapping[str, Array]) -> Array:
        return self.rb.fire(values, self.input_map, self.ops)

    def firing_strengths(self, inputs: Inputs) -> list[float]:
        """Firing strength of every rule for one row, in rule order."""
        w = self.fire(self.check_inputs(inputs))
        return np.asarray(w).tolist()

    def fuzzify(self, inputs: Inputs) -> Dict[str, Dict[str, float]]:
        """Degree of every term of every supplied input."""
        values = self.check_inputs(inputs)
        return {name: self.input_map[name].fuzzify(x) for name, x in values.items()}

    @abc.abstractmethod
    def evaluate(self, inputs: Inputs, *, errors: Literal["raise", "collect"] = "raise") -> Dict[str, Any]:
        raise NotImplementedError

    @abc.abstractmethod
    def __call__(self, x: Array) -> Array:
        raise NotImplementedError

    def split(self, x: Array) -> Dict[str, Array]:
        """Column view of an (..., n_inps) array, keyed by input name."""
        return {var.name: x[..., i] for i, var in enumerate(self.input_vars)}

    @property
    def input_map(self) -> Dict[str, FuzzyVariable]:
        return {v.name: v for v in self.input_vars}

    @property
    def n_inps(self) -> int:
        return len(self.input_vars)

    @property
    def n_rules(self) -> int:
        return self.rb.n_rules
