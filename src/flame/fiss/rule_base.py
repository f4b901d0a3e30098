"""Defines rules and the rule base."""
from __future__ import annotations

import math
from typing import Iterator, Mapping, Tuple

import jax.numpy as jnp
import equinox as eqx

from .antecedent import Antecedent
from ..errors import InvalidParameters, UnknownTerm, UnknownVariable
from ..fuzzy_variable import FuzzyVariable
from ..ops import Operators
from ..utils.types import Array, ScalarLike


class Consequent(eqx.Module):
    """``THEN var IS term``, scaled by ``weight``."""
    var: str = eqx.field(static=True)
    term: str = eqx.field(static=True)
    weight: float = eqx.field(converter=float, default=1.0)

    def __check_init__(self) -> None:
        if not math.isfinite(self.weight) or self.weight < 0.0:
            raise InvalidParameters(
                f"weight must be finite and >= 0.0, got {self.weight}.",
                owner=f"Consequent {self.var} IS {self.term}",
            )

    def __str__(self) -> str:
        w = "" if self.weight == 1.0 else f" (weight {self.weight:g})"
        return f"{self.var} IS {self.term}{w}"


class Rule(eqx.Module):
    antecedent: Antecedent
    consequents: Tuple[Consequent, ...] = eqx.field(converter=tuple)
    enabled: bool = eqx.field(static=True, default=True)

    def __check_init__(self) -> None:
        if not isinstance(self.antecedent, Antecedent):
            raise InvalidParameters(f"antecedent must be an Antecedent, got {type(self.antecedent).__name__}.")

        if len(self.consequents) == 0:
            raise InvalidParameters("a rule needs at least one consequent.")

        if any(not isinstance(c, Consequent) for c in self.consequents):
            raise InvalidParameters("consequents must be Consequent instances.")

    def fire(
        self,
        values: Mapping[str, ScalarLike],
        variables: Mapping[str, FuzzyVariable],
        ops: Operators,
    ) -> Array:
        """Firing strength: the truth degree of the antecedent."""
        return self.antecedent(values, variables, ops)

    def __str__(self) -> str:
        then = " AND ".join(str(c) for c in self.consequents)
        state = "" if self.enabled else " [disabled]"
        return f"IF {self.antecedent} THEN {then}{state}"


class RuleBase(eqx.Module):
    """Ordered rules; a rule is identified by its position."""
    rules: Tuple[Rule, ...] = eqx.field(converter=tuple)

    @property
    def n_rules(self) -> int:
        return len(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __getitem__(self, i: int) -> Rule:
        return self.rules[i]

    def enabled_rules(self) -> list[tuple[int, Rule]]:
        return [(i, r) for i, r in enumerate(self.rules) if r.enabled]

    def referenced_inputs(self) -> frozenset[str]:
        """Variables an evaluation must supply: those read by enabled rules."""
        names: set[str] = set()
        for _, rule in self.enabled_rules():
            names |= rule.antecedent.variables()
        return frozenset(names)

    def targets(self, var: str) -> list[tuple[int, Consequent]]:
        """(rule index, consequent) pairs of enabled rules writing to ``var``."""
        return [
            (i, c)
            for i, rule in self.enabled_rules()
            for c in rule.consequents
            if c.var == var
        ]

    def validate(
        self,
        input_vars: Mapping[str, FuzzyVariable],
        output_vars: Mapping[str, FuzzyVariable],
    ) -> None:
        """Checks every reference of every rule, disabled ones included.

        Raises
        ------
        UnknownVariable
            An antecedent names a variable that is not an input, or a
            consequent names one that is not an output.
        UnknownTerm
            A referenced variable has no such term.
        """
        for i, rule in enumerate(self.rules):
            rule.antecedent.validate(input_vars, rule=i)

            for c in rule.consequents:
                if c.var not in output_vars:
                    raise UnknownVariable(c.var, rule=i)
                if not output_vars[c.var].has_term(c.term):
                    raise UnknownTerm(c.var, c.term, rule=i)

    def fire(
        self,
        values: Mapping[str, ScalarLike],
        variables: Mapping[str, FuzzyVariable],
        ops: Operators,
    ) -> Array:
        """Firing strengths of shape (..., n_rules); disabled rules give 0."""
        if self.n_rules == 0:
            raise InvalidParameters("rule base is empty.")

        ws = [
            rule.fire(values, variables, ops) if rule.enabled else None
            for rule in self.rules
        ]

        shapes = [jnp.shape(w) for w in ws if w is not None]
        shape = jnp.broadcast_shapes(*shapes) if shapes else ()
        zeros = jnp.zeros(shape)
        ws = [zeros if w is None else jnp.broadcast_to(w, shape) for w in ws]

        return jnp.stack(ws, axis=-1)

