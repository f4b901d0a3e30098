"""Defines antecedent expression trees."""
from __future__ import annotations

import abc
from typing import Iterator, Mapping

import equinox as eqx

from ..errors import MissingInput, UnknownTerm, UnknownVariable
from ..fuzzy_variable import FuzzyVariable
from ..ops import Operators
from ..utils.types import Array, ScalarLike


class Antecedent(eqx.Module, abc.ABC):
    """Fuzzy boolean expression over ``variable IS term`` atoms.

    Nodes compose with ``&`` (AND), ``|`` (OR) and ``~`` (NOT).
    """

    @abc.abstractmethod
    def __call__(
        self,
        values: Mapping[str, ScalarLike],
        variables: Mapping[str, FuzzyVariable],
        ops: Operators,
    ) -> Array:
        raise NotImplementedError("__call__ is not implemented for base antecedent class.")

    @abc.abstractmethod
    def atoms(self) -> Iterator["Is"]:
        raise NotImplementedError("atoms is not implemented for base antecedent class.")

    def variables(self) -> frozenset[str]:
        return frozenset(atom.var for atom in self.atoms())

    def validate(self, variables: Mapping[str, FuzzyVariable], *, rule: int | None = None) -> None:
        """Checks every atom against the declared variables and their terms."""
        for atom in self.atoms():
            if atom.var not in variables:
                raise UnknownVariable(atom.var, rule=rule)
            if not variables[atom.var].has_term(atom.term):
                raise UnknownTerm(atom.var, atom.term, rule=rule)

    def __and__(self, other: "Antecedent") -> "And":
        return And(self, other)

    def __or__(self, other: "Antecedent") -> "Or":
        return Or(self, other)

    def __invert__(self) -> "Not":
        return Not(self)


class Is(Antecedent):
    var: str = eqx.field(static=True)
    term: str = eqx.field(static=True)

    def __call__(self, values, variables, ops):
        if self.var not in values:
            raise MissingInput(self.var)

        return variables[self.var].term(self.term)(values[self.var])

    def atoms(self):
        yield self

    def __str__(self) -> str:
        return f"{self.var} IS {self.term}"


class And(Antecedent):
    left: Antecedent
    right: Antecedent

    def __call__(self, values, variables, ops):
        return ops.and_(self.left(values, variables, ops), self.right(values, variables, ops))

    def atoms(self):
        yield from self.left.atoms()
        yield from self.right.atoms()

    def __str__(self) -> str:
        return f"({self.left} AND {self.right})"


class Or(Antecedent):
    left: Antecedent
    right: Antecedent

    def __call__(self, values, variables, ops):
        return ops.or_(self.left(values, variables, ops), self.right(values, variables, ops))

    def atoms(self):
        yield from self.left.atoms()
        yield from self.right.atoms()

    def __str__(self) -> str:
        return f"({self.left} OR {self.right})"


class Not(Antecedent):
    expr: Antecedent

    def __call__(self, values, variables, ops):
        return ops.not_(self.expr(values, variables, ops))

    def atoms(self):
        yield from self.expr.atoms()

    def __str__(self) -> str:
        return f"NOT {self.expr}"
