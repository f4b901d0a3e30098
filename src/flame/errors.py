"""Defines the FLAME exception hierarchy."""
from __future__ import annotations


class FuzzyError(Exception):
    """Base class for every error raised by FLAME."""


class InvalidParameters(FuzzyError, ValueError):
    """A shape, operator or configuration value violates its invariants."""

    def __init__(self, message: str, *, owner: str | None = None) -> None:
        self.owner = owner
        if owner is not None:
            message = f"{owner}: {message}"
        super().__init__(message)


class UnknownVariable(FuzzyError, LookupError):
    def __init__(self, var: str, *, rule: int | None = None) -> None:
        self.var = var
        self.rule = rule
        where = f" (rule {rule})" if rule is not None else ""
        super().__init__(f"Unknown variable \"{var}\"{where}.")


class UnknownTerm(FuzzyError, LookupError):
    def __init__(self, var: str, term: str, *, rule: int | None = None) -> None:
        self.var = var
        self.term = term
        self.rule = rule
        where = f" (rule {rule})" if rule is not None else ""
        super().__init__(f"Variable \"{var}\" has no term \"{term}\"{where}.")


class MissingInput(FuzzyError, LookupError):
    """An evaluation input omits a variable that an enabled rule reads."""

    def __init__(self, var: str) -> None:
        self.var = var
        super().__init__(f"No input value supplied for variable \"{var}\".")


class DomainViolation(FuzzyError, ValueError):
    """An input is not finite, or lies outside its domain in strict mode."""

    def __init__(self, var: str, value: float, domain: tuple[float, float] | None = None) -> None:
        self.var = var
        self.value = value
        self.domain = domain
        if domain is None:
            msg = f"Input \"{var}\" must be a finite number, got {value!r}."
        else:
            msg = f"Input \"{var}\"={value!r} is outside the domain [{domain[0]}, {domain[1]}]."
        super().__init__(msg)


class ZeroArea(FuzzyError, ArithmeticError):
    """The aggregated set of an output variable is empty."""

    def __init__(self, var: str) -> None:
        self.var = var
        super().__init__(f"Aggregated set for \"{var}\" has zero area; no rule fired.")
