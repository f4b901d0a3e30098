"""Defines Mamdani FIS class."""
from __future__ import annotations

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Literal, Mapping, Self, Sequence

import jax.numpy as jnp
import equinox as eqx
import numpy as np

from .aggregate import AggregatedSet, aggregate
from .base_fis import BaseFIS
from .rule_base import Rule, RuleBase
from ..defuzz import Method, get_defuzzifier
from ..errors import FuzzyError, InvalidParameters, UnknownVariable, ZeroArea
from ..fuzzy_variable import FuzzyVariable
from ..sampler import UniformSampler
from ..utils.types import Array, Inputs


logger = logging.getLogger(__name__)


class Mamdani(BaseFIS):
    """Mamdani inference: clip (or scale) consequents, S-norm them, defuzzify.

    Build with :meth:`Mamdani.init`, which validates every variable, rule and
    operator name up front. The result is immutable.
    """
    output_vars: tuple[FuzzyVariable, ...]
    sampler: UniformSampler
    defuzz_methods: tuple[str, ...] = eqx.field(static=True)
    strict_area: bool = eqx.field(static=True, default=False, kw_only=True)

    @classmethod
    def init(
        cls,
        input_vars: Sequence[FuzzyVariable],
        output_vars: Sequence[FuzzyVariable],
        rules: Sequence[Rule] | RuleBase,
        *,
        tnorm: Literal["min", "prod", "lukasiewicz"] = "min",
        snorm: Literal["max", "prob", "lukasiewicz"] = "max",
        implication: Literal["min", "prod"] = "min",
        defuzz: Method | Mapping[str, Method] = "centroid",
        resolution: int = UniformSampler.DEFAULT_N,
        strict_domain: bool = False,
        strict_area: bool = False,
        eps: float = 1e-6,
        name: str = "mamdani",
    ) -> Self:
        """Builds and validates a Mamdani system.

        Parameters
        ----------
        input_vars : Sequence[FuzzyVariable]
            Variables antecedents may read.
        output_vars : Sequence[FuzzyVariable]
            Variables consequents may write.
        rules : Sequence[Rule] | RuleBase
            Rule base, in order.
        tnorm : str, optional
            AND operator, by default "min".
        snorm : str, optional
            OR and aggregation operator, by default "max".
        implication : str, optional
            "min" clips consequents, "prod" scales them, by default "min".
        defuzz : str | Mapping[str, str], optional
            Defuzzification method for all outputs, or per output name (missing
            outputs use "centroid"), by default "centroid".
        resolution : int, optional
            Grid points per output domain, by default 101.
        strict_domain : bool, optional
            Reject inputs outside their domain, by default False.
        strict_area : bool, optional
            Fail outputs whose aggregated set is empty instead of returning
            the domain midpoint, by default False.
        eps : float, optional
            Contributions below ``eps`` count as 0, by default 1e-6.
        name : str, optional
            System name, by default "mamdani".

        Returns
        -------
        Mamdani
            Frozen system.

        Raises
        ------
        InvalidParameters
            Bad operator, method, resolution or duplicate variable names.
        UnknownVariable, UnknownTerm
            A rule references something that is not declared.
        """
        input_vars, rb, ops = BaseFIS._build_base(
            input_vars,
            rules,
            tnorm=tnorm,
            snorm=snorm,
            implication=implication,
        )

        output_vars = tuple(output_vars)
        if len(output_vars) == 0:
            raise InvalidParameters("at least one output variable is required.")

        if any(not isinstance(v, FuzzyVariable) for v in output_vars):
            raise InvalidParameters("output variables must be FuzzyVariable instances.")

        ins = BaseFIS._index(input_vars)
        outs = BaseFIS._index(output_vars)
        shared = sorted(set(ins) & set(outs))
        if shared:
            raise InvalidParameters(f"variables {shared} are declared as both input and output.")

        rb.validate(ins, outs)

        if isinstance(defuzz, str):
            methods = tuple(defuzz for _ in output_vars)
        else:
            for key in defuzz:
                if key not in outs:
                    raise UnknownVariable(key)
            methods = tuple(defuzz.get(v.name, "centroid") for v in output_vars)

        for m in methods:
            get_defuzzifier(m)

        if not eps >= 0.0:
            raise InvalidParameters(f"eps must be >= 0.0, got {eps}.")

        sampler = UniformSampler(resolution)

        for v in output_vars:
            if not rb.targets(v.name):
                warnings.warn(
                    f"No enabled rule targets output \"{v.name}\"; it will always defuzzify "
                    "an empty set.",
                    UserWarning,
                    stacklevel=2,
                )

        logger.debug(
            "Built %s: %d inputs, %d outputs, %d rules, ops=%s, defuzz=%s, n=%d.",
            name, len(input_vars), len(output_vars), rb.n_rules, ops.names, methods, sampler.n,
        )

        return cls(
            input_vars=input_vars,
            rb=rb,
            ops=ops,
            output_vars=output_vars,
            sampler=sampler,
            defuzz_methods=methods,
            name=name,
            eps=float(eps),
            strict_domain=strict_domain,
            strict_area=strict_area,
        )

    def grid(self, var: FuzzyVariable) -> Array:
        return self.sampler.sample(var.minval, var.maxval)

    def aggregate_all(self, w: Array) -> tuple[Array, ...]:
        """Aggregated degrees of every output, each of shape (..., N)."""
        return tuple(
            aggregate(v, self.grid(v), w, self.rb, self.ops, self.eps)
            for v in self.output_vars
        )

    def defuzzify(self, mus: Sequence[Array]) -> Array:
        """Crisp values of shape (..., n_out) from aggregated degrees."""
        crisp = [
            get_defuzzifier(m)(self.grid(v), mu, v.midpoint)
            for v, mu, m in zip(self.output_vars, mus, self.defuzz_methods)
        ]
        return jnp.stack(crisp, axis=-1)

    @eqx.filter_jit
    def infer(self, values: Mapping[str, Array]) -> tuple[Array, tuple[Array, ...], Array]:
        """Numeric core: firing strengths, aggregated sets, crisp outputs."""
        w = self.fire(values)
        mus = self.aggregate_all(w)
        return w, mus, self.defuzzify(mus)

    def aggregate(self, inputs: Inputs) -> Dict[str, AggregatedSet]:
        """Aggregated fuzzy set of every output for one row of inputs."""
        _, mus, _ = self.infer(self.check_inputs(inputs))

        return {
            v.name: AggregatedSet(self.grid(v), mu, v.name)
            for v, mu in zip(self.output_vars, mus)
        }

    def evaluate(
        self,
        inputs: Inputs,
        *,
        errors: Literal["raise", "collect"] = "raise",
    ) -> Dict[str, Any]:
        """Crisp value of every output for one row of inputs.

        Parameters
        ----------
        inputs : Mapping[str, float]
            Crisp value per input name. Inputs no enabled rule reads may be
            omitted.
        errors : str, optional
            With "collect", an output that fails (an empty set under
            ``strict_area``) maps to its :class:`ZeroArea` instead of raising,
            by default "raise".

        Returns
        -------
        Dict[str, float | FuzzyError]
            Output name to crisp value (or failure).
        """
        if errors not in ("raise", "collect"):
            raise InvalidParameters(f"errors must be \"raise\" or \"collect\", got {errors}.")

        _, mus, crisp = self.infer(self.check_inputs(inputs))

        results: Dict[str, Any] = {}
        for j, (v, mu) in enumerate(zip(self.output_vars, mus)):
            if not bool(jnp.any(mu > 0.0)):
                if self.strict_area:
                    err = ZeroArea(v.name)
                    if errors == "raise":
                        raise err
                    results[v.name] = err
                    continue
                logger.debug("%s: no rule fired for %s, using fallback %.6g.", self.name, v.name, v.midpoint)

            results[v.name] = float(crisp[j])

        return results

    def evaluate_batch(
        self,
        rows: Sequence[Inputs],
        *,
        policy: Literal["fail_fast", "collect"] = "fail_fast",
        max_workers: int | None = None,
    ) -> list[Any]:
        """Evaluates independent rows on a thread pool.

        Parameters
        ----------
        rows : Sequence[Mapping[str, float]]
            One input mapping per row.
        policy : str, optional
            "fail_fast" re-raises the first failing row's error (with the row
            index attached as a note) and cancels pending rows. "collect"
            keeps going and puts the error in that row's slot. By default
            "fail_fast".
        max_workers : int | None, optional
            Thread pool size, by default the executor's own default.

        Returns
        -------
        list
            One result dict (or FuzzyError under "collect") per row, in order.
        """
        if policy not in ("fail_fast", "collect"):
            raise InvalidParameters(f"policy must be \"fail_fast\" or \"collect\", got {policy}.")

        errors = "collect" if policy == "collect" else "raise"

        results: list[Any] = []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self.evaluate, row, errors=errors) for row in rows]

            for i, fut in enumerate(futures):
                try:
                    results.append(fut.result())
                except FuzzyError as e:
                    if policy == "fail_fast":
                        for pending in futures[i + 1:]:
                            pending.cancel()
                        e.add_note(f"while evaluating row {i}")
                        raise
                    logger.debug("%s: row %d failed: %s", self.name, i, e)
                    results.append(e)

        return results

    def __call__(self, x: Array) -> Array:
        """Vectorised evaluation of an (..., n_inps) array into (..., n_out)."""
        x = self.check_array(x)

        _, mus, crisp = self.infer(self.split(x))

        if self.strict_area:
            for v, mu in zip(self.output_vars, mus):
                if not np.asarray(jnp.any(mu > 0.0, axis=-1)).all():
                    raise ZeroArea(v.name)

        return crisp

    @property
    def output_map(self) -> Dict[str, FuzzyVariable]:
        return {v.name: v for v in self.output_vars}

    @property
    def n_out(self) -> int:
        return len(self.output_vars)
