"""Tests fuzzy variable class."""
import unittest

import numpy as np

import jax
import jax.numpy as jnp

from flame.errors import DomainViolation, InvalidParameters, UnknownTerm
from flame.fuzzy_variable import FuzzyVariable
from flame.mfs import Gaussian, Trapezoidal, Triangular


def _temperature():
    return FuzzyVariable.from_terms(
        "temp",
        -10.0,
        10.0,
        {
            "cold": Triangular(-10.0, -5.0, 0.0),
            "hot": Triangular(0.0, 5.0, 10.0),
        },
    )


class TestFuzzyVariableInit(unittest.TestCase):
    def test_from_terms_relabels(self):
        fv = _temperature()

        self.assertEqual(fv.name, "temp")
        self.assertEqual(fv.domain, (-10.0, 10.0))
        self.assertEqual(fv.mf_names, ["cold", "hot"])
        self.assertEqual(fv.n_mfs, 2)
        self.assertEqual(fv.mf_params, [(-10.0, -5.0, 0.0), (0.0, 5.0, 10.0)])

    def test_direct_construction(self):
        fv = FuzzyVariable(
            [Triangular(0.0, 0.0, 0.5, name="low"), Trapezoidal(0.25, 0.5, 0.75, 1.0, name="high")],
            0.0,
            1.0,
            name="level",
        )
        self.assertIsInstance(fv.mfs, tuple)
        self.assertTrue(fv.has_term("low"))
        self.assertFalse(fv.has_term("mid"))

    def test_rejects_bad_domain(self):
        for lo, hi in [(1.0, 1.0), (2.0, 1.0), (float("nan"), 1.0), (0.0, float("inf"))]:
            with self.subTest(domain=(lo, hi)):
                with self.assertRaises(InvalidParameters):
                    FuzzyVariable((), lo, hi, name="x")

    def test_rejects_duplicate_labels(self):
        with self.assertRaises(InvalidParameters):
            FuzzyVariable(
                (Triangular(0.0, 0.5, 1.0, name="x"), Triangular(0.0, 0.25, 0.5, name="x")),
                0.0,
                1.0,
            )

    def test_rejects_empty_names(self):
        with self.assertRaises(InvalidParameters):
            FuzzyVariable((Triangular(0.0, 0.5, 1.0, name=""),), 0.0, 1.0)

        with self.assertRaises(InvalidParameters):
            FuzzyVariable((), 0.0, 1.0, name="")

    def test_manual(self):
        fv = FuzzyVariable.manual(
            ["triangle", "trapezoid", "gaussian"],
            [(0.0, 0.0, 5.0), (2.0, 4.0, 6.0, 8.0), (10.0, 1.0)],
            minval=0.0,
            maxval=10.0,
            name="speed",
        )

        self.assertEqual(fv.mf_names, ["mf_1", "mf_2", "mf_3"])
        self.assertIsInstance(fv.term("mf_3"), Gaussian)

    def test_manual_validation(self):
        with self.assertRaises(InvalidParameters):
            FuzzyVariable.manual(["triangle", "bad_mf"], [(0.0, 0.5, 1.0), (0.0,)])

        with self.assertRaises(InvalidParameters):
            FuzzyVariable.manual(["triangle"], [(0.0, 0.5)])

        with self.assertRaises(InvalidParameters):
            FuzzyVariable.manual(["triangle"], [(0.0, 0.5, 1.0)], mf_names=["a", "b"])


class TestFuzzyVariableEval(unittest.TestCase):
    def test_eval_by_name(self):
        fv = _temperature()

        self.assertAlmostEqual(float(fv.eval("cold", -5.0)), 1.0)
        self.assertAlmostEqual(float(fv.eval("hot", 7.5)), 0.5, places=6)

        # endpoints are in domain
        self.assertEqual(float(fv.eval("cold", -10.0, strict=True)), 0.0)
        self.assertEqual(float(fv.eval("hot", 10.0, strict=True)), 0.0)

    def test_unknown_term(self):
        fv = _temperature()

        with self.assertRaises(UnknownTerm) as ctx:
            fv.eval("warm", 0.3)

        self.assertEqual(ctx.exception.var, "temp")
        self.assertEqual(ctx.exception.term, "warm")

    def test_strict_domain(self):
        fv = _temperature()

        with self.assertRaises(DomainViolation):
            fv.eval("hot", 10.5, strict=True)

        with self.assertRaises(DomainViolation):
            fv.eval("cold", -10.1, strict=True)

        # non-strict evaluates the shape as is
        self.assertEqual(float(fv.eval("hot", 10.5)), 0.0)

    def test_check_rejects_nan(self):
        fv = _temperature()

        for bad in [float("nan"), float("inf"), "warm", None]:
            with self.subTest(value=bad):
                with self.assertRaises(DomainViolation):
                    fv.check(bad)

    def test_fuzzify(self):
        fv = _temperature()
        degrees = fv.fuzzify(2.5)

        self.assertEqual(set(degrees), {"cold", "hot"})
        self.assertEqual(degrees["cold"], 0.0)
        self.assertAlmostEqual(degrees["hot"], 0.5, places=6)

    def test_forward_shapes(self):
        fv = _temperature()

        # scalar -> (n_mfs,)
        y0 = fv(0.2)
        self.assertEqual(tuple(y0.shape), (2,))

        # vector -> (N, n_mfs)
        x = jnp.linspace(-10.0, 10.0, 11)
        y = fv(x)
        self.assertEqual(tuple(y.shape), (11, 2))

    def test_jax_jit_vmap(self):
        fv = _temperature()
        xs = jnp.linspace(-10.0, 10.0, 13)

        y_jit = jax.jit(lambda x: fv(x))(xs)
        y_vmap = jax.vmap(fv)(xs)

        np.testing.assert_allclose(np.asarray(y_jit), np.asarray(fv(xs)))
        np.testing.assert_allclose(np.asarray(y_vmap), np.asarray(fv(xs)))
