"""Tests operator families."""
import unittest

import numpy as np

import jax.numpy as jnp

from flame.errors import InvalidParameters
from flame.ops import (
    IMPLICATIONS,
    SNORMS,
    TNORMS,
    Operators,
    complement,
    s_lukasiewicz,
    s_prob,
    t_lukasiewicz,
    t_prod,
)


class TestDefaultOperators(unittest.TestCase):
    def test_min_max_not(self):
        ops = Operators.init()
        a, b = 0.3, 0.7

        self.assertAlmostEqual(float(ops.and_(a, b)), 0.3, places=6)
        self.assertAlmostEqual(float(ops.or_(a, b)), 0.7, places=6)
        self.assertAlmostEqual(float(ops.not_(a)), 0.7, places=6)
        self.assertEqual(ops.names, ("min", "max", "min"))

    def test_boundaries(self):
        ops = Operators.init()

        self.assertEqual(float(ops.and_(0.0, 1.0)), 0.0)
        self.assertEqual(float(ops.or_(0.0, 1.0)), 1.0)
        self.assertEqual(float(ops.not_(0.0)), 1.0)
        self.assertEqual(float(ops.not_(1.0)), 0.0)

    def test_complement_is_clamped(self):
        ys = np.asarray(complement(jnp.array([-1e-7, 1.0 + 1e-6, 0.5])))
        self.assertTrue(np.all((ys >= 0.0) & (ys <= 1.0)))

    def test_default_implication_clips(self):
        ops = Operators.init()
        mu = jnp.array([0.0, 0.25, 0.5, 1.0])

        np.testing.assert_allclose(np.asarray(ops.implicate(0.5, mu)), [0.0, 0.25, 0.5, 0.5])


class TestAlternateOperators(unittest.TestCase):
    def test_product_family(self):
        self.assertAlmostEqual(float(t_prod(0.2, 0.8)), 0.16, places=6)
        self.assertAlmostEqual(float(s_prob(0.1, 0.2)), 0.28, places=6)

    def test_lukasiewicz_family(self):
        self.assertAlmostEqual(float(t_lukasiewicz(0.2, 0.8)), 0.0, places=6)
        self.assertAlmostEqual(float(t_lukasiewicz(0.8, 0.3)), 0.1, places=6)
        self.assertAlmostEqual(float(s_lukasiewicz(0.2, 0.9)), 1.0, places=6)
        self.assertAlmostEqual(float(s_lukasiewicz(0.4, 0.4)), 0.8, places=6)

    def test_product_implication_scales(self):
        ops = Operators.init(implication="prod")
        mu = jnp.array([0.0, 0.5, 1.0])

        np.testing.assert_allclose(np.asarray(ops.implicate(0.5, mu)), [0.0, 0.25, 0.5])

    def test_norm_properties(self):
        vals = jnp.linspace(0.0, 1.0, 6)
        a = vals[:, None]
        b = vals[None, :]

        for table, identity in ((TNORMS, 1.0), (SNORMS, 0.0)):
            for name, fn in table.items():
                with self.subTest(op=name):
                    ab = np.asarray(fn(a, b))
                    ba = np.asarray(fn(b, a))
                    np.testing.assert_allclose(ab, ba, atol=1e-6)
                    np.testing.assert_allclose(np.asarray(fn(vals, identity)), np.asarray(vals), atol=1e-6)
                    self.assertTrue(np.all((ab >= 0.0) & (ab <= 1.0)))

    def test_broadcasting(self):
        for name, fn in IMPLICATIONS.items():
            with self.subTest(op=name):
                out = fn(jnp.ones((3, 1)), jnp.ones((5,)))
                self.assertEqual(out.shape, (3, 5))

    def test_unknown_names(self):
        with self.assertRaises(InvalidParameters):
            Operators.init(tnorm="hamacher")

        with self.assertRaises(InvalidParameters):
            Operators.init(snorm="sum")

        with self.assertRaises(InvalidParameters):
            Operators.init(implication="godel")
