import unittest
from math import pi

from curvekit.tools.arclength import (
    ArcLengthMap,
    cubic_bezier_length_map,
    ellipse_length_map,
    inv_polynomial_approx3,
    inv_polynomial_approx4,
    polynomial_approx3,
)
from curvekit.tools.bezier import cubic_bezier_deriv, cubic_bezier_length
from curvekit.tools.point import Point
from curvekit.tools.quadrature import gauss_legendre3, gauss_legendre5

ARCH = (Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0))
LINE = (Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0))


class TestArcLengthMap(unittest.TestCase):
    def test_map_evaluation(self):
        forward = ArcLengthMap((1.0, 2.0), 2.0, 4.0, 3.0)
        # u = 0.5
        self.assertAlmostEqual(forward(3.0), 0.5 + 2.0 * 0.25)
        self.assertEqual(forward.domain, (2.0, 4.0))
        self.assertEqual(forward.length, 3.0)
        self.assertEqual(forward.degree, 2)
        self.assertFalse(forward.inverse)

        inverse = ArcLengthMap((0.5,), 2.0, 4.0, 2.0, inverse=True)
        self.assertAlmostEqual(inverse(1.0), 3.0)
        self.assertTrue(inverse.inverse)
        self.assertIn("inverse=True", repr(inverse))

    def test_map_immutable(self):
        m = ArcLengthMap([1.0, 0.0, 0.0], 0.0, 1.0, 1.0)
        self.assertEqual(m.coefficients, (1.0, 0.0, 0.0))
        with self.assertRaises(AttributeError):
            m.length = 2.0
        with self.assertRaises(AttributeError):
            m.extra = 1


class TestPolynomialApprox(unittest.TestCase):
    def test_polynomial_approx3_exact(self):
        m = polynomial_approx3(gauss_legendre5, lambda x: 2.0 * x, 0.0, 1.0)
        self.assertAlmostEqual(m.length, 1.0)
        self.assertAlmostEqual(m(0.5), 0.25)
        c, b, a = m.coefficients
        self.assertAlmostEqual(c, 0.0)
        self.assertAlmostEqual(b, 1.0)
        self.assertAlmostEqual(a, 0.0)

    def test_polynomial_approx3_domain(self):
        m = polynomial_approx3(gauss_legendre3, lambda x: 1.0, 1.0, 3.0)
        self.assertAlmostEqual(m.length, 2.0)
        self.assertAlmostEqual(m(1.0), 0.0)
        self.assertAlmostEqual(m(2.0), 1.0)
        self.assertAlmostEqual(m(3.0), 2.0)

    def test_inv_polynomial_approx3(self):
        m = inv_polynomial_approx3(gauss_legendre5, lambda x: 1.0, 0.0, 2.0)
        self.assertAlmostEqual(m.length, 2.0)
        self.assertAlmostEqual(m(0.0), 0.0)
        self.assertAlmostEqual(m(2.0), 2.0)
        self.assertAlmostEqual(m(1.0), 1.0, delta=0.005)

    def test_inv_polynomial_approx4(self):
        m = inv_polynomial_approx4(gauss_legendre5, lambda x: 1.0, 1.0, 5.0)
        self.assertAlmostEqual(m.length, 4.0)
        self.assertAlmostEqual(m(0.0), 1.0)
        self.assertAlmostEqual(m(4.0), 5.0)
        self.assertAlmostEqual(m(1.0), 2.0, delta=0.01)
        self.assertAlmostEqual(m(3.0), 4.0, delta=0.01)

    def test_inverse_zero_length(self):
        m = inv_polynomial_approx4(gauss_legendre5, lambda x: 0.0, 0.5, 1.0)
        self.assertEqual(m.length, 0.0)
        self.assertEqual(m(0.0), 0.5)
        m = inv_polynomial_approx3(gauss_legendre5, lambda x: 0.0, 0.5, 1.0)
        self.assertEqual(m(0.0), 0.5)


class TestCurveLengthMaps(unittest.TestCase):
    def test_line_forward(self):
        m = cubic_bezier_length_map(*LINE, inverse=False)
        self.assertAlmostEqual(m.length, 3.0)
        self.assertAlmostEqual(m(0.5), 1.5)

    def test_line_inverse(self):
        m = cubic_bezier_length_map(*LINE)
        self.assertEqual(m.degree, 4)
        self.assertAlmostEqual(m(0.0), 0.0)
        self.assertAlmostEqual(m(3.0), 1.0)
        self.assertAlmostEqual(m(1.5), 0.5, delta=0.005)

    def test_arch_inverse(self):
        """Walking to the parameter found for a length travels about that length."""
        m = cubic_bezier_length_map(*ARCH)
        total = cubic_bezier_length(*ARCH)
        self.assertAlmostEqual(m.length, total, delta=total * 0.01)

        def speed(t):
            return cubic_bezier_deriv(*ARCH, t).length()

        for fraction in (0.25, 0.5, 0.75):
            t = m(fraction * m.length)
            self.assertTrue(0.0 < t < 1.0)
            travelled = gauss_legendre5(speed, 0.0, t)
            self.assertAlmostEqual(travelled, fraction * m.length, delta=0.02 * m.length)

    def test_degenerate_curve(self):
        p = Point(2, 2)
        m = cubic_bezier_length_map(p, p, p, p)
        self.assertEqual(m.length, 0.0)
        self.assertEqual(m(0.0), 0.0)
        m = cubic_bezier_length_map(p, p, p, p, inverse=False)
        self.assertEqual(m(0.5), 0.0)

    def test_circle_maps(self):
        forward = ellipse_length_map(2, 2, 0.0, pi, inverse=False)
        self.assertAlmostEqual(forward.length, 2.0 * pi)
        self.assertAlmostEqual(forward(pi / 2), pi)

        inverse = ellipse_length_map(2, 2, 0.0, pi)
        self.assertAlmostEqual(inverse(pi), pi / 2, delta=0.01)

    def test_clockwise_arc_maps(self):
        inverse = ellipse_length_map(2, 2, pi, 0.0)
        self.assertAlmostEqual(inverse.length, 2.0 * pi)
        self.assertAlmostEqual(inverse(0.0), pi)
        self.assertAlmostEqual(inverse(pi), pi / 2, delta=0.01)
        self.assertAlmostEqual(inverse(2.0 * pi), 0.0)

        forward = ellipse_length_map(2, 2, pi, 0.0, inverse=False)
        self.assertAlmostEqual(forward.length, 2.0 * pi)
