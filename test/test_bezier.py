import unittest
from math import sqrt

from curvekit.tools.bezier import (
    cubic_bezier_chord_deviation,
    cubic_bezier_deriv,
    cubic_bezier_deriv2,
    cubic_bezier_length,
    cubic_bezier_normal,
    cubic_bezier_pos,
    cubic_bezier_radius,
    cubic_bezier_segment,
    find_inflection_points_cubic_bezier,
    quadratic_bezier_deriv,
    quadratic_bezier_length,
    quadratic_bezier_pos,
    quadratic_to_cubic_bezier,
    split_cubic_bezier,
    split_quadratic_bezier,
)
from curvekit.tools.point import Point

ARCH = (Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0))
S_CURVE = (Point(0, 0), Point(10, 10), Point(0, 10), Point(20, 0))
QUAD = (Point(0, 0), Point(5, 10), Point(10, 0))


def polyline_length(pos, n=4000):
    points = [pos(i / n) for i in range(n + 1)]
    return sum(points[i].distance_to(points[i + 1]) for i in range(n))


class TestCubicBezier(unittest.TestCase):
    def assertPointAlmostEqual(self, p, q, places=7):
        self.assertAlmostEqual(p[0], q[0], places=places)
        self.assertAlmostEqual(p[1], q[1], places=places)

    def test_cubic_pos(self):
        self.assertEqual(cubic_bezier_pos(*ARCH, 0.0), ARCH[0])
        self.assertEqual(cubic_bezier_pos(*ARCH, 1.0), ARCH[3])
        self.assertPointAlmostEqual(cubic_bezier_pos(*ARCH, 0.5), (5.0, 7.5))

    def test_cubic_derivatives(self):
        self.assertPointAlmostEqual(cubic_bezier_deriv(*ARCH, 0.0), (0.0, 30.0))
        self.assertPointAlmostEqual(cubic_bezier_deriv(*ARCH, 1.0), (0.0, -30.0))
        self.assertPointAlmostEqual(cubic_bezier_deriv(*ARCH, 0.5), (15.0, 0.0))
        self.assertPointAlmostEqual(cubic_bezier_deriv2(*ARCH, 0.0), (60.0, -60.0))

    def test_cubic_derivative_matches_difference(self):
        h = 1e-6
        for t in (0.1, 0.4, 0.8):
            numeric = (cubic_bezier_pos(*S_CURVE, t + h) - cubic_bezier_pos(*S_CURVE, t - h)) / (2 * h)
            self.assertPointAlmostEqual(cubic_bezier_deriv(*S_CURVE, t), numeric, places=4)

    def test_cubic_radius(self):
        # The arch turns clockwise while following t.
        r = cubic_bezier_radius(*ARCH, 0.5)
        self.assertLess(r, 0.0)
        r = cubic_bezier_radius(*reversed(ARCH), 0.5)
        self.assertGreater(r, 0.0)

    def test_cubic_radius_inflection(self):
        t1, t2 = find_inflection_points_cubic_bezier(*S_CURVE)
        self.assertIsNone(cubic_bezier_radius(*S_CURVE, t1))
        self.assertIsNone(cubic_bezier_radius(*S_CURVE, t2))
        self.assertIsNotNone(cubic_bezier_radius(*S_CURVE, 0.5))

    def test_cubic_normal(self):
        self.assertPointAlmostEqual(cubic_bezier_normal(*ARCH, 0.0, 2.0), (2.0, 0.0))
        self.assertPointAlmostEqual(cubic_bezier_normal(*ARCH, 1.0, 2.0), (-2.0, 0.0))
        self.assertPointAlmostEqual(cubic_bezier_normal(*ARCH, 0.0, -2.0), (-2.0, 0.0))

    def test_cubic_normal_coincident_control_points(self):
        p0, p2, p3 = Point(0, 0), Point(10, 10), Point(10, 0)
        n = cubic_bezier_normal(p0, p0, p2, p3, 0.0, 2.0)
        self.assertPointAlmostEqual(n, (sqrt(2), -sqrt(2)))
        n = cubic_bezier_normal(p0, p2, p3, p3, 1.0, 1.0)
        # p2 coincides with p3, the curve arrives heading down
        self.assertPointAlmostEqual(n, (-1.0, 0.0))
        p = Point(3, 3)
        self.assertEqual(cubic_bezier_normal(p, p, p, p, 0.0, 5.0), Point(0, 0))

    def test_cubic_normal_interior(self):
        with self.assertRaises(AssertionError):
            cubic_bezier_normal(*ARCH, 0.5, 1.0)

    def test_cubic_split(self):
        first, second = split_cubic_bezier(*ARCH, 0.5)
        self.assertEqual(first[0], ARCH[0])
        self.assertEqual(second[3], ARCH[3])
        self.assertEqual(first[3], second[0])
        self.assertPointAlmostEqual(first[3], (5.0, 7.5))
        for u in (0.2, 0.7):
            self.assertPointAlmostEqual(cubic_bezier_pos(*first, u), cubic_bezier_pos(*ARCH, u * 0.5))
            self.assertPointAlmostEqual(
                cubic_bezier_pos(*second, u), cubic_bezier_pos(*ARCH, 0.5 + u * 0.5)
            )

    def test_cubic_segment(self):
        segment = cubic_bezier_segment(*S_CURVE, 0.25, 0.75)
        self.assertPointAlmostEqual(segment[0], cubic_bezier_pos(*S_CURVE, 0.25))
        self.assertPointAlmostEqual(segment[3], cubic_bezier_pos(*S_CURVE, 0.75))
        self.assertPointAlmostEqual(cubic_bezier_pos(*segment, 0.5), cubic_bezier_pos(*S_CURVE, 0.5))
        self.assertEqual(tuple(cubic_bezier_segment(*S_CURVE, 0.0, 1.0)), S_CURVE)
        tail = cubic_bezier_segment(*S_CURVE, 0.6, 1.0)
        self.assertEqual(tail[3], S_CURVE[3])

    def test_inflections_s_curve(self):
        t1, t2 = find_inflection_points_cubic_bezier(*S_CURVE)
        self.assertAlmostEqual(t1, (1.0 - sqrt(0.2)) / 2.0)
        self.assertAlmostEqual(t2, (1.0 + sqrt(0.2)) / 2.0)
        self.assertTrue(0.0 < t1 < t2 < 1.0)

    def test_inflections_symmetric_s_curve(self):
        # Both inflection points merge into a double root in the middle.
        t1, t2 = find_inflection_points_cubic_bezier(
            Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0)
        )
        self.assertAlmostEqual(t1, 0.5)
        self.assertIsNone(t2)

    def test_inflections_convex(self):
        self.assertEqual(find_inflection_points_cubic_bezier(*ARCH), (None, None))

    def test_inflections_straight(self):
        line = (Point(0, 0), Point(1, 1), Point(2, 2), Point(3, 3))
        self.assertEqual(find_inflection_points_cubic_bezier(*line), (0.0, None))

    def test_inflections_single(self):
        # One inflection point inside, the other one before the start.
        t1, t2 = find_inflection_points_cubic_bezier(
            Point(0, 0), Point(10, 20), Point(0, 10), Point(-20, 0)
        )
        self.assertAlmostEqual(t1, (1.0 + sqrt(13.0)) / 6.0)
        self.assertIsNone(t2)

    def test_cubic_length_coincident(self):
        p = Point(4, 4)
        self.assertEqual(cubic_bezier_length(p, p, p, p), 0.0)

    def test_cubic_length_collinear(self):
        length = cubic_bezier_length(Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0))
        self.assertAlmostEqual(length, 3.0)

    def test_cubic_length(self):
        for curve in (ARCH, S_CURVE):
            expected = polyline_length(lambda t: cubic_bezier_pos(*curve, t))
            self.assertAlmostEqual(cubic_bezier_length(*curve), expected, delta=expected * 0.01)

    def test_cubic_derivatives_coincident(self):
        p = Point(0.1, 0.7)
        for t in (0.0, 0.3, 1.0):
            self.assertEqual(cubic_bezier_deriv(p, p, p, p, t), Point(0.0, 0.0))
            self.assertEqual(cubic_bezier_deriv2(p, p, p, p, t), Point(0.0, 0.0))

    def test_inflections_coincident_start(self):
        # p0 == p1 makes zero a double root of the cross product quadratic
        self.assertEqual(
            find_inflection_points_cubic_bezier(Point(0, 0), Point(0, 0), Point(10, 10), Point(10, 0)),
            (0.0, None),
        )

    def test_chord_deviation(self):
        self.assertAlmostEqual(cubic_bezier_chord_deviation(*ARCH), 7.5)
        line = (Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0))
        self.assertAlmostEqual(cubic_bezier_chord_deviation(*line), 0.0)
        # the curve runs past p3 up to x=4*sqrt(2)-4 at t=2-sqrt(2) before returning
        overshoot = (Point(0, 0), Point(2, 0), Point(2, 0), Point(1, 0))
        self.assertAlmostEqual(cubic_bezier_chord_deviation(*overshoot), 4.0 * sqrt(2.0) - 5.0)
        closed = (Point(0, 0), Point(0, 3), Point(4, 0), Point(0, 0))
        self.assertAlmostEqual(cubic_bezier_chord_deviation(*closed), 4.0)

    def test_chord_deviation_bounds_curve(self):
        for curve in (ARCH, S_CURVE, (Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0))):
            bound = cubic_bezier_chord_deviation(*curve)
            chord = curve[3] - curve[0]
            for i in range(101):
                q = cubic_bezier_pos(*curve, i / 100) - curve[0]
                u = max(0.0, min(1.0, q.dot(chord) / chord.dot(chord)))
                self.assertLessEqual((q - chord * u).length(), bound + 1e-9)


class TestQuadraticBezier(unittest.TestCase):
    def assertPointAlmostEqual(self, p, q, places=7):
        self.assertAlmostEqual(p[0], q[0], places=places)
        self.assertAlmostEqual(p[1], q[1], places=places)

    def test_quadratic_pos(self):
        self.assertEqual(quadratic_bezier_pos(*QUAD, 0.0), QUAD[0])
        self.assertEqual(quadratic_bezier_pos(*QUAD, 1.0), QUAD[2])
        self.assertPointAlmostEqual(quadratic_bezier_pos(*QUAD, 0.5), (5.0, 5.0))

    def test_quadratic_deriv(self):
        self.assertPointAlmostEqual(quadratic_bezier_deriv(*QUAD, 0.0), (10.0, 20.0))
        self.assertPointAlmostEqual(quadratic_bezier_deriv(*QUAD, 0.5), (10.0, 0.0))
        self.assertPointAlmostEqual(quadratic_bezier_deriv(*QUAD, 1.0), (10.0, -20.0))

    def test_quadratic_to_cubic(self):
        c1, c2 = quadratic_to_cubic_bezier(*QUAD)
        self.assertPointAlmostEqual(c1, (10.0 / 3.0, 20.0 / 3.0))
        self.assertPointAlmostEqual(c2, (20.0 / 3.0, 20.0 / 3.0))
        for t in (0.1, 0.5, 0.9):
            self.assertPointAlmostEqual(
                cubic_bezier_pos(QUAD[0], c1, c2, QUAD[2], t), quadratic_bezier_pos(*QUAD, t)
            )

    def test_quadratic_split(self):
        first, second = split_quadratic_bezier(*QUAD, 0.5)
        self.assertEqual(first[0], QUAD[0])
        self.assertEqual(second[2], QUAD[2])
        self.assertEqual(first[2], second[0])
        self.assertPointAlmostEqual(first[2], (5.0, 5.0))
        self.assertPointAlmostEqual(quadratic_bezier_pos(*first, 0.5), quadratic_bezier_pos(*QUAD, 0.25))

    def test_quadratic_length(self):
        expected = polyline_length(lambda t: quadratic_bezier_pos(*QUAD, t))
        self.assertAlmostEqual(quadratic_bezier_length(*QUAD), expected, delta=1e-3)

    def test_quadratic_length_no_quadratic_term(self):
        # The control point is the midpoint, the closed form does not apply.
        self.assertEqual(quadratic_bezier_length(Point(0, 0), Point(1, 0), Point(2, 0)), 0.0)

    def test_quadratic_length_stopping(self):
        # p0 == p1, the curve starts at rest
        self.assertAlmostEqual(quadratic_bezier_length(Point(0, 0), Point(0, 0), Point(1, 0)), 1.0)
        # p1 == p2, the curve ends at rest
        self.assertAlmostEqual(quadratic_bezier_length(Point(0, 0), Point(1, 0), Point(1, 0)), 1.0)

    def test_quadratic_length_turning_back(self):
        # out to x=4/3 at t=2/3, then back to x=1
        self.assertAlmostEqual(quadratic_bezier_length(Point(0, 0), Point(2, 0), Point(1, 0)), 5.0 / 3.0)
        # collinear and slowing down, but not turning back before t=1
        self.assertAlmostEqual(quadratic_bezier_length(Point(0, 0), Point(2, 0), Point(3, 0)), 3.0)

    def test_quadratic_deriv_coincident(self):
        p = Point(0.1, 0.7)
        self.assertEqual(quadratic_bezier_deriv(p, p, p, 0.3), Point(0.0, 0.0))
