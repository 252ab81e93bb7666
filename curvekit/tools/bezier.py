"""
Quadratic and cubic Bézier geometry.

A segment is nothing more than its control points: (p0, p1, p2) for a quadratic and (p0, p1, p2, p3) for a cubic.
Every function here is a pure function of those points and the curve parameter t in [0, 1].
"""
from collections import namedtuple
from math import hypot, log, sqrt

from curvekit.tools.geomutil import equal
from curvekit.tools.point import Point
from curvekit.tools.quadrature import gauss_legendre5
from curvekit.tools.roots import INFINITE_ROOTS, solve_quadratic

SplitResult = namedtuple("SplitResult", ("first", "second"))


def quadratic_to_cubic_bezier(start, c, end):
    """Control points of the cubic describing the same curve as the quadratic."""
    c1 = Point(*start).interpolate(c, 2.0 / 3.0)
    c2 = Point(*end).interpolate(c, 2.0 / 3.0)
    return c1, c2


def quadratic_bezier_pos(p0, p1, p2, t):
    p0 = p0 * (1.0 - 2.0 * t + t * t)
    p1 = p1 * (2.0 * t - 2.0 * t * t)
    p2 = p2 * (t * t)
    return p0 + p1 + p2


def quadratic_bezier_deriv(p0, p1, p2, t):
    # from the differences of the control points, so coincident points give an exact zero
    return (p1 - p0) * (2.0 - 2.0 * t) + (p2 - p1) * (2.0 * t)


def _quadratic_bezier_length_collinear(p0, p1, p2, a, b):
    # The speed |b + 2*a*t| is linear on either side of the point where the curve turns back, which Gauss-Legendre
    # integrates exactly.
    def speed(t):
        return quadratic_bezier_deriv(p0, p1, p2, t).length()

    t = -a.dot(b) / (2.0 * a.dot(a))
    if 0.0 < t < 1.0:
        return gauss_legendre5(speed, 0.0, t) + gauss_legendre5(speed, t, 1.0)
    return gauss_legendre5(speed, 0.0, 1.0)


def quadratic_bezier_length(p0, p1, p2):
    """
    Closed form length, see https://malczak.linuxpl.com/blog/quadratic-bezier-curve-length/

    Returns 0 when the quadratic term vanishes, that is when the control point is the midpoint of the end points.
    The closed form breaks down when the curve stops or turns back on itself (the control point on the line
    through the end points, outside of them, or on an end point), those lengths are integrated numerically.
    """
    a = p0 - p1 * 2.0 + p2
    b = p1 * 2.0 - p0 * 2.0
    A = 4.0 * a.dot(a)
    B = 4.0 * a.dot(b)
    C = b.dot(b)
    if equal(A, 0.0):
        return 0.0

    # A + B + C is the squared norm of 2a + b, rounding may take it below zero
    Sabc = 2.0 * sqrt(max(A + B + C, 0.0))
    A_2 = sqrt(A)
    A_32 = 2.0 * A * A_2
    C_2 = 2.0 * sqrt(C)
    BA = B / A_2
    if equal(BA + C_2, 0.0) or equal(2.0 * A_2 + BA + Sabc, 0.0):
        return _quadratic_bezier_length_collinear(p0, p1, p2, a, b)
    return (
        A_32 * Sabc
        + A_2 * B * (Sabc - C_2)
        + (4.0 * C * A - B * B) * log((2.0 * A_2 + BA + Sabc) / (BA + C_2))
    ) / (4.0 * A_32)


def split_quadratic_bezier(p0, p1, p2, t):
    """De Casteljau subdivision at t."""
    q0 = p0
    q1 = p0.interpolate(p1, t)

    r2 = p2
    r1 = p1.interpolate(p2, t)

    r0 = q1.interpolate(r1, t)
    q2 = r0
    return SplitResult((q0, q1, q2), (r0, r1, r2))


def cubic_bezier_pos(p0, p1, p2, p3, t):
    p0 = p0 * (1.0 - 3.0 * t + 3.0 * t * t - t * t * t)
    p1 = p1 * (3.0 * t - 6.0 * t * t + 3.0 * t * t * t)
    p2 = p2 * (3.0 * t * t - 3.0 * t * t * t)
    p3 = p3 * (t * t * t)
    return p0 + p1 + p2 + p3


def cubic_bezier_deriv(p0, p1, p2, p3, t):
    # quadratic Bézier of the control point differences
    mt = 1.0 - t
    return (
        (p1 - p0) * (3.0 * mt * mt)
        + (p2 - p1) * (6.0 * mt * t)
        + (p3 - p2) * (3.0 * t * t)
    )


def cubic_bezier_deriv2(p0, p1, p2, p3, t):
    return (p2 - p1 * 2.0 + p0) * (6.0 - 6.0 * t) + (p3 - p2 * 2.0 + p1) * (6.0 * t)


def cubic_bezier_radius(p0, p1, p2, p3, t):
    """
    Signed radius of curvature at t, negative when the curve bends clockwise while following t. None at
    inflection points where the curvature vanishes.
    """
    dp = cubic_bezier_deriv(p0, p1, p2, p3, t)
    ddp = cubic_bezier_deriv2(p0, p1, p2, p3, t)
    a = dp.perp_dot(ddp)
    if equal(a, 0.0):
        return None
    return (dp.x * dp.x + dp.y * dp.y) ** 1.5 / a


def cubic_bezier_normal(p0, p1, p2, p3, t, d):
    """
    Normal at the right-hand side of the curve (when increasing t) at either end point, with length d.

    Coincident control points are skipped to find the direction the curve leaves or enters the end point.
    Only t=0 and t=1 are supported.
    """
    assert t in (0.0, 1.0), f"cubic_bezier_normal only supports t=0 or t=1, got {t}"
    if t == 0.0:
        candidates = (p1 - p0, p2 - p0, p3 - p0)
    else:
        candidates = (p3 - p2, p3 - p1, p3 - p0)
    for n in candidates:
        if not n.is_zero():
            return n.rot90cw().norm(d)
    return Point(0.0, 0.0)


def split_cubic_bezier(p0, p1, p2, p3, t):
    """De Casteljau subdivision at t."""
    pm = p1.interpolate(p2, t)

    q0 = p0
    q1 = p0.interpolate(p1, t)
    q2 = q1.interpolate(pm, t)

    r3 = p3
    r2 = p2.interpolate(p3, t)
    r1 = pm.interpolate(r2, t)

    r0 = q2.interpolate(r1, t)
    q3 = r0
    return SplitResult((q0, q1, q2, q3), (r0, r1, r2, r3))


def cubic_bezier_segment(p0, p1, p2, p3, t0, t1):
    """Control points of the part of the curve between t0 and t1, with t0 < t1."""
    curve = (p0, p1, p2, p3)
    if t1 < 1.0:
        curve = split_cubic_bezier(*curve, t1).first
    if t0 > 0.0:
        curve = split_cubic_bezier(*curve, t0 / t1).second
    return curve


def _cubic_range(c0, c1, c2, c3):
    """Minimum and maximum over [0, 1] of the cubic with Bernstein coefficients c0..c3."""
    values = [c0, c3]
    e0, e1, e2 = c1 - c0, c2 - c1, c3 - c2
    roots = solve_quadratic(e0 - 2.0 * e1 + e2, 2.0 * (e1 - e0), e0)
    if roots is not INFINITE_ROOTS:
        for t in roots:
            if t is None:
                continue
            mt = 1.0 - t
            values.append(
                c0 * mt * mt * mt + 3.0 * c1 * mt * mt * t + 3.0 * c2 * mt * t * t + c3 * t * t * t
            )
    return min(values), max(values)


def cubic_bezier_chord_deviation(p0, p1, p2, p3):
    """
    Largest distance between the curve and the line segment p0-p3, or an upper bound of it.

    The distance across the chord is exact. Parts of the curve running back past p0 or beyond p3, as happens
    around cusps, add their overshoot along the chord.
    """
    chord = p3 - p0
    length = chord.length()
    if equal(length, 0.0):
        # the curve lies within the hull of its control points
        return max(p1.distance_to(p0), p2.distance_to(p0), p3.distance_to(p0))
    u = chord / length
    smin, smax = _cubic_range(0.0, u.perp_dot(p1 - p0), u.perp_dot(p2 - p0), 0.0)
    rmin, rmax = _cubic_range(0.0, u.dot(p1 - p0), u.dot(p2 - p0), length)
    across = max(-smin, smax)
    along = max(-rmin, rmax - length, 0.0)
    return hypot(across, along)


def find_inflection_points_cubic_bezier(p0, p1, p2, p3):
    """
    Parameters of the inflection points (and cusps) in [0, 1).

    @return: (t1, t2) with t1 < t2, absent values are None and present values come first. A straight curve
    inflects everywhere, this is reported as (0.0, None).
    """
    # we omit multiplying bx,by,cx,cy with 3.0, so there is no need for divisions when calculating a,b,c
    ax = -p0.x + 3.0 * p1.x - 3.0 * p2.x + p3.x
    ay = -p0.y + 3.0 * p1.y - 3.0 * p2.y + p3.y
    bx = p0.x - 2.0 * p1.x + p2.x
    by = p0.y - 2.0 * p1.y + p2.y
    cx = -p0.x + p1.x
    cy = -p0.y + p1.y

    a = ay * bx - ax * by
    b = ay * cx - ax * cy
    c = by * cx - bx * cy
    roots = solve_quadratic(a, b, c)
    if roots is INFINITE_ROOTS:
        return 0.0, None
    t1, t2 = roots
    if t1 is None or t1 == t2:
        return t2, None
    return t1, t2


def cubic_bezier_length(p0, p1, p2, p3):
    """
    Length of the cubic Bézier, taking care of inflection points. Integrating across a change in the sign of the
    curvature is unreliable so the curve is first split there. Gauss-Legendre (n=5) has an error of ~1% or less
    (empirical).
    """
    if p0 == p1 == p2 == p3:
        return 0.0
    t1, t2 = find_inflection_points_cubic_bezier(p0, p1, p2, p3)
    splits = [t for t in (t1, t2) if t is not None and 0.0 < t < 1.0]

    beziers = []
    curve = (p0, p1, p2, p3)
    previous = 0.0
    for t in splits:
        first, curve = split_cubic_bezier(*curve, (t - previous) / (1.0 - previous))
        beziers.append(first)
        previous = t
    beziers.append(curve)

    length = 0.0
    for bezier in beziers:

        def speed(t):
            return cubic_bezier_deriv(*bezier, t).length()

        length += gauss_legendre5(speed, 0.0, 1.0)
    return length
