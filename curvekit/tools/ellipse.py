"""
Elliptical arc geometry.

An ellipse is given by its radii rx and ry, its rotation phi and its center (cx, cy). Positions on it are
parameterized by the angle theta before the ellipse has been stretched and rotated. Arcs come in two forms:

    endpoint form: start, rx, ry, phi, large_arc, sweep, end (the SVG path arc command)
    center form: cx, cy, rx, ry, phi, theta1, theta2

theta1 lies in [0, tau) and theta2 = theta1 + delta with delta in (-tau, tau). The arc runs clockwise (sweep is
False) when theta2 < theta1. See https://www.w3.org/TR/SVG/implnote.html#ArcImplementationNotes
"""
from collections import namedtuple
from math import acos, cos, pi, sin, sqrt, tau

from curvekit.kernel.channel import channel
from curvekit.tools.geomutil import angle_between, angle_norm, equal
from curvekit.tools.path import Path
from curvekit.tools.point import Point
from curvekit.tools.quadrature import gauss_legendre5

ARC_BEZIERS = 16
ARC_SEGMENTS_PER_TURN = 64

EllipseCenter = namedtuple("EllipseCenter", ("cx", "cy", "theta1", "theta2", "rx", "ry"))
EllipseSplit = namedtuple("EllipseSplit", ("point", "large_arc0", "large_arc1"))


def ellipse_pos(rx, ry, phi, cx, cy, theta):
    sintheta, costheta = sin(theta), cos(theta)
    sinphi, cosphi = sin(phi), cos(phi)
    x = cx + rx * costheta * cosphi - ry * sintheta * sinphi
    y = cy + rx * costheta * sinphi + ry * sintheta * cosphi
    return Point(x, y)


def ellipse_deriv(rx, ry, phi, sweep, theta):
    """Derivative with respect to theta, reversed when the arc is traversed clockwise."""
    sintheta, costheta = sin(theta), cos(theta)
    sinphi, cosphi = sin(phi), cos(phi)
    dx = -rx * sintheta * cosphi - ry * costheta * sinphi
    dy = -rx * sintheta * sinphi + ry * costheta * cosphi
    if not sweep:
        return Point(-dx, -dy)
    return Point(dx, dy)


def ellipse_deriv2(rx, ry, phi, sweep, theta):
    sintheta, costheta = sin(theta), cos(theta)
    sinphi, cosphi = sin(phi), cos(phi)
    ddx = -rx * costheta * cosphi + ry * sintheta * sinphi
    ddy = -rx * costheta * sinphi - ry * sintheta * cosphi
    return Point(ddx, ddy)


def ellipse_radius(rx, ry, phi, sweep, theta):
    """
    Signed radius of curvature at theta, None where the curvature is undefined.
    """
    dp = ellipse_deriv(rx, ry, phi, sweep, theta)
    ddp = ellipse_deriv2(rx, ry, phi, sweep, theta)
    a = dp.perp_dot(ddp)
    if equal(a, 0.0):
        return None
    return (dp.x * dp.x + dp.y * dp.y) ** 1.5 / a


def ellipse_normal(rx, ry, phi, sweep, theta, d):
    """Normal to the right at angle theta of the ellipse, with length d."""
    return ellipse_deriv(rx, ry, phi, sweep, theta).rot90cw().norm(d)


def ellipse_length(rx, ry, theta1, theta2):
    """
    Length of the elliptical arc between both angles. Gauss-Legendre (n=5) has an error of ~1% or less
    (empirical).
    """
    if theta2 < theta1:
        theta1, theta2 = theta2, theta1

    def speed(theta):
        return ellipse_deriv(rx, ry, 0.0, True, theta).length()

    return gauss_legendre5(speed, theta1, theta2)


def _radii_check(x1p, y1p, rx, ry):
    return x1p * x1p / rx / rx + y1p * y1p / ry / ry


def _prime(x1, y1, phi, x2, y2):
    sinphi, cosphi = sin(phi), cos(phi)
    x1p = cosphi * (x1 - x2) / 2.0 + sinphi * (y1 - y2) / 2.0
    y1p = -sinphi * (x1 - x2) / 2.0 + cosphi * (y1 - y2) / 2.0
    return x1p, y1p


def ellipse_radii_correction(x1, y1, rx, ry, phi, x2, y2):
    """
    Radii which are too small to reach between both end points are scaled up proportionally until they do.
    """
    x1p, y1p = _prime(x1, y1, phi, x2, y2)
    radii_check = _radii_check(x1p, y1p, rx, ry)
    if radii_check > 1.0:
        rx *= sqrt(radii_check)
        ry *= sqrt(radii_check)
    return rx, ry


def ellipse_to_center(x1, y1, rx, ry, phi, large_arc, sweep, x2, y2):
    """
    Convert the endpoint form to the center form.

    @return: EllipseCenter(cx, cy, theta1, theta2, rx, ry) with the angles in radians and the radii actually used,
    which differ from the given ones when those were too small.
    """
    if x1 == x2 and y1 == y2:
        return EllipseCenter(x1, y1, 0.0, 0.0, rx, ry)

    sinphi, cosphi = sin(phi), cos(phi)
    x1p, y1p = _prime(x1, y1, phi, x2, y2)

    radii_check = _radii_check(x1p, y1p, rx, ry)
    if radii_check > 1.0:
        rx *= sqrt(radii_check)
        ry *= sqrt(radii_check)
        chan = channel("ellipse")
        if chan:
            chan(f"radii enlarged by {sqrt(radii_check):.6g} to reach the end point")

    sq = (rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p) / (
        rx * rx * y1p * y1p + ry * ry * x1p * x1p
    )
    if sq < 0.0:
        # rounding errors after enlarging the radii
        sq = 0.0
    coef = sqrt(sq)
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = coef * -ry * x1p / rx
    cx = cosphi * cxp - sinphi * cyp + (x1 + x2) / 2.0
    cy = sinphi * cxp + cosphi * cyp + (y1 + y2) / 2.0

    # U and V vectors; theta = arccos(U*V / sqrt(U*U + V*V))
    ux = (x1p - cxp) / rx
    uy = (y1p - cyp) / ry
    vx = -(x1p + cxp) / rx
    vy = -(y1p + cyp) / ry

    theta = acos(max(-1.0, min(1.0, ux / sqrt(ux * ux + uy * uy))))
    if uy < 0.0:
        theta = -theta
    theta = angle_norm(theta)

    delta_acos = (ux * vx + uy * vy) / sqrt((ux * ux + uy * uy) * (vx * vx + vy * vy))
    delta_acos = min(1.0, max(-1.0, delta_acos))
    delta = acos(delta_acos)
    if ux * vy - uy * vx < 0.0:
        delta = -delta
    if not sweep and delta > 0.0:  # clockwise in Cartesian
        delta -= tau
    elif sweep and delta < 0.0:  # counter clockwise in Cartesian
        delta += tau
    return EllipseCenter(cx, cy, theta, theta + delta, rx, ry)


def split_ellipse(rx, ry, phi, cx, cy, theta1, theta2, theta):
    """
    Split the arc theta1 -> theta2 at theta.

    @return: EllipseSplit with the split point and the large arc flags of both resulting arcs, or None when theta
    does not lie strictly inside the arc.
    """
    if not angle_between(theta, theta1, theta2):
        return None
    # Bring theta within the numeric range of the arc, measured in its direction.
    if theta1 <= theta2:
        theta = theta1 + angle_norm(theta - theta1)
    else:
        theta = theta1 - angle_norm(theta1 - theta)
    if equal(theta, theta1) or equal(theta, theta2):
        return None

    mid = ellipse_pos(rx, ry, phi, cx, cy, theta)
    large_arc0 = abs(theta - theta1) > pi
    large_arc1 = abs(theta2 - theta) > pi
    return EllipseSplit(mid, large_arc0, large_arc1)


def ellipse_to_beziers(
    start, rx, ry, phi, large_arc, sweep, end, path=None, segments=ARC_BEZIERS
):
    """
    Approximate the arc by quadratic Béziers appended to path, in a fixed number of equal angular steps.

    The control point of each step passes the curve through the arc's midpoint of that step. The step count does
    not depend on a tolerance.
    """
    if path is None:
        path = Path(start)
    cx, cy, theta1, theta2, rx, ry = ellipse_to_center(
        start[0], start[1], rx, ry, phi, large_arc, sweep, end[0], end[1]
    )
    if theta1 == theta2:
        return path

    for i in range(segments):
        t1 = i / segments
        t2 = (i + 1) / segments
        p0 = ellipse_pos(rx, ry, phi, cx, cy, theta1 + (theta2 - theta1) * t1)
        mid = ellipse_pos(rx, ry, phi, cx, cy, theta1 + (theta2 - theta1) * (t1 + t2) / 2.0)
        p2 = ellipse_pos(rx, ry, phi, cx, cy, theta1 + (theta2 - theta1) * t2)
        c = mid * 2.0 - p0 * 0.5 - p2 * 0.5
        path.quad_to(c.x, c.y, p2.x, p2.y)
    return path


def flatten_ellipse(
    start,
    rx,
    ry,
    phi,
    large_arc,
    sweep,
    end,
    path=None,
    segments_per_turn=ARC_SEGMENTS_PER_TURN,
):
    """
    Replace the arc by lines, segments_per_turn for a full ellipse and proportionally fewer for shorter arcs.
    """
    if path is None:
        path = Path(start)
    cx, cy, theta1, theta2, rx, ry = ellipse_to_center(
        start[0], start[1], rx, ry, phi, large_arc, sweep, end[0], end[1]
    )

    if theta1 == theta2:
        return path
    # Arcs shorter than one step still need a line to their end point.
    n = max(1, int(abs(theta2 - theta1) / tau * segments_per_turn))
    for i in range(n):
        t = (i + 1) / n
        p = ellipse_pos(rx, ry, phi, cx, cy, theta1 + (theta2 - theta1) * t)
        path.line_to(p.x, p.y)
    return path
