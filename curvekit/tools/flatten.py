"""
Flattening and stroking of cubic Béziers.

Replaces a cubic Bézier, or the curve at a constant distance d to its right (one rail of a stroke, d negative
for the left rail), by a polyline that stays within the flatness tolerance of it.

See Flat, precise flattening of cubic Bezier path and offset curves, by T.F. Hain et al., 2005
https://www.sciencedirect.com/science/article/pii/S0097849305001287

Away from inflection points the curve is approximated locally by a parabola and the step size that keeps the
chord within the tolerance follows from its curvature. Offset curves become ill-conditioned near inflection
points, so a window around every inflection point where a single chord already fits is cut out first and the
remaining regions are stepped through.

The start point is assumed to be the current point of the path. The points added to it are strictly increasing
in the curve parameter and the last one is the end of the curve (offset by d).
"""
from math import hypot, inf, sqrt

import numpy as np

from curvekit.kernel.channel import channel
from curvekit.tools.bezier import (
    cubic_bezier_chord_deviation,
    cubic_bezier_normal,
    cubic_bezier_segment,
    find_inflection_points_cubic_bezier,
    quadratic_to_cubic_bezier,
    split_cubic_bezier,
)
from curvekit.tools.path import Path
from curvekit.tools.point import Point

TOLERANCE = 0.01
MIN_STEP = 1e-5
WINDOW_HALVINGS = 64


def is_degenerate_cubic_bezier(p0, p1, p2, p3):
    """Bézier has p0=p1=p3 or p0=p2=p3 and thus has no surface"""
    return p0 == p3 and (p0 == p1 or p0 == p2)


def add_cubic_bezier_line(path, p0, p1, p2, p3, t, d):
    """Line to the start (t=0) or end (t=1) of the curve, offset by d."""
    if is_degenerate_cubic_bezier(p0, p1, p2, p3):
        return
    pos = p0 if t == 0.0 else p3
    if d != 0.0:
        pos = pos + cubic_bezier_normal(p0, p1, p2, p3, t, d)
    path.line_to(pos.x, pos.y)


def flatten_smooth_cubic_bezier(path, p0, p1, p2, p3, d, flatness, min_step=MIN_STEP):
    """
    Split the curve and replace it by lines as long as the maximum deviation (flatness) is maintained.

    The curve must be free of inflection points. min_step is the smallest part of the curve a single line may
    replace, which bounds the number of lines to 1/min_step.
    """
    remaining = 1.0
    while True:
        # s2 is the distance of p2 to the tangent at p0, positive to the left, so d * s2 > 0 for an offset on
        # the outside of the turn, which needs the tighter flatness.
        s2nom = (p1.x - p0.x) * (p2.y - p0.y) - (p1.y - p0.y) * (p2.x - p0.x)
        denom = hypot(p1.x - p0.x, p1.y - p0.y)
        if s2nom * denom == 0.0:
            # The rest is straight.
            break

        s2 = s2nom / denom
        r1 = denom
        effective_flatness = flatness / abs(1.0 + 2.0 * d * s2 / 3.0 / r1 / r1)
        t = 2.0 * sqrt(effective_flatness / 3.0 / abs(s2))
        if t >= 1.0:
            if d != 0.0 or cubic_bezier_chord_deviation(p0, p1, p2, p3) <= flatness:
                break
            # The parabola underestimates the rest of the curve, which happens when it ends close to a cusp.
            t = 0.5
        floor = min_step / remaining
        if t < floor:
            chan = channel("flatten")
            if chan:
                chan(f"step {t * remaining:.3g} below minimum {min_step:.3g}")
            if floor >= 1.0:
                break
            t = floor
        p0, p1, p2, p3 = split_cubic_bezier(p0, p1, p2, p3, t).second
        remaining *= 1.0 - t
        add_cubic_bezier_line(path, p0, p1, p2, p3, 0.0, d)
    add_cubic_bezier_line(path, p0, p1, p2, p3, 1.0, d)


def find_inflection_point_range(p0, p1, p2, p3, t, flatness):
    """
    Window (tmin, tmax) around the inflection point at t inside which the curve can be replaced by one line.

    The window may extend past 0 or 1. An absent inflection point (t is None) gives (inf, inf); when the curve is
    straight at t the window covers the whole curve.

    The cubic model of the curve around t fails at and near cusps. The window is halved until the part of the
    curve inside [0, 1] stays within flatness of its chord.
    """
    if t is None:
        return inf, inf
    assert 0.0 <= t <= 1.0, f"inflection point {t} outside the 0.0--1.0 range"
    curve = (p0, p1, p2, p3)

    # we state that s(t) = 3*s2*t^2 + (s3 - 3*s2)*t^3 (see paper on the r-s coordinate system)
    # with s(t) aligned perpendicular to the curve at t = 0
    # then we impose that s(tf) = flatness and find tf
    # at inflection points however, s2 = 0, so that s(t) = s3*t^3
    if t != 0.0:
        p0, p1, p2, p3 = split_cubic_bezier(p0, p1, p2, p3, t).second
    nr = p1 - p0
    ns = p3 - p0
    if nr.is_zero():
        # if p0=p1, then rn (the velocity at t=0) needs adjustment
        # nr = lim[t->0](B'(t)) = 3*(p1-p0) + 6*t*((p1-p0)+(p2-p1)) + second order terms of t
        # if (p1-p0)->0, we use (p2-p1)=(p2-p0)
        nr = p2 - p0

    if nr.is_zero():
        # p0=p1=p2, so the curve is straight
        return 0.0, 1.0

    s3 = abs(ns.x * nr.y - ns.y * nr.x) / hypot(nr.x, nr.y)
    if s3 == 0.0:
        return 0.0, 1.0

    tf = float(np.cbrt(flatness / s3))
    for _ in range(WINDOW_HALVINGS):
        tmin = max(t - tf * (1.0 - t), 0.0)
        tmax = min(t + tf * (1.0 - t), 1.0)
        if tmax <= tmin:
            break
        segment = cubic_bezier_segment(*curve, tmin, tmax)
        if cubic_bezier_chord_deviation(*segment) <= flatness:
            break
        tf *= 0.5
    return t - tf * (1.0 - t), t + tf * (1.0 - t)


def _inflection_windows(p0, p1, p2, p3, flatness):
    """
    Windows around the inflection points clipped to [0, 1], in increasing order and without overlap. A window
    overlapping its predecessor starts where the predecessor ends.
    """
    windows = []
    end = 0.0
    for t in find_inflection_points_cubic_bezier(p0, p1, p2, p3):
        if t is None:
            continue
        tmin, tmax = find_inflection_point_range(p0, p1, p2, p3, t, flatness)
        tmin = max(tmin, end)
        tmax = min(tmax, 1.0)
        if tmax <= tmin:
            continue
        windows.append((tmin, tmax))
        end = tmax
    return windows


def stroke_cubic_bezier(p0, p1, p2, p3, d, flatness, path=None, min_step=MIN_STEP):
    """
    Flatten the curve at distance d to the right of the cubic Bézier p0, p1, p2, p3 into path.

    @param d: half width of the stroke, positive is to the right (when increasing t)
    @param flatness: maximum error from the exact (offset) curve
    @param path: Path to append to, a new one starting at the (offset) start point if None
    @param min_step: smallest parameter step of the linear subdivision
    @return: path
    """
    p0, p1, p2, p3 = Point(*p0), Point(*p1), Point(*p2), Point(*p3)
    if path is None:
        start = p0
        if d != 0.0:
            start = start + cubic_bezier_normal(p0, p1, p2, p3, 0.0, d)
        path = Path(start)
    if is_degenerate_cubic_bezier(p0, p1, p2, p3):
        chan = channel("flatten")
        if chan:
            chan(f"skipped degenerate cubic {p0} {p1} {p2} {p3}")
        return path

    position = 0.0
    for tmin, tmax in _inflection_windows(p0, p1, p2, p3, flatness):
        if position < tmin:
            flatten_smooth_cubic_bezier(
                path,
                *cubic_bezier_segment(p0, p1, p2, p3, position, tmin),
                d,
                flatness,
                min_step=min_step,
            )
        # Within the window a single line suffices.
        if tmax < 1.0:
            add_cubic_bezier_line(
                path, *split_cubic_bezier(p0, p1, p2, p3, tmax).second, 0.0, d
            )
        else:
            add_cubic_bezier_line(path, p0, p1, p2, p3, 1.0, d)
        position = tmax
    if position < 1.0:
        flatten_smooth_cubic_bezier(
            path,
            *cubic_bezier_segment(p0, p1, p2, p3, position, 1.0),
            d,
            flatness,
            min_step=min_step,
        )
    return path


def flatten_cubic_bezier(p0, p1, p2, p3, flatness=TOLERANCE, path=None, min_step=MIN_STEP):
    return stroke_cubic_bezier(p0, p1, p2, p3, 0.0, flatness, path=path, min_step=min_step)


def stroke_quadratic_bezier(p0, p1, p2, d, flatness, path=None, min_step=MIN_STEP):
    """Quadratic Béziers are stroked as the cubic describing the same curve."""
    c1, c2 = quadratic_to_cubic_bezier(p0, p1, p2)
    return stroke_cubic_bezier(p0, c1, c2, p2, d, flatness, path=path, min_step=min_step)


def flatten_quadratic_bezier(p0, p1, p2, flatness=TOLERANCE, path=None, min_step=MIN_STEP):
    return stroke_quadratic_bezier(p0, p1, p2, 0.0, flatness, path=path, min_step=min_step)
