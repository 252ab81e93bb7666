"""
Floating point helpers shared by the curve modules.

equal() is an absolute tolerance comparison against EPSILON. Angles are in radians; angle_norm() maps any angle
into [0, tau) and angle_between() tests whether an angle falls inside an arc span given by its start and end
angle, taking the direction of the span and the wraparound at tau into account.
"""
from math import fmod, tau

EPSILON = 1e-10


def equal(a, b, epsilon=EPSILON):
    return abs(a - b) <= epsilon


def angle_norm(theta):
    theta = fmod(theta, tau)
    if theta < 0.0:
        theta += tau
    if theta >= tau:
        # fmod of a tiny negative value can round up to tau.
        theta = 0.0
    return theta


def angle_between(theta, lower, upper):
    """
    True when theta lies within the span from lower to upper, end points included. The span may run in either
    direction and the angles may lie outside [0, tau); a span of a full turn or more contains every angle.
    """
    if upper < lower:
        lower, upper = upper, lower
    span = upper - lower
    if span >= tau:
        return True
    offset = angle_norm(theta - lower)
    if offset <= span + EPSILON:
        return True
    # theta sits just below lower and wrapped around to nearly tau.
    return equal(offset, tau)
