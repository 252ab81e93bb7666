"""
Numerically stable quadratic equation solver restricted to the unit parameter domain.

Only roots in the half-open interval [0, 1) are reported, roots elsewhere are None. When every term of the
equation vanishes every x is a solution, which is reported with the INFINITE_ROOTS singleton instead of a tuple.

See https://math.stackexchange.com/a/2007723
"""
from math import sqrt


class InfiniteRoots:
    """Marker for an equation satisfied by every x."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "INFINITE_ROOTS"

    def __reduce__(self):
        return (InfiniteRoots, ())


INFINITE_ROOTS = InfiniteRoots()


def in_unit_domain(x):
    """x if it falls within [0, 1), otherwise None"""
    if x is None or x < 0.0 or 1.0 <= x:
        return None
    return x


def solve_quadratic(a, b, c):
    """
    Solve a*x^2 + b*x + c = 0 for x in [0, 1).

    @return: INFINITE_ROOTS or a (x1, x2) tuple with x1 <= x2 when both are present, absent roots are None.
    """
    if a == 0.0:
        if b == 0.0:
            if c == 0.0:
                # all terms disappear, all x satisfy the solution
                return INFINITE_ROOTS
            # linear term disappears, no solutions
            return None, None
        # quadratic term disappears, solve linear equation
        return in_unit_domain(-c / b), None

    if c == 0.0:
        if b == 0.0:
            # a*x^2 = 0, a double root at zero
            return 0.0, None
        # no constant term, one solution at zero and one from solving linearly
        return 0.0, in_unit_domain(-b / a)

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None, None
    elif discriminant == 0.0:
        return in_unit_domain(-b / (2.0 * a)), None

    # Avoid catastrophic cancellation: when 4ac is small sqrt(discriminant) approaches |b|. We take the root where
    # b and the radical have the same sign and derive the other one from the product of the roots (citardauq).
    q = sqrt(discriminant)
    if b < 0.0:
        q = -q
    x1 = -(b + q) / (2.0 * a)
    x2 = c / (a * x1)
    if x1 > x2:
        x1, x2 = x2, x1
    return in_unit_domain(x1), in_unit_domain(x2)
