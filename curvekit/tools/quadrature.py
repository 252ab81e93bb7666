"""
Fixed order Gauss-Legendre quadrature and a bounded bisection root search.

The abscissae and weights are computed once with numpy for orders 3, 5 and 7 and rescaled to the integration
interval on every call. Order 5 is used for arc lengths (error around 1% or less, empirical), order 3 for cheap
sampling and order 7 when more precision is wanted.

See https://pomax.github.io/bezierinfo/legendre-gauss.html for the tables.
"""
import numpy as np

from curvekit.kernel.channel import channel
from curvekit.kernel.exceptions import QuadratureError

BISECTION_MAX_ITERATIONS = 100
BISECTION_TOLERANCE = 0.001  # 0.1%

_TABLES = {
    order: tuple(
        (float(x), float(w)) for x, w in zip(*np.polynomial.legendre.leggauss(order))
    )
    for order in (3, 5, 7)
}


def _gauss_legendre(table, f, a, b):
    c = (b - a) / 2.0
    d = (a + b) / 2.0
    total = 0.0
    for x, w in table:
        total += w * f(x * c + d)
    return c * total


def gauss_legendre3(f, a, b):
    """Integrate f from a to b with n=3"""
    return _gauss_legendre(_TABLES[3], f, a, b)


def gauss_legendre5(f, a, b):
    """Integrate f from a to b with n=5"""
    return _gauss_legendre(_TABLES[5], f, a, b)


def gauss_legendre7(f, a, b):
    """Integrate f from a to b with n=7"""
    return _gauss_legendre(_TABLES[7], f, a, b)


_INTEGRATORS = {
    3: gauss_legendre3,
    5: gauss_legendre5,
    7: gauss_legendre7,
}


def gauss_legendre(order=5):
    """
    Integrator function for the given order.

    @param order: 3, 5 or 7
    @return: function(f, a, b)
    """
    try:
        return _INTEGRATORS[order]
    except KeyError:
        raise QuadratureError(
            f"No Gauss-Legendre table for order {order}, use one of 3, 5 or 7"
        ) from None


def bisection_method(
    f,
    y,
    xmin,
    xmax,
    max_iterations=BISECTION_MAX_ITERATIONS,
    tolerance=BISECTION_TOLERANCE,
):
    """
    Find the value x for which f(x) = y in the interval [xmin, xmax] using the bisection method.

    f is assumed to be monotonically increasing over the interval. The search stops when f(x) is within
    tolerance of the range of f over the interval, or when the bracket is narrower than tolerance of the interval
    width. The current best estimate is returned when max_iterations is reached, this never fails.
    """
    tolerance_x = abs(xmax - xmin) * tolerance
    tolerance_y = abs(f(xmax) - f(xmin)) * tolerance

    for _ in range(max_iterations):
        x = (xmin + xmax) / 2.0
        dy = f(x) - y
        if abs(dy) < tolerance_y or abs(xmax - xmin) / 2.0 < tolerance_x:
            return x
        elif dy > 0.0:
            xmax = x
        else:
            xmin = x
    chan = channel("quadrature")
    if chan:
        chan(
            f"bisection reached {max_iterations} iterations looking for {y} in [{xmin}, {xmax}]"
        )
    return (xmin + xmax) / 2.0
